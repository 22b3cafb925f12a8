"""Dashboard wiring: settings, client, controller and refresh timer."""

from __future__ import annotations

from typing import Optional

from newsfeed.connectors.base import FeedSource
from newsfeed.connectors.scraping_api import ScrapingApiClient
from newsfeed.controller import Clock, FeedController
from newsfeed.models.domain import ViewSelector
from newsfeed.scheduler import RefreshScheduler
from newsfeed.settings import Settings, get_settings
from newsfeed.sinks import RenderSink
from newsfeed.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


class NewsDashboard:
    """Startup sequence: portal bootstrap, initial ``All`` load, auto-refresh."""

    def __init__(
        self,
        sink: RenderSink,
        settings: Optional[Settings] = None,
        client: Optional[FeedSource] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client or ScrapingApiClient(self.settings)
        self.controller = FeedController(self.client, sink, tz=self.settings.tzinfo(), clock=clock)
        self.scheduler = RefreshScheduler(self.controller, self.settings.refresh_interval_seconds)

    async def start(self) -> FeedController:
        """Bootstrap and start auto-refresh.

        Raises:
            StartupError: the portal list could not be loaded; nothing else
                is started.
        """
        configure_logging(self.settings.log_level, json_enabled=self.settings.log_json)
        await self.controller.bootstrap()
        await self.controller.select_view(ViewSelector.all())
        self.scheduler.start()
        logger.info(
            "dashboard.started",
            extra={"base_url": self.settings.api_base_url, "refresh_seconds": self.settings.refresh_interval_seconds},
        )
        return self.controller

    async def stop(self) -> None:
        await self.scheduler.stop()
