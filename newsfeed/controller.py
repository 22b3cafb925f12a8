"""View state controller: load, filter and render the feed."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Optional, Union

from newsfeed.connectors.base import FeedError, FeedSource, StartupError
from newsfeed.models.domain import (
    Article,
    FeedState,
    FeedStatus,
    FeedView,
    PortalRegistry,
    ViewSelector,
)
from newsfeed.services.filters import DateFilter, filter_articles, parse_date_filter
from newsfeed.services.grouping import sort_articles
from newsfeed.services.normalizer import normalize_payload, portal_labels
from newsfeed.services.view_model import build_view
from newsfeed.sinks import RenderSink
from newsfeed.utils.logging import get_logger

CANNOT_REACH_SERVER = "Cannot reach the server. Check that the news API is running."
LOAD_FAILED = "Could not load news. Please try again."

Clock = Callable[[], datetime]

logger = get_logger(__name__)


class _Unset:
    pass


_UNSET = _Unset()


def apply_filters(
    articles: List[Article],
    source: Optional[str],
    day: DateFilter,
    tz: Optional[tzinfo] = None,
) -> List[Article]:
    """Filter then sort; the canonical list is left untouched."""
    return sort_articles(filter_articles(articles, source, day, tz))


class FeedController:
    """Owns FeedState and drives it through Idle/Loading/Ready/Error.

    Every ``select_view``/``refresh`` bumps ``state.generation``; a response
    whose generation is no longer current is discarded, so a slow earlier
    request never overwrites fresher data.
    """

    def __init__(
        self,
        client: FeedSource,
        sink: RenderSink,
        *,
        tz: Optional[tzinfo] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._client = client
        self._sink = sink
        self._tz = tz
        self._clock: Clock = clock or (lambda: datetime.now(timezone.utc))
        self.state = FeedState()
        self.loaded_view: Optional[ViewSelector] = None
        self.portals: Optional[PortalRegistry] = None

    @property
    def status(self) -> FeedStatus:
        return self.state.status

    def current_view(self) -> ViewSelector:
        return self.state.view

    async def bootstrap(self) -> PortalRegistry:
        """Load the portal registry; failure is fatal to startup."""
        try:
            payload = await self._client.fetch_portals()
            registry = PortalRegistry(portal_labels(payload))
        except FeedError as exc:
            logger.error("feed.bootstrap.failed", extra={"error_type": type(exc).__name__, "error": str(exc)})
            self._sink.show_error(CANNOT_REACH_SERVER)
            raise StartupError(CANNOT_REACH_SERVER, cause=exc) from exc
        self.portals = registry
        self._sink.show_portals(registry)
        logger.info("feed.bootstrap.ready", extra={"portals": len(registry)})
        return registry

    async def select_view(self, view: ViewSelector) -> bool:
        """Fetch and render ``view``. Returns False on error or stale completion."""
        if self.portals is None:
            raise RuntimeError("bootstrap() must succeed before loading a view")

        self.state.generation += 1
        generation = self.state.generation
        self.state.view = view
        self.state.status = FeedStatus.LOADING
        self._sink.show_loading()
        logger.info("feed.load.start", extra={"view": str(view), "generation": generation})

        try:
            payload = await self._client.fetch_view(view)
            normalized = normalize_payload(payload, view)
        except FeedError as exc:
            if generation != self.state.generation:
                logger.info("feed.load.stale", extra={"view": str(view), "generation": generation})
                return False
            self.state.status = FeedStatus.ERROR
            logger.warning(
                "feed.load.failed",
                extra={"view": str(view), "error_type": type(exc).__name__, "error": str(exc)},
            )
            self._sink.show_error(LOAD_FAILED)
            return False

        if generation != self.state.generation:
            logger.info("feed.load.stale", extra={"view": str(view), "generation": generation})
            return False

        self.state.articles = list(normalized.articles)
        self.state.last_24h_count = normalized.last_24h_count
        self.state.last_updated = self._clock()
        self.loaded_view = view
        self.state.filtered = apply_filters(
            self.state.articles, self.state.source_filter, self.state.date_filter, self._tz
        )
        self.state.status = FeedStatus.READY
        logger.info(
            "feed.load.ready",
            extra={
                "view": str(view),
                "articles": len(self.state.articles),
                "last_24h_count": self.state.last_24h_count,
            },
        )
        self._render()
        return True

    async def refresh(self) -> bool:
        """Re-fetch whatever view is currently active."""
        return await self.select_view(self.state.view)

    def change_filter(
        self,
        *,
        source: Union[Optional[str], _Unset] = _UNSET,
        day: Union[DateFilter, _Unset] = _UNSET,
    ) -> None:
        """Update the local filters without touching the network.

        Ready: re-filter and render. Error: re-filter the retained data only.
        Idle/Loading: values are stored and applied when the load completes.
        """
        if not isinstance(source, _Unset):
            self.state.source_filter = source or None
        if not isinstance(day, _Unset):
            self.state.date_filter = parse_date_filter(day)

        if self.state.status in (FeedStatus.IDLE, FeedStatus.LOADING):
            return
        self.state.filtered = apply_filters(
            self.state.articles, self.state.source_filter, self.state.date_filter, self._tz
        )
        if self.state.status is FeedStatus.READY:
            self._render()

    def clear_filters(self) -> None:
        self.change_filter(source=None, day=None)

    def _render(self) -> FeedView:
        view = build_view(
            self.loaded_view or self.state.view,
            self.state.filtered,
            canonical=self.state.articles,
            last_24h_count=self.state.last_24h_count,
            now=self._clock(),
            last_updated=self.state.last_updated,
            tz=self._tz,
        )
        self._sink.render(view)
        return view
