"""Render sinks consuming the controller's view models."""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Tuple

from newsfeed.models.domain import FeedView, PortalRegistry
from newsfeed.utils.logging import get_logger


class RenderSink(Protocol):
    def show_loading(self) -> None: ...  # noqa: D401
    def show_error(self, message: str) -> None: ...  # noqa: D401
    def show_portals(self, registry: PortalRegistry) -> None: ...  # noqa: D401
    def render(self, view: FeedView) -> None: ...  # noqa: D401


class InMemorySink:
    """Sink that records every call, for tests/local runs."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []
        self.registry: Optional[PortalRegistry] = None

    def show_loading(self) -> None:
        self.events.append(("loading", None))

    def show_error(self, message: str) -> None:
        self.events.append(("error", message))

    def show_portals(self, registry: PortalRegistry) -> None:
        self.registry = registry
        self.events.append(("portals", registry))

    def render(self, view: FeedView) -> None:
        self.events.append(("render", view))

    @property
    def views(self) -> List[FeedView]:
        return [payload for kind, payload in self.events if kind == "render"]

    @property
    def errors(self) -> List[str]:
        return [payload for kind, payload in self.events if kind == "error"]

    @property
    def last_view(self) -> Optional[FeedView]:
        views = self.views
        return views[-1] if views else None

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.events]


class LoggingSink:
    """Sink that writes one log event per call."""

    def __init__(self, logger_name: str = "newsfeed.render") -> None:
        self._logger = get_logger(logger_name)

    def show_loading(self) -> None:
        self._logger.info("render.loading")

    def show_error(self, message: str) -> None:
        self._logger.error("render.error", extra={"user_message": message})

    def show_portals(self, registry: PortalRegistry) -> None:
        self._logger.info("render.portals", extra={"portals": registry.source_options()})

    def render(self, view: FeedView) -> None:
        self._logger.info(
            "render.feed",
            extra={
                "view": str(view.view),
                "cards": len(view.cards),
                "groups": len(view.groups) if view.groups is not None else None,
                "new_count": view.stats.new_count,
                "last_24h_count": view.stats.last_24h_count,
                "last_update": view.last_update,
            },
        )
