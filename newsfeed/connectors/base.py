"""Feed error taxonomy and the data source protocol."""

from __future__ import annotations

from typing import Any, Protocol

from newsfeed.models.domain import ViewSelector


class FeedError(Exception):
    """Base feed error."""


class NetworkError(FeedError):
    """Fetch failed or the API answered with a non-success status."""


class TransientNetworkError(NetworkError):
    """Retryable failure (timeout, connection reset, 429/5xx)."""


class NormalizationError(FeedError):
    """Payload shape does not match the requested view."""


class StartupError(FeedError):
    """Portal bootstrap failed; the dashboard cannot start."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.user_message = message
        self.cause = cause


class FeedSource(Protocol):
    async def fetch_portals(self) -> Any: ...  # noqa: D401
    async def fetch_view(self, view: ViewSelector) -> Any: ...  # noqa: D401
