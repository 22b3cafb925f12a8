"""Scraping API client (provider-injected for tests/offline)."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import httpx

from newsfeed.models.domain import ViewSelector
from newsfeed.settings import Settings, get_settings
from newsfeed.utils.logging import get_logger

from .base import NetworkError, NormalizationError, TransientNetworkError


ProviderFn = Callable[[str], Awaitable[Any]]

logger = get_logger(__name__)


class ScrapingApiClient:
    """Client for the three GET resources of the scraping API.

    - with ``provider``: offline mode, the provider answers each path
    - without ``provider``: real HTTP calls against ``api_base_url``
    """

    def __init__(self, settings: Optional[Settings] = None, provider: Optional[ProviderFn] = None):
        self._settings = settings or get_settings()
        self._provider = provider

    @property
    def settings(self) -> Settings:
        return self._settings

    def resource_path(self, view: ViewSelector) -> str:
        if view.kind == "all":
            return self._settings.articles_path
        if view.kind == "by_portal":
            return self._settings.portals_path
        return f"/{view.slug}"

    async def fetch_portals(self) -> Any:
        return await self.get_json(self._settings.portals_path)

    async def fetch_view(self, view: ViewSelector) -> Any:
        return await self.get_json(self.resource_path(view))

    async def get_json(self, path: str) -> Any:
        max_attempts = int(self._settings.max_attempts)
        attempts = 0
        while True:
            attempts += 1
            try:
                return await self._get_once(path)
            except TransientNetworkError as exc:
                if attempts >= max_attempts:
                    raise
                logger.info("api.request.retry", extra={"path": path, "attempt": attempts, "error": str(exc)})

    async def _get_once(self, path: str) -> Any:
        if self._provider is not None:
            return await self._provider(path)

        cfg = self._settings
        try:
            async with httpx.AsyncClient(
                base_url=cfg.api_base_url,
                timeout=float(cfg.request_timeout_seconds),
            ) as client:
                resp = await client.get(path)
        except httpx.TimeoutException as exc:
            raise TransientNetworkError(f"API timeout: {path}") from exc
        except httpx.HTTPError as exc:
            raise TransientNetworkError(f"API request failed: {path}") from exc

        if resp.status_code == 429 or resp.status_code >= 500:
            raise TransientNetworkError(f"API temporary error: {resp.status_code} {path}")
        if not resp.is_success:
            raise NetworkError(f"API error: {resp.status_code} {path}")

        try:
            return resp.json()
        except ValueError as exc:
            raise NormalizationError(f"API response is not JSON: {path}") from exc
