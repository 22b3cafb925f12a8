from __future__ import annotations

import httpx
import pytest

pytest.importorskip("pytest_httpx")

from newsfeed.connectors.base import NetworkError, NormalizationError, TransientNetworkError
from newsfeed.connectors.scraping_api import ScrapingApiClient
from newsfeed.models.domain import ViewSelector
from newsfeed.settings import Settings

BASE = "http://api.test/api/scraping"


def _settings(**overrides) -> Settings:
    values = {
        "NEWSFEED_API_BASE_URL": BASE,
        "NEWSFEED_MAX_ATTEMPTS": 2,
        "NEWSFEED_REQUEST_TIMEOUT_SECONDS": 2,
    }
    values.update(overrides)
    return Settings(**values)


def test_resource_paths():
    client = ScrapingApiClient(_settings())
    assert client.resource_path(ViewSelector.all()) == "/articles"
    assert client.resource_path(ViewSelector.by_portal()) == "/portals"
    assert client.resource_path(ViewSelector.from_token("portal-Rádio CBN")) == "/radiocbn"


@pytest.mark.asyncio
async def test_fetch_view_hits_articles_resource(httpx_mock):
    body = {"articles": [{"fonte": "A", "titulo": "T1", "link": "l1", "data": "2024-01-01T10:00:00"}], "last24hCount": 1}
    httpx_mock.add_response(method="GET", url=f"{BASE}/articles", json=body, status_code=200)

    client = ScrapingApiClient(_settings())
    payload = await client.fetch_view(ViewSelector.all())

    assert payload == body


@pytest.mark.asyncio
async def test_fetch_single_portal_uses_slug(httpx_mock):
    httpx_mock.add_response(method="GET", url=f"{BASE}/radiocbn", json={"last24hCount": 0})

    client = ScrapingApiClient(_settings())
    payload = await client.fetch_view(ViewSelector.single_portal("Rádio CBN"))

    assert payload == {"last24hCount": 0}


@pytest.mark.asyncio
async def test_fetch_portals(httpx_mock):
    httpx_mock.add_response(method="GET", url=f"{BASE}/portals", json={"portals": [], "last24hCount": 0})

    client = ScrapingApiClient(_settings())
    assert await client.fetch_portals() == {"portals": [], "last24hCount": 0}


@pytest.mark.asyncio
async def test_server_error_is_retried_then_succeeds(httpx_mock):
    httpx_mock.add_response(method="GET", url=f"{BASE}/articles", status_code=503)
    httpx_mock.add_response(method="GET", url=f"{BASE}/articles", json={"articles": [], "last24hCount": 0})

    client = ScrapingApiClient(_settings())
    payload = await client.get_json("/articles")

    assert payload["articles"] == []
    assert len(httpx_mock.get_requests()) == 2


@pytest.mark.asyncio
async def test_server_error_exhausts_attempts(httpx_mock):
    httpx_mock.add_response(method="GET", url=f"{BASE}/articles", status_code=500)
    httpx_mock.add_response(method="GET", url=f"{BASE}/articles", status_code=500)

    client = ScrapingApiClient(_settings())
    with pytest.raises(TransientNetworkError):
        await client.get_json("/articles")


@pytest.mark.asyncio
async def test_client_error_is_not_retried(httpx_mock):
    httpx_mock.add_response(method="GET", url=f"{BASE}/unknown", status_code=404)

    client = ScrapingApiClient(_settings())
    with pytest.raises(NetworkError) as exc:
        await client.get_json("/unknown")

    assert not isinstance(exc.value, TransientNetworkError)
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_connection_error_maps_to_network_error(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectError("refused"))

    client = ScrapingApiClient(_settings(NEWSFEED_MAX_ATTEMPTS=1))
    with pytest.raises(NetworkError):
        await client.get_json("/portals")


@pytest.mark.asyncio
async def test_non_json_body_is_a_normalization_error(httpx_mock):
    httpx_mock.add_response(method="GET", url=f"{BASE}/articles", text="<html>oops</html>")

    client = ScrapingApiClient(_settings())
    with pytest.raises(NormalizationError):
        await client.get_json("/articles")


@pytest.mark.asyncio
async def test_provider_bypasses_http():
    seen = []

    async def provider(path: str):
        seen.append(path)
        return {"articles": [], "last24hCount": 0}

    client = ScrapingApiClient(_settings(), provider=provider)
    await client.fetch_view(ViewSelector.all())
    await client.fetch_view(ViewSelector.by_portal())

    assert seen == ["/articles", "/portals"]
