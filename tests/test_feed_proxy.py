"""
Tests for FeedClient and the /api/proxy routes.

Upstream APIs are replaced by an httpx.MockTransport.
"""

import httpx
import pytest

from api.dependencies import get_feed_client
from tools.feed_api import FeedClient, FeedError, FeedRequestError


def _upstream(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    if host == "api.nasa.gov":
        if request.url.params.get("count"):
            count = int(request.url.params["count"])
            return httpx.Response(200, json=[{"title": f"apod-{i}"} for i in range(count)])
        return httpx.Response(200, json={"title": "apod", "api_key": request.url.params["api_key"]})
    if host == "api.openweathermap.org":
        if request.url.params["q"] == "Atlantis":
            return httpx.Response(404, json={"cod": "404", "message": "city not found"})
        return httpx.Response(200, json={"cod": 200, "name": request.url.params["q"]})
    if host == "api.spaceflightnewsapi.net":
        return httpx.Response(200, json={"count": 2, "results": [{"id": 1}, {"id": 2}]})
    raise httpx.ConnectError("unreachable", request=request)


@pytest.fixture
def feeds():
    return FeedClient(
        nasa_api_key="nasa-key",
        openweather_api_key="ow-key",
        transport=httpx.MockTransport(_upstream),
    )


@pytest.mark.asyncio
async def test_nasa_single_and_count(feeds):
    assert await feeds.fetch_nasa() == {"title": "apod", "api_key": "nasa-key"}
    assert len(await feeds.fetch_nasa(count=3)) == 3


@pytest.mark.asyncio
async def test_weather_ok(feeds):
    data = await feeds.fetch_weather("Oslo")
    assert data["name"] == "Oslo"


@pytest.mark.asyncio
async def test_weather_upstream_error_code(feeds):
    with pytest.raises(FeedRequestError, match="city not found"):
        await feeds.fetch_weather("Atlantis")


@pytest.mark.asyncio
async def test_news_unwraps_results(feeds):
    assert await feeds.fetch_news() == [{"id": 1}, {"id": 2}]


@pytest.mark.asyncio
async def test_transport_failure_is_feed_error():
    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = FeedClient("k", "k", transport=httpx.MockTransport(down))
    with pytest.raises(FeedError):
        await client.fetch_news()
    await client.close()


@pytest.fixture
def proxy_client(client, app, feeds):
    app.dependency_overrides[get_feed_client] = lambda: feeds
    return client


def test_proxy_nasa(proxy_client):
    resp = proxy_client.get("/api/proxy/nasa", params={"count": 2})

    assert resp.status_code == 200
    assert resp.json() == [{"title": "apod-0"}, {"title": "apod-1"}]


def test_proxy_weather_requires_city(proxy_client):
    resp = proxy_client.get("/api/proxy/weather")

    assert resp.status_code == 400
    assert resp.json() == {"error": "City parameter required"}


def test_proxy_weather_bad_city(proxy_client):
    resp = proxy_client.get("/api/proxy/weather", params={"city": "Atlantis"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "city not found"}


def test_proxy_news(proxy_client):
    assert proxy_client.get("/api/proxy/news").json() == [{"id": 1}, {"id": 2}]


def test_proxy_upstream_down_is_500(client, app):
    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    app.dependency_overrides[get_feed_client] = lambda: FeedClient(
        "k", "k", transport=httpx.MockTransport(down)
    )

    resp = client.get("/api/proxy/news")

    assert resp.status_code == 500
    assert "connection refused" in resp.json()["error"]


def test_proxy_nasa_count_is_passed_through(proxy_client):
    """count is relayed unbounded; the upstream decides what it accepts."""
    resp = proxy_client.get("/api/proxy/nasa", params={"count": 150})

    assert resp.status_code == 200
    assert len(resp.json()) == 150
