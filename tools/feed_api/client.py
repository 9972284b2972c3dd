"""
HTTP client for the upstream dashboard feeds.

Feeds:
- NASA APOD          GET https://api.nasa.gov/planetary/apod
- OpenWeatherMap     GET https://api.openweathermap.org/data/2.5/weather
- Spaceflight News   GET https://api.spaceflightnewsapi.net/v4/articles/

Responses are relayed as decoded JSON; the client doesn't reshape them
beyond unwrapping the news ``results`` list.
"""

from typing import Any, Optional

import httpx

from core.logging import get_logger


logger = get_logger(__name__)

NASA_APOD_URL = "https://api.nasa.gov/planetary/apod"
OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
SPACEFLIGHT_NEWS_URL = "https://api.spaceflightnewsapi.net/v4/articles/"
NEWS_ARTICLE_LIMIT = 5


class FeedError(Exception):
    """Upstream call failed (transport error or undecodable body)."""
    pass


class FeedRequestError(FeedError):
    """Upstream rejected the request (bad city and the like)."""
    pass


class FeedClient:
    """
    Thin async pass-through to the three upstream feeds.

    Usage:
        client = FeedClient(nasa_api_key="DEMO_KEY", openweather_api_key="...")
        apod = await client.fetch_nasa(count=5)
        await client.close()
    """

    def __init__(
        self,
        nasa_api_key: str,
        openweather_api_key: str,
        timeout_s: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._nasa_api_key = nasa_api_key
        self._openweather_api_key = openweather_api_key
        self._http = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            resp = await self._http.get(url, params=params)
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise FeedError(str(e)) from e

    async def fetch_nasa(self, count: Optional[int] = None) -> Any:
        """Astronomy picture of the day; a list when count is given."""
        params: dict[str, Any] = {"api_key": self._nasa_api_key}
        if count:
            params["count"] = count

        data = await self._get_json(NASA_APOD_URL, params)
        logger.info(
            "NASA data loaded",
            items=len(data) if isinstance(data, list) else 1,
        )
        return data

    async def fetch_weather(self, city: str) -> Any:
        """Current weather for a city, metric units."""
        data = await self._get_json(
            OPENWEATHER_URL,
            {"q": city, "appid": self._openweather_api_key, "units": "metric"},
        )

        # OpenWeatherMap reports errors in the body, sometimes as a string code
        cod = data.get("cod") if isinstance(data, dict) else None
        if cod is not None and str(cod) != "200":
            raise FeedRequestError(str(data.get("message", "Weather request failed")))

        logger.info("Weather data loaded", city=data.get("name") if isinstance(data, dict) else None)
        return data

    async def fetch_news(self) -> Any:
        """Latest spaceflight news articles."""
        data = await self._get_json(SPACEFLIGHT_NEWS_URL, {"limit": NEWS_ARTICLE_LIMIT})
        articles = data.get("results", data) if isinstance(data, dict) else data
        logger.info(
            "News data loaded",
            articles=len(articles) if isinstance(articles, list) else 0,
        )
        return articles

    async def close(self) -> None:
        await self._http.aclose()
