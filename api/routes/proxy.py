"""
Feed proxy endpoints.

Relays the upstream NASA, weather and news feeds so API keys stay on
the server. Upstream errors come back as ``{"error": message}``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.dependencies import get_feed_client
from core.logging import get_logger
from tools.feed_api import FeedClient, FeedError, FeedRequestError


logger = get_logger(__name__)
router = APIRouter(prefix="/api/proxy", tags=["Feeds"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/nasa")
async def proxy_nasa(
    count: Optional[int] = Query(default=None),
    feeds: FeedClient = Depends(get_feed_client),
):
    """Astronomy picture of the day, or ``count`` random ones."""
    logger.info("NASA feed requested", count=count)
    try:
        return await feeds.fetch_nasa(count)
    except FeedError as e:
        logger.error("NASA proxy error", error=str(e))
        return _error(500, str(e))


@router.get("/weather")
async def proxy_weather(
    city: Optional[str] = None,
    feeds: FeedClient = Depends(get_feed_client),
):
    """Current weather for ``city``."""
    if not city:
        return _error(400, "City parameter required")

    logger.info("Weather feed requested", city=city)
    try:
        return await feeds.fetch_weather(city)
    except FeedRequestError as e:
        return _error(400, str(e))
    except FeedError as e:
        logger.error("Weather proxy error", error=str(e))
        return _error(500, str(e))


@router.get("/news")
async def proxy_news(feeds: FeedClient = Depends(get_feed_client)):
    """Latest spaceflight news articles."""
    logger.info("News feed requested")
    try:
        return await feeds.fetch_news()
    except FeedError as e:
        logger.error("News proxy error", error=str(e))
        return _error(500, str(e))
