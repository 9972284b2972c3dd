from tools.feed_api.client import FeedClient, FeedError, FeedRequestError

__all__ = ["FeedClient", "FeedError", "FeedRequestError"]
