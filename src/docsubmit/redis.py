from redis.asyncio import from_url as redis_from_url

from docsubmit.config import Settings, get_settings


def get_async_redis(settings: Settings | None = None):
    """Create an async Redis client, or None when no redis_url is configured."""
    settings = settings or get_settings()
    if not settings.redis_url:
        return None
    return redis_from_url(settings.redis_url, decode_responses=True)
