from redis.asyncio import Redis

from kostnotify.config import settings

redis = Redis.from_url(settings.redis_url, decode_responses=True)


def get_redis() -> Redis:
    return redis
