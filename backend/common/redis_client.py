import redis.asyncio as redis
from django.conf import settings

_fake_server = None


def get_redis_url():
    return getattr(settings, "REDIS_URL", "redis://127.0.0.1:6379/0")


def _get_fake_client():
    global _fake_server
    import fakeredis
    import fakeredis.aioredis

    if _fake_server is None:
        _fake_server = fakeredis.FakeServer()
    return fakeredis.aioredis.FakeRedis(server=_fake_server, decode_responses=True)


def get_redis_client():
    """
    Async Redis clients are event-loop bound and must not be cached.
    """
    if getattr(settings, "TESTING", False):
        return _get_fake_client()

    return redis.from_url(
        get_redis_url(),
        decode_responses=True,
    )
