import logging
import ssl
from typing import Optional

from redis.asyncio import Redis

from .config import Settings

_logger = logging.getLogger(__name__)


def create_redis(settings: Settings) -> Optional[Redis]:
    """Build the app's Redis client, or ``None`` when Redis is switched off.

    The client connects lazily on first command, so a missing server only
    shows up as logged publish failures.
    """
    if not settings.REDIS_ENABLED:
        _logger.info("Redis disabled, stock events will not be published")
        return None
    conn_kwargs = {
        "host": settings.REDIS_HOST,
        "port": settings.REDIS_PORT,
        "username": settings.REDIS_USERNAME or None,
        "password": settings.REDIS_PASSWORD or None,
        "db": settings.REDIS_DB,
        "decode_responses": True,
    }
    if settings.REDIS_SSL:
        conn_kwargs.update(
            {
                "ssl": True,
                # relax cert verification for local/dev unless overridden by env
                "ssl_cert_reqs": ssl.CERT_NONE,
            }
        )
    _logger.info(
        "Redis client configured for %s:%s (SSL=%s)",
        settings.REDIS_HOST,
        settings.REDIS_PORT,
        settings.REDIS_SSL,
    )
    return Redis(**conn_kwargs)


async def close_redis(client: Optional[Redis]) -> None:
    if client is not None:
        await client.aclose()
