import asyncio
import json
import logging
from contextlib import suppress
from typing import Any, AsyncIterator, Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

_logger = logging.getLogger(__name__)

StockUpdate = Dict[str, Any]


class StockEvents:
    """Publishes stock changes on a Redis channel for live product pages."""

    def __init__(self, redis: Optional[Redis], channel: str):
        self.redis = redis
        self.channel = channel

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    async def publish(self, product_id: int, stock: int) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.publish(self.channel, json.dumps({"product_id": product_id, "stock": stock}))
            _logger.info("Published stock update | product_id=%s stock=%s channel=%s", product_id, stock, self.channel)
        except Exception as e:
            # the database write already happened; a lost event only delays the UI
            _logger.warning("Failed to publish stock update | product_id=%s err=%s", product_id, e)

    async def listen(self, idle_timeout: float = 5.0) -> AsyncIterator[Optional[StockUpdate]]:
        """Yield stock updates as they arrive, and ``None`` after each quiet interval.

        A dropped subscription is re-opened with capped exponential backoff,
        so the iterator only ends when the consumer closes it.
        """
        backoff = 1.0
        while True:
            pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
            try:
                await pubsub.subscribe(self.channel)
                while True:
                    message = await pubsub.get_message(timeout=idle_timeout)
                    backoff = 1.0
                    yield _decode(message["data"]) if message else None
            except (RedisError, OSError) as e:
                _logger.warning("Stock subscription lost, retrying in %.0fs | err=%s", backoff, e)
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2, 15.0)
            finally:
                with suppress(RedisError, OSError):
                    await pubsub.aclose()


def _decode(data: Any) -> StockUpdate:
    if not isinstance(data, str):
        return {"stock": data}
    try:
        return json.loads(data)
    except ValueError:
        # older publishers sent the bare stock number
        return {"stock": data}
