"""
Direct-message channel resolution.

DM channels are cached by the recipient's user id. On a miss the channel is
created remotely, then the cache entry the gateway's CHANNEL_CREATE event
inserts under the channel id is dropped and one entry keyed by user id
replaces it. Concurrent misses for the same user share a single creation
request.
"""

import asyncio
import logging

from .cache import CHANNELS, EntityCache
from .models import DMChannel
from .transport import Transport

logger = logging.getLogger(__name__)


class DMChannelResolver:
    """Get-or-create DM channels with one in-flight creation per user."""

    def __init__(
        self,
        cache: EntityCache,
        transport: Transport,
        send_delay: float = 1.0,
    ):
        self._cache = cache
        self._transport = transport
        self._send_delay = send_delay
        self._in_flight: dict[int, asyncio.Task] = {}
        self._send_semaphore = asyncio.Semaphore(1)

    async def _create(self, user_id: int) -> DMChannel:
        payload = await self._transport.start_private_message(user_id)
        channel = DMChannel.from_payload(payload, user_id)
        self._cache.delete(CHANNELS, channel.id)
        self._cache.set(CHANNELS, user_id, channel)
        logger.info(f"Created DM channel {channel.id} for user {user_id}")
        return channel

    def _forget(self, user_id: int, task: asyncio.Task) -> None:
        if not task.cancelled():
            # Marks a failure as retrieved even if every waiter was cancelled
            task.exception()
        if self._in_flight.get(user_id) is task:
            del self._in_flight[user_id]

    async def resolve(self, user_id: int) -> DMChannel:
        """
        Get the DM channel for a user, creating it on a cache miss.

        A failed creation propagates to every caller waiting on it and is
        not cached, so the next call tries again.
        """
        channel = self._cache.get(CHANNELS, user_id)
        if channel is not None:
            return channel

        task = self._in_flight.get(user_id)
        if task is None:
            task = asyncio.ensure_future(self._create(user_id))
            self._in_flight[user_id] = task
            task.add_done_callback(lambda done: self._forget(user_id, done))
        else:
            logger.debug(f"Joining in-flight DM channel creation for user {user_id}")
        # One caller being cancelled must not cancel creation for the others
        return await asyncio.shield(task)

    async def send(self, user_id: int, content: str):
        """Send a DM to a user. Takes two requests on a cache miss."""
        channel = await self.resolve(user_id)
        async with self._send_semaphore:
            result = await self._transport.send_message(channel.id, content)
            if self._send_delay:
                await asyncio.sleep(self._send_delay)
        return result
