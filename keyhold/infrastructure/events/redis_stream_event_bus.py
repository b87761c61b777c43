"""Redis Streams event bus.

Durable, at-least-once transport for domain events.

Publishing:
    ``publish()`` appends the encoded event to the stream with XADD. A
    RedisError becomes EventPublishError so the publishing handler can
    report Messaging.PublishFailed.

Consuming:
    ``run_consumer()`` reads through a consumer group with XREADGROUP and
    dispatches each entry to the handlers subscribed to its event type.
    An entry is XACKed only after every handler succeeded. Unacknowledged
    entries stay in the group's pending list and are read again (id "0")
    on the next pass, so a crashed or failing consumer sees them again.
    After ``max_delivery_attempts`` reads an entry is acknowledged and
    logged as ``event_handler_failed`` so one poisoned entry cannot block
    the stream. A handler that was cancelled leaves its entry pending
    without counting an attempt.
"""

import asyncio
from collections import defaultdict
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError, ResponseError

from keyhold.domain.events.base_event import DomainEvent
from keyhold.domain.protocols.event_bus_protocol import EventHandler, EventPublishError
from keyhold.domain.protocols.logger_protocol import LoggerProtocol
from keyhold.infrastructure.events.event_codec import (
    EventDecodeError,
    decode_event,
    encode_event,
)


class RedisStreamEventBus:
    """EventBusProtocol over a Redis stream and consumer group.

    Attributes:
        _redis: Async Redis client (decode_responses=True).
        _stream: Stream key.
        _group: Consumer group name.
        _consumer: This process's consumer name within the group.
    """

    def __init__(
        self,
        redis_client: Redis,
        logger: LoggerProtocol,
        *,
        stream: str,
        group: str,
        consumer: str,
        block_ms: int = 5000,
        batch_size: int = 10,
        max_delivery_attempts: int = 3,
    ) -> None:
        self._redis = redis_client
        self._logger = logger
        self._stream = stream
        self._group = group
        self._consumer = consumer
        self._block_ms = block_ms
        self._batch_size = batch_size
        self._max_delivery_attempts = max_delivery_attempts
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._delivery_counts: dict[str, int] = {}

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def subscribed_event_types(self) -> set[type[DomainEvent]]:
        return {event_type for event_type, handlers in self._handlers.items() if handlers}

    async def publish(self, event: DomainEvent) -> None:
        """Append the event to the stream.

        Raises:
            EventPublishError: Redis rejected the write.
        """
        try:
            entry_id = await self._redis.xadd(self._stream, encode_event(event))
        except RedisError as e:
            raise EventPublishError(f"Could not append event to {self._stream}") from e

        self._logger.debug(
            "event_published",
            event_type=type(event).__name__,
            event_id=str(event.event_id),
            entry_id=entry_id,
        )

    async def ensure_group(self) -> None:
        """Create the consumer group (and stream) if missing."""
        try:
            await self._redis.xgroup_create(self._stream, self._group, id="0", mkstream=True)
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise

    async def run_consumer(self, stop: asyncio.Event | None = None) -> None:
        """Consume until ``stop`` is set or the task is cancelled."""
        await self.ensure_group()
        self._logger.info(
            "event_consumer_started",
            stream=self._stream,
            group=self._group,
            consumer=self._consumer,
        )
        while stop is None or not stop.is_set():
            try:
                await self.consume_once()
            except RedisError as e:
                self._logger.error("event_consumer_read_failed", error=e, stream=self._stream)
                await asyncio.sleep(1)

    async def close(self) -> None:
        await self._redis.aclose()

    async def consume_once(self) -> int:
        """Process pending entries first, then new ones.

        Returns:
            Number of entries acknowledged.
        """
        acked = await self._read_and_dispatch("0", block=None)
        if acked:
            return acked
        return await self._read_and_dispatch(">", block=self._block_ms)

    async def _read_and_dispatch(self, start_id: str, block: int | None) -> int:
        response = await self._redis.xreadgroup(
            self._group,
            self._consumer,
            {self._stream: start_id},
            count=self._batch_size,
            block=block,
        )
        acked = 0
        for _stream, entries in response or []:
            for entry_id, fields in entries:
                if await self._dispatch(entry_id, fields):
                    await self._redis.xack(self._stream, self._group, entry_id)
                    self._delivery_counts.pop(entry_id, None)
                    acked += 1
        return acked

    async def _dispatch(self, entry_id: str, fields: dict[str, Any]) -> bool:
        """Run all handlers for one entry. Returns True when it may be acked."""
        if not fields:
            # Entry was trimmed from the stream while pending.
            return True
        try:
            event = decode_event(fields)
        except EventDecodeError as e:
            self._logger.error("event_decode_failed", error=e, entry_id=entry_id)
            return True

        attempt = self._delivery_counts.get(entry_id, 0) + 1
        self._delivery_counts[entry_id] = attempt

        handlers = self._handlers.get(type(event), [])
        results = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if not failures:
            return True

        if any(isinstance(f, asyncio.CancelledError) for f in failures):
            # An interrupted delivery does not use up an attempt.
            self._delivery_counts[entry_id] = attempt - 1
            self._logger.warning(
                "event_handler_cancelled",
                event_type=type(event).__name__,
                event_id=str(event.event_id),
                entry_id=entry_id,
            )
            return False

        exhausted = attempt >= self._max_delivery_attempts
        for failure in failures:
            self._logger.error(
                "event_handler_failed" if exhausted else "event_handler_retrying",
                error=failure,
                event_type=type(event).__name__,
                event_id=str(event.event_id),
                entry_id=entry_id,
                attempt=attempt,
            )
        return exhausted
