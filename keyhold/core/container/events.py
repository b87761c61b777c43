"""Event bus dependency factory.

Application-scoped singleton for domain event publishing. Consumers are
wired explicitly in build_event_bus(); the wiring is checked against
EVENT_REGISTRY so a registered event without a consumer fails at startup.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from keyhold.core.config import Settings, get_settings
from keyhold.core.container.infrastructure import get_email_sender, get_logger
from keyhold.domain.events import ConfirmationEmailEvent, TemporaryPasswordEvent
from keyhold.domain.events.registry import EVENT_REGISTRY

if TYPE_CHECKING:
    from keyhold.domain.protocols import (
        EmailSenderProtocol,
        EventBusProtocol,
        LoggerProtocol,
    )


def build_event_bus(
    settings: Settings,
    logger: "LoggerProtocol",
    email_sender: "EmailSenderProtocol",
) -> "EventBusProtocol":
    """Create the configured transport and subscribe every consumer.

    Transport is chosen by ``MESSAGING__TRANSPORT``:
        - 'in-memory': InMemoryEventBus (single process)
        - 'redis-streams': RedisStreamEventBus (consumer group on a stream)

    Raises:
        RuntimeError: If a registered event has no subscriber.
    """
    from keyhold.infrastructure.events import InMemoryEventBus, RedisStreamEventBus
    from keyhold.infrastructure.events.consumers import (
        ConfirmationEmailConsumer,
        TemporaryPasswordConsumer,
    )

    messaging = settings.messaging
    event_bus: InMemoryEventBus | RedisStreamEventBus
    if messaging.transport == "redis-streams":
        from redis.asyncio import Redis

        redis_client = Redis.from_url(messaging.redis_url, decode_responses=True)
        event_bus = RedisStreamEventBus(
            redis_client,
            logger,
            stream=messaging.stream,
            group=messaging.consumer_group,
            consumer=messaging.consumer_name,
            block_ms=messaging.block_ms,
            batch_size=messaging.batch_size,
            max_delivery_attempts=messaging.max_delivery_attempts,
        )
    else:
        event_bus = InMemoryEventBus(
            logger, max_delivery_attempts=messaging.max_delivery_attempts
        )

    confirmation = ConfirmationEmailConsumer(email_sender, settings.email, logger)
    temporary_password = TemporaryPasswordConsumer(email_sender, settings.email, logger)
    event_bus.subscribe(ConfirmationEmailEvent, confirmation.handle)  # type: ignore[arg-type]
    event_bus.subscribe(TemporaryPasswordEvent, temporary_password.handle)  # type: ignore[arg-type]

    missing = [
        meta.name
        for meta in EVENT_REGISTRY
        if meta.event_class not in event_bus.subscribed_event_types()
    ]
    if missing:
        raise RuntimeError(f"Events without subscribers: {', '.join(missing)}")

    logger.info(
        "event_bus_configured",
        transport=messaging.transport,
        event_types=sorted(meta.name for meta in EVENT_REGISTRY),
    )
    return event_bus


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Usage:
        event_bus = get_event_bus()
        await event_bus.publish(ConfirmationEmailEvent(...))
    """
    return build_event_bus(get_settings(), get_logger(), get_email_sender())
