"""Event transports and consumers."""

from keyhold.infrastructure.events.in_memory_event_bus import InMemoryEventBus
from keyhold.infrastructure.events.redis_stream_event_bus import RedisStreamEventBus

__all__ = ["InMemoryEventBus", "RedisStreamEventBus"]
