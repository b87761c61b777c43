"""Unit tests for container wiring."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from keyhold.core.config import JwtSettings, MessagingSettings, Settings
from keyhold.core.container import build_event_bus, get_cancellation_token, infrastructure
from keyhold.domain.events import ConfirmationEmailEvent, TemporaryPasswordEvent
from keyhold.domain.events.registry import EVENT_REGISTRY
from keyhold.infrastructure.events import InMemoryEventBus, RedisStreamEventBus


def make_settings(transport: str = "in-memory") -> Settings:
    return Settings(
        jwt=JwtSettings(secret="container-test-secret-that-is-long-enough"),
        messaging=MessagingSettings(transport=transport),
    )


@pytest.mark.unit
class TestBuildEventBus:
    def test_in_memory_transport_subscribes_every_registered_event(self, mock_logger):
        bus = build_event_bus(make_settings(), mock_logger, Mock())

        assert isinstance(bus, InMemoryEventBus)
        assert bus.subscribed_event_types() == {meta.event_class for meta in EVENT_REGISTRY}
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.args[0] == "event_bus_configured"

    def test_redis_transport(self, mock_logger):
        bus = build_event_bus(make_settings("redis-streams"), mock_logger, Mock())

        assert isinstance(bus, RedisStreamEventBus)
        assert bus.subscribed_event_types() == {
            ConfirmationEmailEvent,
            TemporaryPasswordEvent,
        }

    @pytest.mark.asyncio
    async def test_confirmation_event_reaches_email_sender(self, mock_logger):
        sender = Mock()
        sender.send = AsyncMock()
        bus = build_event_bus(make_settings(), mock_logger, sender)

        await bus.publish(
            ConfirmationEmailEvent(
                user_id=uuid7(),
                email="jane@example.com",
                verification_code="code",
            )
        )
        await bus.close()

        assert sender.send.await_args.args[0].to_address == "jane@example.com"


@pytest.mark.unit
class TestCancellationTokenDependency:
    @pytest.fixture(autouse=True)
    def fast_polling(self, monkeypatch):
        monkeypatch.setattr(infrastructure, "DISCONNECT_POLL_SECONDS", 0.01)

    @pytest.mark.asyncio
    async def test_client_disconnect_cancels_token(self):
        request = Mock()
        request.is_disconnected = AsyncMock(side_effect=[False, True])
        dependency = get_cancellation_token(request)

        token = await dependency.__anext__()
        for _ in range(100):
            if token.cancelled:
                break
            await asyncio.sleep(0.01)

        assert token.cancelled
        assert token.reason == "Client disconnected"
        await dependency.aclose()

    @pytest.mark.asyncio
    async def test_watcher_stops_when_request_ends(self):
        request = Mock()
        request.is_disconnected = AsyncMock(return_value=False)
        dependency = get_cancellation_token(request)

        token = await dependency.__anext__()
        await asyncio.sleep(0.03)
        await dependency.aclose()
        polls = request.is_disconnected.await_count
        await asyncio.sleep(0.03)

        assert polls >= 1
        assert request.is_disconnected.await_count == polls
        assert not token.cancelled
