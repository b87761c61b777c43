"""Unit tests for CancellationToken."""

import asyncio

import pytest

from keyhold.core.cancellation import CancellationToken, OperationCancelledError


@pytest.mark.unit
class TestCancellationToken:
    def test_none_token_is_not_cancelled(self):
        token = CancellationToken.none()

        assert token.cancelled is False
        token.raise_if_cancelled()

    def test_cancel_raises_with_reason(self):
        token = CancellationToken.none()

        token.cancel("Client disconnected")

        assert token.cancelled is True
        with pytest.raises(OperationCancelledError) as exc_info:
            token.raise_if_cancelled()
        assert exc_info.value.reason == "Client disconnected"

    def test_cancel_is_idempotent(self):
        token = CancellationToken.none()

        token.cancel("first")
        token.cancel("second")

        assert token.reason == "first"

    @pytest.mark.asyncio
    async def test_with_timeout_fires_after_deadline(self):
        token = CancellationToken.with_timeout(0.01)

        await asyncio.wait_for(token.wait(), timeout=1)

        assert token.cancelled is True
        assert token.reason == "Request timed out"

    @pytest.mark.asyncio
    async def test_dispose_stops_deadline(self):
        token = CancellationToken.with_timeout(0.01)

        token.dispose()
        await asyncio.sleep(0.05)

        assert token.cancelled is False
