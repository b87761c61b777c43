"""Pytest configuration.

Environment is set before any keyhold import: settings are resolved when
``keyhold.main`` builds the app, and a missing JWT secret is fatal.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("JWT__SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "10")
os.environ.setdefault("CREATE_TABLES", "false")

from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from keyhold.core.config import JwtSettings  # noqa: E402
from keyhold.core.request_context import (  # noqa: E402
    actor_context,
    client_ip_context,
    trace_id_context,
)
from keyhold.infrastructure.persistence.database import Database  # noqa: E402
from keyhold.infrastructure.security import (  # noqa: E402
    BcryptPasswordService,
    JWTService,
)
from keyhold.infrastructure.telemetry.span_tracer import SpanTracer  # noqa: E402

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def mock_logger() -> Mock:
    """Logger double; assert on calls like ``mock_logger.warning.assert_called``."""
    return Mock()


@pytest.fixture
def tracer(mock_logger: Mock) -> SpanTracer:
    return SpanTracer(mock_logger)


@pytest.fixture
def jwt_settings() -> JwtSettings:
    return JwtSettings(secret=TEST_JWT_SECRET)


@pytest.fixture
def token_service(jwt_settings: JwtSettings) -> JWTService:
    return JWTService(jwt_settings)


@pytest.fixture
def password_service() -> BcryptPasswordService:
    # Minimum cost keeps hashing fast in tests
    return BcryptPasswordService(cost_factor=10)


@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database per test."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield db
    await db.drop_all()
    await db.close()


@pytest.fixture(autouse=True)
def clean_request_context():
    """Reset request-scoped context variables around every test."""
    tokens = (
        trace_id_context.set(None),
        client_ip_context.set(None),
        actor_context.set(None),
    )
    yield
    trace_id_context.reset(tokens[0])
    client_ip_context.reset(tokens[1])
    actor_context.reset(tokens[2])
