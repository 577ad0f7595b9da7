"""Fixtures for pybluelinkapi tests."""

from __future__ import annotations

import pytest
import pytest_asyncio

from pybluelinkapi.connection import Connection
from pybluelinkapi.push import StaticPushRegistrar
from pybluelinkapi.session import Session

from .responses import MockBackend

NOW = 1_700_000_000.0


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def session() -> Session:
    return Session(device_id="local-device-id", clock=lambda: NOW)


@pytest_asyncio.fixture
async def connection(backend, session):
    conn = Connection(
        "user@example.com",
        "secret",
        pin="1234",
        push_registrar=StaticPushRegistrar("push-token"),
        transport=backend.transport,
        session=session,
    )
    yield conn
    await conn.close()
