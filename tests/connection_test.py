"""Tests for `pybluelinkapi.connection`."""

from __future__ import annotations

import pytest

from pybluelinkapi.connection import Connection
from pybluelinkapi.const import EU_BASE_URL, EU_ENDPOINTS
from pybluelinkapi.exceptions import (
    CredentialRejectedError,
    PreconditionError,
    ProtocolError,
)
from pybluelinkapi.push import StaticPushRegistrar
from pybluelinkapi.session import Session

from .conftest import NOW
from .responses import PIN_RESPONSE, add_login_routes, request_json

STATUS_URL = f"{EU_BASE_URL}/api/v1/spa/vehicles/vehicle-1/status"
DOOR_URL = f"{EU_BASE_URL}/api/v2/spa/vehicles/vehicle-1/control/door"


@pytest.mark.asyncio
async def test_enter_pin_before_login(backend, connection: Connection) -> None:
    """Test the PIN cannot be entered without an access token."""
    with pytest.raises(PreconditionError):
        await connection.enter_pin()
    assert backend.requests == []
    assert connection.session.control_token is None


@pytest.mark.asyncio
async def test_enter_pin(backend, connection: Connection) -> None:
    """Test a control token valid for ten minutes is stored."""
    add_login_routes(backend)
    backend.add("PUT", EU_ENDPOINTS.pin, json=PIN_RESPONSE)
    await connection.login()

    expires_at = await connection.enter_pin()
    assert connection.session.control_token == "Bearer CT1"
    assert connection.session.control_token_expires_at == NOW + 600
    assert expires_at == NOW + 600

    (request,) = backend.requests_to(EU_ENDPOINTS.pin)
    assert request.headers["authorization"] == "Bearer T1"
    assert request_json(request) == {"deviceId": "server-device-id", "pin": "1234"}


@pytest.mark.asyncio
async def test_enter_pin_argument_overrides_configured_pin(backend, connection: Connection) -> None:
    """Test an explicit PIN is submitted instead of the configured one."""
    connection.session.store_access_token("T1")
    backend.add("PUT", EU_ENDPOINTS.pin, json=PIN_RESPONSE)
    await connection.enter_pin("9876")
    (request,) = backend.requests_to(EU_ENDPOINTS.pin)
    assert request_json(request)["pin"] == "9876"


@pytest.mark.asyncio
async def test_enter_pin_rejected(backend, connection: Connection) -> None:
    """Test a rejected PIN is surfaced without retrying."""
    connection.session.store_access_token("T1")
    backend.add("PUT", EU_ENDPOINTS.pin, status=400, json={"errCode": "4004"})
    with pytest.raises(CredentialRejectedError) as exc_info:
        await connection.enter_pin()
    assert exc_info.value.message == "BAD_REQUEST"
    assert len(backend.requests_to(EU_ENDPOINTS.pin)) == 1
    assert connection.session.control_token is None


@pytest.mark.asyncio
async def test_enter_pin_without_control_token(backend, connection: Connection) -> None:
    """Test a PIN response without control token."""
    connection.session.store_access_token("T1")
    backend.add("PUT", EU_ENDPOINTS.pin, json={})
    with pytest.raises(ProtocolError):
        await connection.enter_pin()


@pytest.mark.asyncio
async def test_request_headers(backend, connection: Connection) -> None:
    """Test authenticated requests carry the bearer token and device id."""
    connection.session.store_access_token("T1")
    backend.add("GET", STATUS_URL, json={"resMsg": {"doorLock": True}})
    response = await connection.get(STATUS_URL)
    assert response == {"resMsg": {"doorLock": True}}
    (request,) = backend.requests
    assert request.headers["authorization"] == "Bearer T1"
    assert request.headers["ccsp-device-id"] == "local-device-id"


@pytest.mark.asyncio
async def test_request_requires_access_token(backend, connection: Connection) -> None:
    """Test requests without access token fail before being sent."""
    with pytest.raises(PreconditionError):
        await connection.get(STATUS_URL)
    assert backend.requests == []


@pytest.mark.asyncio
async def test_elevated_request(backend, connection: Connection) -> None:
    """Test elevated requests use the control token."""
    connection.session.store_access_token("T1")
    connection.session.store_control_token("CT1")
    backend.add("POST", DOOR_URL, json={"retCode": "S"})
    await connection.post(DOOR_URL, json={"action": "close"}, elevated=True)
    (request,) = backend.requests
    assert request.headers["authorization"] == "Bearer CT1"


@pytest.mark.asyncio
async def test_elevated_request_after_expiry(backend) -> None:
    """Test elevated requests are refused once the control token expired."""
    now = [NOW]
    conn = Connection(transport=backend.transport, session=Session(clock=lambda: now[0]))
    conn.session.store_access_token("T1")
    conn.session.store_control_token("CT1")
    now[0] = NOW + 601
    with pytest.raises(PreconditionError):
        await conn.post(DOOR_URL, json={"action": "close"}, elevated=True)
    assert backend.requests == []
    await conn.close()


@pytest.mark.asyncio
async def test_logout(backend, connection: Connection) -> None:
    """Test logout forgets the tokens without contacting the API."""
    add_login_routes(backend)
    await connection.login()
    sent = len(backend.requests)
    await connection.logout()
    assert connection.session.access_token is None
    assert len(backend.requests) == sent
    with pytest.raises(PreconditionError):
        await connection.enter_pin()


@pytest.mark.asyncio
async def test_context_manager(backend) -> None:
    """Test the connection closes its client on exit."""
    async with Connection(transport=backend.transport) as conn:
        client = conn.asyncClient
    assert client.is_closed


@pytest.mark.asyncio
async def test_ensure_valid_token(backend) -> None:
    """Test a login only happens when the token is missing or expired."""
    now = [NOW]
    conn = Connection(
        "user@example.com",
        "secret",
        push_registrar=StaticPushRegistrar("push-token"),
        transport=backend.transport,
        session=Session(clock=lambda: now[0]),
    )
    add_login_routes(backend)

    await conn.ensure_valid_token()
    assert conn.session.access_token == "Bearer T1"
    await conn.ensure_valid_token()
    assert len(backend.requests_to(EU_ENDPOINTS.session)) == 1

    now[0] = conn.session.token_expires_at
    await conn.ensure_valid_token()
    assert len(backend.requests_to(EU_ENDPOINTS.session)) == 2
    await conn.close()
