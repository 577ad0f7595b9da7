"""Tests for `pybluelinkapi.session`."""

from __future__ import annotations

import random
import re

import pytest

from pybluelinkapi.exceptions import PreconditionError
from pybluelinkapi.session import Session, generate_device_id

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def test_device_id_layout() -> None:
    """Test generated ids follow the UUID v4 layout."""
    for _ in range(200):
        device_id = generate_device_id()
        assert len(device_id) == 36
        assert device_id[14] == "4"
        assert device_id[19] in "89ab"
        assert UUID_PATTERN.match(device_id)


def test_device_id_is_random() -> None:
    """Test two ids from identically seeded generators differ only by state."""
    first = generate_device_id(random.Random(1))
    second = generate_device_id(random.Random(2))
    assert first != second
    assert generate_device_id(random.Random(1)) == first


def test_session_generates_device_id() -> None:
    """Test a new session carries a generated device id and no tokens."""
    session = Session()
    assert UUID_PATTERN.match(session.device_id)
    assert session.access_token is None
    assert session.control_token is None
    assert not session.has_access_token


def test_store_tokens() -> None:
    """Test tokens are stored with the bearer prefix."""
    now = [1000.0]
    session = Session(clock=lambda: now[0])
    session.store_authorization_code("ABC123")
    session.store_access_token("T1", expires_in=3600)
    assert session.authorization_code == "ABC123"
    assert session.refresh_token == "ABC123"
    assert session.access_token == "Bearer T1"
    assert session.token_expires_at == 4600.0

    expires_at = session.store_control_token("CT1")
    assert session.control_token == "Bearer CT1"
    assert expires_at == session.control_token_expires_at == 1600.0
    assert session.require_control_token() == "Bearer CT1"

    now[0] = 1601.0
    assert not session.control_token_valid()
    with pytest.raises(PreconditionError):
        session.require_control_token()


def test_access_token_without_expiry() -> None:
    """Test the expiry stays unset when the API reports none."""
    session = Session(clock=lambda: 1000.0)
    session.store_access_token("T1")
    assert session.token_expires_at is None


def test_require_access_token() -> None:
    """Test the access token guard."""
    session = Session()
    with pytest.raises(PreconditionError):
        session.require_access_token()
    with pytest.raises(PreconditionError):
        session.require_control_token()


def test_clear_keeps_device_id() -> None:
    """Test clearing the session drops tokens only."""
    session = Session(device_id="device", clock=lambda: 1000.0)
    session.store_authorization_code("ABC123")
    session.store_access_token("T1")
    session.store_control_token("CT1")
    session.clear()
    assert session.device_id == "device"
    assert session.as_dict() == {
        "device_id": "device",
        "authorization_code": None,
        "access_token": None,
        "token_expires_at": None,
        "control_token": None,
        "control_token_expires_at": 0,
    }


def test_successive_device_ids_differ() -> None:
    """Test successive calls on one generator give different ids."""
    rng = random.Random(1)
    assert generate_device_id(rng) != generate_device_id(rng)


def test_invalid_expiry_leaves_token_untouched() -> None:
    """Test a bad expiry does not half-write the access token."""
    session = Session(clock=lambda: 1000.0)
    session.store_access_token("OLD", expires_in=60)
    with pytest.raises(ValueError):
        session.store_access_token("T1", expires_in="soon")
    assert session.access_token == "Bearer OLD"
    assert session.token_expires_at == 1060.0
