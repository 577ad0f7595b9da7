#  SPDX-License-Identifier: Apache-2.0
"""In-memory session state for the Bluelink API."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

from .const import CONTROL_TOKEN_TTL
from .exceptions import PreconditionError

_LOGGER = logging.getLogger(__name__)

_UUID_TEMPLATE = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"


def generate_device_id(rng: random.Random | None = None) -> str:
    """Return a random identifier in UUID v4 layout.

    The identifier only tags the client with the API, so the non-cryptographic
    ``random`` module is sufficient.
    """
    rng = rng or random
    chars = []
    for c in _UUID_TEMPLATE:
        if c == "x":
            chars.append(f"{rng.randrange(16):x}")
        elif c == "y":
            chars.append(f"{rng.randrange(16) & 0x3 | 0x8:x}")
        else:
            chars.append(c)
    return "".join(chars)


def _bearer(token: str) -> str:
    return f"Bearer {token}"


class Session:
    """Tokens and identity of one logged in client.

    Each field group has its own mutator: the device id is written by
    :meth:`assign_device_id`, the login tokens by :meth:`store_authorization_code`
    and :meth:`store_access_token`, the control token by
    :meth:`store_control_token`. Everything else is read-only.

    :param device_id: initial device id, generated when omitted
    :param clock: callable returning the current epoch time in seconds
    """

    def __init__(
        self,
        device_id: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialise an empty session."""
        self._clock = clock
        self._device_id = device_id or generate_device_id()
        self._authorization_code: str | None = None
        self._access_token: str | None = None
        self._token_expires_at: float | None = None
        self._control_token: str | None = None
        self._control_token_expires_at: float = 0

    @property
    def device_id(self) -> str:
        """Return the device id sent with API requests."""
        return self._device_id

    @property
    def authorization_code(self) -> str | None:
        """Return the one-time authorization code from the last login."""
        return self._authorization_code

    @property
    def refresh_token(self) -> str | None:
        """Return the authorization code under its historical name."""
        return self._authorization_code

    @property
    def access_token(self) -> str | None:
        """Return the bearer access token, including the ``Bearer`` prefix."""
        return self._access_token

    @property
    def token_expires_at(self) -> float | None:
        """Return the access token expiry, if the API reported one."""
        return self._token_expires_at

    @property
    def control_token(self) -> str | None:
        """Return the bearer control token, including the ``Bearer`` prefix."""
        return self._control_token

    @property
    def control_token_expires_at(self) -> float:
        """Return the instant after which the control token is invalid."""
        return self._control_token_expires_at

    @property
    def has_access_token(self) -> bool:
        """Return true once a login has succeeded."""
        return bool(self._access_token)

    def is_expired(self, leeway: int = 60) -> bool | None:
        """Return true if the access token has expired, None if its expiry is unknown."""
        if not self._token_expires_at:
            return None
        # small timedelta to consider token as expired before it actually expires
        return self._token_expires_at - leeway < self._clock()

    def control_token_valid(self) -> bool:
        """Return true if a control token is held and not yet expired."""
        return bool(self._control_token) and self._clock() <= self._control_token_expires_at

    def require_access_token(self) -> str:
        """Return the access token or raise if there is none."""
        if not self._access_token:
            msg = "Token not set"
            raise PreconditionError(msg)
        return self._access_token

    def require_control_token(self) -> str:
        """Return the control token or raise if it is missing or expired."""
        self.require_access_token()
        if not self.control_token_valid():
            msg = "Control token not set or expired"
            raise PreconditionError(msg)
        return self._control_token

    def assign_device_id(self, device_id: str) -> None:
        """Replace the device id, e.g. with the one assigned by the server."""
        if device_id != self._device_id:
            _LOGGER.debug("Device id changed from %s to %s", self._device_id, device_id)
        self._device_id = device_id

    def store_authorization_code(self, code: str) -> None:
        """Store the authorization code extracted during login."""
        self._authorization_code = code

    def store_access_token(self, token: str, expires_in: int | None = None) -> None:
        """Store a new access token and, when known, its expiry."""
        expires_at = None if expires_in is None else self._clock() + int(expires_in)
        self._access_token = _bearer(token)
        self._token_expires_at = expires_at

    def store_control_token(self, token: str) -> float:
        """Store a new control token, valid for ten minutes from now."""
        self._control_token = _bearer(token)
        self._control_token_expires_at = self._clock() + CONTROL_TOKEN_TTL
        return self._control_token_expires_at

    def clear(self) -> None:
        """Forget all tokens, keeping the device id."""
        self._authorization_code = None
        self._access_token = None
        self._token_expires_at = None
        self._control_token = None
        self._control_token_expires_at = 0

    def as_dict(self) -> dict:
        """Return the session fields as a dict."""
        return {
            "device_id": self._device_id,
            "authorization_code": self._authorization_code,
            "access_token": self._access_token,
            "token_expires_at": self._token_expires_at,
            "control_token": self._control_token,
            "control_token_expires_at": self._control_token_expires_at,
        }
