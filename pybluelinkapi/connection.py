#  SPDX-License-Identifier: Apache-2.0
"""Python Package for controlling the Bluelink Europe API."""

from __future__ import annotations

import asyncio
import logging

import httpx

from .const import EU_ENDPOINTS, Endpoints
from .exceptions import PreconditionError, ProtocolError
from .oauth2 import (
    REJECTED_STATUS_CODES,
    Credentials,
    LoginFlow,
    LoginResult,
    log_request,
    request_json,
)
from .push import PushRegistrar
from .session import Session

_LOGGER = logging.getLogger(__name__)


class Connection:
    """Handles authentication and connecting to the Bluelink API.

    :param username: Bluelink account email
    :param password: Bluelink account password
    :param pin: PIN used to obtain control tokens
    :param push_registrar: provider of the push token registered at login
    :param endpoints: URL table of the API, Europe by default
    :param async_client: httpx.AsyncClient for API calls or None
    :param transport: httpx transport used by every client this connection opens
    :param session: Session to use, a fresh one by default
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        pin: str | None = None,
        push_registrar: PushRegistrar | None = None,
        endpoints: Endpoints = EU_ENDPOINTS,
        async_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        session: Session | None = None,
    ) -> None:
        """Initialise the connection to the Bluelink API."""
        self.credentials = Credentials(username, password)
        self.pin = pin
        self.push_registrar = push_registrar
        self.endpoints = endpoints
        self.transport = transport
        self.session = session or Session()
        self.token_lock = asyncio.Lock()

        if async_client is None:
            async_client = self._new_client()
        self.asyncClient = async_client
        _LOGGER.debug("Connection created for device %s", self.session.device_id)

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport,
            follow_redirects=True,
            event_hooks={"request": [log_request]},
        )

    async def login(self) -> LoginResult:
        """Run the full login handshake and store the resulting tokens.

        Cookies set during the handshake live in a client opened for this
        login only and are discarded with it.
        """
        if not self.credentials.username or not self.credentials.password:
            msg = "Username and password are required"
            raise PreconditionError(msg)
        if self.push_registrar is None:
            msg = "A push registrar is required to log in"
            raise PreconditionError(msg)

        async with self.token_lock, self._new_client() as client:
            flow = LoginFlow(
                client,
                self.session,
                self.credentials,
                self.push_registrar,
                self.endpoints,
            )
            result = await flow.run()
        _LOGGER.debug("Login success")
        return result

    async def refresh_access_token(self) -> LoginResult:
        """Get a new access token, which means logging in again."""
        return await self.login()

    async def ensure_valid_token(self, leeway: int = 60) -> None:
        """Log in when there is no access token or it is about to expire."""
        if not self.session.has_access_token or self.session.is_expired(leeway):
            _LOGGER.debug("Access token missing or expired, logging in")
            await self.login()

    async def enter_pin(self, pin: str | None = None) -> float:
        """Exchange the PIN for a control token valid for ten minutes.

        :param pin: PIN to submit, defaults to the configured one
        :return: the instant the control token expires
        """
        access_token = self.session.require_access_token()
        pin = pin or self.pin
        if not pin:
            msg = "PIN not set"
            raise PreconditionError(msg)

        body = await request_json(
            self.asyncClient,
            "PUT",
            self.endpoints.pin,
            headers={
                "Authorization": access_token,
                "Content-Type": "application/json",
            },
            json={"deviceId": self.session.device_id, "pin": pin},
            reject_on=REJECTED_STATUS_CODES,
        )
        control_token = body.get("controlToken") if isinstance(body, dict) else None
        if not control_token:
            msg = "PIN response contained no control token"
            raise ProtocolError(msg)
        expires_at = self.session.store_control_token(control_token)
        _LOGGER.debug("PIN entered OK, control token valid until %s", expires_at)
        return expires_at

    async def logout(self) -> None:
        """Forget the session tokens. The API has no logout endpoint."""
        self.session.clear()

    async def get(self, url, params=None, *, elevated=False):
        """Make a GET request to the Bluelink API."""
        return await self.request("GET", url, params=params, elevated=elevated)

    async def post(self, url, data=None, json=None, *, elevated=False):
        """Make a POST request to the Bluelink API."""
        return await self.request("POST", url, data=data, json=json, elevated=elevated)

    async def put(self, url, data=None, json=None, *, elevated=False):
        """Make a PUT request to the Bluelink API."""
        return await self.request("PUT", url, data=data, json=json, elevated=elevated)

    async def delete(self, url, *, elevated=False):
        """Make a DELETE request to the Bluelink API."""
        return await self.request("DELETE", url, elevated=elevated)

    async def request(self, method, url, *, elevated=False, **kwargs):
        """Create an authenticated request to the Bluelink API.

        Elevated requests carry the control token and fail once it expired.
        """
        if elevated:
            token = self.session.require_control_token()
        else:
            token = self.session.require_access_token()
        headers = {
            "Authorization": token,
            "ccsp-device-id": self.session.device_id,
        }
        return await request_json(self.asyncClient, method, url, headers=headers, **kwargs)

    async def close(self):
        """Close the asyncClient connection."""
        await self.asyncClient.aclose()

    async def __aenter__(self) -> Connection:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
