"""Login handshake for the Bluelink API."""

#  SPDX-License-Identifier: Apache-2.0
import logging
import re
from typing import NamedTuple

import httpx

from .const import (
    DEFAULT_LANGUAGE,
    EU_BASIC_TOKEN,
    EU_CLIENT_ID,
    GCM_SENDER_ID,
    PUSH_TYPE,
    TIMEOUT,
    USER_AGENT,
    Endpoints,
)
from .exceptions import (
    CredentialRejectedError,
    ProtocolError,
    TransportError,
)
from .push import PushRegistrar
from .session import Session

_LOGGER = logging.getLogger(__name__)

_AUTH_CODE_PATTERN = re.compile(r"code=([^&]*)")

#: status codes meaning the API refused the submitted credentials
REJECTED_STATUS_CODES = (400, 401, 403)


class Credentials(NamedTuple):
    """Store credentials for the Bluelink API."""

    username: str
    password: str


class LoginResult(NamedTuple):
    """Outcome of a completed login handshake."""

    authorization_code: str
    device_id: str
    access_token: str


async def log_request(request):
    """Provide formatting for http logging."""
    _LOGGER.debug("Request method - url: %s %s", request.method, request.url)


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    reject_on: tuple = (),
    **kwargs,
) -> httpx.Response:
    """Send a request, translating httpx errors into Bluelink exceptions.

    :param reject_on: status codes reported as :class:`CredentialRejectedError`
    :return: the successful response
    """
    try:
        resp = await client.request(method, url, timeout=TIMEOUT, **kwargs)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        _LOGGER.debug("%s %s failed with %s: %s", method, url, status, exc.response.text)
        if status in reject_on:
            raise CredentialRejectedError(status) from exc
        raise TransportError(status) from exc
    except httpx.RequestError as exc:
        raise TransportError(f"{method} {url} failed: {exc!r}") from exc
    return resp


async def request_json(client: httpx.AsyncClient, method: str, url: str, **kwargs) -> dict:
    """Send a request and return the decoded JSON body."""
    resp = await send_request(client, method, url, **kwargs)
    try:
        return resp.json()
    except ValueError as exc:
        msg = f"Response from {url} is not JSON"
        raise ProtocolError(msg) from exc


def extract_authorization_code(redirect_url: str | None) -> str:
    """Return the ``code`` query parameter embedded in a redirect URL."""
    match = _AUTH_CODE_PATTERN.search(redirect_url or "")
    if match is None:
        msg = "Authorization code was not found"
        raise ProtocolError(msg)
    return match.group(1)


class LoginFlow:
    """The five step login handshake.

    Every step is a coroutine of its own, taking what the previous step
    produced, so a failure points at exactly one step:

    1. :meth:`bootstrap_session` fetches the session cookies
    2. :meth:`negotiate_language` sets the UI language
    3. :meth:`fetch_authorization_code` submits the credentials
    4. :meth:`register_device` registers for push notifications
    5. :meth:`fetch_access_token` exchanges the code for an access token

    The client passed in should be used for this login only, its cookie jar
    is the login's cookie store.

    :param client: httpx.AsyncClient dedicated to this login
    :param session: session receiving the results
    :param credentials: tuple of username, password
    :param push_registrar: provider of the push token
    :param endpoints: URL table of the API
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        session: Session,
        credentials: Credentials,
        push_registrar: PushRegistrar,
        endpoints: Endpoints,
    ):
        """Initialise the login flow."""
        self.client = client
        self.session = session
        self.credentials = credentials
        self.push_registrar = push_registrar
        self.endpoints = endpoints
        self.headers = {
            "Host": httpx.URL(endpoints.token).netloc.decode("ascii"),
            "Connection": "Keep-Alive",
            "Accept-Encoding": "gzip",
            "User-Agent": USER_AGENT,
        }

    async def run(self) -> LoginResult:
        """Run all steps in order and return the outcome."""
        await self.bootstrap_session()
        await self.negotiate_language()
        authorization_code = await self.fetch_authorization_code()
        device_id = await self.register_device(self.session.device_id)
        access_token = await self.fetch_access_token(authorization_code)
        return LoginResult(authorization_code, device_id, access_token)

    async def bootstrap_session(self) -> None:
        """Request the session endpoint so the API sets its cookies."""
        _LOGGER.debug("Requesting session cookies.")
        await send_request(self.client, "GET", self.endpoints.session)

    async def negotiate_language(self, language: str = DEFAULT_LANGUAGE) -> None:
        """Declare the UI language, required before signing in."""
        _LOGGER.debug("Setting language to %s.", language)
        await send_request(
            self.client,
            "POST",
            self.endpoints.language,
            json={"lang": language},
        )

    async def fetch_authorization_code(self) -> str:
        """Sign in and extract the authorization code from the redirect URL.

        :return: authorization code to be exchanged for an access token
        """
        _LOGGER.debug("Submitting credentials to sign in endpoint.")
        body = await request_json(
            self.client,
            "POST",
            self.endpoints.login,
            json={
                "email": self.credentials.username,
                "password": self.credentials.password,
            },
            reject_on=REJECTED_STATUS_CODES,
        )
        authorization_code = extract_authorization_code(
            body.get("redirectUrl") if isinstance(body, dict) else None,
        )
        _LOGGER.debug("Got authorization code: %s", authorization_code)
        self.session.store_authorization_code(authorization_code)
        return authorization_code

    async def register_device(self, device_id: str) -> str:
        """Register for push notifications and adopt the device id the API assigns.

        :param device_id: device id to register
        :return: device id to use from now on
        """
        push_token = await self.push_registrar.register(GCM_SENDER_ID)
        _LOGGER.debug("Registering device %s for notifications.", device_id)
        body = await request_json(
            self.client,
            "POST",
            self.endpoints.notification_register,
            headers=self.headers
            | {
                "ccsp-service-id": EU_CLIENT_ID,
                "Content-Type": "application/json;charset=UTF-8",
            },
            json={
                "pushRegId": push_token,
                "pushType": PUSH_TYPE,
                "uuid": device_id,
            },
        )
        try:
            assigned = body["resMsg"]["deviceId"]
        except (KeyError, TypeError) as exc:
            msg = "Notification registration returned no device id"
            raise ProtocolError(msg) from exc
        self.session.assign_device_id(assigned)
        return assigned

    async def fetch_access_token(self, authorization_code: str) -> str:
        """Exchange the authorization code for an access token.

        :param authorization_code: code returned by the sign in step
        :return: access token, including the ``Bearer`` prefix
        """
        data = {
            "grant_type": "authorization_code",
            "redirect_uri": self.endpoints.redirect_uri,
            "code": authorization_code,
        }

        _LOGGER.debug("Exchanging the authorization code for an access token.")
        body = await request_json(
            self.client,
            "POST",
            self.endpoints.token,
            data=data,
            headers=self.headers
            | {
                "Authorization": EU_BASIC_TOKEN,
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )
        if not isinstance(body, dict):
            body = {}
        access_token = body.get("access_token")
        if not access_token:
            msg = "Token response contained no access token"
            raise ProtocolError(msg)
        expires_in = body.get("expires_in")
        if expires_in is not None:
            try:
                expires_in = int(expires_in)
            except (TypeError, ValueError) as exc:
                msg = f"Token response has an invalid expires_in: {expires_in!r}"
                raise ProtocolError(msg) from exc
        self.session.store_access_token(access_token, expires_in)
        _LOGGER.debug("New Access Token: %s", self.session.access_token)
        return self.session.access_token
