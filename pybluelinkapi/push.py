#  SPDX-License-Identifier: Apache-2.0
"""Push notification provider registration."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from .exceptions import PreconditionError, ProtocolError

_LOGGER = logging.getLogger(__name__)


class PushRegistrar(ABC):
    """Obtains a push token from a push notification provider."""

    @abstractmethod
    async def register(self, sender_id: str) -> str:
        """Register with the provider and return the push token."""


class GcmPushRegistrar(PushRegistrar):
    """Registers with Google Cloud Messaging through ``push_receiver``.

    :param register: registration function, ``push_receiver.register`` by default
    """

    def __init__(self, register: Callable[..., dict] | None = None) -> None:
        """Initialise the registrar."""
        self._register = register
        self.credentials: dict | None = None

    async def register(self, sender_id: str) -> str:
        """Register a new GCM client and return its token."""
        register = self._register
        if register is None:
            from push_receiver import register

        _LOGGER.debug("Registering with GCM for sender %s", sender_id)
        # push_receiver is blocking
        credentials = await asyncio.to_thread(register, sender_id=sender_id)
        try:
            token = credentials["gcm"]["token"]
        except (KeyError, TypeError) as exc:
            msg = "GCM registration returned no token"
            raise ProtocolError(msg) from exc
        self.credentials = credentials
        return token


class StaticPushRegistrar(PushRegistrar):
    """Hands out a push token obtained beforehand."""

    def __init__(self, token: str) -> None:
        """Initialise the registrar with a known token."""
        if not token:
            msg = "Push token not set"
            raise PreconditionError(msg)
        self.token = token

    async def register(self, sender_id: str) -> str:
        """Return the stored token."""
        _LOGGER.debug("Using static push token for sender %s", sender_id)
        return self.token
