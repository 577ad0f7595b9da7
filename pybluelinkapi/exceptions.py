#  SPDX-License-Identifier: Apache-2.0
"""Exceptions used for the Bluelink API."""

import logging

_LOGGER = logging.getLogger(__name__)


class BluelinkExceptionError(Exception):
    """Class of Bluelink API exceptions."""

    def __init__(self, code=None, *args, **kwargs) -> None:
        """Initialize exceptions for the Bluelink API."""
        self.message = ""
        self.code = None
        super().__init__(*args, **kwargs)
        if code is not None:
            self.code = code
            if isinstance(code, str):
                self.message = self.code
                return
            if self.code == 400:
                self.message = "BAD_REQUEST"
            elif self.code == 401:
                self.message = "UNAUTHORIZED"
            elif self.code == 403:
                self.message = "FORBIDDEN"
            elif self.code == 404:
                self.message = "NOT_FOUND"
            elif self.code == 429:
                self.message = "TOO_MANY_REQUESTS"
            elif self.code == 500:
                self.message = "SERVER_ERROR"
            elif self.code == 503:
                self.message = "SERVICE_MAINTENANCE"
            elif self.code == 504:
                self.message = "UPSTREAM_TIMEOUT"
            elif self.code > 299:
                self.message = f"UNKNOWN_ERROR_{self.code}"

    def __str__(self) -> str:
        """Return the human readable message."""
        return self.message or super().__str__()


class PreconditionError(BluelinkExceptionError):
    """An operation was attempted without the token it requires."""


class ProtocolError(BluelinkExceptionError):
    """A response did not have the expected shape."""


class TransportError(BluelinkExceptionError):
    """The underlying HTTP call failed."""


class CredentialRejectedError(BluelinkExceptionError):
    """Login credentials or PIN were rejected by the API."""

    def __init__(self, code=None, *args, **kwargs) -> None:
        """Initialize the exception, logging the rejection."""
        super().__init__(code, *args, **kwargs)
        _LOGGER.debug("Credentials rejected: %s", self.message)
