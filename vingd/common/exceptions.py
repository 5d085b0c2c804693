"""
Custom exceptions for the Vingd API client.
"""

from __future__ import annotations

from http import HTTPStatus


class VingdError(Exception):
    """Base class for all errors raised by this package."""


class FormatError(VingdError, ValueError):
    """Exception for a resource path argument failing type validation."""


class TransportError(VingdError):
    """Exception for connection-level failures (no response obtained)."""


class BrokerConnectionError(TransportError):
    """Exception for a broker that could not be reached or understood."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        status_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_message = status_message


class BrokerError(VingdError):
    """Exception for failures reported by the Vingd Broker."""

    def __init__(
        self,
        message: str,
        context: str | None = "General error",
        code: int = HTTPStatus.CONFLICT,
        subcode: int = 0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context
        self.code = int(code)
        self.subcode = subcode

    def __str__(self) -> str:
        return f"[{self.context}]: {self.message} ({self.code}: {self.subcode})"


class InvalidTokenError(BrokerError):
    """Exception for a malformed purchase token."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "Invalid token", HTTPStatus.BAD_REQUEST)
