"""Typed errors raised across the capability manager and its collaborators.

Every error carries an :class:`ErrorKind` so that surfaces can branch on the
kind of failure (prompt for payment, ask for a new key, retry later) without
parsing message text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar


class ErrorKind(StrEnum):
    """Stable, wire-safe identifiers for each failure category."""

    UNAUTHENTICATED = "unauthenticated"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    SERVICE_UNAVAILABLE = "service_unavailable"
    CAPABILITY_UNAVAILABLE = "capability_unavailable"
    VALIDATION = "validation"
    TRANSIENT_NETWORK = "transient_network"
    INTERNAL = "internal"


class GhostwriteError(Exception):
    """Base exception for all GhostWrite errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL
    default_message: ClassVar[str] = "Unexpected GhostWrite error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_payload(self) -> dict[str, Any]:
        """Render the error in the `{success: false, ...}` message shape."""
        return {"success": False, "error": self.message, "kind": self.kind.value}


class UnauthenticatedError(GhostwriteError):
    """Raised when the credential is missing or rejected by the service."""

    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Missing or invalid API key"


class InsufficientCreditsError(GhostwriteError):
    """Raised when a metered transform is requested without credits."""

    kind = ErrorKind.INSUFFICIENT_CREDITS
    default_message = (
        "No credits available. Please purchase credits to use AI features."
    )


class ServiceUnavailableError(GhostwriteError):
    """Raised when every text-generation provider failed."""

    kind = ErrorKind.SERVICE_UNAVAILABLE
    default_message = "AI service temporarily unavailable"

    def __init__(self, message: str | None = None, *, details: str | None = None):
        super().__init__(message)
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.details:
            payload["details"] = self.details
        return payload


class ResponseParseError(ServiceUnavailableError):
    """Raised when the remote service answers with an unexpected payload shape."""

    default_message = "Unexpected response from the GhostWrite service"


class ProviderError(GhostwriteError):
    """A single text-generation provider failed.

    Provider chains convert exhaustion of all providers into
    :class:`ServiceUnavailableError`; this error rarely reaches a surface.
    """

    kind = ErrorKind.SERVICE_UNAVAILABLE
    default_message = "Provider call failed"

    def __init__(self, message: str | None = None, *, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider


class CapabilityUnavailableError(GhostwriteError):
    """Raised when the grammar engine is requested but never loaded."""

    kind = ErrorKind.CAPABILITY_UNAVAILABLE
    default_message = "Grammar engine not loaded"


class ValidationError(GhostwriteError):
    """Raised when request input is empty or not text."""

    kind = ErrorKind.VALIDATION
    default_message = "Invalid input: text is required"


class TransientNetworkError(GhostwriteError):
    """Raised when the network could not be reached."""

    kind = ErrorKind.TRANSIENT_NETWORK
    default_message = "No internet connection"


class ConfigFileError(GhostwriteError):
    """Raised when a configuration file exists but cannot be used."""

    kind = ErrorKind.VALIDATION
    default_message = "Invalid configuration file"

    def __init__(self, file_path: object, message: str, cause: Exception | None = None):
        self.file_path = file_path
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")
