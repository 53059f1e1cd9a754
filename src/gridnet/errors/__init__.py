"""Custom exception hierarchy for gridnet."""

from __future__ import annotations

from typing import Optional


class GridNetError(Exception):
    """Base class for all custom errors raised by gridnet."""


# --- 3-layer hierarchy ---

class DomainError(GridNetError):
    """Base class for domain-level errors."""


class InfrastructureError(GridNetError):
    """Base class for infrastructure-level errors."""


class ApplicationError(GridNetError):
    """Base class for application-level errors."""


# --- Application errors ---

class InvalidRequestKind(ApplicationError):
    """Raised when a request kind has no endpoint that could serve it."""

    def __init__(self, kind: object, message: Optional[str] = None) -> None:
        self.kind = kind
        super().__init__(message or f"No endpoint configured for request kind {kind!r}")


class BusinessFailure(ApplicationError):
    """The remote service answered, but reported ``result`` other than true."""


# --- Infrastructure errors ---

class TransportError(InfrastructureError):
    """Raised when the transport cannot deliver a request or its response.

    ``aborted`` marks failures the user or the host initiated (a cancelled
    call); those never produce a user-visible notice.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        aborted: bool = False,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.aborted = aborted


# --- Configuration errors ---

class ConfigurationError(GridNetError):
    """Base class for configuration related failures."""


class ConfigurationLoadError(ConfigurationError):
    """Raised when a configuration file cannot be read or parsed."""


class ConfigurationValidationError(ConfigurationError):
    """Raised when configuration data fails schema validation."""
