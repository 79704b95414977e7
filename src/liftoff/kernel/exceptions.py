"""Unified exception hierarchy for Liftoff.

All framework exceptions inherit from LiftoffException, enabling unified
error handling across modules.

Categories:
- ConfigurationException: Invalid application or hybrid options
- InitializationException: Module graph or adapter bring-up failures
- BindException: Transport bind failures (port in use, permission, bad port)
"""

from __future__ import annotations

import errno as _errno
from typing import Any

ADDRESS_IN_USE = "EADDRINUSE"


# =============================================================================
# Base Exception
# =============================================================================


class LiftoffException(Exception):
    """Base exception for all Liftoff errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "EADDRINUSE").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ConfigurationException(LiftoffException):
    """An application, listen or hybrid option has an invalid value."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(LiftoffException):
    """Infrastructure failures: transports, sockets, adapters."""


class InitializationException(InfrastructureException):
    """Module graph or adapter bring-up failed; the instance stays uninitialized.

    The underlying error is kept as ``__cause__`` and the failing
    subsystem is named.
    """

    def __init__(self, subsystem: str, reason: str) -> None:
        self.subsystem = subsystem
        self.reason = reason
        super().__init__(
            message=f"Failed to initialize {subsystem}: {reason}",
            code="INITIALIZATION_FAILED",
            context={"subsystem": subsystem},
        )


class BindException(InfrastructureException):
    """A transport could not be bound to the requested port. Never retried."""

    def __init__(self, message: str, port: int, code: str | None = None) -> None:
        super().__init__(message=message, code=code, context={"port": port})
        self.port = port


class PortInUseException(BindException):
    """The requested port is already occupied by another listener."""

    def __init__(self, port: int, host: str | None = None) -> None:
        address = f"{host}:{port}" if host else f":::{port}"
        super().__init__(
            f"listen {ADDRESS_IN_USE}: address already in use {address}",
            port=port,
            code=ADDRESS_IN_USE,
        )
        self.host = host


class PortRetryExhaustedException(BindException):
    """Every candidate port was in use before the attempt ceiling was reached."""

    def __init__(self, first_port: int, last_port: int, attempts: int) -> None:
        super().__init__(
            f"Port retry exhausted after {attempts} attempts: ports {first_port}-{last_port} "
            f"are all in use ({ADDRESS_IN_USE})",
            port=last_port,
            code="PORT_RETRY_EXHAUSTED",
        )
        self.first_port = first_port
        self.last_port = last_port
        self.attempts = attempts


def error_code_of(exc: BaseException) -> str | None:
    """Return the standardized error code carried by *exc*, if any.

    ``OSError`` instances expose a numeric errno which is translated to its
    symbolic name; other exceptions may carry a string ``code`` attribute.
    """
    code: Any = getattr(exc, "code", None)
    if isinstance(code, str):
        return code
    if isinstance(exc, OSError) and exc.errno is not None:
        return _errno.errorcode.get(exc.errno)
    return None


def is_address_in_use(exc: BaseException) -> bool:
    """True when *exc* signals that the address is already in use."""
    if isinstance(exc, PortInUseException):
        return True
    if isinstance(exc, OSError) and exc.errno == _errno.EADDRINUSE:
        return True
    return error_code_of(exc) == ADDRESS_IN_USE
