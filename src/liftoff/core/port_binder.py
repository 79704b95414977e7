# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""PortBinder — bind the HTTP adapter, moving to the next port while the current one is busy."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

import structlog

from liftoff.core.options import AutoListenPolicy
from liftoff.http.ports.outbound import HttpAdapter
from liftoff.kernel.exceptions import (
    BindException,
    PortInUseException,
    PortRetryExhaustedException,
    error_code_of,
    is_address_in_use,
)

MAX_PORT = 65535


class BindOutcome(str, enum.Enum):
    BOUND = "bound"
    IN_USE = "in_use"
    FATAL = "fatal"


class BinderState(str, enum.Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    BOUND = "bound"
    FAILED = "failed"


@dataclass(frozen=True)
class BindAttempt:
    port: int
    outcome: BindOutcome
    error: BaseException | None = field(default=None, compare=False)


class PortBinder:
    """Drives ``HttpAdapter.listen`` through ``Idle -> Attempting -> Bound | Retrying | Failed``.

    Attempts are strictly sequential. Only an address-in-use failure is
    retried, and only when the auto-listen policy is enabled; at most
    ``policy.max_attempts`` ports are tried before giving up with
    :class:`PortRetryExhaustedException`.
    """

    def __init__(self, adapter: HttpAdapter, policy: AutoListenPolicy, logger: Any = None) -> None:
        self._adapter = adapter
        self._policy = policy
        self._logger = logger if logger is not None else structlog.get_logger("liftoff.core.port_binder")
        self._state = BinderState.IDLE
        self._attempts: list[BindAttempt] = []
        self._bound_port: int | None = None

    @property
    def state(self) -> BinderState:
        return self._state

    @property
    def attempts(self) -> list[BindAttempt]:
        return list(self._attempts)

    @property
    def bound_port(self) -> int | None:
        return self._bound_port

    async def bind(self, port: int, *args: Any) -> int:
        """Bind to *port* (or a later one) and return the port actually bound."""
        if self._state is not BinderState.IDLE:
            raise RuntimeError(f"PortBinder already used (state={self._state.value})")

        requested = int(port)
        candidate = requested
        while True:
            self._state = BinderState.ATTEMPTING
            attempt = await self._attempt(candidate, *args)
            self._attempts.append(attempt)

            if attempt.outcome is BindOutcome.BOUND:
                self._state = BinderState.BOUND
                actual = getattr(self._adapter, "bound_port", None)
                self._bound_port = actual if isinstance(actual, int) and actual > 0 else candidate
                return self._bound_port

            if attempt.outcome is BindOutcome.FATAL:
                raise self._fail(candidate, attempt.error, self._as_fatal(candidate, attempt.error))

            # Address in use from here on.
            if not self._policy.enabled or candidate == 0:
                raise self._fail(candidate, attempt.error, PortInUseException(candidate))

            in_use = sum(1 for a in self._attempts if a.outcome is BindOutcome.IN_USE)
            next_port = candidate + 1
            if in_use >= self._policy.max_attempts or next_port > MAX_PORT:
                raise self._fail(
                    candidate,
                    attempt.error,
                    PortRetryExhaustedException(requested, candidate, in_use),
                )

            self._logger.info(
                "port_in_use",
                message=f"Port {candidate} is in use, trying port {next_port} instead",
                port=candidate,
                next_port=next_port,
            )
            self._state = BinderState.RETRYING
            candidate = next_port

    async def _attempt(self, port: int, *args: Any) -> BindAttempt:
        try:
            await self._adapter.listen(port, *args)
        except Exception as exc:
            outcome = BindOutcome.IN_USE if is_address_in_use(exc) else BindOutcome.FATAL
            return BindAttempt(port, outcome, exc)
        return BindAttempt(port, BindOutcome.BOUND)

    def _fail(self, port: int, cause: BaseException | None, error: BindException) -> BindException:
        self._state = BinderState.FAILED
        self._logger.error(
            "listen_failed",
            message=str(error),
            port=port,
            code=error.code,
            attempts=len(self._attempts),
        )
        if cause is not error:
            error.__cause__ = cause
        return error

    @staticmethod
    def _as_fatal(port: int, exc: BaseException | None) -> BindException:
        if isinstance(exc, BindException):
            return exc
        code = error_code_of(exc) if exc is not None else None
        return BindException(f"Failed to bind port {port}: {exc}", port=port, code=code)
