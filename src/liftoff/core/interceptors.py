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
"""Interceptor protocol and chain composition shared by HTTP and RPC dispatch."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

CallHandler = Callable[[], Awaitable[Any]]


@dataclass
class ExecutionContext:
    """What is being handled: an HTTP request or an RPC message."""

    context_type: str
    handler: Any = None
    request: Any = None
    pattern: str | None = None
    data: Any = None
    attributes: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Interceptor(Protocol):
    """Wraps handler execution; must call ``call_next()`` to proceed."""

    async def intercept(self, context: ExecutionContext, call_next: CallHandler) -> Any: ...


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def build_chain(
    interceptors: Sequence[Interceptor],
    context: ExecutionContext,
    handler: CallHandler,
) -> CallHandler:
    """Compose *interceptors* around *handler*; the first registered runs outermost."""
    chain = handler
    for interceptor in reversed(list(interceptors)):
        chain = _wrap(interceptor, context, chain)
    return chain


def _wrap(interceptor: Interceptor, context: ExecutionContext, next_call: CallHandler) -> CallHandler:
    async def _inner() -> Any:
        return await _maybe_await(interceptor.intercept(context, next_call))

    return _inner
