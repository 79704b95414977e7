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
"""Outbound port: microservice transport server interface."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

MessageHandler = Callable[[Any], Awaitable[Any]]


@runtime_checkable
class TransportServer(Protocol):
    """A server receiving pattern-addressed messages for a microservice."""

    def add_handler(self, pattern: str, handler: MessageHandler) -> None:
        """Route messages matching *pattern* to *handler*."""
        ...

    async def listen(self) -> None:
        """Start accepting messages. Returns once ready."""
        ...

    async def close(self) -> None:
        """Stop accepting messages and release resources."""
        ...
