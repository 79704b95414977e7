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
"""In-process transport for testing and single-process applications."""

from __future__ import annotations

from typing import Any

from liftoff.microservices.ports.outbound import MessageHandler


class InMemoryTransportServer:
    def __init__(self) -> None:
        self._handlers: dict[str, MessageHandler] = {}
        self._running = False

    @property
    def patterns(self) -> list[str]:
        return list(self._handlers)

    @property
    def running(self) -> bool:
        return self._running

    def add_handler(self, pattern: str, handler: MessageHandler) -> None:
        self._handlers[pattern] = handler

    async def dispatch(self, pattern: str, data: Any = None) -> Any:
        if not self._running:
            raise RuntimeError("Transport is not listening")
        handler = self._handlers.get(pattern)
        if handler is None:
            raise LookupError(f"There is no matching message handler defined for pattern {pattern!r}")
        return await handler(data)

    async def listen(self) -> None:
        self._running = True

    async def close(self) -> None:
        self._running = False
