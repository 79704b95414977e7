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
"""TCP transport: newline-delimited JSON request/response over asyncio streams.

Request:  ``{"id": "...", "pattern": "sum", "data": [1, 2]}``
Response: ``{"id": "...", "response": 3}`` or ``{"id": "...", "err": "..."}``
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import structlog

from liftoff.microservices.ports.outbound import MessageHandler

logger = structlog.get_logger("liftoff.microservices.tcp")


class TcpTransportServer:
    def __init__(self, host: str = "127.0.0.1", port: int = 3001) -> None:
        self._host = host
        self._port = port
        self._handlers: dict[str, MessageHandler] = {}
        self._server: asyncio.base_events.Server | None = None

    @property
    def bound_port(self) -> int | None:
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    def add_handler(self, pattern: str, handler: MessageHandler) -> None:
        self._handlers[pattern] = handler

    async def listen(self) -> None:
        self._server = await asyncio.start_server(self._handle_connection, self._host, self._port)
        logger.debug("tcp_transport_listening", host=self._host, port=self.bound_port)

    async def close(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None

    async def _handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            while line := await reader.readline():
                reply = await self._handle_line(line)
                writer.write(json.dumps(reply).encode() + b"\n")
                await writer.drain()
        except ConnectionError as exc:
            logger.debug("tcp_connection_lost", error=str(exc))
        finally:
            writer.close()

    async def _handle_line(self, line: bytes) -> dict[str, Any]:
        try:
            packet = json.loads(line)
        except json.JSONDecodeError as exc:
            return {"id": None, "err": f"Malformed packet: {exc}"}

        packet_id = packet.get("id")
        handler = self._handlers.get(packet.get("pattern"))
        if handler is None:
            return {"id": packet_id, "err": f"There is no matching message handler defined for pattern {packet.get('pattern')!r}"}
        try:
            return {"id": packet_id, "response": await handler(packet.get("data"))}
        except Exception as exc:
            logger.warning("message_handler_failed", pattern=packet.get("pattern"), error=str(exc))
            return {"id": packet_id, "err": str(exc)}
