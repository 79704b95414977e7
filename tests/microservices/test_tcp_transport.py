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
"""Tests for TcpTransportServer over a real loopback connection."""

from __future__ import annotations

import asyncio
import json

import pytest

from liftoff.context.module_graph import ModuleGraph
from liftoff.microservices import LiftoffMicroservice, MicroserviceOptions, TcpTransportServer, message_pattern


async def _request(port: int, payload: bytes) -> dict:
    reader, writer = await asyncio.open_connection("127.0.0.1", port)
    try:
        writer.write(payload + b"\n")
        await writer.drain()
        return json.loads(await reader.readline())
    finally:
        writer.close()
        await writer.wait_closed()


class TestTcpTransportServer:
    @pytest.mark.asyncio
    async def test_request_response(self):
        server = TcpTransportServer(port=0)

        async def add(data):
            return data["a"] + data["b"]

        server.add_handler("add", add)
        await server.listen()
        try:
            reply = await _request(server.bound_port, json.dumps({"id": "1", "pattern": "add", "data": {"a": 2, "b": 3}}).encode())
            assert reply == {"id": "1", "response": 5}
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_unknown_pattern_returns_error(self):
        server = TcpTransportServer(port=0)
        await server.listen()
        try:
            reply = await _request(server.bound_port, b'{"id": "7", "pattern": "missing"}')
            assert reply["id"] == "7"
            assert "missing" in reply["err"]
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_handler_failure_returns_error(self):
        server = TcpTransportServer(port=0)

        async def explode(data):
            raise ValueError("bad input")

        server.add_handler("explode", explode)
        await server.listen()
        try:
            reply = await _request(server.bound_port, b'{"id": "2", "pattern": "explode"}')
            assert reply == {"id": "2", "err": "bad input"}
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_malformed_packet(self):
        server = TcpTransportServer(port=0)
        await server.listen()
        try:
            reply = await _request(server.bound_port, b"not json")
            assert reply["id"] is None
            assert reply["err"].startswith("Malformed packet")
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_bound_port_cleared_on_close(self):
        server = TcpTransportServer(port=0)
        assert server.bound_port is None
        await server.listen()
        assert server.bound_port
        await server.close()
        assert server.bound_port is None


class TestTcpMicroservice:
    @pytest.mark.asyncio
    async def test_serves_module_handlers(self):
        class Greeter:
            @message_pattern("greet")
            def greet(self, name):
                return f"hello {name}"

        microservice = LiftoffMicroservice(ModuleGraph([Greeter]), MicroserviceOptions(port=0))
        await microservice.listen()
        try:
            port = microservice.transport.bound_port
            reply = await _request(port, b'{"id": "g", "pattern": "greet", "data": "ada"}')
            assert reply == {"id": "g", "response": "hello ada"}
        finally:
            await microservice.close()
