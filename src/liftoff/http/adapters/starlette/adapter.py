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
"""Starlette + Uvicorn HTTP adapter."""

from __future__ import annotations

import asyncio
import socket
from collections.abc import Sequence
from typing import Any

import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.routing import BaseRoute

from liftoff.core.interceptors import Interceptor
from liftoff.core.routes import ExcludeRoute
from liftoff.http.adapters.starlette.interceptor_chain import InterceptorChainMiddleware, InterceptorsProvider
from liftoff.http.adapters.starlette.routing import prefix_routes

logger = structlog.get_logger("liftoff.http")

DEFAULT_HOST = "127.0.0.1"


class StarletteHttpAdapter:
    """HttpAdapter implementation serving a Starlette app with Uvicorn.

    The listening socket is bound here rather than by Uvicorn, so a failed
    bind raises ``OSError`` to the caller (Uvicorn would log and exit the
    process instead). Serving then runs as a background task until
    :meth:`close`.
    """

    def __init__(
        self,
        app: Starlette | None = None,
        *,
        backlog: int = 1024,
        log_level: str = "warning",
    ) -> None:
        self._app = app if app is not None else Starlette()
        self._backlog = backlog
        self._log_level = log_level
        self._interceptors: InterceptorsProvider = tuple
        self._server: uvicorn.Server | None = None
        self._socket: socket.socket | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._bound_port: int | None = None
        self._host: str | None = None
        self._initialized = False

    # ------------------------------------------------------------------
    # HttpAdapter
    # ------------------------------------------------------------------

    async def init(self) -> None:
        if self._initialized:
            return
        self._app.add_middleware(InterceptorChainMiddleware, provider=self._current_interceptors)
        self._initialized = True

    async def listen(self, port: int, host: str | None = None, *args: Any) -> uvicorn.Server:
        host = host or DEFAULT_HOST
        sock = self._bind_socket(host, port)

        config = uvicorn.Config(self._app, log_level=self._log_level, lifespan="off", backlog=self._backlog)
        server = uvicorn.Server(config)
        serve_task = asyncio.create_task(server.serve(sockets=[sock]))

        try:
            while not server.started:
                if serve_task.done():
                    serve_task.result()
                    raise OSError(f"HTTP server stopped before startup on {host}:{port}")
                await asyncio.sleep(0.01)
        except BaseException:
            await self._abort_startup(server, serve_task)
            sock.close()
            raise

        self._socket = sock
        self._server = server
        self._serve_task = serve_task
        self._host = host
        self._bound_port = sock.getsockname()[1]
        logger.debug("http_server_bound", host=host, port=self._bound_port)
        return server

    @staticmethod
    async def _abort_startup(server: uvicorn.Server, serve_task: asyncio.Task[None]) -> None:
        server.should_exit = True
        if not serve_task.done():
            serve_task.cancel()
        try:
            await serve_task
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            logger.debug("http_server_startup_aborted", error=str(exc))

    async def close(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
        if self._serve_task is not None:
            await self._serve_task
        if self._socket is not None:
            self._socket.close()
        self._server = None
        self._serve_task = None
        self._socket = None
        self._bound_port = None

    async def wait_closed(self) -> None:
        """Block until the server stops (e.g. on SIGINT)."""
        if self._serve_task is not None:
            await self._serve_task

    def get_instance(self) -> Starlette:
        return self._app

    def get_http_server(self) -> uvicorn.Server | None:
        return self._server

    def set_http_server(self, server: Any) -> None:
        self._server = server

    def register_routes(
        self,
        routes: Sequence[BaseRoute],
        prefix: str = "",
        exclude: Sequence[ExcludeRoute] = (),
    ) -> None:
        self._app.router.routes.extend(prefix_routes(routes, prefix, exclude))

    def use_interceptors(self, interceptors_provider: InterceptorsProvider) -> None:
        self._interceptors = interceptors_provider

    @property
    def bound_port(self) -> int | None:
        return self._bound_port

    @property
    def host(self) -> str | None:
        return self._host

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _current_interceptors(self) -> Sequence[Interceptor]:
        return self._interceptors()

    def _bind_socket(self, host: str, port: int) -> socket.socket:
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(self._backlog)
        except OSError:
            sock.close()
            raise
        sock.setblocking(False)
        sock.set_inheritable(True)
        return sock
