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
"""InterceptorChainMiddleware — pure ASGI middleware running global interceptors."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from liftoff.core.interceptors import ExecutionContext, Interceptor, build_chain

InterceptorsProvider = Callable[[], Sequence[Interceptor]]


class InterceptorChainMiddleware:
    """Executes the application's global interceptors around every HTTP request.

    The interceptor list is read through *provider* on each request, so
    interceptors registered after startup apply immediately. With no
    interceptors registered the request passes straight through.
    """

    def __init__(self, app: ASGIApp, provider: InterceptorsProvider = tuple) -> None:
        self.app = app
        self._provider = provider

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        interceptors = list(self._provider())
        if scope["type"] != "http" or not interceptors:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive, send)

        async def _call_app() -> Response:
            """Terminal: run downstream ASGI app and capture its response."""
            status_code = 200
            raw_headers: list[tuple[bytes, bytes]] = []
            body_parts: list[bytes] = []

            async def _capture(message: Any) -> None:
                nonlocal status_code, raw_headers
                if message["type"] == "http.response.start":
                    status_code = message["status"]
                    raw_headers = list(message.get("headers", []))
                elif message["type"] == "http.response.body":
                    body = message.get("body", b"")
                    if body:
                        body_parts.append(body)

            await self.app(scope, receive, _capture)

            response = Response(content=b"".join(body_parts), status_code=status_code)
            response.raw_headers[:] = raw_headers
            return response

        context = ExecutionContext(context_type="http", request=request, handler=scope.get("endpoint"))
        response = cast(Response, await build_chain(interceptors, context, _call_app)())
        await response(scope, receive, send)
