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
"""Outbound port: HTTP adapter interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HttpAdapter(Protocol):
    """Abstract HTTP adapter wrapping an underlying network server.

    ``listen`` must raise when the bind fails -- an ``OSError`` carrying
    ``errno.EADDRINUSE`` (or any exception with ``code == "EADDRINUSE"``)
    marks a busy port; anything else is treated as fatal.
    """

    async def init(self) -> None:
        """Prepare the server (build the app, install middleware)."""
        ...

    async def listen(self, port: int, *args: Any) -> Any:
        """Bind to *port* and start serving. Returns once bound."""
        ...

    async def close(self) -> None:
        """Stop serving and release the bound socket."""
        ...

    def get_instance(self) -> Any:
        """The framework application object (e.g. a Starlette app)."""
        ...

    def get_http_server(self) -> Any: ...

    def set_http_server(self, server: Any) -> None: ...

    def register_routes(self, routes: Sequence[Any], prefix: str = "", exclude: Sequence[Any] = ()) -> None:
        """Mount *routes*, prepending *prefix* to every route not matched by *exclude*."""
        ...

    def use_interceptors(self, interceptors_provider: Any) -> None:
        """Install a callable returning the current global interceptors."""
        ...

    @property
    def bound_port(self) -> int | None:
        """The port actually bound, or ``None`` when not listening."""
        ...
