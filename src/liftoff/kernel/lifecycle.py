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
"""Lifecycle hook protocols for application modules.

Modules opt in by defining the matching method; the module graph calls
``on_module_init`` and ``on_application_bootstrap`` during ``init()`` and
the shutdown hooks during ``close()`` -- in registration order and reverse
order respectively. Every hook may be a plain or a coroutine function.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class OnModuleInit(Protocol):
    """Called once the module graph has been assembled."""

    def on_module_init(self) -> Any: ...


@runtime_checkable
class OnApplicationBootstrap(Protocol):
    """Called after every module has been initialized."""

    def on_application_bootstrap(self) -> Any: ...


@runtime_checkable
class OnModuleDestroy(Protocol):
    """Called first during shutdown."""

    def on_module_destroy(self) -> Any: ...


@runtime_checkable
class BeforeApplicationShutdown(Protocol):
    """Called after ``on_module_destroy``, before connections are closed."""

    def before_application_shutdown(self, signal: str | None = None) -> Any: ...


@runtime_checkable
class OnApplicationShutdown(Protocol):
    """Called last, once connections have been closed."""

    def on_application_shutdown(self, signal: str | None = None) -> Any: ...
