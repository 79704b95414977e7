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
"""ModuleGraph — ordered set of application modules and their lifecycle hooks."""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from typing import Any

import structlog
from starlette.routing import BaseRoute

from liftoff.kernel.exceptions import InitializationException

logger = structlog.get_logger("liftoff.context")

_MESSAGE_PATTERN_ATTR = "__liftoff_message_pattern__"


class ModuleGraph:
    """Resolves modules (and the modules they ``imports``) into init order.

    A module is any object or class; classes are instantiated without
    arguments. Imported modules come before the modules importing them and
    each module type appears once.
    """

    def __init__(self, modules: Iterable[Any] = ()) -> None:
        self._modules: list[Any] = []
        self._seen: set[type] = set()
        for module in modules:
            self.add(module)

    @property
    def modules(self) -> list[Any]:
        return list(self._modules)

    def add(self, module: Any) -> None:
        module_type = module if isinstance(module, type) else type(module)
        if module_type in self._seen:
            return
        self._seen.add(module_type)
        for imported in getattr(module, "imports", ()) or ():
            self.add(imported)
        self._modules.append(module() if isinstance(module, type) else module)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def routes(self) -> list[BaseRoute]:
        """HTTP routes declared by modules through a ``routes`` attribute."""
        collected: list[BaseRoute] = []
        for module in self._modules:
            collected.extend(getattr(module, "routes", ()) or ())
        return collected

    def message_handlers(self) -> list[tuple[str, Any]]:
        """``(pattern, bound method)`` pairs for every ``@message_pattern`` handler."""
        handlers: list[tuple[str, Any]] = []
        for module in self._modules:
            for attr_name in dir(module):
                if attr_name.startswith("__"):
                    continue
                method = getattr(module, attr_name, None)
                pattern = getattr(method, _MESSAGE_PATTERN_ATTR, None)
                if pattern is not None:
                    handlers.append((pattern, method))
        return handlers

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self) -> None:
        """Run ``on_module_init`` on every module, then ``on_application_bootstrap``."""
        for hook in ("on_module_init", "on_application_bootstrap"):
            for module in self._modules:
                try:
                    await self._call_hook(module, hook)
                except Exception as exc:
                    raise InitializationException(
                        subsystem="modules",
                        reason=f"{type(module).__name__}.{hook} failed: {exc}",
                    ) from exc

    async def destroy(self, signal: str | None = None) -> None:
        """Run ``on_module_destroy`` then ``before_application_shutdown`` in reverse order."""
        await self._call_best_effort("on_module_destroy")
        await self._call_best_effort("before_application_shutdown", signal)

    async def shutdown(self, signal: str | None = None) -> None:
        """Run ``on_application_shutdown`` in reverse order."""
        await self._call_best_effort("on_application_shutdown", signal)

    async def _call_best_effort(self, hook: str, *args: Any) -> None:
        for module in reversed(self._modules):
            try:
                await self._call_hook(module, hook, *args)
            except Exception as exc:
                logger.warning("module_hook_failed", module=type(module).__name__, hook=hook, error=str(exc))

    @staticmethod
    async def _call_hook(module: Any, hook: str, *args: Any) -> None:
        method = getattr(module, hook, None)
        if method is None:
            return
        result = method(*args)
        if inspect.isawaitable(result):
            await result
