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
"""InitGuard — run an asynchronous initialization exactly once."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class InitGuard(Generic[T]):
    """Caches the in-flight initialization so every caller awaits the same work.

    - The first ``run()`` schedules *factory* as a task; concurrent callers
      await that same task instead of starting their own.
    - A successful result is kept and returned by every later call.
    - A failure propagates to all waiting callers and clears the cached task,
      so the next ``run()`` starts a fresh attempt.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[T] | None = None
        self._done = False
        self._result: Any = None

    @property
    def done(self) -> bool:
        """True once an initialization attempt has completed successfully."""
        return self._done

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._done

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        if self._done:
            return self._result
        if self._task is None:
            self._task = asyncio.ensure_future(self._execute(factory))
        # Shielded: one cancelled caller must not cancel the shared work.
        return await asyncio.shield(self._task)

    def mark_done(self, result: Any = None) -> None:
        """Record an initialization performed outside ``run()``."""
        self._result = result
        self._done = True

    async def _execute(self, factory: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await factory()
        except BaseException:
            self._task = None
            raise
        self._result = result
        self._done = True
        return result
