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
"""Tests for InitGuard — exactly-once asynchronous initialization."""

from __future__ import annotations

import asyncio

import pytest

from liftoff.core.lifecycle import InitGuard


class _Counter:
    def __init__(self, fail_times: int = 0, delay: float = 0.0) -> None:
        self.calls = 0
        self.fail_times = fail_times
        self.delay = delay

    async def __call__(self) -> str:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.calls <= self.fail_times:
            raise RuntimeError(f"boom #{self.calls}")
        return f"result-{self.calls}"


class TestInitGuard:
    @pytest.mark.asyncio
    async def test_sequential_calls_run_once(self):
        guard: InitGuard[str] = InitGuard()
        work = _Counter()
        first = await guard.run(work)
        second = await guard.run(work)
        assert first == second == "result-1"
        assert work.calls == 1
        assert guard.done

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_in_flight_work(self):
        guard: InitGuard[str] = InitGuard()
        work = _Counter(delay=0.01)
        results = await asyncio.gather(*(guard.run(work) for _ in range(5)))
        assert results == ["result-1"] * 5
        assert work.calls == 1

    @pytest.mark.asyncio
    async def test_failure_propagates_and_allows_retry(self):
        guard: InitGuard[str] = InitGuard()
        work = _Counter(fail_times=1)
        with pytest.raises(RuntimeError, match="boom #1"):
            await guard.run(work)
        assert not guard.done
        assert not guard.in_flight

        assert await guard.run(work) == "result-2"
        assert guard.done

    @pytest.mark.asyncio
    async def test_failure_reaches_every_concurrent_caller(self):
        guard: InitGuard[str] = InitGuard()
        work = _Counter(fail_times=1, delay=0.01)
        results = await asyncio.gather(guard.run(work), guard.run(work), return_exceptions=True)
        assert all(isinstance(r, RuntimeError) for r in results)
        assert work.calls == 1

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_shared_work(self):
        guard: InitGuard[str] = InitGuard()
        work = _Counter(delay=0.02)
        waiter = asyncio.ensure_future(guard.run(work))
        await asyncio.sleep(0)
        waiter.cancel()
        assert await guard.run(work) == "result-1"
        assert work.calls == 1

    @pytest.mark.asyncio
    async def test_mark_done_skips_work(self):
        guard: InitGuard[str] = InitGuard()
        guard.mark_done("external")
        work = _Counter()
        assert await guard.run(work) == "external"
        assert work.calls == 0
