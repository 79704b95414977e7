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
"""Tests for PortBinder — busy-port retry state machine."""

from __future__ import annotations

import errno
import re
from unittest.mock import MagicMock

import pytest

from liftoff.core.options import AutoListenPolicy
from liftoff.core.port_binder import BinderState, BindOutcome, PortBinder
from liftoff.kernel.exceptions import (
    BindException,
    PortInUseException,
    PortRetryExhaustedException,
)
from liftoff.testing import BusyPortHttpAdapter

RETRY_MESSAGE = re.compile(r"Port.*3000.*is in use.*trying.*3001.*instead")


def _info_messages(logger: MagicMock) -> list[str]:
    return [c.kwargs.get("message", "") for c in logger.info.call_args_list]


class TestAutoListenEnabled:
    @pytest.mark.asyncio
    async def test_binds_free_port_directly(self):
        adapter = BusyPortHttpAdapter()
        logger = MagicMock()
        binder = PortBinder(adapter, AutoListenPolicy(enabled=True), logger)

        assert await binder.bind(3000) == 3000
        assert binder.state is BinderState.BOUND
        assert [a.outcome for a in binder.attempts] == [BindOutcome.BOUND]
        logger.info.assert_not_called()

    @pytest.mark.asyncio
    async def test_moves_to_next_port_when_busy(self):
        adapter = BusyPortHttpAdapter(busy_ports={3000: 1})
        logger = MagicMock()
        binder = PortBinder(adapter, AutoListenPolicy(enabled=True), logger)

        assert await binder.bind(3000) == 3001
        assert adapter.bound_port == 3001
        assert adapter.listen_calls == [3000, 3001]
        assert any(RETRY_MESSAGE.search(m) for m in _info_messages(logger))
        logger.error.assert_not_called()

    @pytest.mark.asyncio
    async def test_retry_log_names_ports(self):
        adapter = BusyPortHttpAdapter(busy_ports={3000: 1})
        logger = MagicMock()
        await PortBinder(adapter, AutoListenPolicy(enabled=True), logger).bind(3000)

        event, = logger.info.call_args.args
        assert event == "port_in_use"
        assert logger.info.call_args.kwargs["port"] == 3000
        assert logger.info.call_args.kwargs["next_port"] == 3001

    @pytest.mark.asyncio
    async def test_skips_several_busy_ports(self):
        adapter = BusyPortHttpAdapter(busy_ports={3000: 1, 3001: 1, 3002: 1})
        binder = PortBinder(adapter, AutoListenPolicy(enabled=True), MagicMock())

        assert await binder.bind(3000) == 3003
        assert [a.port for a in binder.attempts] == [3000, 3001, 3002, 3003]

    @pytest.mark.asyncio
    async def test_attempts_are_strictly_sequential(self):
        adapter = BusyPortHttpAdapter(busy_ports={3000: 1, 3001: 1})
        await PortBinder(adapter, AutoListenPolicy(enabled=True), MagicMock()).bind(3000)
        assert adapter.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_fatal_error_is_not_retried(self):
        denied = PermissionError(errno.EACCES, "Permission denied")
        adapter = BusyPortHttpAdapter(failing_ports={80: denied})
        logger = MagicMock()
        binder = PortBinder(adapter, AutoListenPolicy(enabled=True), logger)

        with pytest.raises(BindException) as exc_info:
            await binder.bind(80)

        assert not isinstance(exc_info.value, PortInUseException)
        assert exc_info.value.code == "EACCES"
        assert exc_info.value.__cause__ is denied
        assert adapter.listen_calls == [80]
        assert binder.state is BinderState.FAILED
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_exhaustion_raises_distinct_error(self):
        adapter = BusyPortHttpAdapter(busy_ports={p: 1 for p in range(3000, 3010)})
        logger = MagicMock()
        binder = PortBinder(adapter, AutoListenPolicy(enabled=True, max_attempts=3), logger)

        with pytest.raises(PortRetryExhaustedException, match="EADDRINUSE") as exc_info:
            await binder.bind(3000)

        assert exc_info.value.first_port == 3000
        assert exc_info.value.last_port == 3002
        assert adapter.listen_calls == [3000, 3001, 3002]
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_never_goes_past_highest_port(self):
        adapter = BusyPortHttpAdapter(busy_ports={65535: 1})
        binder = PortBinder(adapter, AutoListenPolicy(enabled=True), MagicMock())
        with pytest.raises(PortRetryExhaustedException):
            await binder.bind(65535)
        assert adapter.listen_calls == [65535]


class TestAutoListenDisabled:
    @pytest.mark.asyncio
    async def test_busy_port_fails_immediately(self):
        adapter = BusyPortHttpAdapter(busy_ports={3000: 1})
        logger = MagicMock()
        binder = PortBinder(adapter, AutoListenPolicy(enabled=False), logger)

        with pytest.raises(PortInUseException, match="EADDRINUSE") as exc_info:
            await binder.bind(3000)

        assert exc_info.value.code == "EADDRINUSE"
        assert exc_info.value.port == 3000
        assert adapter.listen_calls == [3000]
        logger.error.assert_called_once()
        logger.info.assert_not_called()

    @pytest.mark.asyncio
    async def test_free_port_still_binds(self):
        adapter = BusyPortHttpAdapter()
        binder = PortBinder(adapter, AutoListenPolicy(enabled=False), MagicMock())
        assert await binder.bind(3000) == 3000


class TestBinderState:
    @pytest.mark.asyncio
    async def test_starts_idle(self):
        binder = PortBinder(BusyPortHttpAdapter(), AutoListenPolicy(), MagicMock())
        assert binder.state is BinderState.IDLE
        assert binder.bound_port is None

    @pytest.mark.asyncio
    async def test_single_use(self):
        binder = PortBinder(BusyPortHttpAdapter(), AutoListenPolicy(), MagicMock())
        await binder.bind(3000)
        with pytest.raises(RuntimeError):
            await binder.bind(3000)

    @pytest.mark.asyncio
    async def test_recognizes_error_code_attribute(self):
        class CodedError(Exception):
            code = "EADDRINUSE"

        class CodedAdapter(BusyPortHttpAdapter):
            async def listen(self, port, *args):
                self.listen_calls.append(port)
                if port == 3000:
                    raise CodedError("busy")
                self._bound_port = port

        binder = PortBinder(CodedAdapter(), AutoListenPolicy(enabled=True), MagicMock())
        assert await binder.bind(3000) == 3001
