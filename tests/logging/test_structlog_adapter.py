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
"""Tests for LoggingProperties binding and the structlog adapter."""

import io
import json
import logging

import pytest
import structlog

from liftoff.core.config import Config
from liftoff.kernel.exceptions import ConfigurationException
from liftoff.logging import LoggingPort, LoggingProperties, StructlogAdapter


@pytest.fixture(autouse=True)
def _restore_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().setLevel(logging.WARNING)
    logging.getLogger("liftoff.core").setLevel(logging.NOTSET)
    logging.getLogger("liftoff.core.port_binder").setLevel(logging.NOTSET)


class TestLoggingProperties:
    def test_framework_defaults(self):
        settings = Config.defaults().bind(LoggingProperties)
        assert settings.format == "console"
        assert settings.root_level == "INFO"
        assert settings.logger_levels == {}

    def test_per_logger_levels(self):
        config = Config({"liftoff": {"logging": {"level": {"root": "warning", "liftoff.core": "debug"}}}})
        settings = config.bind(LoggingProperties)
        assert settings.root_level == "WARNING"
        assert settings.logger_levels == {"liftoff.core": "DEBUG"}

    def test_env_level_sets_root(self, monkeypatch):
        monkeypatch.setenv("LIFTOFF_LOGGING_LEVEL", "error")
        settings = Config.defaults().bind(LoggingProperties)
        assert settings.root_level == "ERROR"
        assert settings.logger_levels == {}

    def test_env_format(self, monkeypatch):
        monkeypatch.setenv("LIFTOFF_LOGGING_FORMAT", "JSON")
        assert Config.defaults().bind(LoggingProperties).format == "json"

    def test_rejects_unknown_format(self):
        with pytest.raises(ConfigurationException) as exc_info:
            LoggingProperties(format="xml")
        assert exc_info.value.code == "INVALID_LOG_FORMAT"

    def test_rejects_unknown_level(self):
        with pytest.raises(ConfigurationException) as exc_info:
            LoggingProperties(level={"liftoff.http": "LOUD"})
        assert exc_info.value.code == "INVALID_LOG_LEVEL"


class TestStructlogAdapter:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)

    def test_configure_keeps_bound_settings(self):
        adapter = StructlogAdapter(stream=io.StringIO())
        adapter.configure(Config({"liftoff": {"logging": {"format": "json"}}}))
        assert adapter.settings.format == "json"
        assert adapter.settings.root_level == "INFO"

    def test_apply_sets_root_and_logger_levels(self):
        adapter = StructlogAdapter(stream=io.StringIO())
        adapter.apply(LoggingProperties(level={"root": "WARNING", "liftoff.core": "debug"}))
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("liftoff.core").level == logging.DEBUG

    def test_json_events_carry_fields(self):
        stream = io.StringIO()
        adapter = StructlogAdapter(stream=stream)
        adapter.apply(LoggingProperties(format="json"))

        adapter.get_logger("liftoff.core.port_binder").info("port_in_use", port=3000, next_port=3001)

        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "port_in_use"
        assert event["port"] == 3000
        assert event["logger"] == "liftoff.core.port_binder"
        assert event["level"] == "info"

    def test_logger_level_filters_events(self):
        stream = io.StringIO()
        adapter = StructlogAdapter(stream=stream)
        adapter.apply(LoggingProperties(format="json", level={"liftoff.core.port_binder": "ERROR"}))

        adapter.get_logger("liftoff.core.port_binder").info("suppressed")
        assert stream.getvalue() == ""

    def test_set_level(self):
        adapter = StructlogAdapter(stream=io.StringIO())
        adapter.set_level("liftoff.core.port_binder", "warning")
        assert logging.getLogger("liftoff.core.port_binder").level == logging.WARNING

    def test_set_level_rejects_unknown_level(self):
        with pytest.raises(ConfigurationException):
            StructlogAdapter().set_level("liftoff.core", "chatty")
