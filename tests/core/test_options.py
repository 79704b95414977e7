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
"""Tests for auto-listen policy resolution and hybrid options."""

from __future__ import annotations

import pytest

from liftoff.core.config import Config
from liftoff.core.options import (
    DEFAULT_MAX_PORT_ATTEMPTS,
    ApplicationOptions,
    ApplicationProperties,
    AutoListenOptions,
    AutoListenPolicy,
    HybridApplicationOptions,
)
from liftoff.kernel.exceptions import ConfigurationException


class TestAutoListenPolicy:
    def test_omitted_is_enabled(self):
        assert AutoListenPolicy.from_option(None).enabled is True

    def test_true_is_enabled(self):
        assert AutoListenPolicy.from_option(True).enabled is True

    def test_false_is_disabled(self):
        assert AutoListenPolicy.from_option(False).enabled is False

    def test_empty_mapping_is_disabled(self):
        assert AutoListenPolicy.from_option({}).enabled is False

    def test_options_object_without_flag_is_disabled(self):
        assert AutoListenPolicy.from_option(AutoListenOptions()).enabled is False

    def test_mapping_with_flag(self):
        policy = AutoListenPolicy.from_option({"enabled": True, "max_attempts": 5})
        assert policy.enabled is True
        assert policy.max_attempts == 5

    def test_options_object_with_flag(self):
        policy = AutoListenPolicy.from_option(AutoListenOptions(enabled=True, max_attempts=3))
        assert policy == AutoListenPolicy(enabled=True, max_attempts=3)

    @pytest.mark.parametrize("value,expected", [("true", True), ("FALSE", False), ("1", True), ("off", False)])
    def test_strings_from_environment(self, value, expected):
        assert AutoListenPolicy.from_option(value).enabled is expected

    def test_default_attempt_ceiling(self):
        assert AutoListenPolicy.from_option(None).max_attempts == DEFAULT_MAX_PORT_ATTEMPTS

    def test_rejects_non_positive_ceiling(self):
        with pytest.raises(ConfigurationException):
            AutoListenPolicy.from_option({"enabled": True, "max_attempts": 0})

    def test_rejects_garbage(self):
        with pytest.raises(ConfigurationException):
            AutoListenPolicy.from_option("sometimes")

    @pytest.mark.parametrize(
        ("enabled", "expected"),
        [("false", False), ("off", False), ("0", False), ("yes", True), ("TRUE", True), (1, True), (0, False)],
    )
    def test_mapping_flag_strings(self, enabled, expected):
        assert AutoListenPolicy.from_option({"enabled": enabled}).enabled is expected

    def test_options_object_flag_string(self):
        assert AutoListenPolicy.from_option(AutoListenOptions(enabled="no")).enabled is False  # type: ignore[arg-type]

    def test_rejects_garbage_mapping_flag(self):
        with pytest.raises(ConfigurationException) as exc_info:
            AutoListenPolicy.from_option({"enabled": "maybe"})
        assert exc_info.value.code == "INVALID_AUTO_LISTEN"


class TestHybridApplicationOptions:
    def test_defaults(self):
        options = HybridApplicationOptions.from_option(None)
        assert options.inherit_app_config is False
        assert options.defer_initialization is False

    def test_from_mapping(self):
        options = HybridApplicationOptions.from_option({"inherit_app_config": True})
        assert options == HybridApplicationOptions(inherit_app_config=True, defer_initialization=False)

    def test_is_immutable(self):
        options = HybridApplicationOptions()
        with pytest.raises(AttributeError):
            options.inherit_app_config = True  # type: ignore[misc]

    def test_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationException):
            HybridApplicationOptions.from_option({"inheritAppConfig": True})

    def test_flag_strings(self):
        options = HybridApplicationOptions.from_option({"inherit_app_config": "false", "defer_initialization": "yes"})
        assert options == HybridApplicationOptions(inherit_app_config=False, defer_initialization=True)


class TestApplicationOptions:
    def test_from_properties_with_overrides(self):
        props = ApplicationProperties(host="0.0.0.0", auto_listen=True, max_port_attempts=7)
        options = ApplicationOptions.from_properties(props, auto_listen=False)
        assert options.host == "0.0.0.0"
        assert options.auto_listen_policy == AutoListenPolicy(enabled=False, max_attempts=7)

    def test_unknown_override_is_rejected(self):
        with pytest.raises(ConfigurationException):
            ApplicationOptions.from_properties(ApplicationProperties(), autoListen=True)

    def test_binds_kebab_case_yaml_keys(self):
        config = Config({"liftoff": {"application": {"auto-listen": {"enabled": True}, "max-port-attempts": 4}}})
        props = config.bind(ApplicationProperties)
        assert props.max_port_attempts == 4
        assert ApplicationOptions.from_properties(props).auto_listen_policy.enabled is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LIFTOFF_APPLICATION_AUTO_LISTEN", "false")
        props = Config({}).bind(ApplicationProperties)
        assert ApplicationOptions.from_properties(props).auto_listen_policy.enabled is False
