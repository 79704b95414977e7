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
"""Application, auto-listen and hybrid options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from liftoff.core.config import config_properties
from liftoff.kernel.exceptions import ConfigurationException

DEFAULT_MAX_PORT_ATTEMPTS = 50

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


def _coerce_flag(value: Any, name: str, code: str = "INVALID_AUTO_LISTEN") -> bool:
    """Accept real booleans and the usual config-file spellings of them."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    elif isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ConfigurationException(f"Invalid {name} value: {value!r}", code=code)


@dataclass
class AutoListenOptions:
    """Explicit auto-listen settings.

    ``enabled`` defaults to ``False``: passing an options object without
    the flag keeps busy-port retry switched off.
    """

    enabled: bool = False
    max_attempts: int = DEFAULT_MAX_PORT_ATTEMPTS


AutoListenOption = Union[bool, AutoListenOptions, Mapping[str, Any], str, None]


@dataclass(frozen=True)
class AutoListenPolicy:
    """Resolved policy deciding whether a busy port is retried on the next one."""

    enabled: bool = True
    max_attempts: int = DEFAULT_MAX_PORT_ATTEMPTS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationException(
                f"max_attempts must be at least 1, got {self.max_attempts}",
                code="INVALID_AUTO_LISTEN",
            )

    @classmethod
    def from_option(
        cls,
        value: AutoListenOption,
        default_max_attempts: int = DEFAULT_MAX_PORT_ATTEMPTS,
    ) -> AutoListenPolicy:
        """Resolve an ``auto_listen`` application option.

        - omitted (``None``) or ``True``: enabled
        - ``False``: disabled
        - options object or mapping: its ``enabled`` flag, disabled when absent
        """
        if value is None:
            return cls(enabled=True, max_attempts=default_max_attempts)
        if isinstance(value, (bool, str)):
            return cls(enabled=_coerce_flag(value, "auto_listen"), max_attempts=default_max_attempts)
        if isinstance(value, AutoListenOptions):
            return cls(enabled=_coerce_flag(value.enabled, "auto_listen.enabled"), max_attempts=int(value.max_attempts))
        if isinstance(value, Mapping):
            attempts = value.get("max_attempts", value.get("max-attempts", default_max_attempts))
            enabled = _coerce_flag(value.get("enabled", False), "auto_listen.enabled")
            return cls(enabled=enabled, max_attempts=int(attempts))
        raise ConfigurationException(f"Invalid auto_listen value: {value!r}", code="INVALID_AUTO_LISTEN")


@dataclass(frozen=True)
class HybridApplicationOptions:
    """How a connected microservice relates to its parent application."""

    inherit_app_config: bool = False
    defer_initialization: bool = False

    @classmethod
    def from_option(
        cls, value: HybridApplicationOptions | Mapping[str, Any] | None
    ) -> HybridApplicationOptions:
        if value is None:
            return cls()
        if isinstance(value, HybridApplicationOptions):
            return value
        unknown = set(value) - {"inherit_app_config", "defer_initialization"}
        if unknown:
            raise ConfigurationException(
                f"Unknown hybrid application options: {sorted(unknown)}",
                code="INVALID_HYBRID_OPTIONS",
            )
        return cls(
            inherit_app_config=_coerce_flag(
                value.get("inherit_app_config", False), "inherit_app_config", "INVALID_HYBRID_OPTIONS"
            ),
            defer_initialization=_coerce_flag(
                value.get("defer_initialization", False), "defer_initialization", "INVALID_HYBRID_OPTIONS"
            ),
        )


@config_properties(prefix="liftoff.application")
@dataclass
class ApplicationProperties:
    """Configuration for the application bootstrap (liftoff.application.*)."""

    host: str = "127.0.0.1"
    port: int = 3000
    auto_listen: Any = None
    max_port_attempts: int = DEFAULT_MAX_PORT_ATTEMPTS


@dataclass
class ApplicationOptions:
    """Options handed to a ``LiftoffApplication`` at construction time."""

    auto_listen: AutoListenOption = None
    max_port_attempts: int = DEFAULT_MAX_PORT_ATTEMPTS
    host: str | None = None

    @classmethod
    def from_properties(cls, props: ApplicationProperties, **overrides: Any) -> ApplicationOptions:
        options = cls(
            auto_listen=props.auto_listen,
            max_port_attempts=props.max_port_attempts,
            host=props.host,
        )
        for key, value in overrides.items():
            if not hasattr(options, key):
                raise ConfigurationException(f"Unknown application option: {key!r}", code="INVALID_OPTION")
            setattr(options, key, value)
        return options

    @property
    def auto_listen_policy(self) -> AutoListenPolicy:
        return AutoListenPolicy.from_option(self.auto_listen, default_max_attempts=self.max_port_attempts)
