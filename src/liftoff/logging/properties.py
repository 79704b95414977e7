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
"""Logging settings bound from ``liftoff.logging.*``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from liftoff.core.config import config_properties
from liftoff.kernel.exceptions import ConfigurationException

LOG_FORMATS = ("console", "json")
ROOT_LOGGER_KEY = "root"


def normalize_level(level: Any) -> str:
    """Upper-case *level* and check it names a stdlib logging level."""
    name = str(level).strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ConfigurationException(f"Unknown log level: {level!r}", code="INVALID_LOG_LEVEL")
    return name


@config_properties(prefix="liftoff.logging")
@dataclass
class LoggingProperties:
    """``format`` is ``console`` or ``json``.

    ``level`` is either a single level for the root logger (the shape
    ``LIFTOFF_LOGGING_LEVEL=DEBUG`` produces) or a mapping where ``root``
    is the root level and every other key is a logger name.
    """

    format: str = "console"
    level: Any = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.format = str(self.format).strip().lower()
        if self.format not in LOG_FORMATS:
            raise ConfigurationException(
                f"Unknown log format {self.format!r}, expected one of {', '.join(LOG_FORMATS)}",
                code="INVALID_LOG_FORMAT",
            )
        if not isinstance(self.level, dict):
            self.level = {ROOT_LOGGER_KEY: self.level}
        self.level = {str(name): normalize_level(value) for name, value in self.level.items()}

    @property
    def root_level(self) -> str:
        return self.level.get(ROOT_LOGGER_KEY, "INFO")

    @property
    def logger_levels(self) -> dict[str, str]:
        return {name: value for name, value in self.level.items() if name != ROOT_LOGGER_KEY}
