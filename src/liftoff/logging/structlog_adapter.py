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
"""StructlogAdapter — LoggingPort backed by structlog over the stdlib logging tree."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

from liftoff.core.config import Config
from liftoff.logging.properties import LoggingProperties, normalize_level


def _processors(log_format: str) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == "json":
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain += [structlog.processors.UnicodeDecoder(), structlog.dev.ConsoleRenderer()]
    return chain


class StructlogAdapter:
    """Routes structlog events through stdlib handlers so per-logger levels apply.

    Framework loggers are named after their package (``liftoff.core.port_binder``,
    ``liftoff.http``), which is what ``liftoff.logging.level`` keys refer to.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream
        self._settings = LoggingProperties()

    @property
    def settings(self) -> LoggingProperties:
        return self._settings

    def configure(self, config: Config) -> None:
        self.apply(config.bind(LoggingProperties))

    def apply(self, properties: LoggingProperties) -> None:
        structlog.configure(
            processors=_processors(properties.format),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=self._stream or sys.stdout,
            level=properties.root_level,
            force=True,
        )
        for name, level in properties.logger_levels.items():
            self.set_level(name, level)
        self._settings = properties

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(normalize_level(level))
