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
"""LiftoffFactory — the entry point for creating Liftoff applications."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from liftoff.context.module_graph import ModuleGraph
from liftoff.core.application import LiftoffApplication
from liftoff.core.application_config import ApplicationConfig
from liftoff.core.config import Config
from liftoff.core.options import ApplicationOptions, ApplicationProperties
from liftoff.http.ports.outbound import HttpAdapter
from liftoff.logging.port import LoggingPort
from liftoff.logging.properties import LoggingProperties
from liftoff.logging.structlog_adapter import StructlogAdapter
from liftoff.microservices.microservice import LiftoffMicroservice
from liftoff.microservices.types import MicroserviceOptions


class LiftoffFactory:
    """Assembles configuration, logging, the module graph and the HTTP adapter.

    Usage:
        app = LiftoffFactory.create(AppModule, auto_listen=True)
        app.set_global_prefix("api")
        await app.listen(3000)
    """

    @classmethod
    def create(
        cls,
        *modules: Any,
        http_adapter: HttpAdapter | None = None,
        config: Config | None = None,
        config_path: str | Path | None = None,
        configure_logging: bool = True,
        logging_adapter: LoggingPort | None = None,
        **options: Any,
    ) -> LiftoffApplication:
        """Create an HTTP application.

        Keyword *options* override ``liftoff.application.*`` configuration
        (``auto_listen``, ``max_port_attempts``, ``host``).
        """
        resolved = cls.load_config(config, config_path)
        if configure_logging:
            cls._configure_logging(resolved, logging_adapter)

        if http_adapter is None:
            from liftoff.http.adapters.starlette.adapter import StarletteHttpAdapter

            http_adapter = StarletteHttpAdapter()

        app_options = ApplicationOptions.from_properties(resolved.bind(ApplicationProperties), **options)
        return LiftoffApplication(ModuleGraph(modules), http_adapter, ApplicationConfig(), app_options)

    @classmethod
    def create_microservice(
        cls,
        *modules: Any,
        options: MicroserviceOptions | Mapping[str, Any] | None = None,
        config: Config | None = None,
        config_path: str | Path | None = None,
        configure_logging: bool = True,
        logging_adapter: LoggingPort | None = None,
    ) -> LiftoffMicroservice:
        """Create a standalone microservice owning its module lifecycle."""
        resolved = cls.load_config(config, config_path)
        if configure_logging:
            cls._configure_logging(resolved, logging_adapter)
        return LiftoffMicroservice(ModuleGraph(modules), options, ApplicationConfig())

    @staticmethod
    def _configure_logging(config: Config, adapter: LoggingPort | None) -> None:
        """Bind ``liftoff.logging.*`` and hand it to *adapter* (structlog by default)."""
        (adapter if adapter is not None else StructlogAdapter()).apply(config.bind(LoggingProperties))

    @staticmethod
    def load_config(config: Config | None = None, config_path: str | Path | None = None) -> Config:
        """Explicit config wins, then *config_path* (file or directory), then the working directory."""
        if config is not None:
            return config
        if config_path is not None:
            path = Path(config_path)
            if path.is_dir():
                return Config.from_sources(path)
            return Config.from_file(path)
        for candidate in ("liftoff.yaml", "liftoff.toml", "config/liftoff.yaml", "config/liftoff.toml"):
            if Path(candidate).exists():
                return Config.from_sources(".")
        return Config.defaults()
