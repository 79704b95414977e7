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
"""HybridConnector — attach microservices to a running HTTP application."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from liftoff.context.module_graph import ModuleGraph
from liftoff.core.application_config import ApplicationConfig
from liftoff.core.options import HybridApplicationOptions
from liftoff.microservices.microservice import LiftoffMicroservice
from liftoff.microservices.types import MicroserviceOptions

logger = structlog.get_logger("liftoff.microservices.hybrid")


class HybridConnector:
    """Creates microservices sharing the parent's module graph.

    ``inherit_app_config`` hands the parent's ``ApplicationConfig`` object
    itself to the microservice, so enhancers registered on either side are
    visible to both. Otherwise the microservice gets a fresh, empty one.
    """

    def __init__(self, module_graph: ModuleGraph, application_config: ApplicationConfig) -> None:
        self._graph = module_graph
        self._application_config = application_config

    def connect(
        self,
        options: MicroserviceOptions | Mapping[str, Any] | None = None,
        hybrid_options: HybridApplicationOptions | Mapping[str, Any] | None = None,
    ) -> LiftoffMicroservice:
        hybrid = HybridApplicationOptions.from_option(hybrid_options)
        config = self._application_config if hybrid.inherit_app_config else ApplicationConfig()

        instance = LiftoffMicroservice(
            self._graph,
            MicroserviceOptions.from_option(options),
            config,
            owns_modules=False,
        )
        if not hybrid.defer_initialization:
            self._initialize_eagerly(instance)

        logger.debug(
            "microservice_connected",
            inherit_app_config=hybrid.inherit_app_config,
            deferred=hybrid.defer_initialization,
            initialized=instance.is_initialized,
        )
        return instance

    @staticmethod
    def _initialize_eagerly(instance: LiftoffMicroservice) -> None:
        try:
            instance.register_listeners()
        except Exception as exc:
            logger.error("microservice_init_failed", error=str(exc))
            instance.record_init_failure(exc)
            return
        instance.set_is_initialized(True)
        instance.set_is_init_hook_called(True)
