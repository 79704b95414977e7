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
"""LiftoffMicroservice — a message-driven application, standalone or hybrid."""

from __future__ import annotations

import inspect
from typing import Any

import structlog

from liftoff.context.module_graph import ModuleGraph
from liftoff.core.application_config import ApplicationConfig
from liftoff.core.interceptors import ExecutionContext, build_chain
from liftoff.core.lifecycle import InitGuard
from liftoff.microservices.adapters.memory import InMemoryTransportServer
from liftoff.microservices.adapters.tcp import TcpTransportServer
from liftoff.microservices.ports.outbound import MessageHandler, TransportServer
from liftoff.microservices.types import MicroserviceOptions, Transport


def create_transport(options: MicroserviceOptions) -> TransportServer:
    if options.strategy is not None:
        return options.strategy
    if options.transport is Transport.MEMORY:
        return InMemoryTransportServer()
    return TcpTransportServer(host=options.host, port=options.port)


class LiftoffMicroservice:
    """Serves ``@message_pattern`` handlers of a module graph over a transport.

    When *owns_modules* is false (hybrid mode) the parent application runs
    the module lifecycle hooks and this instance only wires its listeners.
    """

    def __init__(
        self,
        module_graph: ModuleGraph,
        options: MicroserviceOptions | dict[str, Any] | None = None,
        application_config: ApplicationConfig | None = None,
        *,
        owns_modules: bool = True,
    ) -> None:
        self._graph = module_graph
        self._options = MicroserviceOptions.from_option(options)
        self._application_config = application_config if application_config is not None else ApplicationConfig()
        self._server = create_transport(self._options)
        self._owns_modules = owns_modules
        self._guard: InitGuard[LiftoffMicroservice] = InitGuard()
        self._is_initialized = False
        self._was_init_hook_called = False
        self._listeners_registered = False
        self._is_listening = False
        self._init_error: BaseException | None = None
        self._logger = structlog.get_logger("liftoff.microservices")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def application_config(self) -> ApplicationConfig:
        return self._application_config

    @property
    def options(self) -> MicroserviceOptions:
        return self._options

    @property
    def transport(self) -> TransportServer:
        return self._server

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def was_init_hook_called(self) -> bool:
        return self._was_init_hook_called

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    def set_is_initialized(self, value: bool) -> None:
        if self._is_initialized and not value:
            raise ValueError("An initialized microservice cannot be marked uninitialized")
        self._is_initialized = value
        if value:
            self._guard.mark_done(self)

    def set_is_init_hook_called(self, value: bool) -> None:
        self._was_init_hook_called = value

    # ------------------------------------------------------------------
    # Global enhancers (delegate to the possibly shared ApplicationConfig)
    # ------------------------------------------------------------------

    def use_global_interceptors(self, *interceptors: Any) -> LiftoffMicroservice:
        self._application_config.use_global_interceptors(*interceptors)
        return self

    def use_global_pipes(self, *pipes: Any) -> LiftoffMicroservice:
        self._application_config.use_global_pipes(*pipes)
        return self

    def use_global_guards(self, *guards: Any) -> LiftoffMicroservice:
        self._application_config.use_global_guards(*guards)
        return self

    def use_global_filters(self, *filters: Any) -> LiftoffMicroservice:
        self._application_config.use_global_filters(*filters)
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def register_listeners(self) -> None:
        """Bind every ``@message_pattern`` handler of the module graph to the transport."""
        if self._listeners_registered:
            return
        for pattern, handler in self._graph.message_handlers():
            self._server.add_handler(pattern, self._create_dispatcher(pattern, handler))
        self._listeners_registered = True

    async def init(self) -> LiftoffMicroservice:
        return await self._guard.run(self._do_init)

    async def _do_init(self) -> LiftoffMicroservice:
        self.register_listeners()
        if self._owns_modules:
            await self._graph.init()
        self._was_init_hook_called = True
        self._is_initialized = True
        self._init_error = None
        self._logger.info("microservice_initialized", transport=self._transport_name())
        return self

    def record_init_failure(self, error: BaseException) -> None:
        """Keep an eager initialization failure for :meth:`ready` to re-raise."""
        self._init_error = error

    async def ready(self) -> LiftoffMicroservice:
        """Resolve once initialized; re-raise a failed eager initialization."""
        if self._init_error is not None:
            raise self._init_error
        return await self.init()

    async def listen(self) -> None:
        if not self._is_initialized:
            await self.init()
        await self._server.listen()
        self._is_listening = True
        self._logger.info("microservice_listening", transport=self._transport_name())

    async def close(self) -> None:
        if self._is_listening:
            await self._server.close()
            self._is_listening = False
        if self._owns_modules and self._is_initialized:
            await self._graph.destroy()
            await self._graph.shutdown()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transport_name(self) -> str:
        if self._options.strategy is not None:
            return type(self._options.strategy).__name__
        return self._options.transport.value

    def _create_dispatcher(self, pattern: str, handler: Any) -> MessageHandler:
        async def _dispatch(data: Any) -> Any:
            async def _call_handler() -> Any:
                result = handler(data)
                if inspect.isawaitable(result):
                    return await result
                return result

            context = ExecutionContext(context_type="rpc", handler=handler, pattern=pattern, data=data)
            interceptors = self._application_config.get_global_interceptors()
            return await build_chain(interceptors, context, _call_handler)()

        return _dispatch
