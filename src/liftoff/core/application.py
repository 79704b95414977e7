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
"""LiftoffApplication — brings an HTTP application and its microservices to a listening state."""

from __future__ import annotations

import asyncio
import signal as _signal
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from liftoff.context.module_graph import ModuleGraph
from liftoff.core.application_config import ApplicationConfig
from liftoff.core.lifecycle import InitGuard
from liftoff.core.options import ApplicationOptions, AutoListenPolicy, HybridApplicationOptions
from liftoff.core.port_binder import PortBinder
from liftoff.core.routes import RouteMatcher
from liftoff.http.ports.outbound import HttpAdapter
from liftoff.kernel.exceptions import InitializationException, LiftoffException
from liftoff.microservices.hybrid import HybridConnector
from liftoff.microservices.microservice import LiftoffMicroservice
from liftoff.microservices.types import MicroserviceOptions


class LiftoffApplication:
    """An HTTP application with optional hybrid microservices.

    Lifecycle:
    1. Configure global prefix and enhancers, connect microservices
    2. ``await init()`` — module hooks, route registration, adapter init (once)
    3. ``await listen(port)`` — bind through :class:`PortBinder`
    4. ``await close()`` — microservices, module teardown, release the socket
    """

    def __init__(
        self,
        module_graph: ModuleGraph,
        http_adapter: HttpAdapter,
        config: ApplicationConfig,
        options: ApplicationOptions | Mapping[str, Any] | None = None,
        *,
        logger: Any = None,
    ) -> None:
        self._graph = module_graph
        self._http_adapter = http_adapter
        self._config = config
        self._options = self._coerce_options(options)
        self._auto_listen: AutoListenPolicy = self._options.auto_listen_policy
        self._logger = logger if logger is not None else structlog.get_logger("liftoff.core")
        self._guard: InitGuard[LiftoffApplication] = InitGuard()
        self._hybrid = HybridConnector(module_graph, config)
        self._microservices: list[LiftoffMicroservice] = []
        self._port_binder: PortBinder | None = None
        self._is_initialized = False
        self._was_init_hook_called = False
        self._modules_initialized = False
        self._routes_registered = False
        self._shutdown_task: asyncio.Task[None] | None = None
        self._is_listening = False
        self._closed = False
        self._host: str | None = None
        self._port: int | None = None

        self._http_adapter.use_interceptors(self._config.get_global_interceptors)

    @staticmethod
    def _coerce_options(options: ApplicationOptions | Mapping[str, Any] | None) -> ApplicationOptions:
        if options is None:
            return ApplicationOptions()
        if isinstance(options, ApplicationOptions):
            return options
        return ApplicationOptions(**dict(options))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> ApplicationConfig:
        return self._config

    @property
    def logger(self) -> Any:
        return self._logger

    @property
    def auto_listen(self) -> AutoListenPolicy:
        return self._auto_listen

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def was_init_hook_called(self) -> bool:
        return self._was_init_hook_called

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    @property
    def port_binder(self) -> PortBinder | None:
        """The binder used by the last ``listen()`` call."""
        return self._port_binder

    def set_is_initialized(self, value: bool) -> None:
        if self._is_initialized and not value:
            raise ValueError("An initialized application cannot be marked uninitialized")
        self._is_initialized = value
        if value:
            self._guard.mark_done(self)

    def get_http_adapter(self) -> HttpAdapter:
        return self._http_adapter

    def get_http_server(self) -> Any:
        return self._http_adapter.get_http_server()

    def get_microservices(self) -> list[LiftoffMicroservice]:
        return list(self._microservices)

    # ------------------------------------------------------------------
    # Global configuration
    # ------------------------------------------------------------------

    def set_global_prefix(self, prefix: str, exclude: Iterable[RouteMatcher] | None = None) -> LiftoffApplication:
        self._config.set_global_prefix(prefix)
        if exclude is not None:
            self._config.set_global_prefix_options(exclude)
        return self

    def use_global_interceptors(self, *interceptors: Any) -> LiftoffApplication:
        self._config.use_global_interceptors(*interceptors)
        return self

    def use_global_pipes(self, *pipes: Any) -> LiftoffApplication:
        self._config.use_global_pipes(*pipes)
        return self

    def use_global_guards(self, *guards: Any) -> LiftoffApplication:
        self._config.use_global_guards(*guards)
        return self

    def use_global_filters(self, *filters: Any) -> LiftoffApplication:
        self._config.use_global_filters(*filters)
        return self

    # ------------------------------------------------------------------
    # Hybrid application
    # ------------------------------------------------------------------

    def connect_microservice(
        self,
        options: MicroserviceOptions | Mapping[str, Any] | None = None,
        hybrid_options: HybridApplicationOptions | Mapping[str, Any] | None = None,
    ) -> LiftoffMicroservice:
        instance = self._hybrid.connect(options, hybrid_options)
        self._microservices.append(instance)
        return instance

    async def start_all_microservices(self) -> LiftoffApplication:
        await asyncio.gather(*(ms.listen() for ms in self._microservices))
        self._logger.info("microservices_started", count=len(self._microservices))
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self) -> LiftoffApplication:
        """Initialize once; concurrent and repeated calls share the first result."""
        return await self._guard.run(self._do_init)

    async def _do_init(self) -> LiftoffApplication:
        """Stages that completed before a failure are skipped when init is retried."""
        try:
            if not self._modules_initialized:
                await self._graph.init()
                self._modules_initialized = True
            if not self._routes_registered:
                self._register_router()
                self._routes_registered = True
            await self._call_adapter_init()
        except LiftoffException as exc:
            self._logger.error("application_init_failed", error=str(exc), code=exc.code)
            raise

        self._was_init_hook_called = True
        self._is_initialized = True
        self._logger.info("application_initialized", message="Liftoff application successfully started")
        return self

    def _register_router(self) -> None:
        routes = self._graph.routes()
        if not routes:
            return
        self._http_adapter.register_routes(
            routes,
            self._config.get_global_prefix(),
            self._config.get_global_prefix_options().exclude,
        )
        self._logger.info("routes_registered", count=len(routes), prefix=self._config.get_global_prefix())

    async def _call_adapter_init(self) -> None:
        try:
            await self._http_adapter.init()
        except LiftoffException:
            raise
        except Exception as exc:
            raise InitializationException(subsystem="http", reason=str(exc)) from exc

    async def listen(self, port: int, host: str | None = None) -> int:
        """Bind the HTTP adapter and return the port actually bound.

        With auto-listen enabled a busy port is retried on the next one;
        otherwise the address-in-use error is raised.
        """
        if self._closed:
            raise LiftoffException("Cannot listen on a closed application", code="APPLICATION_CLOSED")
        if not self._is_initialized:
            await self.init()

        host = host or self._options.host
        binder = PortBinder(self._http_adapter, self._auto_listen, self._logger)
        self._port_binder = binder
        args = (host,) if host else ()
        bound = await binder.bind(port, *args)

        self._is_listening = True
        self._host = host
        self._port = bound
        self._logger.info("application_listening", message=f"Application is listening on {self.get_url()}", port=bound)
        return bound

    def get_url(self) -> str:
        if not self._is_listening or self._port is None:
            raise LiftoffException("get_url() requires the application to be listening", code="NOT_LISTENING")
        host = self._host or "127.0.0.1"
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self._port}"

    async def close(self, signal: str | None = None) -> None:
        """Stop microservices, run module teardown hooks and release the HTTP socket. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._logger.info("shutting_down", signal=signal)

        for microservice in self._microservices:
            await microservice.close()
        if self._modules_initialized:
            await self._graph.destroy(signal)
        await self._http_adapter.close()
        self._is_listening = False
        if self._modules_initialized:
            await self._graph.shutdown(signal)

    def enable_shutdown_hooks(self, signals: Iterable[str] = ("SIGTERM", "SIGINT")) -> LiftoffApplication:
        """Close the application when the running loop receives one of *signals*."""
        loop = asyncio.get_running_loop()
        for name in signals:
            sig = getattr(_signal, name)
            loop.add_signal_handler(sig, self._on_signal, name)
        return self

    @property
    def shutdown_task(self) -> asyncio.Task[None] | None:
        """The close task started by a shutdown signal, if one was received."""
        return self._shutdown_task

    def _on_signal(self, name: str) -> None:
        if self._shutdown_task is not None:
            return
        self._logger.info("shutdown_signal_received", signal=name)
        self._shutdown_task = asyncio.ensure_future(self.close(name))
        self._shutdown_task.add_done_callback(self._on_shutdown_done)

    def _on_shutdown_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error("shutdown_failed", error=str(exc))
