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
"""'liftoff run' — Create an application from a factory and listen until interrupted."""

from __future__ import annotations

import asyncio
import importlib
import inspect
import os
import sys
from pathlib import Path
from typing import Any

import click

from liftoff.cli.console import console
from liftoff.core.application import LiftoffApplication
from liftoff.core.factory import LiftoffFactory
from liftoff.core.options import ApplicationProperties
from liftoff.kernel.exceptions import LiftoffException


def _ensure_src_on_path() -> None:
    """Add ``src/`` to sys.path when running from a src-layout project."""
    src = Path("src").resolve()
    if src.is_dir():
        src_str = str(src)
        if src_str not in sys.path:
            sys.path.insert(0, src_str)


def _import_factory(app_path: str) -> Any:
    module_name, _, attr = app_path.partition(":")
    if not module_name or not attr:
        raise click.BadParameter("expected 'module:attribute'", param_hint="--app")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_name!r}: {exc}", param_hint="--app") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise click.BadParameter(f"{module_name!r} has no attribute {attr!r}", param_hint="--app") from exc


async def _resolve_application(target: Any) -> LiftoffApplication:
    app = target() if callable(target) and not isinstance(target, LiftoffApplication) else target
    if inspect.isawaitable(app):
        app = await app
    if not isinstance(app, LiftoffApplication):
        raise click.ClickException(f"--app must resolve to a LiftoffApplication, got {type(app).__name__}")
    return app


async def _serve(target: Any, host: str | None, port: int) -> None:
    app = await _resolve_application(target)
    try:
        bound = await app.listen(port, host)
        console.print(f"[success]Listening on {app.get_url()}[/success]")
        if bound != port:
            console.print(f"[warning]Port {port} was busy; bound {bound} instead.[/warning]")
        await app.start_all_microservices()

        adapter = app.get_http_adapter()
        wait_closed = getattr(adapter, "wait_closed", None)
        if wait_closed is not None:
            await wait_closed()
        else:
            await asyncio.Event().wait()
    finally:
        await app.close()


@click.command()
@click.option("--app", "app_path", required=True, help="Application factory (e.g. 'myapp.main:create_app').")
@click.option("--host", default=None, help="Bind address (default: liftoff.application.host).")
@click.option("--port", default=None, type=int, help="Port number (default: liftoff.application.port).")
@click.option(
    "--auto-listen/--no-auto-listen",
    "auto_listen",
    default=None,
    help="Retry on the next port while the requested one is busy.",
)
def run_command(app_path: str, host: str | None, port: int | None, auto_listen: bool | None) -> None:
    """Start a Liftoff application."""
    _ensure_src_on_path()

    if auto_listen is not None:
        # Read back by Config.bind() when the factory builds the application.
        os.environ["LIFTOFF_APPLICATION_AUTO_LISTEN"] = "true" if auto_listen else "false"

    if port is None:
        port = LiftoffFactory.load_config().bind(ApplicationProperties).port

    target = _import_factory(app_path)
    try:
        asyncio.run(_serve(target, host, port))
    except LiftoffException as exc:
        console.print(f"[error]{exc}[/error]")
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        console.print("[dim]Interrupted.[/dim]")
