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
"""'liftoff info' — Show version and resolved application settings."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from liftoff.cli.console import console
from liftoff.core.factory import LiftoffFactory
from liftoff.core.options import ApplicationOptions, ApplicationProperties


@click.command()
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file or directory.")
def info_command(config_path: Path | None) -> None:
    """Print the Liftoff version and the effective application settings."""
    from liftoff import __version__

    config = LiftoffFactory.load_config(config_path=config_path)
    props = config.bind(ApplicationProperties)
    policy = ApplicationOptions.from_properties(props).auto_listen_policy

    table = Table(title=f"Liftoff v{__version__}", show_header=True, header_style="bold")
    table.add_column("Setting", style="info")
    table.add_column("Value")
    table.add_row("host", props.host)
    table.add_row("port", str(props.port))
    table.add_row("auto-listen", "enabled" if policy.enabled else "disabled")
    table.add_row("max port attempts", str(policy.max_attempts))
    table.add_row("config sources", "\n".join(config.loaded_sources) or "-")
    console.print(table)
