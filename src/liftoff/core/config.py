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
"""Layered application configuration.

Sources, lowest priority first:

1. ``liftoff-defaults.yaml`` shipped in :mod:`liftoff.resources`
2. ``config/liftoff.{yaml,toml}`` under the project directory
3. ``liftoff.{yaml,toml}`` in the project directory itself
4. ``LIFTOFF_*`` environment variables, consulted on every read

Keys are dotted paths (``liftoff.application.port``). ``@config_properties``
dataclasses are filled from one section with :meth:`Config.bind`.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

CONFIG_FILE_STEM = "liftoff"
ENV_PREFIX = "LIFTOFF_"
DEFAULTS_SOURCE = "liftoff-defaults.yaml (framework defaults)"

_PROPERTIES_PREFIX_ATTR = "__liftoff_config_prefix__"
_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MISSING = object()


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Attach a configuration section to a dataclass for :meth:`Config.bind`."""

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PROPERTIES_PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_key_for(key: str) -> str:
    """``liftoff.application.max-port-attempts`` -> ``LIFTOFF_APPLICATION_MAX_PORT_ATTEMPTS``."""
    stem = key.removeprefix(f"{CONFIG_FILE_STEM}.")
    return ENV_PREFIX + re.sub(r"[.\-]", "_", stem).upper()


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with path.open("rb") as f:
            return tomllib.load(f)
    with path.open() as f:
        return yaml.safe_load(f) or {}


def _read_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("liftoff.resources").joinpath("liftoff-defaults.yaml")
    return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}


def _project_files(base_dir: Path) -> Iterator[Path]:
    for directory in (base_dir / "config", base_dir):
        for suffix in (".yaml", ".toml"):
            candidate = directory / f"{CONFIG_FILE_STEM}{suffix}"
            if candidate.is_file():
                yield candidate


class Config:
    """Read-only view over merged configuration data.

    Environment variables win over file values for every key, so a value
    read through :meth:`get` or :meth:`bind` may be a string even where the
    file holds a number; :meth:`bind` converts those for ``int``, ``float``
    and ``bool`` fields.
    """

    def __init__(self, data: dict[str, Any] | None = None, sources: Iterable[str] = ()) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources = list(sources)

    @property
    def loaded_sources(self) -> list[str]:
        """Where the data came from, lowest priority first."""
        return list(self._sources)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def defaults(cls) -> Config:
        return cls._layered((), load_defaults=True)

    @classmethod
    def from_sources(cls, base_dir: str | Path, load_defaults: bool = True) -> Config:
        """Merge the project files found under *base_dir* over the framework defaults.

        ``config/liftoff.*`` is read before ``liftoff.*`` at the root, so the
        root file wins on conflicting keys.
        """
        return cls._layered(_project_files(Path(base_dir)), load_defaults)

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Use a single YAML or TOML file over the framework defaults; a missing file is skipped."""
        path = Path(path)
        return cls._layered([path] if path.is_file() else [], load_defaults)

    @classmethod
    def _layered(cls, files: Iterable[Path], load_defaults: bool) -> Config:
        data: dict[str, Any] = _read_defaults() if load_defaults else {}
        sources = [DEFAULTS_SOURCE] if load_defaults else []
        for path in files:
            data = _merge(data, _read_file(path))
            sources.append(str(path))
        return cls(data, sources)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dotted *key*, with ``LIFTOFF_*`` overrides and ``${...}`` expansion.

        ``${NAME}`` reads an environment variable or another config key,
        ``${NAME:fallback}`` falls back to the literal after the colon.
        """
        override = os.environ.get(env_key_for(key))
        if override is not None:
            return override
        value = self._lookup(key)
        if value is _MISSING or value is None:
            return default
        if isinstance(value, str):
            return self._expand(value, (key,))
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Raw mapping stored under *prefix*, or ``{}``."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def _expand(self, value: str, chain: tuple[str, ...]) -> str:
        def substitute(match: re.Match[str]) -> str:
            name, sep, fallback = match.group(1).partition(":")
            if name in chain:
                raise ValueError(f"Circular placeholder {' -> '.join((*chain, name))}")
            env_value = os.environ.get(name)
            if env_value is not None:
                return env_value
            found = self._lookup(name)
            if found is not _MISSING and found is not None:
                return self._expand(str(found), (*chain, name))
            if sep:
                return fallback
            raise ValueError(f"Cannot resolve placeholder ${{{name}}}: not set in the environment or config")

        return _PLACEHOLDER_RE.sub(substitute, value)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def bind(self, config_cls: type[T]) -> T:
        """Instantiate a ``@config_properties`` dataclass from its section.

        File keys may be kebab-case; fields missing everywhere keep their
        dataclass defaults.
        """
        prefix = getattr(config_cls, _PROPERTIES_PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = {key.replace("-", "_"): value for key, value in self.get_section(prefix).items()}
        hints = get_type_hints(config_cls)
        values: dict[str, Any] = {}
        for f in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{f.name}", section.get(f.name))
            if value is not None:
                values[f.name] = _convert(value, hints.get(f.name))
        return config_cls(**values)


def _convert(value: Any, expected: Any) -> Any:
    if not isinstance(value, str):
        return value
    if expected is bool:
        return value.strip().lower() in ("true", "1", "yes", "on")
    if expected in (int, float):
        return expected(value)
    return value
