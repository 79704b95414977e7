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
"""ApplicationConfig — global prefix and global enhancers of one application."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from liftoff.core.routes import ExcludeRoute, RouteMatcher, map_to_exclude_route


class EnhancerKind(str, enum.Enum):
    """Kinds of global enhancers, applied in registration order downstream."""

    INTERCEPTOR = "interceptor"
    PIPE = "pipe"
    GUARD = "guard"
    FILTER = "filter"


@dataclass(frozen=True)
class GlobalEnhancer:
    kind: EnhancerKind
    instance: Any


@dataclass(frozen=True)
class GlobalPrefixOptions:
    exclude: list[ExcludeRoute] = field(default_factory=list)


class ApplicationConfig:
    """Mutable holder for application-wide settings.

    A hybrid microservice either shares its parent's instance by reference
    or owns a fresh one; holders sharing an instance see each other's
    mutations immediately.
    """

    def __init__(self) -> None:
        self._global_prefix: str = ""
        self._global_prefix_options = GlobalPrefixOptions()
        self._enhancers: list[GlobalEnhancer] = []

    # ------------------------------------------------------------------
    # Global prefix
    # ------------------------------------------------------------------

    def set_global_prefix(self, prefix: str) -> None:
        self._global_prefix = prefix

    def get_global_prefix(self) -> str:
        return self._global_prefix

    def set_global_prefix_options(self, exclude: Iterable[RouteMatcher] | None = None) -> None:
        self._global_prefix_options = GlobalPrefixOptions(exclude=map_to_exclude_route(exclude or []))

    def get_global_prefix_options(self) -> GlobalPrefixOptions:
        return self._global_prefix_options

    # ------------------------------------------------------------------
    # Global enhancers
    # ------------------------------------------------------------------

    def add_global_enhancers(self, kind: EnhancerKind, *instances: Any) -> None:
        self._enhancers.extend(GlobalEnhancer(kind, instance) for instance in instances)

    def get_global_enhancers(self, kind: EnhancerKind | None = None) -> tuple[GlobalEnhancer, ...]:
        """Registered enhancers in insertion order, optionally of one kind."""
        return tuple(e for e in self._enhancers if kind is None or e.kind is kind)

    def _instances(self, kind: EnhancerKind) -> tuple[Any, ...]:
        return tuple(e.instance for e in self._enhancers if e.kind is kind)

    def use_global_interceptors(self, *interceptors: Any) -> None:
        self.add_global_enhancers(EnhancerKind.INTERCEPTOR, *interceptors)

    def get_global_interceptors(self) -> tuple[Any, ...]:
        return self._instances(EnhancerKind.INTERCEPTOR)

    def use_global_pipes(self, *pipes: Any) -> None:
        self.add_global_enhancers(EnhancerKind.PIPE, *pipes)

    def get_global_pipes(self) -> tuple[Any, ...]:
        return self._instances(EnhancerKind.PIPE)

    def use_global_guards(self, *guards: Any) -> None:
        self.add_global_enhancers(EnhancerKind.GUARD, *guards)

    def get_global_guards(self) -> tuple[Any, ...]:
        return self._instances(EnhancerKind.GUARD)

    def use_global_filters(self, *filters: Any) -> None:
        self.add_global_enhancers(EnhancerKind.FILTER, *filters)

    def get_global_filters(self) -> tuple[Any, ...]:
        return self._instances(EnhancerKind.FILTER)
