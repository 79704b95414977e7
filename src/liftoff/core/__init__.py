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
"""Liftoff Core — application bootstrap, configuration and port binding."""

from liftoff.core.config import Config, config_properties
from liftoff.core.application_config import ApplicationConfig, EnhancerKind, GlobalEnhancer, GlobalPrefixOptions
from liftoff.core.application import LiftoffApplication
from liftoff.core.factory import LiftoffFactory
from liftoff.core.lifecycle import InitGuard
from liftoff.core.options import (
    ApplicationOptions,
    ApplicationProperties,
    AutoListenOptions,
    AutoListenPolicy,
    HybridApplicationOptions,
)
from liftoff.core.port_binder import BindAttempt, BinderState, BindOutcome, PortBinder
from liftoff.core.routes import ExcludeRoute, RequestMethod, RouteInfo, map_to_exclude_route

__all__ = [
    "ApplicationConfig",
    "ApplicationOptions",
    "ApplicationProperties",
    "AutoListenOptions",
    "AutoListenPolicy",
    "BindAttempt",
    "BindOutcome",
    "BinderState",
    "Config",
    "EnhancerKind",
    "ExcludeRoute",
    "GlobalEnhancer",
    "GlobalPrefixOptions",
    "HybridApplicationOptions",
    "InitGuard",
    "LiftoffApplication",
    "LiftoffFactory",
    "PortBinder",
    "RequestMethod",
    "RouteInfo",
    "config_properties",
    "map_to_exclude_route",
]
