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
"""Liftoff — application bootstrap for HTTP servers and hybrid microservices."""

__version__ = "0.1.0"

from liftoff.core import (  # noqa: E402
    ApplicationConfig,
    AutoListenOptions,
    Config,
    HybridApplicationOptions,
    LiftoffApplication,
    LiftoffFactory,
    RequestMethod,
    RouteInfo,
)
from liftoff.microservices import MicroserviceOptions, Transport, message_pattern  # noqa: E402

__all__ = [
    "ApplicationConfig",
    "AutoListenOptions",
    "Config",
    "HybridApplicationOptions",
    "LiftoffApplication",
    "LiftoffFactory",
    "MicroserviceOptions",
    "RequestMethod",
    "RouteInfo",
    "Transport",
    "__version__",
    "message_pattern",
]
