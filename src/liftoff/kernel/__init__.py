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
"""Liftoff Kernel — Foundation layer with zero external dependencies."""

from liftoff.kernel.exceptions import (
    ADDRESS_IN_USE,
    BindException,
    ConfigurationException,
    InfrastructureException,
    InitializationException,
    LiftoffException,
    PortInUseException,
    PortRetryExhaustedException,
    error_code_of,
    is_address_in_use,
)
from liftoff.kernel.lifecycle import (
    BeforeApplicationShutdown,
    OnApplicationBootstrap,
    OnApplicationShutdown,
    OnModuleDestroy,
    OnModuleInit,
)

__all__ = [
    # Lifecycle hooks
    "OnModuleInit",
    "OnApplicationBootstrap",
    "OnModuleDestroy",
    "BeforeApplicationShutdown",
    "OnApplicationShutdown",
    # Base
    "LiftoffException",
    "ConfigurationException",
    # Infrastructure
    "InfrastructureException",
    "InitializationException",
    "BindException",
    "PortInUseException",
    "PortRetryExhaustedException",
    # Helpers
    "ADDRESS_IN_USE",
    "error_code_of",
    "is_address_in_use",
]
