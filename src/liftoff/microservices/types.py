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
"""Microservice transport options."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from liftoff.kernel.exceptions import ConfigurationException


class Transport(str, enum.Enum):
    TCP = "tcp"
    MEMORY = "memory"


@dataclass(frozen=True)
class MicroserviceOptions:
    """Transport settings for a microservice.

    ``strategy`` takes precedence over ``transport``: any object satisfying
    ``TransportServer`` is used as-is.
    """

    transport: Transport = Transport.TCP
    host: str = "127.0.0.1"
    port: int = 3001
    strategy: Any = None

    @classmethod
    def from_option(cls, value: MicroserviceOptions | Mapping[str, Any] | None) -> MicroserviceOptions:
        if value is None:
            return cls()
        if isinstance(value, MicroserviceOptions):
            return value
        unknown = set(value) - {"transport", "host", "port", "strategy"}
        if unknown:
            raise ConfigurationException(
                f"Unknown microservice options: {sorted(unknown)}",
                code="INVALID_MICROSERVICE_OPTIONS",
            )
        kwargs = dict(value)
        if "transport" in kwargs:
            kwargs["transport"] = Transport(str(getattr(kwargs["transport"], "value", kwargs["transport"])).lower())
        if "port" in kwargs:
            kwargs["port"] = int(kwargs["port"])
        return cls(**kwargs)
