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
"""Liftoff Microservices — message-pattern transports and hybrid applications."""

from liftoff.microservices.adapters.memory import InMemoryTransportServer
from liftoff.microservices.adapters.tcp import TcpTransportServer
from liftoff.microservices.decorators import message_pattern
from liftoff.microservices.hybrid import HybridConnector
from liftoff.microservices.microservice import LiftoffMicroservice, create_transport
from liftoff.microservices.ports.outbound import MessageHandler, TransportServer
from liftoff.microservices.types import MicroserviceOptions, Transport

__all__ = [
    "HybridConnector",
    "InMemoryTransportServer",
    "LiftoffMicroservice",
    "MessageHandler",
    "MicroserviceOptions",
    "TcpTransportServer",
    "Transport",
    "TransportServer",
    "create_transport",
    "message_pattern",
]
