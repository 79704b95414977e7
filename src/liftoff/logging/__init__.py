"""Liftoff Logging — logging port, its settings and the structlog adapter."""

from liftoff.logging.port import LoggingPort
from liftoff.logging.properties import LoggingProperties
from liftoff.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "LoggingProperties", "StructlogAdapter"]
