"""Decorators marking module methods as message handlers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


def message_pattern(pattern: str) -> Callable[[F], F]:
    """Register the decorated method as the handler for *pattern*.

    Usage:
        class MathModule:
            @message_pattern("sum")
            async def accumulate(self, data: list[int]) -> int:
                return sum(data)
    """

    def decorator(func: F) -> F:
        func.__liftoff_message_pattern__ = pattern  # type: ignore[attr-defined]
        return func

    return decorator
