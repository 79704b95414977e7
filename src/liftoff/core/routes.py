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
"""Route descriptors and global-prefix exclusion matching."""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from liftoff.kernel.exceptions import ConfigurationException

_PARAM_RE = re.compile(r":(\w+)|\{(\w+)\}")


class RequestMethod(str, enum.Enum):
    """HTTP request methods understood by route matchers."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    ALL = "ALL"


@dataclass(frozen=True)
class RouteInfo:
    """A path restricted to one request method."""

    path: str
    method: RequestMethod = RequestMethod.ALL


@dataclass(frozen=True)
class ExcludeRoute:
    """Canonical, pre-compiled form of a global-prefix exclusion."""

    path: str
    request_method: RequestMethod
    path_regex: re.Pattern[str]

    def matches(self, path: str, method: str | RequestMethod = RequestMethod.ALL) -> bool:
        if not self.path_regex.match(add_leading_slash(path)):
            return False
        if self.request_method is RequestMethod.ALL:
            return True
        requested = str(getattr(method, "value", method)).upper()
        return requested in (self.request_method.value, RequestMethod.ALL.value)


RouteMatcher = Union[str, RouteInfo, Mapping[str, Any], ExcludeRoute]


def add_leading_slash(path: str | None) -> str:
    if not path:
        return ""
    return path if path.startswith("/") else f"/{path}"


def strip_end_slash(path: str) -> str:
    return path[:-1] if len(path) > 1 and path.endswith("/") else path


def path_to_regex(path: str) -> re.Pattern[str]:
    """Compile a route path into an anchored regex.

    ``:name`` and ``{name}`` match one segment; ``*`` and ``(.*)`` match
    any remainder. A trailing slash is optional.
    """
    normalized = strip_end_slash(add_leading_slash(path)) or "/"
    pattern = ""
    pos = 0
    for token in re.finditer(r"\(\.\*\)|\*|:\w+|\{\w+\}", normalized):
        pattern += re.escape(normalized[pos:token.start()])
        pattern += "[^/]+" if _PARAM_RE.fullmatch(token.group(0)) else ".*"
        pos = token.end()
    pattern += re.escape(normalized[pos:])
    return re.compile(f"^{pattern}/?$", re.IGNORECASE)


# Numeric method codes as used by decorator metadata.
_METHOD_CODES: dict[int, RequestMethod] = {
    0: RequestMethod.GET,
    1: RequestMethod.POST,
    2: RequestMethod.PUT,
    3: RequestMethod.DELETE,
    4: RequestMethod.PATCH,
    5: RequestMethod.ALL,
    6: RequestMethod.OPTIONS,
    7: RequestMethod.HEAD,
}


def _to_request_method(value: Any) -> RequestMethod:
    if isinstance(value, RequestMethod):
        return value
    if isinstance(value, bool):
        raise ConfigurationException(f"Invalid request method: {value!r}", code="INVALID_REQUEST_METHOD")
    if isinstance(value, int):
        try:
            return _METHOD_CODES[value]
        except KeyError:
            raise ConfigurationException(
                f"Unknown request method code: {value}", code="INVALID_REQUEST_METHOD"
            ) from None
    try:
        return RequestMethod(str(value).upper())
    except ValueError:
        raise ConfigurationException(f"Unknown request method: {value!r}", code="INVALID_REQUEST_METHOD") from None


def map_to_exclude_route(routes: Iterable[RouteMatcher]) -> list[ExcludeRoute]:
    """Normalize exclusion matchers, preserving order.

    Strings exclude every method; ``RouteInfo`` objects and
    ``{"path": ..., "method": ...}`` mappings exclude one method.
    Already-normalized ``ExcludeRoute`` values pass through unchanged.
    """
    result: list[ExcludeRoute] = []
    for route in routes:
        if isinstance(route, ExcludeRoute):
            result.append(route)
            continue
        if isinstance(route, str):
            path, method = route, RequestMethod.ALL
        elif isinstance(route, RouteInfo):
            path, method = route.path, route.method
        elif isinstance(route, Mapping):
            path = str(route["path"])
            method = _to_request_method(route.get("method", RequestMethod.ALL))
        else:
            raise TypeError(f"Unsupported route matcher: {route!r}")
        result.append(ExcludeRoute(path=path, request_method=method, path_regex=path_to_regex(path)))
    return result


def is_route_excluded(
    excludes: Iterable[ExcludeRoute],
    path: str,
    method: str | RequestMethod = RequestMethod.ALL,
) -> bool:
    return any(route.matches(path, method) for route in excludes)
