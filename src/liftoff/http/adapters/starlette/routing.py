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
"""Apply the global route prefix to Starlette routes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from starlette.routing import BaseRoute, Mount, Route, WebSocketRoute

from liftoff.core.routes import ExcludeRoute, add_leading_slash, is_route_excluded, strip_end_slash


def join_prefix(prefix: str, path: str) -> str:
    prefix = strip_end_slash(add_leading_slash(prefix.strip()))
    if not prefix or prefix == "/":
        return add_leading_slash(path) or "/"
    if path in ("", "/"):
        return prefix
    return prefix + add_leading_slash(path)


def _is_excluded(route: BaseRoute, excludes: Sequence[ExcludeRoute]) -> bool:
    path = getattr(route, "path", "")
    methods = {m for m in (getattr(route, "methods", None) or ()) if m != "HEAD"}
    if not methods:
        return is_route_excluded(excludes, path)
    return all(is_route_excluded(excludes, path, method) for method in methods)


def prefix_routes(
    routes: Iterable[BaseRoute],
    prefix: str,
    excludes: Sequence[ExcludeRoute] = (),
) -> list[BaseRoute]:
    """Return *routes* with *prefix* prepended, skipping excluded ones."""
    if not prefix:
        return list(routes)

    result: list[BaseRoute] = []
    for route in routes:
        if _is_excluded(route, excludes):
            result.append(route)
        elif isinstance(route, Route):
            methods = sorted(route.methods - {"HEAD"}) if route.methods else None
            result.append(
                Route(
                    join_prefix(prefix, route.path),
                    endpoint=route.endpoint,
                    methods=methods,
                    name=route.name,
                    include_in_schema=route.include_in_schema,
                )
            )
        elif isinstance(route, WebSocketRoute):
            result.append(WebSocketRoute(join_prefix(prefix, route.path), endpoint=route.endpoint, name=route.name))
        elif isinstance(route, Mount):
            result.append(Mount(join_prefix(prefix, route.path), app=route.app, name=route.name))
        else:
            result.append(route)
    return result
