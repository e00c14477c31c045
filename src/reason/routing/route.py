"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

# A route endpoint: receives the request (with path params), returns a Response
Endpoint: TypeAlias = Callable[..., Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/books``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created when a resource is added, compiled into the router at
    freeze time.
    """

    path: str
    handler: Endpoint
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
