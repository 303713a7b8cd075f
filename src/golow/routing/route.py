"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:    ``/users``   (is_wildcard=False)
    Wildcard:  ``/docs/*``  (is_wildcard=True, prefix="")
    Prefix:    ``/word*``   (is_wildcard=True, prefix="word")
    """

    value: str
    is_wildcard: bool = False
    prefix: str = ""


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    """

    path: str
    handler: Callable[..., Any]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
