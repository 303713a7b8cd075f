"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.
"""

import logging

from golow.errors import ConfigurationError, NotFound
from golow.routing.route import PathSegment, Route, RouteMatch

logger = logging.getLogger("golow.routing")


def split_path(path: str) -> list[str]:
    """Split a path into segments, keeping empty ones.

    Slashes are significant: ``/go``, ``/go/`` and ``//go`` split
    differently and so never match each other.
    """
    return path.removeprefix("/").split("/")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/go"        -> [PathSegment("go")]
        "/docs/*"    -> [PathSegment("docs"), PathSegment("*", is_wildcard=True)]
        "/word*"     -> [PathSegment("word*", is_wildcard=True, prefix="word")]

    Raises ``ConfigurationError`` if ``*`` appears anywhere but the end.
    """
    parts = split_path(path)
    segments: list[PathSegment] = []
    for i, part in enumerate(parts):
        if "*" not in part:
            segments.append(PathSegment(value=part))
            continue
        if i != len(parts) - 1 or part.index("*") != len(part) - 1:
            msg = (
                f"Invalid route pattern {path!r}: a wildcard '*' is only "
                "allowed at the end of the pattern."
            )
            raise ConfigurationError(msg)
        segments.append(PathSegment(value=part, is_wildcard=True, prefix=part[:-1]))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("children", "route", "wildcard_order", "wildcards")

    def __init__(self) -> None:
        # Static segment children: "docs" -> node
        self.children: dict[str, _TrieNode] = {}
        # Exact route terminating at this node
        self.route: Route | None = None
        # Trailing wildcards hanging off this node, keyed by literal prefix
        self.wildcards: dict[str, Route] = {}
        # Wildcard prefixes, longest first
        self.wildcard_order: tuple[str, ...] = ()


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/go", handler))
        router.add(Route("/docs/*", handler))
        router.compile()
        match = router.match("/docs/intro")

    An exact match always beats a wildcard. Among wildcards the deepest
    wins, then the one with the longest literal prefix. When two routes
    share a pattern, the first one added wins.
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        node = self._root

        for seg in segments:
            if seg.is_wildcard:
                if seg.prefix in node.wildcards:
                    self._warn_duplicate(route, node.wildcards[seg.prefix])
                    return
                node.wildcards[seg.prefix] = route
                node.wildcard_order = tuple(sorted(node.wildcards, key=len, reverse=True))
                return

            if seg.value not in node.children:
                node.children[seg.value] = _TrieNode()
            node = node.children[seg.value]

        if node.route is not None:
            self._warn_duplicate(route, node.route)
            return
        node.route = route

    @staticmethod
    def _warn_duplicate(route: Route, existing: Route) -> None:
        logger.warning(
            "Ignoring route %r: pattern already registered by %r",
            route.path,
            existing.path,
        )

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes.

        Traverses the trie to collect every Route object.
        Useful for introspection and tests.
        """
        result: list[Route] = []
        self._collect_routes(self._root, result)
        return result

    def _collect_routes(self, node: _TrieNode, result: list[Route]) -> None:
        """Recursively collect routes from the trie."""
        if node.route is not None:
            result.append(node.route)
        result.extend(node.wildcards[prefix] for prefix in node.wildcard_order)
        for child in node.children.values():
            self._collect_routes(child, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, path: str) -> RouteMatch:
        """Match a request path against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        """
        parts = split_path(path)
        result = self._match_node(self._root, parts, 0)
        if result is None:
            raise NotFound(f"No route matches {path!r}")
        return result

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
    ) -> RouteMatch | None:
        """Recursively match path parts against the trie."""
        # All parts consumed: exact route, else a bare trailing wildcard
        if index == len(parts):
            if node.route is not None:
                return RouteMatch(route=node.route)
            if "" in node.wildcards:
                return RouteMatch(route=node.wildcards[""])
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1)
            if result is not None:
                return result

        # 2. Try wildcards, longest prefix first
        for prefix in node.wildcard_order:
            if part.startswith(prefix):
                return RouteMatch(route=node.wildcards[prefix])

        return None
