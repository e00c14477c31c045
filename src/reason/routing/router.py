"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes. Any miss, including a known
path with an unregistered method, is a ``NotFound``.
"""

from dataclasses import dataclass

from reason.errors import ConfigurationError, NotFound
from reason.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/books"       -> [PathSegment("books")]
        "/books/{id}"  -> [PathSegment("books"), PathSegment("{id}", is_param=True, param_name="id")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            param_name = part[1:-1]
            if not param_name.isidentifier():
                msg = f"Invalid path parameter {part!r} in route {path!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=param_name))
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "books" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param name per level)
        self.param_child: _ParamEdge | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    node: _TrieNode


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/books", endpoint, frozenset({"GET"})))
        router.add(Route("/books/{id}", endpoint, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/books/42")
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile().

        Raises ``ConfigurationError`` if a method is already registered
        for the same path, or if the path names a different parameter
        where another route already declared one.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param:
                param_name = seg.param_name or ""
                if node.param_child is None:
                    node.param_child = _ParamEdge(param_name=param_name, node=_TrieNode())
                elif node.param_child.param_name != param_name:
                    msg = (
                        f"Parameter {{{param_name}}} in {route.path!r} conflicts with "
                        f"existing parameter {{{node.param_child.param_name}}}."
                    )
                    raise ConfigurationError(msg)
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in route.methods:
            if method in node.routes_by_method:
                msg = f"A {method} route is already registered for {route.path!r}."
                raise ConfigurationError(msg)
            node.routes_by_method[method] = route

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes.

        Traverses the trie to collect every unique Route object.
        """
        seen: set[int] = set()
        result: list[Route] = []
        self._collect_routes(self._root, seen, result)
        return result

    def _collect_routes(self, node: _TrieNode, seen: set[int], result: list[Route]) -> None:
        """Recursively collect routes from the trie."""
        for route in node.routes_by_method.values():
            if id(route) not in seen:
                seen.add(id(route))
                result.append(route)

        for child in node.children.values():
            self._collect_routes(child, seen, result)

        if node.param_child is not None:
            self._collect_routes(node.param_child.node, seen, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches both path and method.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {}, method)
        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")
        route, params = result
        return RouteMatch(route=route, path_params=params)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
        method: str,
    ) -> tuple[Route, dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            route = node.routes_by_method.get(method)
            if route is None:
                return None
            return route, params

        part = parts[index]

        # 1. Static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params, method)
            if result is not None:
                return result

        # 2. Parameter child
        if node.param_child is not None:
            edge = node.param_child
            new_params = {**params, edge.param_name: part}
            return self._match_node(edge.node, parts, index + 1, new_params, method)

        return None
