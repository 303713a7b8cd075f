"""Tests for golow.routing.router — compiled trie-based router."""

import logging

import pytest

from golow.errors import ConfigurationError, NotFound
from golow.routing.route import PathSegment, Route
from golow.routing.router import Router, parse_path


def _handler() -> str:
    return "ok"


def _route(path: str) -> Route:
    return Route(path=path, handler=_handler)


def _router(*paths: str) -> Router:
    r = Router()
    for path in paths:
        r.add(_route(path))
    r.compile()
    return r


class TestParsePath:
    def test_static(self) -> None:
        segments = parse_path("/go")
        assert len(segments) == 1
        assert segments[0].value == "go"
        assert segments[0].is_wildcard is False

    def test_multi_static(self) -> None:
        segments = parse_path("/api/v2/users")
        assert [s.value for s in segments] == ["api", "v2", "users"]

    def test_root(self) -> None:
        assert parse_path("/") == [PathSegment("")]

    def test_trailing_slash_is_a_segment(self) -> None:
        assert [s.value for s in parse_path("/go/")] == ["go", ""]

    def test_segment_wildcard(self) -> None:
        segments = parse_path("/docs/*")
        assert segments[1].is_wildcard is True
        assert segments[1].prefix == ""

    def test_prefix_wildcard(self) -> None:
        segments = parse_path("/word*")
        assert segments[0].is_wildcard is True
        assert segments[0].prefix == "word"

    @pytest.mark.parametrize("pattern", ["/a/*/b", "/w*rd", "/*a", "/a**"])
    def test_rejects_inner_wildcard(self, pattern: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_path(pattern)
        assert pattern in str(exc_info.value)


class TestExactRoutes:
    def test_root(self) -> None:
        match = _router("/").match("/")
        assert match.route.path == "/"

    def test_simple_path(self) -> None:
        assert _router("/go", "/nh").match("/nh").route.path == "/nh"

    @pytest.mark.parametrize("path", ["/go/", "//go", "/go//"])
    def test_slashes_are_significant(self, path: str) -> None:
        with pytest.raises(NotFound):
            _router("/go").match(path)

    def test_trailing_slash_rule(self) -> None:
        r = _router("/go/")
        assert r.match("/go/").route.path == "/go/"
        with pytest.raises(NotFound):
            r.match("/go")

    def test_no_match(self) -> None:
        with pytest.raises(NotFound):
            _router("/go").match("/unknown")

    def test_prefix_of_exact_does_not_match(self) -> None:
        with pytest.raises(NotFound):
            _router("/go").match("/golang")

    def test_deeper_path_does_not_match_exact(self) -> None:
        with pytest.raises(NotFound):
            _router("/go").match("/go/deeper")

    def test_empty_router_matches_nothing(self) -> None:
        with pytest.raises(NotFound):
            _router().match("/")


class TestWildcardRoutes:
    def test_segment_wildcard_matches_below(self) -> None:
        assert _router("/docs/*").match("/docs/intro/setup").route.path == "/docs/*"

    def test_segment_wildcard_matches_bare_prefix(self) -> None:
        assert _router("/docs/*").match("/docs").route.path == "/docs/*"

    def test_segment_wildcard_matches_trailing_slash(self) -> None:
        assert _router("/docs/*").match("/docs/").route.path == "/docs/*"

    def test_prefix_wildcard(self) -> None:
        assert _router("/word*").match("/wordsmith").route.path == "/word*"

    def test_prefix_wildcard_spans_segments(self) -> None:
        assert _router("/word*").match("/words/more").route.path == "/word*"

    def test_prefix_wildcard_requires_prefix(self) -> None:
        with pytest.raises(NotFound):
            _router("/word*").match("/other")

    def test_root_wildcard_catches_everything(self) -> None:
        r = _router("/*")
        assert r.match("/").route.path == "/*"
        assert r.match("/a/b/c").route.path == "/*"


class TestPrecedence:
    def test_exact_beats_wildcard(self) -> None:
        r = _router("/docs/*", "/docs/faq")
        assert r.match("/docs/faq").route.path == "/docs/faq"
        assert r.match("/docs/other").route.path == "/docs/*"

    def test_exact_beats_wildcard_at_same_node(self) -> None:
        r = _router("/docs/*", "/docs")
        assert r.match("/docs").route.path == "/docs"

    def test_deeper_wildcard_wins(self) -> None:
        r = _router("/*", "/docs/*")
        assert r.match("/docs/a").route.path == "/docs/*"
        assert r.match("/blog/a").route.path == "/*"

    def test_longest_prefix_wins(self) -> None:
        r = _router("/w*", "/word*")
        assert r.match("/wordy").route.path == "/word*"
        assert r.match("/wax").route.path == "/w*"

    def test_registration_order_does_not_change_precedence(self) -> None:
        r = _router("/word*", "/w*")
        assert r.match("/wordy").route.path == "/word*"


class TestDuplicates:
    def test_first_registration_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        first = Route(path="/go", handler=_handler, name="first")
        second = Route(path="/go", handler=_handler, name="second")
        r = Router()
        with caplog.at_level(logging.WARNING, logger="golow.routing"):
            r.add(first)
            r.add(second)
        r.compile()
        assert r.match("/go").route.name == "first"
        assert "already registered" in caplog.text

    def test_duplicate_wildcard(self) -> None:
        first = Route(path="/docs/*", handler=_handler, name="first")
        second = Route(path="/docs/*", handler=_handler, name="second")
        r = Router()
        r.add(first)
        r.add(second)
        assert r.match("/docs/x").route.name == "first"
        assert len(r.routes) == 1


class TestCompile:
    def test_add_after_compile(self) -> None:
        r = _router("/go")
        with pytest.raises(RuntimeError):
            r.add(_route("/nh"))

    def test_routes_introspection(self) -> None:
        r = _router("/go", "/docs/*", "/docs/faq", "/")
        assert {route.path for route in r.routes} == {"/go", "/docs/*", "/docs/faq", "/"}
