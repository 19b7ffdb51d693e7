"""Tests for waypost.routing.router — registration, matching, and lookup."""

import threading

import pytest

from waypost.config import RouterConfig
from waypost.errors import (
    ConfigurationError,
    DuplicateRouteNameError,
    PatternError,
    UnsupportedMethodError,
)
from waypost.routing.route import Route
from waypost.routing.router import Router


def _handler() -> str:
    return "ok"


def _other() -> str:
    return "other"


class TestAddRoute:
    def test_registers_route(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}", _handler, group="/api", name="users.show")

        (route,) = r.routes
        assert route.method == "GET"
        assert route.group == "/api"
        assert route.path == "/users/{id}"
        assert route.handler is _handler
        assert route.name == "users.show"

    def test_returns_route(self) -> None:
        r = Router()
        route = r.add_route("POST", "/users", _handler)
        assert r.routes == (route,)

    def test_method_upper_cased(self) -> None:
        r = Router()
        route = r.add_route("patch", "/users/{id}", _handler)
        assert route.method == "PATCH"

    def test_middlewares_stored_as_tuple(self) -> None:
        r = Router()
        route = r.add_route("GET", "/", _handler, middlewares=["auth", "csrf"])
        assert route.middlewares == ("auth", "csrf")

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "PATCH", "DELETE"])
    def test_supported_methods(self, method: str) -> None:
        r = Router()
        r.add_route(method, "/x", _handler)
        assert r.match(method, "/x") is not None

    def test_unsupported_method(self) -> None:
        r = Router()
        with pytest.raises(UnsupportedMethodError, match="Unsupported HTTP method: INVALID"):
            r.add_route("INVALID", "/users", _handler)
        assert r.routes == ()

    def test_head_not_supported_by_default(self) -> None:
        r = Router()
        with pytest.raises(ConfigurationError):
            r.add_route("HEAD", "/users", _handler)

    def test_config_extends_methods(self) -> None:
        config = RouterConfig(methods=frozenset({"GET", "HEAD"}))
        r = Router(config=config)
        r.add_route("HEAD", "/users", _handler)
        with pytest.raises(UnsupportedMethodError):
            r.add_route("POST", "/users", _handler)

    def test_duplicate_name(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}", _handler, name="user.show")

        with pytest.raises(DuplicateRouteNameError, match="Route with name 'user.show' already exists"):
            r.add_route("GET", "/users", _other, name="user.show")

        assert len(r.routes) == 1
        route = r.get_route_by_name("user.show")
        assert route is not None
        assert route.path == "/users/{id}"

    def test_unnamed_routes_never_collide(self) -> None:
        r = Router()
        r.add_route("GET", "/a", _handler)
        r.add_route("GET", "/b", _handler)
        assert len(r.routes) == 2

    def test_bad_template_accepted_at_registration(self) -> None:
        r = Router()
        r.add_route("GET", "/users[/{id}", _handler)
        assert len(r.routes) == 1


class TestPrebuiltRoutes:
    def test_constructor_routes(self) -> None:
        routes = [Route("GET", "/users", _handler), Route("POST", "/users", _other)]
        r = Router(routes)
        assert r.routes == tuple(routes)
        match = r.match("POST", "/users")
        assert match is not None
        assert match.handler is _other

    def test_add_normalizes_method(self) -> None:
        r = Router()
        r.add(Route("get", "/users", _handler))
        assert r.routes[0].method == "GET"
        assert r.match("GET", "/users") is not None

    def test_add_validates(self) -> None:
        r = Router()
        with pytest.raises(UnsupportedMethodError):
            r.add(Route("TRACE", "/", _handler))

    def test_constructor_duplicate_name(self) -> None:
        routes = [
            Route("GET", "/a", _handler, name="x"),
            Route("GET", "/b", _handler, name="x"),
        ]
        with pytest.raises(DuplicateRouteNameError):
            Router(routes)


class TestMatch:
    def test_param(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}", _handler, group="/api", name="users.show")

        match = r.match("GET", "/api/users/123")
        assert match is not None
        assert match.params == {"id": "123"}
        assert match.handler is _handler

    def test_not_found(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}", _handler)
        assert r.match("POST", "/api/users/123") is None
        assert r.match("GET", "/nonexistent") is None

    def test_empty_router(self) -> None:
        assert Router().match("GET", "/") is None

    def test_root(self) -> None:
        r = Router()
        r.add_route("GET", "/", _handler)
        match = r.match("GET", "/")
        assert match is not None
        assert match.params == {}

    def test_no_trailing_slash_normalization(self) -> None:
        r = Router()
        r.add_route("GET", "/users", _handler)
        assert r.match("GET", "/users/") is None

    def test_method_case_insensitive(self) -> None:
        r = Router()
        r.add_route("GET", "/users", _handler)
        assert r.match("get", "/users") == r.match("GET", "/users")
        assert r.match("Get", "/users") is not None

    def test_regex_param(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id:[0-9]+}", _handler)
        match = r.match("GET", "/users/123")
        assert match is not None
        assert match.params == {"id": "123"}
        assert r.match("GET", "/users/abc") is None

    def test_optional_tail(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}/posts[/{page}]", _handler)

        match = r.match("GET", "/users/123/posts")
        assert match is not None
        assert match.params == {"id": "123"}

        match = r.match("GET", "/users/123/posts/2")
        assert match is not None
        assert match.params == {"id": "123", "page": "2"}

    def test_nested_optionals(self) -> None:
        r = Router()
        r.add_route("GET", "/shop[/category/{cat}[/subcategory/{subcat}]]", _handler)

        assert r.match("GET", "/shop").params == {}  # type: ignore[union-attr]
        assert r.match("GET", "/shop/category/electronics").params == {  # type: ignore[union-attr]
            "cat": "electronics"
        }
        match = r.match("GET", "/shop/category/electronics/subcategory/phones")
        assert match is not None
        assert match.params == {"cat": "electronics", "subcat": "phones"}
        assert r.match("GET", "/shop/subcategory/phones") is None

    def test_complex_template(self) -> None:
        r = Router()
        r.add_route("GET", "/{lang:[a-z]{2}}[/admin]/users[/{id:[0-9]+}[/edit]]", _handler)

        cases = {
            "/en/users": {"lang": "en"},
            "/en/admin/users": {"lang": "en"},
            "/ru/users/42": {"lang": "ru", "id": "42"},
            "/de/admin/users/42/edit": {"lang": "de", "id": "42"},
        }
        for path, params in cases.items():
            match = r.match("GET", path)
            assert match is not None, path
            assert match.params == params, path

        assert r.match("GET", "/en/users/edit") is None
        assert r.match("GET", "/eng/users") is None

    def test_first_registered_wins(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}", _handler)
        r.add_route("GET", "/users/me", _other)

        match = r.match("GET", "/users/me")
        assert match is not None
        assert match.handler is _handler

    def test_static_registered_first_wins(self) -> None:
        r = Router()
        r.add_route("GET", "/users/me", _other)
        r.add_route("GET", "/users/{id}", _handler)

        assert r.match("GET", "/users/me").handler is _other  # type: ignore[union-attr]
        assert r.match("GET", "/users/42").handler is _handler  # type: ignore[union-attr]

    def test_repeated_static_match(self) -> None:
        r = Router()
        r.add_route("GET", "/about", _handler, middlewares=["m"])
        first = r.match("GET", "/about")
        second = r.match("GET", "/about")
        assert first == second
        assert second is not None
        assert second.middlewares == ("m",)

    def test_pattern_error_on_first_match(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}]", _handler)
        with pytest.raises(PatternError, match="Unmatched closing bracket"):
            r.match("GET", "/users/1")


class TestCacheInvalidation:
    def test_new_route_matches_after_miss(self) -> None:
        r = Router()
        r.add_route("GET", "/users", _handler)
        assert r.match("GET", "/users") is not None
        assert r.match("GET", "/posts/1") is None

        r.add_route("GET", "/posts/{id}", _other)

        match = r.match("GET", "/posts/1")
        assert match is not None
        assert match.handler is _other

    def test_new_method_visible(self) -> None:
        r = Router()
        r.add_route("GET", "/users", _handler)
        assert r.match("DELETE", "/users") is None

        r.add_route("DELETE", "/users", _other)
        assert r.match("DELETE", "/users") is not None

    def test_clear_cache_keeps_routes(self) -> None:
        r = Router()
        r.add_route("GET", "/users/{id}", _handler)
        r.match("GET", "/users/1")
        r.clear_cache()
        match = r.match("GET", "/users/1")
        assert match is not None
        assert match.params == {"id": "1"}


class TestRouteByName:
    def test_found(self) -> None:
        r = Router()
        route = r.add_route("GET", "/users/{id}", _handler, name="users.show")
        assert r.get_route_by_name("users.show") is route

    def test_missing(self) -> None:
        r = Router()
        r.add_route("GET", "/users", _handler)
        assert r.get_route_by_name("users.index") is None


class TestConcurrency:
    def test_concurrent_register_and_match(self) -> None:
        r = Router()
        r.add_route("GET", "/static", _handler)
        errors: list[BaseException] = []

        def register() -> None:
            for i in range(200):
                r.add_route("GET", f"/items/{i}/{{slug}}", _other)

        def read() -> None:
            try:
                for _ in range(200):
                    match = r.match("GET", "/static")
                    assert match is not None
                    assert match.handler is _handler
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=register)] + [
            threading.Thread(target=read) for _ in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(r.routes) == 201
        match = r.match("GET", "/items/199/last")
        assert match is not None
        assert match.params == {"slug": "last"}
