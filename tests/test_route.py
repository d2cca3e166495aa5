"""Tests for navstack.routing.route: identity, completion and lifecycle."""

import pytest
from _routes import Editor, Home, Profile, Settings

from navstack.routing.query import QueryParams
from navstack.routing.route import Completion, Route
from navstack.stack.mutable import MutableStack


class TestIdentity:
    def test_equal_when_props_match(self) -> None:
        assert Profile("1") == Profile("1")
        assert Profile("1") != Profile("2")

    def test_different_variants_never_equal(self) -> None:
        assert Home() != Settings()

    def test_props_default_to_dataclass_fields(self) -> None:
        assert Profile("7").props == ("7",)
        assert Home().props == ()

    def test_fields_excluded_from_compare_are_not_props(self) -> None:
        assert Editor(allow=True, asked=3) == Editor(allow=True, asked=0)
        assert Editor(allow=True) != Editor(allow=False)

    def test_query_is_not_identity(self) -> None:
        assert Profile("1").with_query("tab=posts") == Profile("1")

    def test_hash_follows_equality(self) -> None:
        assert len({Profile("1"), Profile("1"), Profile("2")}) == 2

    def test_same_instance_is_stricter(self) -> None:
        a, b = Profile("1"), Profile("1")
        assert a == b
        assert not a.same_instance(b)
        assert a.same_instance(a)

    def test_repr(self) -> None:
        assert repr(Profile("1")) == "Profile('1')"
        assert repr(Home()) == "Home()"

    def test_explicit_props(self) -> None:
        class Search(Route):
            def __init__(self, term: str) -> None:
                self.term = term

            @property
            def props(self) -> tuple[str, ...]:
                return (self.term.lower(),)

        assert Search("Cats") == Search("cats")


class TestCapabilities:
    def test_plain_route_has_none(self) -> None:
        route = Home()
        assert route.as_guard() is None
        assert route.as_redirector() is None
        assert route.as_layout() is None
        assert route.parent_layout_key is None

    def test_guard_mixin(self) -> None:
        editor = Editor()
        assert editor.as_guard() is editor


class TestUri:
    def test_uri_with_query(self) -> None:
        route = Profile("1").with_query({"tab": "posts"})
        assert route.to_uri() == "/profile/1?tab=posts"

    def test_uri_without_query(self) -> None:
        assert Profile("1").to_uri() == "/profile/1"

    def test_missing_to_uri(self) -> None:
        class Bare(Route):
            pass

        with pytest.raises(NotImplementedError, match="Bare"):
            Bare().to_uri()


class TestQueryParams:
    def test_parse_string(self) -> None:
        query = QueryParams("?a=1&b=2&a=3")
        assert query["a"] == "1"
        assert query.get_list("a") == ["1", "3"]
        assert query.get("missing") is None

    def test_from_mapping(self) -> None:
        assert QueryParams({"page": "2"}).get_int("page") == 2

    def test_get_int_default(self) -> None:
        assert QueryParams("page=x").get_int("page", 1) == 1

    def test_encode(self) -> None:
        assert QueryParams([("q", "a b"), ("q", "c")]).encode() == "q=a+b&q=c"

    def test_equality(self) -> None:
        assert QueryParams("a=1") == QueryParams({"a": "1"})
        assert len(QueryParams()) == 0


class TestCompletion:
    def test_fulfill_once(self) -> None:
        completion = Completion()
        assert completion.fulfill("x") is True
        assert completion.done
        assert completion.value == "x"

    def test_second_fulfill_raises(self) -> None:
        completion = Completion()
        completion.fulfill()
        with pytest.raises(RuntimeError, match="already fulfilled"):
            completion.fulfill("again")

    def test_second_fulfill_silent(self) -> None:
        completion = Completion()
        completion.fulfill(1)
        assert completion.fulfill(2, fail_silent=True) is False
        assert completion.value == 1

    @pytest.mark.anyio
    async def test_await_delivers_value(self) -> None:
        completion = Completion()
        completion.fulfill(42)
        assert await completion == 42


class TestLifecycle:
    def test_on_discard_completes_with_none(self) -> None:
        route = Profile("1")
        route.on_discard()
        route.on_discard()
        assert route.completion.done
        assert route.result is None

    def test_on_update_adopts_query(self) -> None:
        existing = Profile("1")
        existing.on_update(Profile("1").with_query("tab=likes"))
        assert existing.query["tab"] == "likes"

    def test_on_did_pop_removes_from_stack(self) -> None:
        profile = Profile("1")
        stack = MutableStack("root", [Home(), profile])
        profile.on_did_pop("swiped")
        assert stack.routes == (Home(),)
        assert profile.result == "swiped"
        assert profile.stack is None

    def test_on_did_pop_after_stack_pop_keeps_stack(self) -> None:
        home = Home()
        profile = Profile("1")
        stack = MutableStack("root", [home, profile])
        profile.popped_by_stack = True
        profile.on_did_pop("done")
        assert len(stack) == 2
