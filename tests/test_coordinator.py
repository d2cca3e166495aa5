"""Tests for navstack.coordinator: orchestration across stacks and layouts."""

from typing import Any

import pytest
from _routes import (
    Alias,
    AppCoordinator,
    Article,
    Compose,
    Editor,
    FeedLayout,
    Home,
    Inbox,
    ModalLayout,
    Post,
    Profile,
    Settings,
    TabsLayout,
)

from navstack.config import NavConfig
from navstack.coordinator import Coordinator
from navstack.errors import ConfigurationError, MissingLayoutError, UnresolvedUriError
from navstack.modules import RouteModule
from navstack.routing.deeplink import DeepLink, DeeplinkStrategy
from navstack.routing.route import Route
from navstack.stack.mutable import MutableStack
from navstack.testing import ChangeRecorder, assert_stack, assert_uri


@pytest.fixture
def coordinator() -> AppCoordinator:
    return AppCoordinator()


async def _home(coordinator: AppCoordinator) -> AppCoordinator:
    await coordinator.replace(Home())
    return coordinator


class TestActiveState:
    def test_empty_coordinator(self) -> None:
        coordinator = Coordinator()
        assert coordinator.active_route is None
        assert coordinator.active_stacks == [coordinator.root]
        assert coordinator.active_layouts == []
        assert coordinator.current_uri == "/"

    def test_stacks_registered_in_order(self, coordinator: AppCoordinator) -> None:
        assert [s.label for s in coordinator.stacks] == ["root", "tabs", "feed", "modal"]
        assert coordinator.get_stack("feed") is coordinator.feed
        assert coordinator.get_stack("missing") is None

    def test_root_label_from_config(self) -> None:
        assert Coordinator(config=NavConfig(root_label="main")).root.label == "main"

    def test_stacks_inherit_config(self) -> None:
        config = NavConfig(max_redirects=3)
        coordinator = AppCoordinator(config=config)
        assert coordinator.feed.config is config


class TestPush:
    @pytest.mark.anyio
    async def test_push_on_root(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        handle = await coordinator.push(Profile("1"))
        assert_stack(coordinator.root, [Home(), Profile("1")])
        assert_uri(coordinator, "/profile/1")
        assert handle is not None
        await coordinator.pop("done")
        assert await handle == "done"

    @pytest.mark.anyio
    async def test_push_materializes_layout_chain(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        handle = await coordinator.push(Post("1"))
        assert_stack(coordinator.root, [Home(), TabsLayout()])
        assert coordinator.tabs.active_index == 0
        assert_stack(coordinator.feed, [Post("1")])
        assert [type(s) for s in coordinator.active_layouts] == [TabsLayout, FeedLayout]
        assert coordinator.active_stacks == [coordinator.root, coordinator.tabs, coordinator.feed]
        assert_uri(coordinator, "/feed/1")
        assert handle is not None

    @pytest.mark.anyio
    async def test_push_onto_fixed_host_switches_tab(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Post("1"))
        assert await coordinator.push(Inbox()) is None
        assert coordinator.tabs.active_index == 1
        assert_uri(coordinator, "/inbox")
        # The tab layout was reused, not pushed twice
        assert len(coordinator.root) == 2

    @pytest.mark.anyio
    async def test_push_back_into_inactive_tab(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Post("1"))
        await coordinator.push(Inbox())
        await coordinator.push(Post("2"))
        assert coordinator.tabs.active_index == 0
        assert_stack(coordinator.feed, [Post("1"), Post("2")])
        assert_uri(coordinator, "/feed/2")

    @pytest.mark.anyio
    async def test_push_resolves_redirect_before_layouts(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Alias(Compose("draft")))
        assert_stack(coordinator.root, [Home(), ModalLayout()])
        assert_stack(coordinator.modal, [Compose("draft")])

    @pytest.mark.anyio
    async def test_push_cancelled_by_redirect(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        with ChangeRecorder(coordinator) as recorder:
            assert await coordinator.push(Alias(None)) is None
        assert recorder.count == 0

    @pytest.mark.anyio
    async def test_missing_layout_is_fatal(self) -> None:
        class Lost(Route):
            layout = "lost"

        coordinator = Coordinator()
        with pytest.raises(MissingLayoutError) as exc_info:
            await coordinator.push(Lost())
        assert exc_info.value.key == "lost"


class TestPop:
    @pytest.mark.anyio
    async def test_pop_innermost_mutable_stack(self, coordinator: AppCoordinator) -> None:
        await coordinator.replace(Post("1"))
        await coordinator.push(Post("2"))
        await coordinator.pop()
        assert_stack(coordinator.feed, [Post("1")])
        assert_stack(coordinator.root, [TabsLayout()])

    @pytest.mark.anyio
    async def test_pop_closes_layout_and_resets_child(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        compose = Compose("a")
        await coordinator.push(compose)
        await coordinator.pop()
        assert_stack(coordinator.root, [Home()])
        assert len(coordinator.modal) == 0
        assert compose.completion.done

    @pytest.mark.anyio
    async def test_try_pop(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Settings())
        assert await coordinator.try_pop() is True
        assert await coordinator.try_pop() is None

    @pytest.mark.anyio
    async def test_try_pop_respects_guard(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Editor(allow=False))
        assert await coordinator.try_pop() is False
        assert_stack(coordinator.root, [Home(), Editor(allow=False)])


class TestReplace:
    @pytest.mark.anyio
    async def test_replace_resets_every_stack(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        post = Post("1")
        await coordinator.push(post)
        await coordinator.replace(Settings())
        assert_stack(coordinator.root, [Settings()])
        assert len(coordinator.feed) == 0
        assert post.completion.done

    @pytest.mark.anyio
    async def test_replace_into_layout(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.replace(Compose("x"))
        assert_stack(coordinator.root, [ModalLayout()])
        assert_stack(coordinator.modal, [Compose("x")])


class TestNavigate:
    @pytest.mark.anyio
    async def test_navigate_back(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Profile("a"))
        await coordinator.push(Profile("b"))
        await coordinator.navigate(Profile("a"))
        assert_stack(coordinator.root, [Home(), Profile("a")])

    @pytest.mark.anyio
    async def test_navigate_pushes_absent_route_in_layout(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.navigate(Post("9"))
        assert_uri(coordinator, "/feed/9")

    @pytest.mark.anyio
    async def test_push_or_move_to_top(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Profile("1"))
        await coordinator.push(Settings())
        await coordinator.push_or_move_to_top(Profile("1"))
        assert_stack(coordinator.root, [Home(), Settings(), Profile("1")])

    @pytest.mark.anyio
    async def test_push_or_move_to_top_on_fixed_host(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push_or_move_to_top(Inbox())
        assert coordinator.tabs.active_index == 1


class TestPushReplacement:
    @pytest.mark.anyio
    async def test_same_stack(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        handle = await coordinator.push(Settings())
        await coordinator.push_replacement(Profile("1"), result="popped")
        assert_stack(coordinator.root, [Home(), Profile("1")])
        assert handle is not None
        assert await handle == "popped"

    @pytest.mark.anyio
    async def test_single_route_completes_with_result(self, coordinator: AppCoordinator) -> None:
        home = Home()
        await coordinator.replace(home)
        await coordinator.push_replacement(Settings(), result="replaced")
        assert_stack(coordinator.root, [Settings()])
        assert home.result == "replaced"

    @pytest.mark.anyio
    async def test_leaves_other_stack_first(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        post = Post("1")
        await coordinator.push(post)
        await coordinator.push_replacement(Settings(), result="x")
        assert post.result == "x"
        assert len(coordinator.feed) == 0
        assert_stack(coordinator.root, [Home(), Settings()])

    @pytest.mark.anyio
    async def test_guard_denial_cancels(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Editor(allow=False))
        settings = Settings()
        assert await coordinator.push_replacement(settings) is None
        assert_stack(coordinator.root, [Home(), Editor(allow=False)])
        assert settings.completion.done

    @pytest.mark.anyio
    async def test_redirect_to_nothing(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        assert await coordinator.push_replacement(Alias(None)) is None
        assert_stack(coordinator.root, [Home()])


class Custom(DeepLink, Route):
    deeplink_strategy = DeeplinkStrategy.CUSTOM
    handled: list[tuple[Any, str]] = []

    def to_uri(self) -> str:
        return "/custom"

    async def handle_deeplink(self, coordinator: Any, uri: str) -> None:
        Custom.handled.append((coordinator, uri))


class TestDeepLinks:
    @pytest.mark.anyio
    async def test_default_strategy_replaces(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Profile("1"))
        await coordinator.recover(Settings())
        assert_stack(coordinator.root, [Settings()])

    @pytest.mark.anyio
    async def test_route_strategy_navigate(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Article("a"))
        await coordinator.push(Profile("1"))
        await coordinator.recover(Article("a"))
        assert_stack(coordinator.root, [Home(), Article("a")])

    @pytest.mark.anyio
    async def test_config_strategy_push(self) -> None:
        coordinator = AppCoordinator(config=NavConfig(default_deeplink_strategy=DeeplinkStrategy.PUSH))
        await coordinator.replace(Home())
        await coordinator.recover(Settings())
        assert_stack(coordinator.root, [Home(), Settings()])

    @pytest.mark.anyio
    async def test_custom_handler(self, coordinator: AppCoordinator) -> None:
        Custom.handled.clear()
        await _home(coordinator)
        await coordinator.recover(Custom())
        assert Custom.handled == [(coordinator, "/custom")]
        assert_stack(coordinator.root, [Home()])

    @pytest.mark.anyio
    async def test_custom_default_requires_mixin(self) -> None:
        coordinator = Coordinator(config=NavConfig(default_deeplink_strategy=DeeplinkStrategy.CUSTOM))
        with pytest.raises(ConfigurationError, match="DeepLink"):
            await coordinator.recover(Home())

    @pytest.mark.anyio
    async def test_recover_from_uri(self, coordinator: AppCoordinator) -> None:
        await coordinator.recover_from_uri("/profile/7?tab=likes")
        assert_stack(coordinator.root, [Profile("7")])
        assert_uri(coordinator, "/profile/7?tab=likes")

    @pytest.mark.anyio
    async def test_recover_from_uri_into_layout(self, coordinator: AppCoordinator) -> None:
        await coordinator.recover_from_uri("/feed/3")
        assert_stack(coordinator.root, [TabsLayout()])
        assert_stack(coordinator.feed, [Post("3")])

    @pytest.mark.anyio
    async def test_unparseable_uri(self, coordinator: AppCoordinator) -> None:
        with pytest.raises(UnresolvedUriError) as exc_info:
            await coordinator.recover_from_uri("/nowhere")
        assert exc_info.value.uri == "/nowhere"


class TestSnapshotRestore:
    @pytest.mark.anyio
    async def test_snapshot(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Post("1"))
        await coordinator.push(Post("2"))
        assert coordinator.snapshot().to_dict() == {
            "stacks": {
                "root": ["/", {"layout": "TabsLayout"}],
                "tabs": 0,
                "feed": ["/feed/1", "/feed/2"],
                "modal": [],
            },
            "active": "/feed/2",
        }

    @pytest.mark.anyio
    async def test_restore_round_trip(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Post("1"))
        await coordinator.push(Inbox())
        saved = coordinator.snapshot().to_dict()

        restored = AppCoordinator()
        await restored.restore(saved)
        assert restored.snapshot().to_dict() == saved
        assert_uri(restored, "/inbox")
        assert restored.tabs.active_index == 1

    @pytest.mark.anyio
    async def test_restore_failure_leaves_state(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Profile("1"))
        with pytest.raises(UnresolvedUriError):
            await coordinator.restore({"stacks": {"root": ["/", "/nowhere"]}, "active": "/"})
        assert_stack(coordinator.root, [Home(), Profile("1")])

    @pytest.mark.anyio
    async def test_out_of_range_index_leaves_state(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        await coordinator.push(Profile("1"))
        await coordinator.push(Post("1"))
        before = coordinator.snapshot()
        with pytest.raises(IndexError, match="out of range for fixed stack 'tabs'"):
            await coordinator.restore(
                {"stacks": {"root": ["/"], "tabs": 7, "feed": ["/feed/9"]}, "active": "/"}
            )
        assert coordinator.snapshot() == before
        assert_stack(coordinator.feed, [Post("1")])
        assert_uri(coordinator, "/feed/1")

    @pytest.mark.anyio
    async def test_restore_rejects_wrong_shape(self, coordinator: AppCoordinator) -> None:
        with pytest.raises(ValueError, match="expects an index"):
            await coordinator.restore({"stacks": {"tabs": ["/inbox"]}})


class TestNotifications:
    @pytest.mark.anyio
    async def test_stack_changes_are_relayed(self, coordinator: AppCoordinator) -> None:
        await _home(coordinator)
        with ChangeRecorder(coordinator) as recorder:
            await coordinator.push(Settings())
        assert recorder.states == ["/settings"]

    def test_mark_needs_rebuild(self, coordinator: AppCoordinator) -> None:
        with ChangeRecorder(coordinator) as recorder:
            coordinator.mark_needs_rebuild()
        assert recorder.count == 1

    def test_dispose(self, coordinator: AppCoordinator) -> None:
        coordinator.subscribe(lambda: None)
        coordinator.dispose()
        assert not coordinator.has_listeners
        assert len(coordinator.registry) == 0


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


class CartLayout(ModalLayout):
    pass


class Cart(Route):
    layout = CartLayout

    def to_uri(self) -> str:
        return "/cart"


class NotFound(Route):
    def __init__(self, uri: str) -> None:
        self.uri = uri

    @property
    def props(self) -> tuple[str]:
        return (self.uri,)

    def to_uri(self) -> str:
        return "/404"


class ShopModule(RouteModule):
    def define_layouts(self) -> None:
        self.cart = MutableStack("cart", coordinator=self.coordinator)
        self.cart.bind_layout(CartLayout)

    @property
    def stacks(self) -> tuple[MutableStack, ...]:
        return (self.cart,)

    async def parse_uri(self, uri: str) -> Route | None:
        return Cart() if uri == "/cart" else None


class ShopCoordinator(Coordinator):
    def define_modules(self) -> list[RouteModule]:
        return [ShopModule(self)]

    def not_found_route(self, uri: str) -> Route:
        return NotFound(uri)


class TestModules:
    @pytest.mark.anyio
    async def test_modules_parse_in_order(self) -> None:
        coordinator = ShopCoordinator()
        assert await coordinator.parse_uri("/cart") == Cart()
        assert await coordinator.parse_uri("/elsewhere") == NotFound("/elsewhere")

    def test_get_module(self) -> None:
        coordinator = ShopCoordinator()
        module = coordinator.get_module(ShopModule)
        assert module.registry is coordinator.registry
        assert coordinator.modules == (module,)
        assert module.stacks == (coordinator.get_stack("cart"),)

    def test_get_missing_module(self) -> None:
        with pytest.raises(ConfigurationError, match="not installed"):
            ShopCoordinator().get_module(RouteModule)

    def test_install_twice(self) -> None:
        coordinator = ShopCoordinator()
        with pytest.raises(ConfigurationError, match="already installed"):
            coordinator.install_module(ShopModule(coordinator))

    @pytest.mark.anyio
    async def test_module_layout_navigation(self) -> None:
        coordinator = ShopCoordinator()
        await coordinator.recover_from_uri("/cart")
        assert_uri(coordinator, "/cart")
        assert coordinator.active_stack is coordinator.get_stack("cart")


class TestSharedRegistry:
    def test_child_shares_registry(self, coordinator: AppCoordinator) -> None:
        child = Coordinator(registry=coordinator.registry)
        assert child.registry is coordinator.registry
        child.dispose()
        assert len(coordinator.registry) == 3
