"""Coordinator: the top-level owner of stacks, layouts and navigation.

Every public navigation call follows the same pipeline::

    resolve redirects -> locate host stack (materializing layouts)
        -> mutate the host stack -> notify observers

Subclass to declare stacks, layouts and URI parsing::

    class AppCoordinator(Coordinator):
        def define_layouts(self) -> None:
            self.tabs = FixedStack("tabs", [Feed(), Inbox()], coordinator=self)
            self.tabs.bind_layout(TabsLayout)

        def parse_uri(self, uri: str) -> Route | None:
            match uri.partition("?")[0].strip("/").split("/"):
                case [""]:
                    return Home()
                case ["profile", user_id]:
                    return Profile(user_id)
            return None

    coordinator = AppCoordinator()
    await coordinator.recover_from_uri("/profile/42")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from navstack._internal.invoke import invoke
from navstack.config import NavConfig
from navstack.errors import ConfigurationError, UnresolvedUriError
from navstack.events import ChangeNotifier
from navstack.layout.registry import LayoutRegistry
from navstack.layout.resolve import ChainStrategy, prepare_layout_chain, resolve_parent_layout
from navstack.routing.deeplink import DeepLink, DeeplinkStrategy
from navstack.routing.redirect import resolve
from navstack.routing.route import Completion, Route
from navstack.snapshot import Snapshot, layout_entry_name
from navstack.stack.mutable import MutableStack

if TYPE_CHECKING:
    from collections.abc import Callable

    from navstack._internal.types import LayoutConstructor, LayoutKey
    from navstack.layout.types import Layout
    from navstack.modules import RouteModule
    from navstack.stack.base import Stack

logger = logging.getLogger("navstack.coordinator")


class Coordinator(ChangeNotifier):
    """Owns the root stack, every declared stack and the layout registry.

    Args:
        config: Navigation configuration, shared with every stack created
            with ``coordinator=self``.
        registry: An existing registry to share (child coordinators).  A
            coordinator built without one creates and owns its own.

    Hooks (override in subclasses):
        define_layouts: declare stacks and layouts.
        define_modules: return the ``RouteModule`` instances to install.
        parse_uri: turn an address into a route (sync or async).
        not_found_route: fallback route for unparseable addresses.
    """

    def __init__(
        self,
        *,
        config: NavConfig | None = None,
        registry: LayoutRegistry | None = None,
    ) -> None:
        super().__init__()
        self.config = config or NavConfig()
        self._owns_registry = registry is None
        self.registry = registry if registry is not None else LayoutRegistry()
        self._stacks: list[Stack] = []
        self._unsubscribers: list[Callable[[], None]] = []
        self._modules: dict[type[RouteModule], RouteModule] = {}
        self.root = MutableStack(self.config.root_label, coordinator=self)
        self.init()

    def init(self) -> None:
        """Run the definition hooks.  Called once from ``__init__``."""
        self.define_layouts()
        for module in self.define_modules():
            self.install_module(module)

    # -- Definition hooks ---------------------------------------------------

    def define_layouts(self) -> None:
        """Declare stacks and bind their layouts."""

    def define_modules(self) -> Sequence[RouteModule]:
        return ()

    def install_module(self, module: RouteModule) -> None:
        module_type = type(module)
        if module_type in self._modules:
            msg = f"Module {module_type.__name__} is already installed"
            raise ConfigurationError(msg)
        self._modules[module_type] = module
        module.define_layouts()
        logger.debug("Installed module %s", module_type.__name__)

    def get_module[M: RouteModule](self, module_type: type[M]) -> M:
        try:
            return self._modules[module_type]  # type: ignore[return-value]
        except KeyError:
            msg = f"Module {module_type.__name__} is not installed"
            raise ConfigurationError(msg) from None

    @property
    def modules(self) -> tuple[RouteModule, ...]:
        return tuple(self._modules.values())

    # -- Stacks -------------------------------------------------------------

    def add_stack(self, stack: Stack) -> None:
        """Track *stack* and re-broadcast its notifications.

        Called by ``Stack.__init__`` when given ``coordinator=self``.
        """
        self._stacks.append(stack)
        self._unsubscribers.append(stack.subscribe(self.notify))

    @property
    def stacks(self) -> tuple[Stack, ...]:
        """Every stack, root first, in creation order."""
        return tuple(self._stacks)

    def get_stack(self, label: str) -> Stack | None:
        for stack in self._stacks:
            if stack.label == label:
                return stack
        return None

    def define_layout(
        self,
        key: LayoutKey,
        constructor: LayoutConstructor,
        stack: Stack | None = None,
    ) -> None:
        """Register a layout constructor, optionally with its child stack."""
        self.registry.define(key, constructor, stack=stack)

    # -- Active state -------------------------------------------------------

    @property
    def active_layouts(self) -> list[Layout]:
        """Layouts on the active path, outermost first."""
        layouts: list[Layout] = []
        current = self.root.active_route
        while current is not None and (layout := current.as_layout()) is not None:
            layouts.append(layout)
            current = layout.resolve_stack(self).active_route
        return layouts

    @property
    def active_stacks(self) -> list[Stack]:
        """Stacks on the active path: the root, then each layout's child stack."""
        return [self.root, *(layout.resolve_stack(self) for layout in self.active_layouts)]

    @property
    def active_stack(self) -> Stack:
        """The innermost stack on the active path."""
        return self.active_stacks[-1]

    @property
    def active_route(self) -> Route | None:
        return self.active_stack.active_route

    @property
    def current_uri(self) -> str:
        """Address of the active route, ``"/"`` when nothing is shown."""
        route = self.active_route
        return route.to_uri() if route is not None else "/"

    # -- URI parsing --------------------------------------------------------

    async def parse_uri(self, uri: str) -> Route | None:
        """Turn *uri* into a route.

        The default asks each installed module in order and falls back to
        ``not_found_route()``.  Overrides may be sync or async.
        """
        for module in self._modules.values():
            route = await invoke(module.parse_uri, uri)
            if route is not None:
                return route
        return self.not_found_route(uri)

    def not_found_route(self, uri: str) -> Route | None:
        return None

    async def _parse(self, uri: str) -> Route:
        route = await invoke(self.parse_uri, uri)
        if route is None:
            raise UnresolvedUriError(uri)
        return route

    # -- Navigation ---------------------------------------------------------

    async def _resolve(self, route: Route) -> Route | None:
        return await resolve(route, self, max_redirects=self.config.max_redirects)

    async def _prepare_host(self, target: Route, strategy: ChainStrategy) -> Stack:
        layout = resolve_parent_layout(target, self)
        if layout is None:
            return self.root
        await prepare_layout_chain(layout, self, strategy=strategy)
        return layout.resolve_stack(self)

    async def push(self, route: Route) -> Completion | None:
        """Show *route* on top of its host stack.

        Materializes the route's layout chain first.  On a fixed host the
        matching sibling is activated instead.

        Returns:
            The route's completion handle, or ``None`` when a redirect
            cancelled the push or the host is fixed.
        """
        target = await self._resolve(route)
        if target is None:
            return None
        return await self._push(target)

    async def _push(self, target: Route) -> Completion | None:
        logger.debug("push %r", target)
        host = await self._prepare_host(target, ChainStrategy.PUSH_TO_TOP)
        if host.mutable:
            return await host.push(target, redirect=False)
        await host.activate_route(target)
        return None

    async def push_or_move_to_top(self, route: Route) -> None:
        target = await self._resolve(route)
        if target is None:
            return
        logger.debug("push_or_move_to_top %r", target)
        host = await self._prepare_host(target, ChainStrategy.PUSH_TO_TOP)
        if host.mutable:
            await host.push_or_move_to_top(target, redirect=False)
        else:
            await host.activate_route(target)

    async def navigate(self, route: Route) -> None:
        """Browser-style navigation: go back to *route* if present, else push."""
        target = await self._resolve(route)
        if target is None:
            return
        await self._navigate(target)

    async def _navigate(self, target: Route) -> None:
        logger.debug("navigate %r", target)
        host = await self._prepare_host(target, ChainStrategy.PUSH_TO_TOP)
        await host.navigate(target, redirect=False)

    async def replace(self, route: Route) -> None:
        """Reset every stack, then show *route* as the only destination."""
        target = await self._resolve(route)
        if target is None:
            return
        await self._replace(target)

    async def _replace(self, target: Route) -> None:
        logger.debug("replace %r", target)
        for stack in self._stacks:
            stack.reset()
        host = await self._prepare_host(target, ChainStrategy.OVERRIDE)
        await host.activate_route(target)

    async def push_replacement(self, route: Route, *, result: Any = None) -> Completion | None:
        """Replace the active route with *route*.

        When *route* belongs to a different stack than the active one, the
        active route is popped (or its single-route stack reset) first.  A
        guard denial cancels the whole operation.
        """
        target = await self._resolve(route)
        if target is None:
            return None
        logger.debug("push_replacement %r", target)

        layout = resolve_parent_layout(target, self)
        host = layout.resolve_stack(self) if layout is not None else self.root

        current = self.active_stack
        active = current.active_route
        if current.mutable and active is not None and current is not host:
            if len(current) == 1:
                active.complete(result, fail_silent=True)
                current.reset()
            else:
                popped = await current.pop(result)
                if not popped:
                    target.on_discard()
                    return None

        if layout is not None:
            await prepare_layout_chain(layout, self, strategy=ChainStrategy.PUSH_TO_TOP)

        if host.mutable:
            return await host.push_replacement(target, result=result, redirect=False)
        await host.activate_route(target)
        return None

    async def pop(self, result: Any = None) -> None:
        """Pop every active mutable stack holding two or more routes, innermost first."""
        for stack in reversed([s for s in self.active_stacks if s.mutable]):
            if len(stack) >= 2:
                await stack.pop(result)

    async def try_pop(self, result: Any = None) -> bool | None:
        """Pop the innermost active mutable stack that can lose a route.

        Returns:
            The stack's ``pop()`` outcome, or ``None`` when no active stack
            holds more than one route (the host may exit).
        """
        for stack in reversed([s for s in self.active_stacks if s.mutable]):
            if len(stack) >= 2:
                return await stack.pop(result)
        return None

    # -- Deep links ---------------------------------------------------------

    async def recover(self, route: Route) -> None:
        """Apply a deep-linked *route* using its ``DeeplinkStrategy``."""
        target = await self._resolve(route)
        if target is None:
            return

        if isinstance(target, DeepLink):
            strategy = target.deeplink_strategy
        else:
            strategy = self.config.default_deeplink_strategy
        logger.debug("recover %r (%s)", target, strategy.value)

        match strategy:
            case DeeplinkStrategy.NAVIGATE:
                await self._navigate(target)
            case DeeplinkStrategy.PUSH:
                await self._push(target)
            case DeeplinkStrategy.REPLACE:
                await self._replace(target)
            case DeeplinkStrategy.CUSTOM:
                if not isinstance(target, DeepLink):
                    target.on_discard()
                    msg = f"{target!r} uses the CUSTOM deep-link strategy but does not mix in DeepLink"
                    raise ConfigurationError(msg)
                await invoke(target.handle_deeplink, self, target.to_uri())

    async def recover_from_uri(self, uri: str) -> None:
        """Parse *uri* and recover the resulting route.

        Raises:
            UnresolvedUriError: ``parse_uri()`` returned no route.
        """
        await self.recover(await self._parse(uri))

    # -- Persistence --------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """Capture every labeled stack and the active address."""
        stacks = {stack.label: stack.snapshot() for stack in self._stacks if stack.label is not None}
        active = self.current_uri if self.active_route is not None else None
        return Snapshot(stacks=stacks, active=active)

    async def restore(self, snapshot: Snapshot | Mapping[str, Any]) -> None:
        """Rebuild navigation state from *snapshot*.

        Every entry is parsed and checked before anything is mutated, so a
        bad snapshot leaves the current state intact.  Stacks absent from
        the snapshot are left alone.

        Raises:
            UnresolvedUriError: An entry could not be parsed.
            MissingLayoutError: A layout entry names an unknown layout.
            ValueError: An entry does not fit its stack's variant.
            IndexError: A fixed-stack index is out of range.
        """
        if not isinstance(snapshot, Snapshot):
            snapshot = Snapshot.from_dict(snapshot)

        decoded: list[tuple[Stack, Any]] = []
        for stack in self._stacks:
            if stack.label is None or stack.label not in snapshot.stacks:
                continue
            data = snapshot.stacks[stack.label]
            if stack.mutable:
                if not isinstance(data, list):
                    msg = f"Mutable stack {stack.label!r} expects a list of entries, got {data!r}"
                    raise ValueError(msg)
                decoded.append((stack, [await self._decode_entry(entry) for entry in data]))
            else:
                if not isinstance(data, int):
                    msg = f"Fixed stack {stack.label!r} expects an index, got {data!r}"
                    raise ValueError(msg)
                if not 0 <= data < len(stack):
                    msg = f"Index {data} out of range for fixed stack {stack.label!r} of {len(stack)}"
                    raise IndexError(msg)
                decoded.append((stack, data))

        active = await self._parse(snapshot.active) if snapshot.active is not None else None

        for stack, _ in decoded:
            if isinstance(stack, MutableStack):
                stack.clear()
        for stack, data in decoded:
            stack.restore(data)
        logger.debug("Restored %d stacks", len(decoded))

        if active is not None:
            await self.navigate(active)

    async def _decode_entry(self, entry: Any) -> Route:
        name = layout_entry_name(entry)
        if name is not None:
            return self.registry.construct(self.registry.key_from_name(name))
        return await self._parse(entry)

    # -- Lifecycle ----------------------------------------------------------

    def mark_needs_rebuild(self) -> None:
        """Notify observers without changing state."""
        self.notify()

    def dispose(self) -> None:
        """Dispose every stack and drop every listener."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        for stack in self._stacks:
            stack.dispose()
        if self._owns_registry:
            self.registry.clear()
        self.close()

    def __repr__(self) -> str:
        labels = [stack.label for stack in self._stacks]
        return f"{type(self).__name__}(stacks={labels!r})"
