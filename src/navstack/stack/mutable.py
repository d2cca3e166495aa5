"""Mutable stack: push/pop navigation for main flows and modals.

Every public operation runs through the stack's operation queue, resolves
redirects on the incoming route (unless the caller already did) and
notifies listeners after mutating.  Guards are consulted only on guarded
pops; ``remove()`` and ``reset()`` are forced and skip them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from navstack.errors import ConfigurationError, RouteBindingError
from navstack.routing.guard import can_exit
from navstack.routing.route import Completion, Route
from navstack.snapshot import encode_layout_entry
from navstack.stack.base import Stack

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator

logger = logging.getLogger("navstack.stack")


class MutableStack(Stack):
    """A stack that supports push, pop and forced removal.

    Usage::

        stack = MutableStack("root", [Home()])
        handle = await stack.push(Profile("1"))
        await stack.pop("saved")
        assert await handle == "saved"
    """

    mutable: ClassVar[bool] = True

    def __init__(
        self,
        label: str | None = None,
        routes: Iterable[Route] = (),
        *,
        coordinator: Coordinator | None = None,
    ) -> None:
        super().__init__(label, coordinator=coordinator)
        for route in routes:
            self._bind(route)
            self._routes.append(route)

    @property
    def active_route(self) -> Route | None:
        return self._routes[-1] if self._routes else None

    def _bind(self, route: Route) -> None:
        if route.stack is not None:
            msg = f"{route!r} is already bound to stack {route.stack.label!r}; remove it first"
            raise RouteBindingError(msg)
        if route.completion.done:
            msg = f"{route!r} already left a stack and cannot be bound again"
            raise RouteBindingError(msg)
        route.popped_by_stack = False
        route.bind_stack(self)
        if (layout := route.as_layout()) is not None and self._coordinator is not None:
            self._coordinator.registry.remember(layout)

    # -- Push ---------------------------------------------------------------

    async def push(self, route: Route, *, redirect: bool = True) -> Completion | None:
        """Append *route* on top.

        Returns the route's completion handle, resolved when it later
        leaves the stack, or ``None`` if a redirect cancelled the push.
        """
        async with self._queue:
            target = await self._resolve(route) if redirect else route
            if target is None:
                return None
            self._append(target)
            self._notify("push")
            return target.completion

    def _append(self, route: Route) -> None:
        self._bind(route)
        self._routes.append(route)

    async def push_or_move_to_top(self, route: Route, *, redirect: bool = True) -> None:
        """Push *route*, or move an equal route already present to the top.

        An equal route already on top adopts the incoming route's state
        and the incoming instance is discarded.  An equal route further
        down is removed (and discarded unless it is the incoming instance
        itself) before the incoming route is appended.
        """
        async with self._queue:
            target = await self._resolve(route) if redirect else route
            if target is None:
                return

            index = self.index_of(target)
            if index != -1 and index == len(self._routes) - 1:
                top = self._routes[-1]
                top.on_update(target)
                if not top.same_instance(target):
                    target.on_discard()
                self._notify("merge")
                return

            if index != -1:
                existing = self._routes.pop(index)
                if existing.same_instance(target):
                    self._routes.append(existing)
                    self._notify("move to top")
                    return
                self._release(existing)

            self._append(target)
            self._notify("push")

    async def push_replacement(
        self, route: Route, *, result: Any = None, redirect: bool = True
    ) -> Completion | None:
        """Replace the top route with *route*.

        A single-route stack completes its route with *result* and resets.
        Otherwise the top is popped with *result*, respecting its guard; a
        denial cancels the replacement and discards *route*.
        """
        async with self._queue:
            target = await self._resolve(route) if redirect else route
            if target is None:
                return None

            active = self.active_route
            if active is not None:
                if len(self._routes) == 1:
                    active.complete(result, fail_silent=True)
                    self.clear()
                else:
                    popped = await self._pop(result)
                    if not popped:
                        target.on_discard()
                        return None

            self._append(target)
            self._notify("push replacement")
            return target.completion

    # -- Pop ----------------------------------------------------------------

    async def pop(self, result: Any = None) -> bool | None:
        """Remove the top route if its guard allows.

        Returns:
            ``True`` when popped, ``False`` when the guard denied, ``None``
            when the stack was empty.
        """
        async with self._queue:
            return await self._pop(result)

    async def _pop(self, result: Any) -> bool | None:
        if not self._routes:
            return None
        top = self._routes[-1]
        if not await can_exit(top, self._coordinator):
            return False
        if not self._routes or self._routes[-1] is not top:
            # Mutated underneath while the guard was pending (queue disabled)
            return False

        self._routes.pop()
        top.popped_by_stack = True
        top.clear_stack()
        top.complete(result, fail_silent=True)
        top.on_leave(self._coordinator)
        self._notify("pop")
        return True

    def remove(self, route: Route, *, discard: bool = True) -> bool:
        """Remove *route* from any position, bypassing guards.

        Matches the instance first, then the first equal route.  Returns
        ``False`` when nothing matched.
        """
        index = next((i for i, r in enumerate(self._routes) if r is route), -1)
        if index == -1:
            index = self.index_of(route)
        if index == -1:
            return False
        removed = self._routes.pop(index)
        self._release(removed, discard=discard)
        self._notify("remove")
        return True

    # -- Navigate -----------------------------------------------------------

    async def navigate(self, route: Route, *, redirect: bool = True) -> None:
        """Browser-history navigation.

        If an equal route is present, pop down to it (one guarded pop at a
        time) and merge the incoming state into it.  A denial or an
        unexpectedly empty stack stops immediately; listeners are still
        notified so address observers can resynchronize.  Absent routes
        are pushed.
        """
        async with self._queue:
            target = await self._resolve(route) if redirect else route
            if target is None:
                return

            index = self.index_of(target)
            if index == -1:
                self._append(target)
                self._notify("push")
                return

            while len(self._routes) > index + 1:
                allowed = await self._pop(None)
                if not allowed:
                    logger.debug("navigate(%r) stopped on %r", target, self.label)
                    target.on_discard()
                    self._notify("navigate blocked")
                    return

            if len(self._routes) <= index:
                target.on_discard()
                self._notify("navigate blocked")
                return

            existing = self._routes[index]
            existing.on_update(target)
            if not existing.same_instance(target):
                target.on_discard()
            self._notify("navigate")

    async def activate_route(self, route: Route) -> None:
        """Make *route* the only route on this stack.

        *route* is expected to be resolved already.  If it is on this stack
        it stays bound and every other route is released.
        """
        async with self._queue:
            if route.stack is self:
                for other in [r for r in self._routes if r is not route]:
                    self._release(other)
                self._routes = [route]
            else:
                self.clear()
                self._append(route)
            self._notify("activate")

    # -- Reset --------------------------------------------------------------

    def clear(self) -> None:
        """Drop every route without consulting guards or notifying."""
        routes, self._routes = self._routes, []
        for route in routes:
            self._release(route)

    def reset(self) -> None:
        self.clear()
        self._notify("reset")

    def dispose(self) -> None:
        self.clear()
        super().dispose()

    # -- Snapshot -----------------------------------------------------------

    def snapshot(self) -> list[Any]:
        """Route identities, bottom first: URIs, or layout entries."""
        entries: list[Any] = []
        for route in self._routes:
            layout = route.as_layout()
            if layout is None:
                entries.append(route.to_uri())
                continue
            if self._coordinator is None:
                msg = f"Stack {self.label!r} holds a layout but has no coordinator to encode it"
                raise ConfigurationError(msg)
            entries.append(encode_layout_entry(self._coordinator.registry.key_name(layout.layout_key)))
        return entries

    def restore(self, routes: Sequence[Route]) -> None:
        """Replace the content with freshly parsed *routes*."""
        self.clear()
        for route in routes:
            self._append(route)
        self._notify("restore")
