"""Fixed stack: a predetermined set of sibling routes (tabs, pagers).

The routes are bound once at construction and never leave.  Only the
active index changes, after the active route's guard agrees and the
destination's redirects resolve to a sibling.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar

from navstack._internal.invoke import invoke
from navstack.errors import ConfigurationError, EmptyStackError, RedirectLoopError, RouteNotInStackError
from navstack.routing.guard import can_exit
from navstack.routing.route import Route
from navstack.stack.base import Stack

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator

logger = logging.getLogger("navstack.stack")


class FixedStack(Stack):
    """Stack of N sibling routes with one active index.

    Usage::

        tabs = FixedStack("tabs", [Feed(), Search(), Inbox()])
        await tabs.go_to_index(2)
        assert tabs.active_route == Inbox()

    Raises:
        EmptyStackError: *routes* is empty.
    """

    mutable: ClassVar[bool] = False

    def __init__(
        self,
        label: str | None,
        routes: Sequence[Route],
        *,
        coordinator: Coordinator | None = None,
    ) -> None:
        if not routes:
            msg = f"Fixed stack {label!r} needs at least one route"
            raise EmptyStackError(msg)
        super().__init__(label, coordinator=coordinator)
        for route in routes:
            # Siblings never pop, so nobody may wait on them
            route.complete(None, fail_silent=True)
            route.bind_stack(self)
            self._routes.append(route)
            if (layout := route.as_layout()) is not None and coordinator is not None:
                coordinator.registry.remember(layout)
        self._active_index = 0

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_route(self) -> Route:
        return self._routes[self._active_index]

    # -- Switching ----------------------------------------------------------

    async def go_to_index(self, index: int) -> None:
        """Make the route at *index* active.

        A denial from the active route's guard, a cancelling redirect or a
        redirect to a route that is not a sibling leaves the index as is.

        Raises:
            IndexError: *index* is out of range.
        """
        if not 0 <= index < len(self._routes):
            msg = f"Index {index} out of range for fixed stack {self.label!r} of {len(self._routes)}"
            raise IndexError(msg)

        async with self._queue:
            if index == self._active_index:
                return
            if not await can_exit(self.active_route, self._coordinator):
                return

            target_index = await self._resolve_sibling(index)
            if target_index is None or target_index == self._active_index:
                return
            self._active_index = target_index
            self._notify("switch")

    async def _resolve_sibling(self, index: int) -> int | None:
        candidate = self._routes[index]
        limit = self.config.max_redirects
        hops = 0
        while (redirector := candidate.as_redirector()) is not None:
            next_target = await invoke(redirector.redirect, self._coordinator)
            if next_target is None:
                logger.debug("Redirect from %r cancelled switch on %r", candidate, self.label)
                return None
            if next_target is candidate:
                break

            sibling = self.index_of(next_target)
            if sibling == -1:
                return self._reject_foreign(candidate, next_target)
            if not self._routes[sibling].same_instance(next_target):
                next_target.on_discard()

            hops += 1
            if limit is not None and hops > limit:
                raise RedirectLoopError(limit, next_target)
            if self._routes[sibling] is candidate:
                break
            candidate = self._routes[sibling]
        return self.index_of(candidate)

    def _reject_foreign(self, candidate: Route, target: Route) -> None:
        target.on_discard()
        if self.config.strict_fixed_redirects:
            msg = (
                f"{candidate!r} on fixed stack {self.label!r} redirected to {target!r}, "
                "which is not one of its siblings"
            )
            raise ConfigurationError(msg)
        logger.warning(
            "Ignoring redirect from %r to non-sibling %r on fixed stack %r",
            candidate,
            target,
            self.label,
        )

    async def activate_route(self, route: Route) -> None:
        """Switch to the sibling equal to *route*, merging its state.

        Raises:
            RouteNotInStackError: No sibling equals *route*.
        """
        index = self.index_of(route)
        if index == -1:
            route.on_discard()
            msg = f"{route!r} is not a route of fixed stack {self.label!r}"
            raise RouteNotInStackError(msg)

        existing = self._routes[index]
        existing.on_update(route)
        if not existing.same_instance(route):
            route.on_discard()

        if index == self._active_index:
            self._notify("activate")
            return
        await self.go_to_index(index)

    async def navigate(self, route: Route, *, redirect: bool = True) -> None:
        """Switch to the sibling equal to *route*.

        An absent route leaves the stack untouched but still notifies, so
        address observers can restore the current URI.
        """
        if self.index_of(route) == -1:
            route.on_discard()
            self._notify("navigate miss")
            return
        await self.activate_route(route)

    # -- Reset --------------------------------------------------------------

    def reset(self) -> None:
        self._active_index = 0
        self._notify("reset")

    def dispose(self) -> None:
        for route in self._routes:
            route.clear_stack()
            route.on_leave(self._coordinator)
        super().dispose()

    # -- Snapshot -----------------------------------------------------------

    def snapshot(self) -> int:
        return self._active_index

    def restore(self, index: int) -> None:
        if not 0 <= index < len(self._routes):
            msg = f"Index {index} out of range for fixed stack {self.label!r} of {len(self._routes)}"
            raise IndexError(msg)
        self._active_index = index
        self._notify("restore")
