"""Stack base class shared by the mutable and fixed variants.

A stack owns an ordered list of routes plus the notion of which one is
active, carries a stable label (used for snapshots) and notifies its
listeners after every mutation.

Operations a variant does not support raise ``UnsupportedOperationError``
here so that calling them is a loud programmer error rather than a silent
no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, ClassVar

from navstack.config import NavConfig
from navstack.errors import ConfigurationError, UnsupportedOperationError
from navstack.events import ChangeNotifier
from navstack.routing.redirect import resolve
from navstack.routing.route import Completion, Route
from navstack.stack.queue import OperationQueue

if TYPE_CHECKING:
    from navstack._internal.types import LayoutConstructor, LayoutKey
    from navstack.coordinator import Coordinator

logger = logging.getLogger("navstack.stack")


class Stack(ChangeNotifier):
    """Ordered container of routes.

    ``MutableStack`` and ``FixedStack`` are the two variants.  Each one
    implements the variant contract, which this base leaves raising
    ``NotImplementedError``:

    - ``active_route``: the route currently shown, or ``None``.
    - ``activate_route(route)``: make *route* the shown route.
    - ``navigate(route)``: browser-style navigation to *route*.
    - ``reset()``: return to the initial state without consulting guards.
    - ``snapshot()`` and ``restore(data)``: the serialized form.

    Attributes:
        label: Stable external name, used as the snapshot key.
        mutable: Whether routes can be inserted and removed.
        config: Configuration inherited from the coordinator.
    """

    mutable: ClassVar[bool] = False

    def __init__(self, label: str | None = None, *, coordinator: Coordinator | None = None) -> None:
        super().__init__()
        self.label = label
        self._routes: list[Route] = []
        self._coordinator = coordinator
        self.config: NavConfig = coordinator.config if coordinator is not None else NavConfig()
        self._queue = OperationQueue(enabled=self.config.serialize_operations)
        if coordinator is not None:
            coordinator.add_stack(self)

    # -- Inspection ---------------------------------------------------------

    @property
    def coordinator(self) -> Coordinator | None:
        return self._coordinator

    @property
    def routes(self) -> tuple[Route, ...]:
        """The routes, bottom first."""
        return tuple(self._routes)

    @property
    def active_route(self) -> Route | None:
        raise NotImplementedError

    @property
    def busy(self) -> bool:
        """Whether an operation is in flight on this stack."""
        return self._queue.busy

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(tuple(self._routes))

    def __contains__(self, route: object) -> bool:
        return route in self._routes

    def index_of(self, route: Route) -> int:
        """Index of the first route equal to *route*, or ``-1``."""
        try:
            return self._routes.index(route)
        except ValueError:
            return -1

    def contains_instance(self, route: Route) -> bool:
        return any(r is route for r in self._routes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label!r}, {list(self._routes)!r})"

    # -- Layout wiring ------------------------------------------------------

    def bind_layout(self, constructor: LayoutConstructor, key: LayoutKey | None = None) -> None:
        """Declare which layout owns this stack.

        Registers ``key -> constructor`` (and this stack as the layout's
        child stack) in the coordinator's registry.  *key* defaults to
        *constructor*, which suits ``Layout`` subclasses::

            tabs = FixedStack("tabs", [Feed(), Inbox()], coordinator=self)
            tabs.bind_layout(TabsLayout)
        """
        if self._coordinator is None:
            msg = f"Stack {self.label!r} must be created with a coordinator before bind_layout()"
            raise ConfigurationError(msg)
        layout_key = constructor if key is None else key
        self._coordinator.registry.define(layout_key, constructor, stack=self)

    # -- Shared helpers -----------------------------------------------------

    async def _resolve(self, route: Route) -> Route | None:
        return await resolve(route, self._coordinator, max_redirects=self.config.max_redirects)

    def _release(self, route: Route, *, discard: bool = True) -> None:
        """Unbind a route that left this stack without a guarded pop."""
        route.clear_stack()
        if discard:
            route.on_discard()
        route.on_leave(self._coordinator)

    def _notify(self, reason: str) -> None:
        logger.debug("%s %r: %s", reason, self.label, self._routes)
        self.notify()

    # -- Variant API --------------------------------------------------------

    async def activate_route(self, route: Route) -> None:
        raise NotImplementedError

    async def navigate(self, route: Route, *, redirect: bool = True) -> None:
        raise NotImplementedError

    def reset(self) -> None:
        """Return to the initial state without consulting guards."""
        raise NotImplementedError

    def snapshot(self) -> Any:
        raise NotImplementedError

    def restore(self, data: Any) -> None:
        """Load content produced by decoding ``snapshot()``."""
        raise NotImplementedError

    def dispose(self) -> None:
        """Tear the stack down and drop every listener."""
        self.close()

    # -- Unsupported by default ---------------------------------------------

    async def push(self, route: Route, *, redirect: bool = True) -> Completion | None:
        raise UnsupportedOperationError("push", str(self.label))

    async def pop(self, result: Any = None) -> bool | None:
        raise UnsupportedOperationError("pop", str(self.label))

    async def push_or_move_to_top(self, route: Route, *, redirect: bool = True) -> None:
        raise UnsupportedOperationError("push_or_move_to_top", str(self.label))

    async def push_replacement(
        self, route: Route, *, result: Any = None, redirect: bool = True
    ) -> Completion | None:
        raise UnsupportedOperationError("push_replacement", str(self.label))

    def remove(self, route: Route, *, discard: bool = True) -> bool:
        raise UnsupportedOperationError("remove", str(self.label))

    async def go_to_index(self, index: int) -> None:
        raise UnsupportedOperationError("go_to_index", str(self.label))
