"""Route modules: feature-sized slices of a coordinator.

A module bundles the URI parsing, stacks and layout definitions of one
feature.  The coordinator installs its modules at construction and asks
each of them, in order, to parse an address::

    class ShopModule(RouteModule):
        def define_layouts(self) -> None:
            self.cart = MutableStack("cart", coordinator=self.coordinator)
            self.cart.bind_layout(CartLayout)

        def parse_uri(self, uri: str) -> Route | None:
            if uri.startswith("/cart"):
                return CartHome()
            return None

    class AppCoordinator(Coordinator):
        def define_modules(self):
            return [ShopModule(self)]

Modules share the coordinator's layout registry by reference.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator
    from navstack.layout.registry import LayoutRegistry
    from navstack.routing.route import Route
    from navstack.stack.base import Stack


class RouteModule:
    """Base class for coordinator modules."""

    def __init__(self, coordinator: Coordinator) -> None:
        self.coordinator = coordinator

    @property
    def registry(self) -> LayoutRegistry:
        return self.coordinator.registry

    @property
    def stacks(self) -> tuple[Stack, ...]:
        """Stacks this module owns.  Override to expose them."""
        return ()

    def define_layouts(self) -> None:
        """Declare the module's stacks and layouts.  Called on install."""

    def parse_uri(self, uri: str) -> Route | None | Awaitable[Route | None]:
        """Return a route for *uri*, or ``None`` to let the next module try."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
