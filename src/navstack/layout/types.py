"""Layout routes: routes that own a child stack.

A layout is both a route (it sits on its parent's stack) and a container
(its child stack holds the routes that declare its key).  Ancestry is
expressed through keys, never through object references::

    class TabsLayout(Layout):
        def to_uri(self) -> str:
            return "/tabs"

    @dataclass(eq=False)
    class Feed(Route):
        layout = TabsLayout

Two layouts are equal when their keys are equal, so at most one instance
per key is ever active on a given stack.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from navstack.routing.route import Route

if TYPE_CHECKING:
    from navstack._internal.types import LayoutKey
    from navstack.coordinator import Coordinator
    from navstack.stack.base import Stack


class Layout(Route):
    """A route that hosts a child stack.

    Override ``layout_key`` to register the layout under something other
    than its class (a string, an enum member).  The child stack is found
    through the coordinator's registry, where ``stack.bind_layout()``
    recorded it.
    """

    def as_layout(self) -> Layout:
        return self

    @property
    def layout_key(self) -> LayoutKey:
        return type(self)

    @property
    def props(self) -> tuple[Any, ...]:
        return (self.layout_key,)

    def resolve_stack(self, coordinator: Coordinator) -> Stack:
        """The child stack owned by this layout.

        Raises:
            MissingLayoutError: No stack was bound for ``layout_key``.
        """
        return coordinator.registry.stack_for(self.layout_key)

    def on_leave(self, coordinator: Coordinator | None) -> None:
        """Drop the memoized instance and reset the child stack."""
        if coordinator is None:
            return
        registry = coordinator.registry
        registry.forget(self.layout_key, self)
        if registry.has_stack(self.layout_key):
            registry.stack_for(self.layout_key).reset()

    def __repr__(self) -> str:
        key = self.layout_key
        if key is type(self):
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}({key!r})"
