"""Render binding: keep a view of a stack in sync with its content.

``StackView`` subscribes to a stack and, on every notification, diffs the
routes it last rendered against the current ones.  Insertions and
deletions are reported to optional callbacks (drive enter/exit
transitions there), then the render callback receives the route(s) to
show: every route of a mutable stack, bottom first, or the single active
route of a fixed stack.

    view = StackView(coordinator.root, render=lambda routes: screen.show(routes))
    ...
    view.close()
"""

from collections.abc import Callable, Sequence
from typing import Any

from navstack.diff import Delete, Edit, Insert, diff
from navstack.routing.route import Route
from navstack.stack.base import Stack

RenderCallback = Callable[[Sequence[Route]], Any]
EditCallback = Callable[[Route, int], Any]


class StackView:
    """Diffing observer for one stack.

    Attributes:
        output: Whatever the render callback returned last.
        last_script: Edit script of the last update.
    """

    def __init__(
        self,
        stack: Stack,
        render: RenderCallback,
        *,
        on_insert: EditCallback | None = None,
        on_delete: EditCallback | None = None,
    ) -> None:
        self.stack = stack
        self._render = render
        self._on_insert = on_insert
        self._on_delete = on_delete
        self._rendered: tuple[Route, ...] = ()
        self.output: Any = None
        self.last_script: list[Edit] = []
        self._unsubscribe: Callable[[], None] | None = stack.subscribe(self.update)
        self.update()

    @property
    def rendered(self) -> tuple[Route, ...]:
        """The route sequence seen by the last update."""
        return self._rendered

    def update(self) -> None:
        current = self.stack.routes
        script = diff(self._rendered, current, eq=_same_instance)
        for op in script:
            match op:
                case Insert(new_index=index, element=route) if self._on_insert is not None:
                    self._on_insert(route, index)
                case Delete(old_index=index, element=route) if self._on_delete is not None:
                    self._on_delete(route, index)
        self._rendered = current
        self.last_script = script

        if self.stack.mutable:
            visible: Sequence[Route] = current
        else:
            active = self.stack.active_route
            visible = (active,) if active is not None else ()
        self.output = self._render(visible)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


def _same_instance(a: Route, b: Route) -> bool:
    # Equal-but-distinct routes are separate screens
    return a is b
