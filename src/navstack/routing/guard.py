"""Exit guards: routes that may veto their own removal.

Guards are consulted:

- on the top route of a mutable stack before ``pop()``
- on every step of a multi-pop ``navigate()``
- on the active route of a fixed stack before switching index

A denial aborts exactly that step.  Multi-step operations stop with their
partial progress intact.  Guards may suspend (e.g. to show a dialog); the
stack is not mutated while a decision is pending.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING

from navstack._internal.invoke import invoke
from navstack.routing.route import Route

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator

logger = logging.getLogger("navstack.stack")


class Guard:
    """Mixin for routes that can block their removal.

    Usage::

        @dataclass(eq=False)
        class EditProfile(Guard, Route):
            dirty: bool = False

            async def can_exit(self, coordinator):
                return not self.dirty or await confirm_discard()
    """

    def as_guard(self) -> Guard:
        return self

    def can_exit(self, coordinator: Coordinator | None) -> bool | Awaitable[bool]:
        """Return ``True`` to allow removal, ``False`` to block it."""
        return True


async def can_exit(route: Route, coordinator: Coordinator | None) -> bool:
    """Ask *route* whether it may leave its stack.

    Routes without the ``Guard`` capability always may.
    """
    guard = route.as_guard()
    if guard is None:
        return True
    allowed = bool(await invoke(guard.can_exit, coordinator))
    if not allowed:
        logger.debug("Guard on %r denied exit", route)
    return allowed
