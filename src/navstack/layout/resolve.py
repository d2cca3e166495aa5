"""Layout-chain resolution.

A route that declares a parent layout key can only be shown inside that
layout's child stack, which may itself sit inside another layout.  Before
such a route is pushed, the whole chain of ancestors is materialized and
activated from the root downwards::

    root ── TabsLayout ── tabs (fixed) ── FeedLayout ── feed (mutable) ── Post

Already-active layouts are reused; missing ones are built from the
registry's constructors.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from navstack.errors import ConfigurationError

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator
    from navstack.layout.types import Layout
    from navstack.routing.route import Route
    from navstack.stack.base import Stack

logger = logging.getLogger("navstack.layout")


class ChainStrategy(Enum):
    """How each ancestor is placed on the stack that hosts it."""

    PUSH_TO_TOP = "push_to_top"  # Keep history; move the layout to the top
    OVERRIDE = "override"  # Make the layout the host's only route


def resolve_parent_layout(route: Route, coordinator: Coordinator) -> Layout | None:
    """The layout *route* must be shown in, or ``None`` for the root.

    Prefers the innermost active layout with a matching key and otherwise
    builds one through the registry.

    Raises:
        MissingLayoutError: The key has no registered constructor.
    """
    key = route.parent_layout_key
    if key is None:
        return None
    for layout in reversed(coordinator.active_layouts):
        if layout.layout_key == key:
            return layout
    return coordinator.registry.create(key)


async def prepare_layout_chain(
    layout: Layout,
    coordinator: Coordinator,
    *,
    strategy: ChainStrategy = ChainStrategy.OVERRIDE,
) -> None:
    """Activate *layout* and every ancestor, outermost first.

    Raises:
        MissingLayoutError: A layout in the chain has no constructor or
            no bound stack.
        ConfigurationError: The chain of parent keys loops.
    """
    chain: list[Layout] = []
    hosts: list[Stack] = []
    seen: set[object] = set()
    current: Layout | None = layout
    while current is not None:
        if current.layout_key in seen:
            names = " -> ".join(repr(item) for item in [*chain, current])
            msg = f"Layout chain loops: {names}"
            raise ConfigurationError(msg)
        seen.add(current.layout_key)
        chain.append(current)
        hosts.append(current.resolve_stack(coordinator))
        current = resolve_parent_layout(current, coordinator)
    hosts.append(coordinator.root)

    for i in range(len(hosts) - 1, 0, -1):
        host = hosts[i]
        child = chain[i - 1]
        logger.debug("Placing %r on %r (%s)", child, host.label, strategy.value)
        if strategy is ChainStrategy.PUSH_TO_TOP and host.mutable:
            await host.push_or_move_to_top(child, redirect=False)
        else:
            await host.activate_route(child)
