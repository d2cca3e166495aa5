"""Layout registry: layout key -> constructor and owned stack.

The registry is an explicit object owned by the root coordinator and
shared by reference with child coordinators and route modules.  Besides
the constructor table it memoizes the layout instance currently bound for
each key, so materializing a layout chain reuses what is already shown.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from navstack.errors import ConfigurationError, MissingLayoutError

if TYPE_CHECKING:
    from navstack._internal.types import LayoutConstructor, LayoutKey
    from navstack.layout.types import Layout
    from navstack.stack.base import Stack

logger = logging.getLogger("navstack.layout")


class LayoutRegistry:
    """Constructor, stack and live-instance tables keyed by layout key."""

    def __init__(self) -> None:
        self._constructors: dict[LayoutKey, LayoutConstructor] = {}
        self._stacks: dict[LayoutKey, Stack] = {}
        self._instances: dict[LayoutKey, Layout] = {}

    # -- Definition ---------------------------------------------------------

    def define(
        self,
        key: LayoutKey,
        constructor: LayoutConstructor,
        *,
        stack: Stack | None = None,
    ) -> None:
        """Register *constructor* for *key*, optionally with its child stack.

        Redefining a key replaces the constructor.  Binding a second,
        different stack to the same key is a wiring error.
        """
        if stack is not None:
            bound = self._stacks.get(key)
            if bound is not None and bound is not stack:
                msg = (
                    f"Layout {self.key_name(key)!r} already owns stack {bound.label!r}; "
                    f"cannot also own {stack.label!r}"
                )
                raise ConfigurationError(msg)
            self._stacks[key] = stack
        self._constructors[key] = constructor
        logger.debug("Defined layout %s", self.key_name(key))

    def constructor_for(self, key: LayoutKey) -> LayoutConstructor:
        try:
            return self._constructors[key]
        except KeyError:
            raise MissingLayoutError(key) from None

    def stack_for(self, key: LayoutKey) -> Stack:
        try:
            return self._stacks[key]
        except KeyError:
            raise MissingLayoutError(
                key, f"Layout {self.key_name(key)!r} has no stack; call stack.bind_layout(...)"
            ) from None

    def has_constructor(self, key: LayoutKey) -> bool:
        return key in self._constructors

    def has_stack(self, key: LayoutKey) -> bool:
        return key in self._stacks

    # -- Instances ----------------------------------------------------------

    def create(self, key: LayoutKey) -> Layout:
        """The live layout for *key*, constructing one if none is bound."""
        existing = self._instances.get(key)
        if existing is not None and existing.stack is not None:
            return existing
        return self.construct(key)

    def construct(self, key: LayoutKey) -> Layout:
        """Always build a fresh layout for *key*."""
        layout = self.constructor_for(key)()
        if layout is None or layout.as_layout() is None:
            msg = f"Constructor for layout {self.key_name(key)!r} returned {layout!r}, not a Layout"
            raise ConfigurationError(msg)
        logger.debug("Materialized layout %r", layout)
        return layout

    def remember(self, layout: Layout) -> None:
        self._instances[layout.layout_key] = layout

    def forget(self, key: LayoutKey, instance: Layout | None = None) -> None:
        """Drop the memoized instance for *key* (only if it is *instance*)."""
        current = self._instances.get(key)
        if current is None:
            return
        if instance is None or current is instance:
            del self._instances[key]

    def active_instance(self, key: LayoutKey) -> Layout | None:
        return self._instances.get(key)

    # -- Naming -------------------------------------------------------------

    @staticmethod
    def key_name(key: LayoutKey) -> str:
        """Stable external name for *key*, used in snapshots."""
        if isinstance(key, type):
            return key.__qualname__
        return str(key)

    def key_from_name(self, name: str) -> LayoutKey:
        for key in self._constructors:
            if self.key_name(key) == name:
                return key
        raise MissingLayoutError(name, f"No layout registered under the name {name!r}")

    # -- Inspection ---------------------------------------------------------

    def keys(self) -> list[LayoutKey]:
        return list(self._constructors)

    def stacks(self) -> Iterator[tuple[LayoutKey, Stack]]:
        return iter(list(self._stacks.items()))

    def clear(self) -> None:
        self._constructors.clear()
        self._stacks.clear()
        self._instances.clear()

    def __len__(self) -> int:
        return len(self._constructors)

    def __repr__(self) -> str:
        return f"LayoutRegistry({[self.key_name(k) for k in self._constructors]})"
