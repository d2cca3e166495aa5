"""Shared type aliases used across navstack modules."""

from collections.abc import Callable, Hashable
from typing import Any, TypeAlias

# Change listener: called with no arguments after every notification
Listener: TypeAlias = Callable[[], None]

# Layout key: usually the Layout subclass itself, sometimes a string
LayoutKey: TypeAlias = Hashable

# Zero-argument layout constructor registered per stack
LayoutConstructor: TypeAlias = Callable[[], Any]
