"""Serializable navigation state.

A snapshot maps each labeled stack to its content and records the active
address::

    {
        "stacks": {
            "root": [{"layout": "TabsLayout"}, "/settings"],
            "tabs": 1,
        },
        "active": "/settings",
    }

Mutable stacks store a list of entries, either route URIs or layout
entries naming a registry key.  Fixed stacks store their active index.
The byte/text encoding of the mapping is up to the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

LAYOUT_ENTRY_KEY = "layout"

StackEntry = str | dict[str, str]


def encode_layout_entry(name: str) -> dict[str, str]:
    return {LAYOUT_ENTRY_KEY: name}


def layout_entry_name(entry: Any) -> str | None:
    """The registry key name of a layout entry, or ``None`` for a URI."""
    if isinstance(entry, Mapping):
        name = entry.get(LAYOUT_ENTRY_KEY)
        if not isinstance(name, str):
            msg = f"Malformed layout entry {entry!r}"
            raise ValueError(msg)
        return name
    return None


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Navigation state keyed by stack label.

    Attributes:
        stacks: ``label -> list of entries`` for mutable stacks and
            ``label -> active index`` for fixed stacks.
        active: URI of the active route when the snapshot was taken.
    """

    stacks: dict[str, list[StackEntry] | int] = field(default_factory=dict)
    active: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stacks": {
                label: list(value) if isinstance(value, list) else value
                for label, value in self.stacks.items()
            },
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        """Validate and load a mapping produced by ``to_dict()``.

        Raises:
            ValueError: The mapping does not follow the snapshot layout.
        """
        stacks = data.get("stacks")
        if not isinstance(stacks, Mapping):
            msg = "Snapshot requires a 'stacks' mapping"
            raise ValueError(msg)

        loaded: dict[str, list[StackEntry] | int] = {}
        for label, value in stacks.items():
            if not isinstance(label, str):
                msg = f"Stack label must be a string, got {label!r}"
                raise ValueError(msg)
            # bool is an int subclass; reject it explicitly
            if isinstance(value, int) and not isinstance(value, bool):
                loaded[label] = value
            elif isinstance(value, list):
                for entry in value:
                    if isinstance(entry, str):
                        continue
                    if not isinstance(entry, Mapping):
                        msg = f"Unsupported entry {entry!r} in stack {label!r}"
                        raise ValueError(msg)
                    layout_entry_name(entry)
                loaded[label] = [
                    entry if isinstance(entry, str) else dict(entry) for entry in value
                ]
            else:
                msg = f"Stack {label!r} must map to a list or an index, got {value!r}"
                raise ValueError(msg)

        active = data.get("active")
        if active is not None and not isinstance(active, str):
            msg = f"'active' must be a URI string, got {active!r}"
            raise ValueError(msg)
        return cls(stacks=loaded, active=active)
