"""``navstack stacks``: print the stack tree.

Resolves an import string to a Coordinator and prints every stack under
the layout that owns it, starting from the root::

    root (mutable) [Home(), TabsLayout()]
      TabsLayout -> tabs (fixed, active 0) [Feed(), Inbox()]
"""

import argparse
import sys

from navstack.cli._resolve import resolve_coordinator
from navstack.coordinator import Coordinator
from navstack.stack.base import Stack


def run_stacks(args: argparse.Namespace) -> None:
    try:
        coordinator = resolve_coordinator(args.coordinator)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for line in format_stack_tree(coordinator):
        print(line)


def format_stack_tree(coordinator: Coordinator) -> list[str]:
    registry = coordinator.registry
    owners = {id(stack): key for key, stack in registry.stacks()}
    lines = [_describe(coordinator.root)]
    for stack in coordinator.stacks:
        if stack is coordinator.root:
            continue
        key = owners.get(id(stack))
        owner = registry.key_name(key) if key is not None else "(unowned)"
        lines.append(f"  {owner} -> {_describe(stack)}")
    return lines


def _describe(stack: Stack) -> str:
    if stack.mutable:
        kind = "mutable"
    else:
        kind = f"fixed, active {stack.snapshot()}"
    routes = ", ".join(repr(route) for route in stack.routes)
    return f"{stack.label} ({kind}) [{routes}]"
