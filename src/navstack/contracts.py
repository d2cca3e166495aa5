"""Wiring contracts: static validation of a coordinator's stacks and layouts.

Catches configuration mistakes before the first navigation does:

1. **Stack labels**: every stack has a label, and no two share one
   (snapshots are keyed by label).
2. **Layout keys**: every layout key declared by a route on a fixed stack
   has a registered constructor and a bound stack.
3. **Registry entries**: every registered layout owns a stack.
4. **Reachability**: every stack other than the root is owned by some
   layout.
5. **Fixed-stack redirects** (warning): a sibling that redirects makes
   switching depend on the redirect target being another sibling.

Usage::

    result = check_coordinator(coordinator)
    print(result.summary())

    # Or via CLI:
    #   navstack check myapp:coordinator
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator

# ---------------------------------------------------------------------------
# Issue types
# ---------------------------------------------------------------------------


class Severity(Enum):
    """Severity of a contract validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class ContractIssue:
    """A single validation issue found during contract checking."""

    severity: Severity
    category: str
    message: str
    stack: str | None = None
    details: str | None = None


@dataclass(slots=True)
class CheckResult:
    """Result of a wiring check."""

    issues: list[ContractIssue] = field(default_factory=list)
    stacks_checked: int = 0
    layouts_checked: int = 0

    @property
    def errors(self) -> list[ContractIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ContractIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [f"Checked {self.stacks_checked} stacks and {self.layouts_checked} layouts."]
        if self.ok and not self.warnings:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for issue in self.issues:
            prefix = issue.severity.value.upper()
            loc = f" in stack {issue.stack!r}" if issue.stack else ""
            lines.append(f"  [{prefix}] {issue.message}{loc}")
            if issue.details:
                lines.append(f"           {issue.details}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_coordinator(coordinator: Coordinator) -> CheckResult:
    """Validate the stack and layout wiring of *coordinator*."""
    registry = coordinator.registry
    stacks = coordinator.stacks
    result = CheckResult(stacks_checked=len(stacks), layouts_checked=len(registry))

    labels = Counter(stack.label for stack in stacks if stack.label is not None)
    for label, count in labels.items():
        if count > 1:
            result.issues.append(
                ContractIssue(
                    severity=Severity.ERROR,
                    category="label",
                    message=f"{count} stacks share the label {label!r}",
                    stack=label,
                    details="Snapshots are keyed by label; give each stack a unique one.",
                )
            )
    for stack in stacks:
        if stack.label is None:
            result.issues.append(
                ContractIssue(
                    severity=Severity.WARNING,
                    category="label",
                    message=f"Unlabeled {type(stack).__name__} is skipped by snapshot()",
                )
            )

    owned = {id(stack) for _, stack in registry.stacks()}
    for key in registry.keys():
        if not registry.has_stack(key):
            result.issues.append(
                ContractIssue(
                    severity=Severity.ERROR,
                    category="layout",
                    message=f"Layout {registry.key_name(key)!r} has a constructor but no stack",
                    details="Call stack.bind_layout(...) on the stack it hosts.",
                )
            )

    for stack in stacks:
        if stack is coordinator.root:
            continue
        if id(stack) not in owned:
            result.issues.append(
                ContractIssue(
                    severity=Severity.ERROR,
                    category="reachability",
                    message="Stack is not owned by any layout and can never become active",
                    stack=stack.label,
                )
            )

    for stack in stacks:
        if stack.mutable:
            continue
        for route in stack.routes:
            key = route.parent_layout_key
            if key is not None and not (registry.has_constructor(key) and registry.has_stack(key)):
                result.issues.append(
                    ContractIssue(
                        severity=Severity.ERROR,
                        category="layout",
                        message=f"{route!r} declares layout {registry.key_name(key)!r}, which is not registered",
                        stack=stack.label,
                    )
                )
            if route.as_redirector() is not None:
                result.issues.append(
                    ContractIssue(
                        severity=Severity.WARNING,
                        category="redirect",
                        message=f"{route!r} redirects; only redirects to its siblings take effect",
                        stack=stack.label,
                    )
                )

    return result
