"""Minimal edit scripts between route sequences (Myers' O(ND) algorithm).

Renderers use the script to animate a stack change: ``Insert`` entries
slide in, ``Delete`` entries slide out, ``Keep`` entries stay put.

    >>> [type(op).__name__ for op in diff("abc", "abd")]
    ['Keep', 'Keep', 'Delete', 'Insert']

Elements are compared with ``==`` by default, which for routes is
variant-plus-props equality.  Pass ``eq`` to compare differently (e.g.
``operator.is_`` to diff by instance).
"""

import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Edit operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Keep:
    """``old[old_index]`` survives as ``new[new_index]``."""

    old_index: int
    new_index: int
    element: Any


@dataclass(frozen=True, slots=True)
class Delete:
    """``old[old_index]`` is removed."""

    old_index: int
    element: Any


@dataclass(frozen=True, slots=True)
class Insert:
    """``new[new_index]`` is added."""

    new_index: int
    element: Any


Edit = Keep | Delete | Insert


# ---------------------------------------------------------------------------
# Myers
# ---------------------------------------------------------------------------


def diff(
    old: Sequence[Any],
    new: Sequence[Any],
    *,
    eq: Callable[[Any, Any], bool] = operator.eq,
) -> list[Edit]:
    """Shortest edit script turning *old* into *new*.

    Operations are ordered by position; within a replaced region deletions
    precede insertions.  Identical sequences yield only ``Keep``.
    """
    n, m = len(old), len(new)
    max_d = n + m
    if max_d == 0:
        return []

    offset = max_d
    v = [0] * (2 * max_d + 2)
    trace: list[list[int]] = []

    for d in range(max_d + 1):
        trace.append(v.copy())
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]  # Down: insertion
            else:
                x = v[offset + k - 1] + 1  # Right: deletion
            y = x - k
            while x < n and y < m and eq(old[x], new[y]):
                x += 1
                y += 1
            v[offset + k] = x
            if x >= n and y >= m:
                return _backtrack(trace, old, new, offset)

    msg = "Edit script search exhausted without reaching the end"  # pragma: no cover
    raise AssertionError(msg)  # pragma: no cover


def _backtrack(
    trace: list[list[int]],
    old: Sequence[Any],
    new: Sequence[Any],
    offset: int,
) -> list[Edit]:
    script: list[Edit] = []
    x, y = len(old), len(new)

    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[offset + prev_k]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            script.append(Keep(x, y, new[y]))

        if d > 0:
            if x == prev_x:
                y -= 1
                script.append(Insert(y, new[y]))
            else:
                x -= 1
                script.append(Delete(x, old[x]))

    script.reverse()
    return script


def apply_script(old: Sequence[Any], script: Sequence[Edit]) -> list[Any]:
    """Replay *script* against *old* and return the resulting sequence.

    Raises:
        ValueError: The script does not describe *old*.
    """
    result: list[Any] = []
    cursor = 0
    for op in script:
        match op:
            case Keep(old_index=i):
                if i != cursor:
                    msg = f"Keep({i}) out of order; expected old index {cursor}"
                    raise ValueError(msg)
                result.append(old[i])
                cursor += 1
            case Delete(old_index=i):
                if i != cursor:
                    msg = f"Delete({i}) out of order; expected old index {cursor}"
                    raise ValueError(msg)
                cursor += 1
            case Insert(element=element):
                result.append(element)
    if cursor != len(old):
        msg = f"Script consumed {cursor} of {len(old)} elements"
        raise ValueError(msg)
    return result
