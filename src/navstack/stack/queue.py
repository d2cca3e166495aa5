"""Per-stack operation queue.

Stack operations may suspend on guards and redirectors.  Without
coordination, a second task could mutate the stack while the first is
waiting for a decision.  Each stack therefore runs its operations through
an ``OperationQueue``:

- operations from different tasks run one after the other, in arrival
  order (``anyio.Lock`` is FIFO-fair)
- an operation issued by the task that already holds the queue (a guard
  or redirector calling back into the same stack, or ``navigate()``
  popping step by step) runs inline instead of deadlocking

With ``NavConfig.serialize_operations = False`` the queue is a no-op and
overlapping calls interleave freely (last write wins).
"""

from types import TracebackType

import anyio


class OperationQueue:
    """Re-entrant FIFO lock scoped to the owning task."""

    __slots__ = ("_depth", "_enabled", "_lock", "_owner")

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = enabled
        self._lock: anyio.Lock | None = None  # Created lazily on first use
        self._owner: int | None = None
        self._depth = 0

    @property
    def busy(self) -> bool:
        """Whether an operation is currently running."""
        return self._depth > 0

    async def __aenter__(self) -> "OperationQueue":
        if not self._enabled:
            self._depth += 1
            return self
        task_id = anyio.get_current_task().id
        if self._owner == task_id:
            self._depth += 1
            return self
        if self._lock is None:
            self._lock = anyio.Lock()
        await self._lock.acquire()
        self._owner = task_id
        self._depth = 1
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._depth -= 1
        if not self._enabled or self._depth:
            return
        self._owner = None
        if self._lock is not None:
            self._lock.release()
