"""Invoke helpers: call sync or async decision hooks uniformly.

Guards, redirectors, URI parsers and deep-link handlers can be ``def`` or
``async def``.  Any code that calls one must handle both cases.  This
module keeps the sync/async check in exactly one place.

Usage::

    from navstack._internal.invoke import invoke

    allowed = await invoke(route.can_exit, coordinator)
"""

import inspect
from typing import Any


async def invoke(hook: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a hook and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: the value is used directly
        def can_exit(self, coordinator):
            return not self.dirty

        # async: suspends until the user answers
        async def can_exit(self, coordinator):
            return await coordinator.confirm("Discard changes?")
    """
    result = hook(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
