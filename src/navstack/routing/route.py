"""Route base class and the single-fire completion handle.

A route is a unit of navigable identity.  Its identity is the concrete
class plus an ordered tuple of significant fields (``props``); query data
rides along as transient state.  Everything else on the instance is
lifecycle bookkeeping owned by the stack that holds it.

Lifecycle::

    constructed -> (redirected away -> discarded)
                -> bound to a stack -> active
                -> pop requested -> guard consulted
                -> unbound, completion fulfilled -> discarded (terminal)

Routes may be plain classes overriding ``props`` or dataclasses declared
with ``eq=False`` (the dataclass fields become the props)::

    @dataclass(eq=False)
    class Profile(Route):
        user_id: str

        def to_uri(self) -> str:
            return self.uri_with_query(f"/profile/{self.user_id}")
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, ClassVar

import anyio

from navstack.routing.query import QueryParams

if TYPE_CHECKING:
    from navstack._internal.types import LayoutKey
    from navstack.coordinator import Coordinator
    from navstack.layout.types import Layout
    from navstack.routing.guard import Guard
    from navstack.routing.redirect import Redirector
    from navstack.stack.base import Stack


class Completion:
    """One-shot result handle, fulfilled exactly once.

    Allocated when the route is constructed and fulfilled when the route
    leaves its stack (popped, removed or discarded).  Awaiting it suspends
    until then::

        handle = await coordinator.push(EditProfile())
        saved = await handle  # value passed to pop(result)

    The ``anyio.Event`` backing the wait is created lazily so routes can be
    built outside a running event loop.
    """

    __slots__ = ("_done", "_event", "_value")

    def __init__(self) -> None:
        self._done = False
        self._value: Any = None
        self._event: anyio.Event | None = None

    @property
    def done(self) -> bool:
        return self._done

    @property
    def value(self) -> Any:
        """The delivered value (``None`` until fulfilled)."""
        return self._value

    def fulfill(self, value: Any = None, *, fail_silent: bool = False) -> bool:
        """Deliver *value* to every waiter.

        Returns ``True`` if this call fulfilled the handle.  A second call
        raises ``RuntimeError`` unless *fail_silent* is set, in which case
        it is ignored and returns ``False``.
        """
        if self._done:
            if fail_silent:
                return False
            msg = "Completion already fulfilled."
            raise RuntimeError(msg)
        self._done = True
        self._value = value
        if self._event is not None:
            self._event.set()
        return True

    async def wait(self) -> Any:
        """Suspend until fulfilled, then return the delivered value."""
        if not self._done:
            if self._event is None:
                self._event = anyio.Event()
            await self._event.wait()
        return self._value

    def __await__(self):
        return self.wait().__await__()

    def __repr__(self) -> str:
        if self._done:
            return f"Completion(done, value={self._value!r})"
        return "Completion(pending)"


class Route:
    """Base class for every navigation destination.

    Subclasses declare identity through ``props`` and may mix in optional
    capabilities: ``Guard`` (veto removal), ``Redirector`` (substitute the
    destination) and ``Layout`` (own a child stack).  The capability
    queries ``as_guard()``, ``as_redirector()`` and ``as_layout()`` return
    ``self`` when the capability is present and ``None`` otherwise.

    Attributes:
        layout: Key of the layout this route belongs to (usually a
            ``Layout`` subclass).  ``None`` places the route on the root.
        query: Transient query data, not part of identity.
        popped_by_stack: ``True`` when the owning stack initiated the
            removal, ``False`` for external removal (system back gesture).
    """

    layout: ClassVar[LayoutKey | None] = None

    _stack: Stack | None
    _completion: Completion
    popped_by_stack: bool
    query: QueryParams

    def __new__(cls, *args: Any, **kwargs: Any) -> Route:
        # Set up lifecycle state here so dataclass subclasses need no super().__init__()
        self = super().__new__(cls)
        self._stack = None
        self._completion = Completion()
        self.popped_by_stack = False
        self.query = QueryParams()
        return self

    # -- Identity -----------------------------------------------------------

    @property
    def props(self) -> tuple[Any, ...]:
        """Significant fields, compared pairwise for equality.

        Defaults to the comparable fields of a dataclass subclass and to
        ``()`` otherwise.  Override to declare identity explicitly.
        """
        if dataclasses.is_dataclass(self):
            return tuple(getattr(self, f.name) for f in dataclasses.fields(self) if f.compare)
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return type(self) is type(other) and self.props == other.props

    def __hash__(self) -> int:
        return hash((type(self), self.props))

    def same_instance(self, other: Route) -> bool:
        """Stricter than ``==``: the very same route object."""
        return self is other

    def __repr__(self) -> str:
        args = ", ".join(repr(p) for p in self.props)
        return f"{type(self).__name__}({args})"

    # -- Capabilities -------------------------------------------------------

    def as_guard(self) -> Guard | None:
        return None

    def as_redirector(self) -> Redirector | None:
        return None

    def as_layout(self) -> Layout | None:
        return None

    @property
    def parent_layout_key(self) -> LayoutKey | None:
        return type(self).layout

    # -- Address ------------------------------------------------------------

    def to_uri(self) -> str:
        """The external address of this route (path plus query)."""
        msg = f"{type(self).__name__} does not define to_uri()"
        raise NotImplementedError(msg)

    def uri_with_query(self, path: str) -> str:
        """Append the carried query data to *path*."""
        encoded = self.query.encode()
        return f"{path}?{encoded}" if encoded else path

    def with_query(self, query: str | dict[str, str]) -> Route:
        """Replace the carried query data and return ``self`` for chaining."""
        self.query = QueryParams(query)
        return self

    # -- Stack binding ------------------------------------------------------

    @property
    def stack(self) -> Stack | None:
        """The stack currently holding this route, if any."""
        return self._stack

    def bind_stack(self, stack: Stack) -> None:
        self._stack = stack

    def clear_stack(self) -> None:
        self._stack = None

    # -- Completion ---------------------------------------------------------

    @property
    def completion(self) -> Completion:
        return self._completion

    @property
    def result(self) -> Any:
        """The value delivered when this route left its stack."""
        return self._completion.value

    def complete(self, result: Any = None, *, fail_silent: bool = False) -> bool:
        return self._completion.fulfill(result, fail_silent=fail_silent)

    # -- Lifecycle hooks ----------------------------------------------------

    def on_discard(self) -> None:
        """Called when the route is dropped without (or after) being shown.

        Fulfills the completion with no result so awaiting callers are
        released.  Safe to call more than once.
        """
        self.complete(None, fail_silent=True)

    def on_update(self, new_route: Route) -> None:
        """Adopt transient state from an equal incoming route."""
        self.query = new_route.query

    def on_leave(self, coordinator: Coordinator | None) -> None:
        """Called by the owning stack after this route was removed."""

    def on_did_pop(self, result: Any = None, coordinator: Coordinator | None = None) -> None:
        """Handle a removal initiated outside the stack (e.g. system back).

        When the owning stack did not initiate the pop, the route is
        force-removed from it first.  The completion receives *result*.
        """
        stack = self._stack
        if (
            not self.popped_by_stack
            and stack is not None
            and stack.mutable
            and stack.contains_instance(self)
        ):
            stack.remove(self, discard=False)
        self.complete(result, fail_silent=True)
        self.clear_stack()
