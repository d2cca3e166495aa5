"""Redirect resolution: substitute a route's final destination.

Before any route is shown, the engine follows its redirect chain:

1. The candidate's ``redirect()`` is called (sync or async)
2. ``None``: the candidate is discarded and the operation is cancelled
3. The candidate itself: resolution stops, the candidate is final
4. Another route: the candidate is discarded and the new route becomes
   the candidate; repeat

Redirect logic can also be composed from ``RedirectRule`` objects, run in
order by routes that mix in ``RuleRedirector``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from navstack._internal.invoke import invoke
from navstack.errors import RedirectLoopError
from navstack.routing.route import Route

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator

logger = logging.getLogger("navstack.redirect")


class Redirector:
    """Mixin for routes that may redirect before being shown.

    Return ``self`` to proceed, another route to go there instead, or
    ``None`` to cancel the navigation entirely::

        class Dashboard(Redirector, Route):
            def redirect(self, coordinator):
                if not coordinator.session.logged_in:
                    return Login(next=self.to_uri())
                return self
    """

    def as_redirector(self) -> Redirector:
        return self

    def redirect(self, coordinator: Coordinator | None) -> Route | None | Awaitable[Route | None]:
        return self  # type: ignore[return-value]


async def resolve(
    route: Route,
    coordinator: Coordinator | None,
    *,
    max_redirects: int | None = None,
) -> Route | None:
    """Follow the redirect chain of *route* to its final destination.

    Every candidate that is redirected away (or cancelled) is discarded so
    callers awaiting its completion receive no result.  A redirect that
    returns a new instance equal to the candidate counts as a self-return;
    the duplicate is discarded and the candidate stays final.

    Args:
        route: The requested destination.
        coordinator: Passed to each ``redirect()`` call.
        max_redirects: Optional bound on the number of hops.  ``None``
            leaves loops to the caller.

    Returns:
        The final route, or ``None`` if the navigation was cancelled.

    Raises:
        RedirectLoopError: More than *max_redirects* hops were taken.
    """
    target = route
    hops = 0
    while (redirector := target.as_redirector()) is not None:
        next_target = await invoke(redirector.redirect, coordinator)

        if next_target is None:
            logger.debug("Redirect from %r cancelled navigation", target)
            target.on_discard()
            return None

        if next_target is target:
            break

        if next_target == target:
            next_target.on_discard()
            break

        hops += 1
        if max_redirects is not None and hops > max_redirects:
            target.on_discard()
            next_target.on_discard()
            raise RedirectLoopError(max_redirects, next_target)

        logger.debug("Redirect %r -> %r", target, next_target)
        target.on_discard()
        target = next_target
    return target


# ---------------------------------------------------------------------------
# Composable redirect rules
# ---------------------------------------------------------------------------


class RedirectResult:
    """Outcome of a single ``RedirectRule``."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class Stop(RedirectResult):
    """Cancel the navigation; nothing is shown."""


@dataclass(frozen=True, slots=True)
class Continue(RedirectResult):
    """Defer to the next rule; the original route proceeds if none remain."""


@dataclass(frozen=True, slots=True)
class RedirectTo(RedirectResult):
    """Stop the rule chain and go to *route* instead."""

    route: Route


STOP = Stop()
CONTINUE = Continue()


class RedirectRule:
    """A reusable, testable piece of redirect logic.

    Subclass and implement ``check``::

        class RequireLogin(RedirectRule):
            def check(self, coordinator, route):
                if coordinator.session.logged_in:
                    return CONTINUE
                return RedirectTo(Login())
    """

    def check(
        self, coordinator: Coordinator | None, route: Route
    ) -> RedirectResult | Awaitable[RedirectResult]:
        raise NotImplementedError


class RuleRedirector(Redirector):
    """Redirector that runs ``redirect_rules`` in order.

    Processing stops at the first ``Stop`` or ``RedirectTo``.  When every
    rule continues, the route itself proceeds.
    """

    redirect_rules: Sequence[RedirectRule] = ()

    async def redirect(self, coordinator: Coordinator | None) -> Any:
        for rule in self.redirect_rules:
            result = await invoke(rule.check, coordinator, self)
            match result:
                case Stop():
                    return None
                case RedirectTo(route=route):
                    return route
                case Continue():
                    continue
                case _:
                    msg = f"{type(rule).__name__}.check() returned {result!r}, not a RedirectResult"
                    raise TypeError(msg)
        return self
