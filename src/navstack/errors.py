"""navstack exception hierarchy.

Shared across routes, stacks, layouts and the coordinator so every module
raises and catches the same types.

Only programmer errors are raised.  Guard denials and redirect
cancellations are ordinary return values, never exceptions.
"""

from typing import Any


class NavError(Exception):
    """Base for all navstack-specific errors."""


class ConfigurationError(NavError):
    """Raised when the navigation wiring is invalid.

    Always fatal: the engine never retries an operation that raised one.
    """


class MissingLayoutError(ConfigurationError):
    """A route declared a layout key that nothing registered.

    Raised when the coordinator's registry has no constructor (or no
    owned stack) for ``key``.  Fix it by calling ``stack.bind_layout()``
    or ``coordinator.define_layout()`` for the key.
    """

    def __init__(self, key: Any, detail: str = "") -> None:
        self.key = key
        default_detail = (
            f"No layout registered for key {key!r}. "
            "Bind it with stack.bind_layout(...) or coordinator.define_layout(...)."
        )
        super().__init__(detail or default_detail)


class EmptyStackError(ConfigurationError):
    """A fixed stack was constructed without any routes."""


class UnsupportedOperationError(ConfigurationError):
    """The operation is not supported by this stack variant.

    Fixed stacks cannot push, pop or remove; mutable stacks cannot switch
    an active index.
    """

    def __init__(self, operation: str, stack_label: str) -> None:
        self.operation = operation
        self.stack_label = stack_label
        super().__init__(f"Stack {stack_label!r} does not support {operation}()")


class RouteBindingError(ConfigurationError):
    """A route was bound to a second stack, or rebound after leaving one."""


class RouteNotInStackError(ConfigurationError):
    """``activate_route()`` was called on a fixed stack with a foreign route."""


class RedirectLoopError(ConfigurationError):
    """A redirect chain exceeded ``NavConfig.max_redirects``."""

    def __init__(self, limit: int, last: Any) -> None:
        self.limit = limit
        self.last = last
        super().__init__(f"Redirect chain exceeded {limit} hops (last candidate: {last!r})")


class UnresolvedUriError(ConfigurationError):
    """The URI parser returned no route for a deep link or snapshot entry."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(
            f"parse_uri() returned no route for {uri!r}; "
            "deep-link recovery and snapshot restore require a route for every URI"
        )
