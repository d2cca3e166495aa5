"""navstack: a navigation engine for stacked, tabbed and nested screens.

Tracks which routes are visible, in what order, across independent stacks
(main flow, tabs, modals), resolves redirects and exit guards, builds
nested layouts on demand and keeps everything addressable by URI.

Basic usage::

    from dataclasses import dataclass

    from navstack import Coordinator, Route

    class Home(Route):
        def to_uri(self) -> str:
            return "/"

    @dataclass(eq=False)
    class Profile(Route):
        user_id: str

        def to_uri(self) -> str:
            return f"/profile/{self.user_id}"

    coordinator = Coordinator()
    await coordinator.replace(Home())
    saved = await (await coordinator.push(Profile("42")))
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ChangeNotifier",
    "Completion",
    "ConfigurationError",
    "Coordinator",
    "DeepLink",
    "DeeplinkStrategy",
    "FixedStack",
    "Guard",
    "Layout",
    "LayoutRegistry",
    "MissingLayoutError",
    "MutableStack",
    "NavConfig",
    "NavError",
    "Redirector",
    "Route",
    "RouteModule",
    "Snapshot",
    "Stack",
    "StackView",
    "diff",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import navstack`` fast while providing a clean top-level API.
    """
    if name == "Coordinator":
        from navstack.coordinator import Coordinator

        return Coordinator

    if name == "NavConfig":
        from navstack.config import NavConfig

        return NavConfig

    if name in ("Route", "Completion"):
        from navstack.routing import route as _route

        return getattr(_route, name)

    if name == "Guard":
        from navstack.routing.guard import Guard

        return Guard

    if name == "Redirector":
        from navstack.routing.redirect import Redirector

        return Redirector

    if name in ("DeepLink", "DeeplinkStrategy"):
        from navstack.routing import deeplink as _deeplink

        return getattr(_deeplink, name)

    if name in ("Stack", "MutableStack", "FixedStack"):
        from navstack import stack as _stack

        return getattr(_stack, name)

    if name in ("Layout", "LayoutRegistry"):
        from navstack import layout as _layout

        return getattr(_layout, name)

    if name == "RouteModule":
        from navstack.modules import RouteModule

        return RouteModule

    if name == "Snapshot":
        from navstack.snapshot import Snapshot

        return Snapshot

    if name == "StackView":
        from navstack.render import StackView

        return StackView

    if name == "diff":
        from navstack.diff import diff

        return diff

    if name == "ChangeNotifier":
        from navstack.events import ChangeNotifier

        return ChangeNotifier

    if name in ("NavError", "ConfigurationError", "MissingLayoutError"):
        from navstack import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
