"""Change notification channel shared by stacks and coordinators.

Every successful mutation fires a notification, including guard-blocked
no-ops that still require observers (address bar, renderers, persistence)
to resynchronize with the actual state.

Listeners are plain callables taking no arguments.  They read whatever
state they need from the notifier when called::

    unsubscribe = stack.subscribe(lambda: print(stack.routes))
    ...
    unsubscribe()
"""

from collections.abc import Callable

from navstack._internal.types import Listener


class ChangeNotifier:
    """Broadcast channel for state-change notifications.

    ``subscribe()`` returns an unsubscribe callable; ``unsubscribe()`` is
    also available directly.  Listeners registered or removed while a
    notification is being delivered take effect from the next one.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._version = 0

    @property
    def version(self) -> int:
        """Number of notifications delivered so far."""
        return self._version

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        """Remove *listener*.  Unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def notify(self) -> None:
        """Call every listener registered at the time of the call."""
        self._version += 1
        for listener in tuple(self._listeners):
            listener()

    def close(self) -> None:
        """Drop every listener."""
        self._listeners.clear()
