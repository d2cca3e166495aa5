"""Deep-link strategies.

Decides how the coordinator folds a route reached through an address
(URL, app link, restored snapshot) into the current navigation state.
"""

from __future__ import annotations

from collections.abc import Awaitable
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from navstack.coordinator import Coordinator


class DeeplinkStrategy(Enum):
    """How ``Coordinator.recover()`` applies a deep-linked route."""

    REPLACE = "replace"  # Reset every stack, then show the route
    NAVIGATE = "navigate"  # Pop back to it if present, otherwise push
    PUSH = "push"  # Push on top of the current state
    CUSTOM = "custom"  # Delegate to the route's handle_deeplink()


class DeepLink:
    """Mixin for routes that choose their own deep-link handling.

    Routes without this mixin use ``NavConfig.default_deeplink_strategy``.
    """

    deeplink_strategy: DeeplinkStrategy = DeeplinkStrategy.REPLACE

    def handle_deeplink(self, coordinator: Coordinator, uri: str) -> Awaitable[Any] | None:
        """Custom handler, called when the strategy is ``CUSTOM``."""
        return None
