"""Navigation configuration.

NavConfig is a frozen dataclass shared by a coordinator and every stack
created with ``coordinator=...``.
"""

from dataclasses import dataclass

from navstack.routing.deeplink import DeeplinkStrategy


@dataclass(frozen=True, slots=True)
class NavConfig:
    """Coordinator configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = NavConfig(max_redirects=8, strict_fixed_redirects=True)
    """

    # Concurrency: FIFO operation queue per stack (False = last write wins)
    serialize_operations: bool = True

    # Redirects
    max_redirects: int | None = None  # None = unbounded; loops are a caller bug
    strict_fixed_redirects: bool = False  # Raise when a tab redirects to a non-sibling

    # Deep links
    default_deeplink_strategy: DeeplinkStrategy = DeeplinkStrategy.REPLACE

    # Stacks
    root_label: str = "root"
