"""Test utilities for navstack.

Provides a change recorder and stack/coordinator assertions::

    from navstack.testing import ChangeRecorder, assert_stack
"""

from navstack.testing.assertions import assert_active, assert_bound, assert_stack, assert_uri
from navstack.testing.recorder import ChangeRecorder

__all__ = [
    "ChangeRecorder",
    "assert_active",
    "assert_bound",
    "assert_stack",
    "assert_uri",
]
