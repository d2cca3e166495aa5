"""Stacks: ordered route containers, mutable or fixed."""

from navstack.stack.base import Stack
from navstack.stack.fixed import FixedStack
from navstack.stack.mutable import MutableStack
from navstack.stack.queue import OperationQueue

__all__ = [
    "FixedStack",
    "MutableStack",
    "OperationQueue",
    "Stack",
]
