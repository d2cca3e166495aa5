"""Layouts: routes that own a child stack, and the registry that builds them."""

from navstack.layout.registry import LayoutRegistry
from navstack.layout.resolve import ChainStrategy, prepare_layout_chain, resolve_parent_layout
from navstack.layout.types import Layout

__all__ = [
    "ChainStrategy",
    "Layout",
    "LayoutRegistry",
    "prepare_layout_chain",
    "resolve_parent_layout",
]
