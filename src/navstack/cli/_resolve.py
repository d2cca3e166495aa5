"""Coordinator import resolution: ``"module:attribute"`` to a Coordinator.

Shared by ``navstack check`` and ``navstack stacks``.
"""

import importlib

from navstack.coordinator import Coordinator


def resolve_coordinator(import_string: str) -> Coordinator:
    """Resolve an import string to a Coordinator instance.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"coordinator"``.

    Supports factories: a callable that is not a Coordinator (a subclass,
    or a function building one) is called without arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a Coordinator or the
            factory raised.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "coordinator"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Coordinator):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Coordinator):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a navstack.Coordinator instance"
        raise TypeError(msg)

    return obj
