"""CRUD package exports with lazy module loading.

Keeps ``import skilltrade.crud.user`` cheap for ``skilltrade.utils.security``
without dragging every model helper in at import time.
"""

from importlib import import_module

__all__ = ["user", "skill", "review", "availability"]


def __getattr__(name):
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
