"""Host-native module loading for bare specifiers."""

import importlib
from typing import Any, Callable

from bfs.errors import NativeLoadError

NativeLoader = Callable[[str], Any]


def is_missing(error: ModuleNotFoundError, name: str) -> bool:
    """True when the error is about ``name`` itself (or a parent package).

    A module that exists but fails to import one of its own dependencies
    also raises ModuleNotFoundError; that case is not an absence of ``name``.
    """
    if error.name is None:
        return True
    return name == error.name or name.startswith(f"{error.name}.")


def import_native(name: str) -> Any:
    """Import a module from the host interpreter.

    Args:
        name: Bare specifier, e.g. ``json`` or ``os.path``

    Returns:
        The imported module

    Raises:
        ModuleNotFoundError: If no such module is installed
        NativeLoadError: If the module exists but could not be imported
    """
    if not name or name.startswith("."):
        # empty and relative dotted names have no host module to resolve to
        raise ModuleNotFoundError(f"No module named {name!r}", name=name)

    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as e:
        if is_missing(e, name):
            raise
        raise NativeLoadError(name, str(e)) from e
    except ImportError as e:
        raise NativeLoadError(name, str(e)) from e
