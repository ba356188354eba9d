"""Execution of source text loaded from the archive."""

import ast
import builtins
import types
from typing import Any, Callable, Dict

from bfs.paths import strip_dot_prefix

RequireFunc = Callable[[str], Any]

EXPORTS = "exports"


class PythonExecutor:
    """Runs Python source with an injected ``require`` and returns its export.

    The exported value is picked in this order:

    1. the ``exports`` global, when the code assigns it
    2. the value of the last statement, when that statement is a bare expression
    3. a module object holding everything the code defined

    A module whose last statement is its docstring or a bare call such as
    ``main()`` exports that string or the call's return value, not the
    module. Assign ``exports`` or end with a statement to get the module.

    Example:
        >>> executor = PythonExecutor()
        >>> executor.execute("exports = require('./a') + 1", "main.py", lambda name: 41)
        42
    """

    def execute(self, source: str, filename: str, require: RequireFunc) -> Any:
        namespace: Dict[str, Any] = {
            "__name__": module_name(filename),
            "__file__": filename,
            "__builtins__": builtins,
            "require": require,
        }

        tree = ast.parse(source, filename, "exec")
        tail = None
        if tree.body and isinstance(tree.body[-1], ast.Expr):
            tail = ast.Expression(tree.body.pop().value)

        exec(compile(tree, filename, "exec", dont_inherit=True), namespace)
        result = None
        if tail is not None:
            result = eval(compile(tail, filename, "eval", dont_inherit=True), namespace)

        if EXPORTS in namespace:
            return namespace[EXPORTS]
        if tail is not None:
            return result

        module = types.ModuleType(namespace["__name__"])
        module.__dict__.update(namespace)
        return module


def module_name(filename: str) -> str:
    """Dotted module name for an archive path, e.g. ``pkg/util.py`` -> ``pkg.util``."""
    name = strip_dot_prefix(filename)
    if name.endswith(".py"):
        name = name[:-3]
    parts = [part for part in name.split("/") if part and part not in (".", "..")]
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts) or "__bfs__"
