"""Path handling for archive lookups and module specifiers.

Archive paths are always POSIX-style and relative. Joining follows the usual
rules (``.`` and ``..`` collapse) but keeps a trailing slash, since a
trailing slash marks a directory reference that defaults to the index file.
"""

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from bfs.errors import InvalidArgumentError


class SpecifierKind(Enum):
    """How a module specifier is resolved."""
    RELATIVE = "relative"
    BARE = "bare"


@dataclass(frozen=True)
class Specifier:
    """A classified module specifier.

    Attributes:
        name: The specifier as written
        kind: RELATIVE for ``./`` and ``../`` paths, BARE otherwise
    """
    name: str
    kind: SpecifierKind

    @property
    def is_relative(self) -> bool:
        return self.kind is SpecifierKind.RELATIVE

    @property
    def directory(self) -> str:
        """Directory the specifier lives in, used to resolve what it requires."""
        return dirname(self.name)


def classify(name: str) -> Specifier:
    """Classify a module specifier.

    Args:
        name: Specifier such as ``./lib``, ``../util`` or ``json``

    Returns:
        Specifier tagged with its kind
    """
    if name.startswith("./") or name.startswith("../"):
        return Specifier(name, SpecifierKind.RELATIVE)
    return Specifier(name, SpecifierKind.BARE)


def join(*parts: str) -> str:
    """Join path segments, collapsing ``.``/``..`` and keeping a trailing slash.

    >>> join("./modules", "./nested/")
    'modules/nested/'
    >>> join("nested/deep", "../a")
    'nested/a'
    """
    joined = "/".join(part for part in parts if part)
    if not joined:
        return "."

    normalized = posixpath.normpath(joined)
    if joined.endswith("/") and not normalized.endswith("/"):
        normalized += "/"
    return normalized


def dirname(path: str) -> str:
    """Directory portion of a path; ``.`` when there is none.

    A trailing slash is ignored, so ``dirname("./a/")`` is ``.``.
    """
    trimmed = path.rstrip("/") or path
    return posixpath.dirname(trimmed) or "."


def strip_dot_prefix(path: str) -> str:
    """Remove every leading ``./`` segment."""
    while path.startswith("./"):
        path = path[2:]
    return path


def as_relative(path: str) -> str:
    """Prefix ``./`` so the path classifies as a relative specifier."""
    if path.startswith("./") or path.startswith("../"):
        return path
    return f"./{path}"


def has_suffix(path: str, suffixes: Iterable[str]) -> bool:
    return any(path.endswith(suffix) for suffix in suffixes)


def is_directory_reference(path: str) -> bool:
    """True for ``./`` and any path ending in a slash."""
    return path == "./" or path.endswith("/")


def normalize_basedir(path: str) -> str:
    """Validate and normalize a base directory.

    Args:
        path: Directory such as ``modules``, ``./modules/`` or ``lib/pkg``

    Returns:
        Directory starting with ``./`` and not ending with ``/``

    Raises:
        InvalidArgumentError: If the path is blank
    """
    path = path.strip()
    if not path:
        raise InvalidArgumentError("Custom basedir must not be empty")

    if not path.startswith("./"):
        path = f"./{path}"
    return path.rstrip("/") or "."
