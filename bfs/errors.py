"""Errors raised by the buffered file system.

Every error derives from BFSError so callers can catch the whole family.
NotFoundError is the one the resolver treats as a signal to try the next
lookup; everything else is propagated to the caller.
"""

from typing import Optional


class BFSError(Exception):
    """Base class for buffered file system errors."""
    pass


class ArchiveError(BFSError):
    """The archive buffer could not be parsed."""
    pass


class NotFoundError(BFSError, LookupError):
    """No entry in the archive matches the lookup key.

    Attributes:
        path: The lookup key after base directory and ``./`` handling
    """

    def __init__(self, path: str):
        super().__init__(f"ENOENT: {path}")
        self.path = path


class InvalidArgumentError(BFSError, ValueError):
    """An argument was rejected before any state changed."""
    pass


class ManifestParseError(BFSError):
    """A package manifest could not be parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid manifest {path}: {reason}")
        self.path = path
        self.reason = reason


class NativeLoadError(BFSError, ImportError):
    """The host failed to import a module for a reason other than absence."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Failed to load native module {name!r}: {reason}", name=name)
        self.reason = reason


class ExecutionError(BFSError):
    """Code loaded from the archive raised while executing.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, path: str, reason: Optional[str] = None):
        message = f"Error executing {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
