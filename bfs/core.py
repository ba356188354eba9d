"""Buffered File System (BFS).

A read-only file system created from an archive buffer. Supports reading
files and requiring modules from the archive without unpacking it to disk.
"""

import re
from typing import Any, Dict, List, Optional, Pattern

from bfs.config import ResolverConfig
from bfs.errors import NotFoundError
from bfs.executor import PythonExecutor
from bfs.logger import Logger
from bfs.native import NativeLoader
from bfs.paths import is_directory_reference, normalize_basedir
from bfs.reader import Selector, TarReader
from bfs.resolver import ModuleResolver

MATCH_ALL = re.compile(".*")


class BFS:
    """Buffered file system over an initialized archive reader.

    Usage:
        >>> bfs = await from_tar(data)
        >>> bfs.basedir("modules")
        >>> bfs.read_file("README.md")
        >>> bfs.require("./")              # modules/__init__.py
        >>> bfs.provide("requests", fake)  # override what the archive gets
    """

    def __init__(
        self,
        reader: TarReader,
        logger: Optional[Logger] = None,
        config: Optional[ResolverConfig] = None,
        native_loader: Optional[NativeLoader] = None,
        executor: Optional[PythonExecutor] = None,
    ):
        self.reader = reader
        self.logger = logger or Logger()
        self.config = config or ResolverConfig()
        self.provided_modules: Dict[str, Any] = {}
        self.resolver = ModuleResolver(
            self,
            config=self.config,
            native_loader=native_loader,
            executor=executor,
            logger=self.logger,
        )

    def byte_length(self) -> int:
        """Size in bytes of the archive buffer."""
        return len(self.reader.data)

    def size(self) -> int:
        """Number of files in the archive; 0 for an archive without files."""
        try:
            return len(self.read_files(MATCH_ALL))
        except NotFoundError:
            return 0

    def read_file(self, file: Selector) -> str:
        """Read contents of the file at a path relative to the base directory."""
        return self.read_files(file)[0]

    def read_files(self, file: Selector) -> List[str]:
        """Read contents of every file matching a path or pattern.

        Directory references (``./`` or anything ending in ``/``) default to
        the index file at the root of the base directory.
        """
        return self.reader.read(self.index_selector(file))

    def index_selector(self, file: Selector) -> Selector:
        """Rewrite directory references to the index file."""
        if isinstance(file, str) and is_directory_reference(file):
            return f"./{self.config.index_file}"
        return file

    def list_files(self, pattern: Optional[Pattern[str]] = None) -> List[str]:
        """Paths of the files stored in the archive, in archive order."""
        return self.reader.keys(pattern)

    def require(self, mod: str) -> Any:
        """Recursively require a module from within the FS."""
        return self.resolver.require(mod)

    def provide(self, name: str, mod: Any) -> None:
        """Provide a named module for the FS to use when it is required.

        Useful for mocking out modules that may not exist or may not be
        fully compatible with the host. The first value provided for a name
        is kept.
        """
        if name in self.provided_modules:
            return
        self.provided_modules[name] = mod

    def basedir(self, directory: str) -> None:
        """Set the base directory from which to read files and require modules.

        Raises:
            InvalidArgumentError: If ``directory`` is blank
        """
        self.reader.basedir = normalize_basedir(directory)
        self.logger.debug("Base directory set", {"basedir": self.reader.basedir})


async def from_tar(
    tar: bytes,
    logger: Optional[Logger] = None,
    config: Optional[ResolverConfig] = None,
    native_loader: Optional[NativeLoader] = None,
    executor: Optional[PythonExecutor] = None,
) -> BFS:
    """Parse a tar archive and return a BFS over it.

    Args:
        tar: Raw archive bytes (plain or compressed tar)
        logger: Optional logger capability shared by reader and resolver
        config: File naming conventions used by ``require``
        native_loader: Replacement for the host import of bare specifiers
        executor: Replacement for the Python source executor

    Returns:
        Initialized BFS

    Raises:
        ArchiveError: If the buffer isn't a readable tar archive
    """
    reader = TarReader(tar, logger)
    await reader.init()
    return BFS(reader, logger, config=config, native_loader=native_loader, executor=executor)
