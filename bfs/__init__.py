"""
bfs - a read-only file system built from a single tar archive in memory.

Files are read straight out of the archive buffer, and Python modules stored
in it can be required (resolved, executed and returned) without unpacking
anything to disk.

Layout of a typical archive:

    ```
    modules/
    ├── __init__.py              # require("./")
    ├── nested.py                # require("./nested")
    ├── nested/
    │   ├── __init__.py          # require("./nested/__init__.py")
    │   └── deep/
    │       ├── __init__.py      # require("./a"), require("../__init__.py")
    │       └── a.py
    └── site-packages/
        └── custommodule/
            ├── manifest.json    # {"main": "lib/main"}
            └── lib/main.py      # require("custommodule")
    ```

Resolution order for require(name):

    - Provided modules (bfs.provide) win over everything
    - Bare names: host import, then ./site-packages/<name>
    - Relative names: as is, then with .py, then via <name>/manifest.json

Usage Example:

    ```python
    import asyncio
    from pathlib import Path

    from bfs import from_tar

    bfs = asyncio.run(from_tar(Path("bundle.tar").read_bytes()))
    bfs.basedir("modules")

    print(bfs.size(), "files")
    print(bfs.read_file("nested.py"))

    exported = bfs.require("./nested/deep/__init__.py")
    ```

Modules signal what they export by assigning ``exports``; otherwise the value
of a trailing expression, or the module object itself, is returned.
"""

from bfs.core import BFS, from_tar
from bfs.config import ResolverConfig
from bfs.errors import (
    BFSError,
    ArchiveError,
    NotFoundError,
    InvalidArgumentError,
    ManifestParseError,
    NativeLoadError,
    ExecutionError,
)
from bfs.logger import Logger
from bfs.paths import Specifier, SpecifierKind, classify
from bfs.reader import TarReader

__version__ = "0.1.0"
__all__ = [
    # Main entry point
    "BFS",
    "from_tar",
    # Collaborators
    "TarReader",
    "Logger",
    "ResolverConfig",
    # Specifiers
    "Specifier",
    "SpecifierKind",
    "classify",
    # Errors
    "BFSError",
    "ArchiveError",
    "NotFoundError",
    "InvalidArgumentError",
    "ManifestParseError",
    "NativeLoadError",
    "ExecutionError",
]
