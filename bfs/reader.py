"""Tar archive reader backing the buffered file system.

The archive is parsed once into a content map of entry path to data chunks.
After that every lookup is a scan over the in-memory keys; nothing touches
the disk.
"""

import asyncio
import io
import tarfile
from typing import Dict, List, Optional, Pattern, Union

from bfs.errors import ArchiveError, NotFoundError
from bfs.logger import Logger
from bfs.paths import join, strip_dot_prefix

Selector = Union[str, Pattern[str]]

CHUNK_SIZE = 64 * 1024


class TarReader:
    """Reads files out of an in-memory tar archive.

    Attributes:
        data: The raw archive buffer
        basedir: Base directory prepended to string lookups ("" when unset)
    """

    def __init__(self, data: bytes, logger: Optional[Logger] = None):
        self.data = data
        self.basedir = ""
        self.logger = logger or Logger()
        self._contents: Dict[str, List[bytes]] = {}
        self._initialized = False

    async def init(self) -> None:
        """Parse the archive. Calling this more than once is a no-op."""
        if self._initialized:
            self.logger.debug("TarReader already initialized", {"files": len(self._contents)})
            return

        contents = await asyncio.to_thread(self._parse)
        if not self._initialized:
            self._contents = contents
            self._initialized = True

    def _parse(self) -> Dict[str, List[bytes]]:
        contents: Dict[str, List[bytes]] = {}
        try:
            with tarfile.open(fileobj=io.BytesIO(self.data), mode="r:*") as archive:
                for member in archive:
                    if member.isdir():
                        continue
                    if not member.isfile():
                        self.logger.debug("Skipping non-regular entry", {"name": member.name})
                        continue

                    stream = archive.extractfile(member)
                    chunks = []
                    while True:
                        chunk = stream.read(CHUNK_SIZE)
                        if not chunk:
                            break
                        chunks.append(chunk)
                    if not chunks:
                        self.logger.debug("Skipping empty entry", {"name": member.name})
                        continue
                    contents.setdefault(member.name, []).append(b"".join(chunks))
        except tarfile.TarError as e:
            self.logger.error("Failed to parse archive", {"exception": str(e)})
            raise ArchiveError(f"Failed to parse archive: {e}") from e

        self.logger.debug("Parsed archive", {"files": len(contents)})
        return contents

    def lookup_key(self, file: str) -> str:
        """Turn a string selector into the content map key it refers to."""
        if self.basedir:
            file = join(self.basedir, file)
        return strip_dot_prefix(file)

    def read(self, file: Selector) -> List[str]:
        """Read every file matching a path or pattern.

        Args:
            file: Exact path (joined onto the base directory) or compiled regex

        Returns:
            Decoded contents, one per matching entry, in archive order

        Raises:
            NotFoundError: If nothing matches
        """
        if isinstance(file, str):
            file = self.lookup_key(file)
        self.logger.debug("Reading file...", {"file": _describe(file)})

        contents = []
        for key, chunks in self._contents.items():
            if isinstance(file, str):
                if key != file:
                    continue
                contents.append(_decode(chunks))
                break
            if file.search(key):
                contents.append(_decode(chunks))

        self.logger.debug("Done reading file", {"file": _describe(file), "matches": len(contents)})
        if not contents:
            raise NotFoundError(_describe(file))
        return contents

    def keys(self, pattern: Optional[Pattern[str]] = None) -> List[str]:
        """List stored entry paths, optionally filtered by a regex."""
        if pattern is None:
            return list(self._contents)
        return [key for key in self._contents if pattern.search(key)]


def _decode(chunks: List[bytes]) -> str:
    # undecodable bytes become U+FFFD so binary entries never fail a read
    return b"".join(chunks).decode("utf-8", errors="replace")


def _describe(file: Selector) -> str:
    if isinstance(file, str):
        return file
    return file.pattern

