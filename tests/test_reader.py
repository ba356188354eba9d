"""
Tests for TarReader.

Tests focus on:
- Parsing plain and compressed archives
- Directory and non-regular entries being skipped
- Repeated entries appending chunks
- Exact and pattern lookups with the base directory applied
"""

import asyncio
import io
import re
import tarfile

import pytest

from bfs.errors import ArchiveError, NotFoundError
from bfs.reader import TarReader
from conftest import make_tar


async def read_archive(data: bytes) -> TarReader:
    reader = TarReader(data)
    await reader.init()
    return reader


class TestInit:
    """Test archive parsing."""

    @pytest.mark.asyncio
    async def test_parses_regular_files(self):
        """
        Given: An archive with two files
        When: Initializing the reader
        Then: Both paths are stored in archive order
        """
        reader = await read_archive(make_tar({"a.txt": "A", "dir/b.txt": "B"}))

        assert reader.keys() == ["a.txt", "dir/b.txt"]

    @pytest.mark.asyncio
    async def test_skips_directory_entries(self):
        """
        Given: An archive containing directory entries
        When: Initializing the reader
        Then: Only files become keys
        """
        reader = await read_archive(make_tar({"dir/": None, "dir/file": "x"}))

        assert reader.keys() == ["dir/file"]

    @pytest.mark.asyncio
    async def test_skips_symlinks(self):
        """
        Given: An archive with a symlink entry
        When: Initializing the reader
        Then: The symlink is not stored
        """
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w") as archive:
            info = tarfile.TarInfo("link")
            info.type = tarfile.SYMTYPE
            info.linkname = "target"
            archive.addfile(info)
            data = b"content"
            info = tarfile.TarInfo("target")
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))

        reader = await read_archive(buf.getvalue())

        assert reader.keys() == ["target"]

    @pytest.mark.asyncio
    async def test_repeated_entries_append(self):
        """
        Given: An archive where the same path appears twice
        When: Reading that path
        Then: Both chunks are concatenated in archive order
        """
        reader = await read_archive(make_tar([("dup", "ab"), ("dup", "cd")]))

        assert reader.keys() == ["dup"]
        assert reader.read("dup") == ["abcd"]

    @pytest.mark.asyncio
    async def test_empty_file_is_skipped(self):
        """
        Given: An archive with a zero-length file
        When: Initializing the reader
        Then: The file is not stored and reading it raises NotFoundError
        """
        reader = await read_archive(make_tar({"empty": "", "min": "test"}))

        assert reader.keys() == ["min"]
        with pytest.raises(NotFoundError):
            reader.read("empty")

    @pytest.mark.asyncio
    async def test_empty_repeat_adds_nothing(self):
        reader = await read_archive(make_tar([("dup", "ab"), ("dup", "")]))

        assert reader.read("dup") == ["ab"]

    @pytest.mark.asyncio
    async def test_binary_entry_decodes_with_replacement(self):
        """
        Given: An entry that is not valid UTF-8
        When: Reading it directly or through a pattern
        Then: Invalid bytes become U+FFFD instead of failing the read
        """
        reader = await read_archive(make_tar({"min": "test", "logo.png": b"\x89PNG\r\n\x1a\n\xff\xfe"}))

        assert reader.read("logo.png") == ["\ufffdPNG\r\n\x1a\n\ufffd\ufffd"]
        assert reader.read(re.compile(".*")) == ["test", "\ufffdPNG\r\n\x1a\n\ufffd\ufffd"]

    @pytest.mark.asyncio
    async def test_gzip_archive(self):
        """
        Given: A gzip-compressed tar archive
        When: Initializing the reader
        Then: Files are readable
        """
        reader = await read_archive(make_tar({"min": "test"}, mode="w:gz"))

        assert reader.read("min") == ["test"]

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self):
        """
        Given: An initialized reader
        When: Calling init again
        Then: Contents are unchanged
        """
        reader = await read_archive(make_tar({"min": "test"}))
        await reader.init()

        assert reader.keys() == ["min"]
        assert reader.read("min") == ["test"]

    @pytest.mark.asyncio
    async def test_garbage_raises_archive_error(self):
        """
        Given: Bytes that are not a tar archive
        When: Initializing the reader
        Then: ArchiveError is raised
        """
        with pytest.raises(ArchiveError):
            await read_archive(b"definitely not a tar archive")


class TestRead:
    """Test lookups."""

    @pytest.fixture
    def reader(self):
        reader = TarReader(make_tar({
            "min": "test",
            "pkg/a.py": "A",
            "pkg/b.py": "B",
            "pkg/data.json": "{}",
        }))
        asyncio.run(reader.init())
        return reader

    def test_exact_path(self, reader):
        assert reader.read("pkg/a.py") == ["A"]

    def test_leading_dot_slash_is_stripped(self, reader):
        """
        Given: A path with repeated leading ./ segments
        When: Reading it
        Then: The segments are ignored
        """
        assert reader.read("././pkg/a.py") == ["A"]

    def test_basedir_is_joined(self, reader):
        """
        Given: A base directory
        When: Reading a relative path
        Then: The path is looked up beneath the base directory
        """
        reader.basedir = "./pkg"

        assert reader.read("./b.py") == ["B"]
        assert reader.read("../min") == ["test"]

    def test_pattern_collects_all_matches(self, reader):
        """
        Given: A pattern matching several paths
        When: Reading it
        Then: Every match is returned in archive order
        """
        assert reader.read(re.compile(r"\.py$")) == ["A", "B"]

    def test_pattern_ignores_basedir(self, reader):
        reader.basedir = "./pkg"

        assert reader.read(re.compile("^min$")) == ["test"]

    def test_missing_path_raises(self, reader):
        """
        Given: A path that isn't in the archive
        When: Reading it
        Then: NotFoundError names the lookup key
        """
        reader.basedir = "./pkg"

        with pytest.raises(NotFoundError, match="ENOENT: pkg/missing.py") as exc_info:
            reader.read("./missing.py")

        assert exc_info.value.path == "pkg/missing.py"

    def test_unmatched_pattern_raises(self, reader):
        with pytest.raises(NotFoundError):
            reader.read(re.compile(r"\.txt$"))

    def test_keys_with_pattern(self, reader):
        assert reader.keys(re.compile("^pkg/")) == ["pkg/a.py", "pkg/b.py", "pkg/data.json"]
