"""Shared fixtures: tar archives built in memory."""

import asyncio
import io
import tarfile
from typing import Dict, Iterable, Tuple, Union

import pytest

from bfs import BFS, from_tar

Entry = Tuple[str, Union[str, bytes, None]]


def make_tar(entries: Union[Dict[str, Union[str, bytes, None]], Iterable[Entry]], mode: str = "w") -> bytes:
    """Build a tar archive in memory.

    Args:
        entries: Path -> content. ``None`` content adds a directory entry.
            An iterable of pairs may repeat a path.
        mode: tarfile write mode, e.g. ``w`` or ``w:gz``

    Returns:
        Archive bytes
    """
    if isinstance(entries, dict):
        entries = entries.items()

    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode=mode) as archive:
        for name, content in entries:
            info = tarfile.TarInfo(name)
            if content is None:
                info.type = tarfile.DIRTYPE
                archive.addfile(info)
                continue
            data = content.encode("utf-8") if isinstance(content, str) else content
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def load(entries, **kwargs) -> BFS:
    """Build a BFS from archive entries."""
    return asyncio.run(from_tar(make_tar(entries), **kwargs))


MODULES = {
    "modules/": None,
    "modules/__init__.py": '"donkey"\n',
    "modules/nested.py": 'exports = "nested"\n',
    "modules/nested/": None,
    "modules/nested/__init__.py": 'exports = "nested"\n',
    "modules/nested/deep/": None,
    "modules/nested/deep/__init__.py": (
        "exports = {\n"
        '    "deepModule": require("./a"),\n'
        '    "nestedModule": require("../__init__.py"),\n'
        "}\n"
    ),
    "modules/nested/deep/a.py": 'exports = ["a"]\n',
    "modules/site-packages/custommodule/manifest.json": '{"main": "lib/main"}\n',
    "modules/site-packages/custommodule/lib/main.py": 'exports = "required from site-packages!"\n',
}


@pytest.fixture
def modules_tar() -> bytes:
    """Archive laid out like a small project with nested packages."""
    return make_tar(MODULES)


@pytest.fixture
def modules_bfs(modules_tar) -> BFS:
    """BFS over the modules archive, rooted at ``modules``."""
    bfs = asyncio.run(from_tar(modules_tar))
    bfs.basedir("modules")
    return bfs
