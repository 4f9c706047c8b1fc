"""
Scoped temporary workspaces.

Each engine invocation gets its own directory. The directory is removed on
every exit path; removal errors are logged and swallowed so they never mask
the result or the original exception.
"""

import logging
import shutil
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "docverse-"


def safe_filename(filename: str, default: str = "document") -> str:
    """Strip directory parts and separators from a client-supplied name."""
    name = filename.replace("/", "_").replace("\\", "_").strip()
    name = name.lstrip(".")[:200]
    return name or default


class ScopedWorkspace:
    """A temp directory exclusively owned by one request."""

    def __init__(self, path: Path):
        self.path = path

    def file(self, name: str) -> Path:
        """Path for a file inside the workspace."""
        return self.path / safe_filename(name)

    def write(self, name: str, data: bytes) -> Path:
        target = self.file(name)
        target.write_bytes(data)
        return target

    def read(self, name: str) -> bytes:
        target = self.file(name)
        if not target.is_file():
            raise FileNotFoundError(f"Expected output not found: {target.name}")
        return target.read_bytes()

    def subdir(self, name: str) -> Path:
        target = self.path / safe_filename(name)
        target.mkdir(parents=True, exist_ok=True)
        return target


def _remove(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Failed to remove workspace %s: %s", path, e)


@asynccontextmanager
async def scoped_workspace(
    prefix: str = WORKSPACE_PREFIX,
    root: Optional[str] = None,
) -> AsyncIterator[ScopedWorkspace]:
    """
    Provision a workspace and guarantee its removal.

    Args:
        prefix: Directory name prefix
        root: Parent directory (system temp dir when None)
    """
    if root:
        Path(root).mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=root))
    logger.debug("Created workspace %s", path)
    try:
        yield ScopedWorkspace(path)
    finally:
        _remove(path)
