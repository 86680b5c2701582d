"""Per-session build directories.

Every generation run gets its own directory under
``<base_dir>/<build_dir>/<session_id>``.  Scaffold files are copied in,
edited in place, and the result is either zipped for download or deleted.
"""

from __future__ import annotations

import asyncio
import errno
import io
import shutil
import uuid
import zipfile
from collections.abc import AsyncIterator, Iterable
from pathlib import Path

from megagen.config import Config
from megagen.utils import ensure_dir, print_info

ZIP_CHUNK_SIZE = 64 * 1024


class ArchiveError(Exception):
    """Raised when a zip archive cannot be produced."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


def generate_session_id() -> str:
    """Return a new unique session id (12 hex characters)."""
    return uuid.uuid4().hex[:12]


async def exists(path: str | Path) -> bool:
    """Return ``False`` only when *path* does not exist.

    Other ``stat`` failures (permissions, I/O errors) propagate.
    """
    try:
        await asyncio.to_thread(Path(path).stat)
    except FileNotFoundError:
        return False
    except OSError as exc:
        if exc.errno == errno.ENOTDIR:
            return False
        raise
    return True


# ---------------------------------------------------------------------------
# Archive helpers
# ---------------------------------------------------------------------------


def _zip_files(files: Iterable[Path]) -> bytes:
    buffer = io.BytesIO()
    seen: set[str] = set()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for path in files:
            if path.name in seen:
                raise ArchiveError(f"Duplicate archive entry {path.name!r} from {path}", path)
            seen.add(path.name)
            try:
                zf.write(path, arcname=path.name)
            except OSError as exc:
                raise ArchiveError(f"Cannot add {path} to archive: {exc.strerror or exc}", path) from exc
    return buffer.getvalue()


async def build_zip(files: Iterable[str | Path]) -> bytes:
    """Zip *files* into memory, each stored under its basename.

    Raises:
        ArchiveError: If a file cannot be read, two files share a basename,
            or the archive fails.
    """
    paths = [Path(f) for f in files]
    try:
        return await asyncio.to_thread(_zip_files, paths)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
        raise ArchiveError(str(exc)) from exc


async def iter_chunks(data: bytes, chunk_size: int = ZIP_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield *data* in slices of at most *chunk_size* bytes."""
    for offset in range(0, len(data), chunk_size):
        yield data[offset : offset + chunk_size]


async def iter_zip(
    files: Iterable[str | Path],
    chunk_size: int = ZIP_CHUNK_SIZE,
) -> AsyncIterator[bytes]:
    """Yield the archive of *files* in chunks of *chunk_size* bytes.

    The archive is built before the first chunk, so an ``ArchiveError``
    surfaces on the first iteration.
    """
    data = await build_zip(files)
    async for chunk in iter_chunks(data, chunk_size):
        yield chunk


# ---------------------------------------------------------------------------
# SessionWorkspace
# ---------------------------------------------------------------------------


class SessionWorkspace:
    """Creates, fills, exports and removes session build directories."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def path(self, session_id: str) -> Path:
        return self.config.session_path(session_id)

    async def prepare(self, session_id: str | None = None) -> str:
        """Create an empty directory for *session_id* and return the id.

        A fresh id is generated when *session_id* is ``None``; an empty id is
        rejected like any other invalid one.  Any previous content of the
        directory is removed.
        """
        if session_id is None:
            session_id = generate_session_id()
        session_dir = self.path(session_id)
        await asyncio.to_thread(_remove_tree, session_dir)
        await asyncio.to_thread(ensure_dir, session_dir)
        print_info(f"Created {session_id}")
        return session_id

    async def cleanup(self, session_id: str) -> None:
        """Delete the session directory.  A missing directory is not an error."""
        await asyncio.to_thread(_remove_tree, self.path(session_id))

    async def copy_into(
        self,
        session_id: str,
        source: str | Path,
        dest: str | Path | None = None,
    ) -> Path:
        """Copy a scaffold file or directory into the session directory.

        Args:
            session_id: Target session.
            source: File or directory to copy.
            dest: Path relative to the session directory.  Defaults to the
                source's basename.

        Returns:
            The destination path.
        """
        src = Path(source)
        session_dir = self.path(session_id)
        target = session_dir / (dest if dest is not None else src.name)
        if not target.resolve().is_relative_to(session_dir.resolve()):
            raise ValueError(f"Destination escapes session directory: {dest}")
        await asyncio.to_thread(_copy, src, target)
        return target

    async def build_zip(self, files: Iterable[str | Path] | None = None) -> bytes:
        """Zip *files* (defaults to the configured export files)."""
        return await build_zip(files if files is not None else self.config.export_paths)


def _remove_tree(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def _copy(src: Path, target: Path) -> None:
    ensure_dir(target.parent)
    if src.is_dir():
        shutil.copytree(src, target, dirs_exist_ok=True)
    else:
        shutil.copy2(src, target)
