"""Placeholder removal.

Scaffold files carry placeholder comments (``//= SOMETHING``) that mark where
optional code may be injected.  Once a generation run has injected what it
needs, every remaining placeholder line is deleted.  Empty class attributes
left behind by template rendering are stripped at the same time.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from megagen.editor.lines import edit_file
from megagen.utils import print_warning

EMPTY_CLASS_ATTRIBUTES: tuple[str, ...] = (' class=""', ' className=""')


def _strip_line(line: str, marker: str) -> str | None:
    if marker in line:
        return None
    for attribute in EMPTY_CLASS_ATTRIBUTES:
        if attribute in line:
            line = line.replace(attribute, "")
    return line


async def strip_marked(path: str | Path, marker: str) -> bool:
    """Delete every line of *path* containing *marker*.

    Surviving lines lose any empty ``class=""`` / ``className=""``
    attribute.  The file is not touched when nothing matches.

    Returns:
        ``True`` if the file was rewritten.
    """
    if not marker:
        raise ValueError("marker must be a non-empty string")
    return await edit_file(path, lambda line: _strip_line(line, marker))


def _walk_files(root: Path) -> list[Path]:
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {root}")
    return sorted(p for p in root.rglob("*") if p.is_file() and not p.is_symlink())


async def strip_tree(root: str | Path, marker: str = "//=") -> list[Path]:
    """Strip *marker* lines from every text file under *root*.

    Files that are not valid UTF-8 (images, fonts) are skipped with a
    warning.

    Returns:
        The text files that were visited.
    """
    files = await asyncio.to_thread(_walk_files, Path(root))
    visited: list[Path] = []
    for path in files:
        try:
            await strip_marked(path, marker)
        except UnicodeDecodeError:
            print_warning(f"Skipping binary file: {path}")
            continue
        visited.append(path)
    return visited
