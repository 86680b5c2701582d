"""Line-oriented file editing.

A file is loaded as a list of lines (split on ``\\n``), every line is mapped
to a decision and the surviving lines are joined back with ``\\n``.  A
transform returns the new text for a line, or ``None`` to delete it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from megagen.utils import read_text, write_text

LineTransform = Callable[[str], str | None]


async def load_lines(path: str | Path) -> list[str]:
    """Return the lines of *path*, without the ``\\n`` separators."""
    return (await read_text(path)).split("\n")


async def save_lines(path: str | Path, lines: Iterable[str]) -> None:
    """Overwrite *path* with *lines* joined by ``\\n``."""
    await write_text(path, "\n".join(lines))


def edit_lines(lines: Iterable[str], transform: LineTransform) -> list[str]:
    """Apply *transform* to every line and materialise the result.

    Each decision is taken on the original line, so deleting a line never
    changes what later lines are matched against.
    """
    result: list[str] = []
    for line in lines:
        decision = transform(line)
        if decision is not None:
            result.append(decision)
    return result


async def edit_file(path: str | Path, transform: LineTransform) -> bool:
    """Run :func:`edit_lines` over *path* in place.

    The file is only rewritten when the transform changed something.

    Returns:
        ``True`` if the file was written.
    """
    original = await load_lines(path)
    edited = edit_lines(original, transform)
    if edited == original:
        return False
    await save_lines(path, edited)
    return True
