"""Shared utility functions for megagen.

Provides async text and JSON file I/O (run in worker threads so the event
loop never blocks on disk), directory helpers, and Rich-based console output.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from rich.console import Console

console = Console()

# ---------------------------------------------------------------------------
# Text I/O
# ---------------------------------------------------------------------------


def _read(path: Path) -> str:
    # newline="" keeps \r\n intact so line editors see the original endings
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def _write(path: Path, content: str, mode: str) -> None:
    with open(path, mode, encoding="utf-8", newline="") as fh:
        fh.write(content)


async def read_text(path: str | Path) -> str:
    """Read a whole UTF-8 file.

    Raises:
        FileNotFoundError: If the file does not exist.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    return await asyncio.to_thread(_read, Path(path))


async def write_text(path: str | Path, content: str) -> None:
    """Overwrite *path* with *content*.  The parent directory must exist."""
    await asyncio.to_thread(_write, Path(path), content, "w")


async def append_text(path: str | Path, content: str) -> None:
    """Append *content* to *path*, creating the file when missing."""
    await asyncio.to_thread(_write, Path(path), content, "a")


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


async def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    return json.loads(await read_text(path))


async def save_json(data: Any, path: str | Path) -> None:
    """Save data as JSON with 2-space indentation and a trailing newline."""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    await write_text(path, content)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    console.print(f"[cyan]{message}[/cyan]")
