"""``.env`` file writer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from megagen.utils import append_text


def _env_value(value: Any) -> str:
    # same text as JavaScript's String() for booleans and null
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_env_block(data: dict[str, Any]) -> str:
    """Format *data* as a blank-line framed block of ``KEY='value'`` lines.

    Values are quoted verbatim; embedded single quotes are not escaped.
    ``True``/``False``/``None`` become ``true``/``false``/``null``.
    """
    lines = [f"{key}='{_env_value(value)}'" for key, value in data.items()]
    return "\n" + "\n".join(lines) + "\n"


async def add_env(env_path: str | Path, data: dict[str, Any]) -> None:
    """Append *data* to the ``.env`` file at *env_path*."""
    await append_text(env_path, format_env_block(data))
