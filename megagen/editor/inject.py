"""Code injection at placeholder lines.

A placeholder is a token at the end of a line (``//= PASSPORT_REQUIRE``).
:func:`inject` swaps every such line for the contents of a source file,
optionally indented and preceded by a blank line.  Lines carrying the
preserve-whitespace token are emptied instead, so the blank line they stand
for survives the later placeholder stripping pass.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field

from megagen.editor.lines import edit_lines, load_lines, save_lines
from megagen.utils import read_text

DEFAULT_PRESERVE_TOKEN = "//_"


class InjectOptions(BaseModel):
    """How injected code is laid out."""

    indent_level: int = Field(default=0, ge=0, description="Indent levels of indent_width spaces")
    indent_spaces: int = Field(default=0, ge=0, description="Extra leading spaces")
    indent_width: int = Field(default=2, ge=1)
    leading_blank_line: bool = Field(default=False)
    anchored: bool = Field(
        default=False,
        description="Require the token to start the line as well as end it",
    )


def _indent(text: str, prefix: str, preserve_blank_lines: bool) -> str:
    lines = text.split("\n")
    if preserve_blank_lines:
        return "\n".join(prefix + line if line.strip() else line for line in lines)
    # Legacy layout: empty lines disappear from indented code.
    return "\n".join(prefix + line for line in lines if line)


def indent_code(
    text: str,
    *,
    indent_level: int = 0,
    indent_spaces: int = 0,
    indent_width: int = 2,
    preserve_blank_lines: bool = True,
) -> str:
    """Indent every non-blank line of *text*.

    ``indent_level`` and ``indent_spaces`` are applied one after the other,
    so setting both adds ``indent_level * indent_width + indent_spaces``
    spaces.
    """
    if indent_level:
        text = _indent(text, " " * (indent_level * indent_width), preserve_blank_lines)
    if indent_spaces:
        text = _indent(text, " " * indent_spaces, preserve_blank_lines)
    return text


def build_block(
    source: str,
    options: InjectOptions,
    *,
    preserve_blank_lines: bool = True,
) -> str:
    """Lay out *source* the way it replaces a placeholder line."""
    block = indent_code(
        source,
        indent_level=options.indent_level,
        indent_spaces=options.indent_spaces,
        indent_width=options.indent_width,
        preserve_blank_lines=preserve_blank_lines,
    )
    lines = block.split("\n")
    if lines[-1] == "":
        block = "\n".join(lines[:-1])
    if options.leading_blank_line:
        block = "\n" + block
    return block


def placeholder_pattern(token: str, anchored: bool = False) -> re.Pattern[str]:
    """Match *token* at the end of a line, ignoring a trailing line ending."""
    start = "^" if anchored else ""
    return re.compile(start + re.escape(token) + r"(\r\n|\r|\n)?$")


async def inject(
    target_path: str | Path,
    token: str,
    source_path: str | Path,
    options: InjectOptions | None = None,
    *,
    preserve_token: str = DEFAULT_PRESERVE_TOKEN,
    preserve_blank_lines: bool = True,
) -> int:
    """Replace every line of *target_path* ending in *token* with *source_path*.

    Args:
        target_path: File edited in place.
        token: Literal placeholder text.
        source_path: File whose full contents are spliced in.
        options: Indentation and blank-line layout.
        preserve_token: Lines containing it are emptied rather than removed.
        preserve_blank_lines: Keep blank lines of the source when indenting.

    Returns:
        The number of placeholder lines replaced.

    Raises:
        FileNotFoundError: If either file is missing.
    """
    if not token:
        raise ValueError("token must be a non-empty string")
    options = options or InjectOptions()

    # Both files are read before anything is written.
    original = await load_lines(target_path)
    source = await read_text(source_path)

    block = build_block(source, options, preserve_blank_lines=preserve_blank_lines)
    pattern = placeholder_pattern(token, options.anchored)
    replaced = 0

    def _transform(line: str) -> str:
        nonlocal replaced
        if pattern.search(line):
            replaced += 1
            return block
        if preserve_token and preserve_token in line:
            return ""
        return line

    edited = edit_lines(original, _transform)
    if edited != original:
        await save_lines(target_path, edited)
    return replaced
