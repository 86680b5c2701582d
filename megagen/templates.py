"""Jinja2 template rendering for scaffold files.

Provides the TemplateRenderer class which renders a scaffold file in place:
the file is read, rendered against a context dictionary, and overwritten
with the result.  Two delimiter styles are supported: the usual Jinja2
braces and an ERB/lodash style (``<%= name %>``, ``<% if x %>``) for
scaffolds whose sources already use curly braces heavily.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal

import jinja2
from jinja2 import Environment, StrictUndefined, Undefined

from megagen.utils import read_text, write_text

TemplateStyle = Literal["jinja", "erb"]

_ERB_DELIMITERS: dict[str, str] = {
    "variable_start_string": "<%=",
    "variable_end_string": "%>",
    "block_start_string": "<%",
    "block_end_string": "%>",
    "comment_start_string": "<%#",
    "comment_end_string": "%>",
}


class TemplateRenderError(Exception):
    """Raised when a template cannot be compiled or rendered."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        prefix = f"{path}: " if path is not None else ""
        super().__init__(f"{prefix}{message}")


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders scaffold files as Jinja2 templates.

    With ``strict=True`` (the default) a reference to a name missing from
    the context is an error.  With ``strict=False`` it renders as an empty
    string.
    """

    def __init__(self, style: TemplateStyle = "jinja", strict: bool = True) -> None:
        if style not in ("jinja", "erb"):
            raise ValueError(f"Unknown template style: {style!r}")
        self.style = style
        self.strict = strict
        delimiters = _ERB_DELIMITERS if style == "erb" else {}
        self.env = Environment(
            undefined=StrictUndefined if strict else Undefined,
            keep_trailing_newline=True,
            autoescape=False,
            **delimiters,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    def render_string(self, source: str, data: dict[str, Any]) -> str:
        """Render an inline template string with *data*.

        Raises:
            TemplateRenderError: On a syntax error or an undefined name.
        """
        try:
            template = self.env.from_string(source)
            return template.render(**data)
        except jinja2.TemplateError as exc:
            raise TemplateRenderError(_describe(exc)) from exc

    async def render_file(self, path: str | Path, data: dict[str, Any]) -> Path:
        """Render the file at *path* in place and return its path."""
        target = Path(path)
        source = await read_text(target)
        try:
            rendered = self.render_string(source, data)
        except TemplateRenderError as exc:
            raise TemplateRenderError(str(exc), path=target) from exc.__cause__
        await write_text(target, rendered)
        return target


def _describe(exc: jinja2.TemplateError) -> str:
    if isinstance(exc, jinja2.TemplateSyntaxError):
        return f"line {exc.lineno}: {exc.message}"
    return exc.message or type(exc).__name__


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
