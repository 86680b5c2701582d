"""Unit tests for utility functions (megagen.utils).

Tests cover:
- read_text / write_text / append_text
- load_json / save_json formatting
- ensure_dir
- Rich output helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from megagen.utils import (
    append_text,
    ensure_dir,
    load_json,
    print_error,
    print_info,
    print_success,
    print_warning,
    read_text,
    save_json,
    write_text,
)


class TestTextIO:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_write_then_read(self, tmp_path: Path):
        path = tmp_path / "a.txt"
        await write_text(path, "héllo\n")
        assert await read_text(path) == "héllo\n"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_newlines_untranslated(self, tmp_path: Path):
        path = tmp_path / "crlf.txt"
        await write_text(path, "a\r\nb\n")
        assert path.read_bytes() == b"a\r\nb\n"
        assert await read_text(path) == "a\r\nb\n"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_append_creates_and_appends(self, tmp_path: Path):
        path = tmp_path / "log.txt"
        await append_text(path, "one\n")
        await append_text(path, "two\n")
        assert path.read_text(encoding="utf-8") == "one\ntwo\n"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_read_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "bin"
        path.write_bytes(b"\xff\xfe")
        with pytest.raises(UnicodeDecodeError):
            await read_text(path)


class TestJsonIO:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_format(self, tmp_path: Path):
        path = tmp_path / "data.json"
        await save_json({"b": 1, "a": [1, 2]}, path)
        assert path.read_text(encoding="utf-8") == (
            '{\n  "b": 1,\n  "a": [\n    1,\n    2\n  ]\n}\n'
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_load(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"x": "ü"}), encoding="utf-8")
        assert await load_json(path) == {"x": "ü"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_load_invalid(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            await load_json(path)


class TestEnsureDir:
    @pytest.mark.unit
    def test_creates_nested(self, tmp_path: Path):
        result = ensure_dir(tmp_path / "a" / "b")
        assert result.is_dir()
        assert result == (tmp_path / "a" / "b").resolve()

    @pytest.mark.unit
    def test_existing_ok(self, tmp_path: Path):
        assert ensure_dir(tmp_path) == tmp_path.resolve()


class TestOutputHelpers:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("func", "style"),
        [
            (print_success, "green"),
            (print_error, "red"),
            (print_warning, "yellow"),
            (print_info, "cyan"),
        ],
    )
    def test_styles(self, func, style: str):
        with patch("megagen.utils.console") as console:
            func("message")
        printed = console.print.call_args[0][0]
        assert "message" in printed
        assert style in printed
