"""Tests for the line editor (megagen.editor.lines).

Covers:
- load_lines / save_lines round trip and missing-file errors
- edit_lines keep / replace / delete decisions
- edit_file only writing when something changed
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from megagen.editor.lines import edit_file, edit_lines, load_lines, save_lines

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# load_lines / save_lines
# ---------------------------------------------------------------------------


class TestLoadSave:
    @pytest.mark.asyncio
    async def test_load_splits_on_newline(self, tmp_path: Path):
        path = tmp_path / "a.txt"
        path.write_text("one\ntwo\n", encoding="utf-8")
        assert await load_lines(path) == ["one", "two", ""]

    @pytest.mark.asyncio
    async def test_load_keeps_carriage_returns(self, tmp_path: Path):
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"one\r\ntwo")
        assert await load_lines(path) == ["one\r", "two"]

    @pytest.mark.asyncio
    async def test_save_joins_with_newline(self, tmp_path: Path):
        path = tmp_path / "out.txt"
        path.write_text("", encoding="utf-8")
        await save_lines(path, ["a", "b", "c"])
        assert path.read_bytes() == b"a\nb\nc"

    @pytest.mark.asyncio
    async def test_load_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            await load_lines(tmp_path / "missing.txt")

    @pytest.mark.asyncio
    async def test_save_into_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(OSError):
            await save_lines(tmp_path / "nope" / "out.txt", ["x"])


# ---------------------------------------------------------------------------
# edit_lines
# ---------------------------------------------------------------------------


class TestEditLines:
    def test_keep_all(self):
        assert edit_lines(["a", "b"], lambda line: line) == ["a", "b"]

    def test_delete_with_none(self):
        result = edit_lines(["a", "drop", "b", "drop"], lambda l: None if l == "drop" else l)
        assert result == ["a", "b"]

    def test_replace(self):
        assert edit_lines(["a", "b"], str.upper) == ["A", "B"]

    def test_decisions_use_original_lines(self):
        seen: list[str] = []

        def transform(line: str) -> str | None:
            seen.append(line)
            return None if line.startswith("x") else line

        edit_lines(["x1", "y", "x2", "z"], transform)
        assert seen == ["x1", "y", "x2", "z"]

    def test_empty_input(self):
        assert edit_lines([], lambda line: line) == []


# ---------------------------------------------------------------------------
# edit_file
# ---------------------------------------------------------------------------


class TestEditFile:
    @pytest.mark.asyncio
    async def test_writes_changes(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("keep\ndrop\nkeep", encoding="utf-8")
        changed = await edit_file(path, lambda l: None if l == "drop" else l)
        assert changed is True
        assert path.read_text(encoding="utf-8") == "keep\nkeep"

    @pytest.mark.asyncio
    async def test_unchanged_file_not_rewritten(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("a\nb", encoding="utf-8")
        os.utime(path, (1_000_000, 1_000_000))
        changed = await edit_file(path, lambda line: line)
        assert changed is False
        assert path.stat().st_mtime == 1_000_000
