"""Shared pytest fixtures for the megagen test suite.

Provides reusable fixtures for:
- A ``Config`` rooted in a temporary directory
- A ``SessionWorkspace`` with a prepared session
- Sample ``package.json`` manifests and version tables
- Scaffold files with placeholder markers
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any

import pytest

from megagen.config import Config
from megagen.workspace import SessionWorkspace


# ---------------------------------------------------------------------------
# Configuration & workspace
# ---------------------------------------------------------------------------


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config whose base directory is a fresh temp dir."""
    return Config(base_dir=tmp_path)


@pytest.fixture
def workspace(config: Config) -> SessionWorkspace:
    return SessionWorkspace(config)


@pytest.fixture
def session_dir(config: Config) -> Path:
    """An existing session directory for the id ``testing``."""
    path = config.session_path("testing")
    path.mkdir(parents=True)
    return path


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_manifest() -> dict[str, Any]:
    return {
        "name": "megaboilerplate",
        "version": "0.1.0",
        "scripts": {"start": "node server.js"},
        "dependencies": {
            "express": "^4.13.4",
            "body-parser": "^1.15.1",
        },
    }


@pytest.fixture
def manifest_path(session_dir: Path, sample_manifest: dict[str, Any]) -> Path:
    path = session_dir / "package.json"
    path.write_text(json.dumps(sample_manifest, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def versions_path(tmp_path: Path) -> Path:
    path = tmp_path / "npm_dependencies.json"
    path.write_text(
        json.dumps(
            {
                "mongoose": "^4.4.8",
                "passport": "^0.3.2",
                "nodemon": "^1.9.1",
                "dotenv": "^2.0.0",
            }
        ),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Scaffold files
# ---------------------------------------------------------------------------


@pytest.fixture
def app_js(session_dir: Path) -> Path:
    """An Express ``app.js`` scaffold with placeholder markers."""
    path = session_dir / "app.js"
    path.write_text(
        textwrap.dedent(
            """\
            var express = require('express');
            //= DATABASE_REQUIRE
            var app = express();
            //_
            //= DATABASE_CONNECT
            app.listen(3000);
            """
        ),
        encoding="utf-8",
    )
    return path
