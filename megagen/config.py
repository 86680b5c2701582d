"""megagen configuration.

Centralised, typed configuration for the boilerplate generator.  Every
component receives a ``Config`` explicitly instead of reading a process-wide
base path, so tests and callers can point a whole generation run at any
directory.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


DEFAULT_EXPORT_FILES: list[str] = [
    "modules/express/app.js",
    "modules/express/package.json",
]


class Config(BaseModel):
    """Global megagen configuration.

    Instances are typically created once by the CLI or the download app and
    then passed to ``SessionWorkspace`` and the editors.
    """

    base_dir: Path = Field(default=Path("."))
    build_dir: str = Field(default="build")
    placeholder_marker: str = Field(default="//=", min_length=1)
    preserve_token: str = Field(default="//_", min_length=1)
    indent_width: int = Field(default=2, ge=1, description="Spaces per indent level")
    preserve_blank_lines: bool = Field(
        default=True,
        description="Keep blank lines of injected code when indenting it",
    )
    zip_name: str = Field(default="megaboilerplate-express.zip")
    export_files: list[str] = Field(default_factory=lambda: list(DEFAULT_EXPORT_FILES))
    dependency_versions_path: Path | None = Field(default=None)

    @field_validator("build_dir")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        if (
            not value
            or value in (".", "..")
            or "/" in value
            or "\\" in value
        ):
            raise ValueError(f"build_dir must be a single directory name, got {value!r}")
        return value

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def build_path(self) -> Path:
        """Directory holding every session directory."""
        return self.base_dir / self.build_dir

    def session_path(self, session_id: str) -> Path:
        """Build directory owned by *session_id*."""
        return self.build_path / validate_session_id(session_id)

    def manifest_path(self, session_id: str) -> Path:
        return self.session_path(session_id) / "package.json"

    def env_path(self, session_id: str) -> Path:
        return self.session_path(session_id) / ".env"

    @property
    def export_paths(self) -> list[Path]:
        """Files shipped by the download endpoint, resolved against ``base_dir``."""
        return [self.base_dir / name for name in self.export_files]

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration as JSON, or YAML for ``.yaml``/``.yml``."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.suffix in (".yaml", ".yml"):
            target.write_text(
                yaml.safe_dump(self.model_dump(mode="json"), sort_keys=False),
                encoding="utf-8",
            )
        else:
            target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration file written by :meth:`save`."""
        source = Path(path)
        raw = source.read_text(encoding="utf-8")
        if source.suffix in (".yaml", ".yml"):
            return cls.model_validate(yaml.safe_load(raw) or {})
        return cls.model_validate(json.loads(raw))

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            MEGAGEN_BASE_DIR, MEGAGEN_BUILD_DIR, MEGAGEN_ZIP_NAME,
            MEGAGEN_VERSIONS, MEGAGEN_PRESERVE_BLANK_LINES.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("MEGAGEN_BASE_DIR"):
            kwargs["base_dir"] = Path(os.environ["MEGAGEN_BASE_DIR"])
        if os.environ.get("MEGAGEN_BUILD_DIR"):
            kwargs["build_dir"] = os.environ["MEGAGEN_BUILD_DIR"]
        if os.environ.get("MEGAGEN_ZIP_NAME"):
            kwargs["zip_name"] = os.environ["MEGAGEN_ZIP_NAME"]
        if os.environ.get("MEGAGEN_VERSIONS"):
            kwargs["dependency_versions_path"] = Path(os.environ["MEGAGEN_VERSIONS"])
        if os.environ.get("MEGAGEN_PRESERVE_BLANK_LINES"):
            flag = os.environ["MEGAGEN_PRESERVE_BLANK_LINES"].strip().lower()
            kwargs["preserve_blank_lines"] = flag not in ("0", "false", "no", "off")
        return cls(**kwargs)


def validate_session_id(session_id: str) -> str:
    """Reject ids that would escape the build directory."""
    if (
        not session_id
        or session_id in (".", "..")
        or "/" in session_id
        or "\\" in session_id
    ):
        raise ValueError(f"Invalid session id: {session_id!r}")
    return session_id
