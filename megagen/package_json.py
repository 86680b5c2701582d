"""``package.json`` editing.

Adds npm dependencies and scripts to the manifest of a generated project.
Dependency maps are kept in alphabetical order, the way ``npm install``
leaves them.  Versions come from a lookup table (package name -> version
string) kept as JSON next to the scaffolds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from megagen.utils import load_json, save_json


class SchemaError(ValueError):
    """Raised when a manifest lacks a map an edit relies on."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class UnknownPackageError(KeyError):
    """Raised when a package has no entry in the version table."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"No version known for npm package '{self.name}'"


# ---------------------------------------------------------------------------
# Version table
# ---------------------------------------------------------------------------


async def load_dependency_versions(path: str | Path) -> dict[str, str]:
    """Load a ``{package: version}`` table from JSON."""
    data = await load_json(path)
    if not isinstance(data, dict):
        raise SchemaError("Dependency version table must be a JSON object", Path(path))
    return {str(name): str(version) for name, version in data.items()}


def resolve_version(versions: dict[str, str], name: str) -> str:
    """Return the version pinned for *name*.

    Raises:
        UnknownPackageError: If *name* is not in the table.
    """
    try:
        return versions[name]
    except KeyError:
        raise UnknownPackageError(name) from None


# ---------------------------------------------------------------------------
# Manifest edits
# ---------------------------------------------------------------------------


def sort_keys(mapping: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *mapping* with keys in ascending order."""
    return {key: mapping[key] for key in sorted(mapping)}


async def _load_manifest(path: Path) -> dict[str, Any]:
    manifest = await load_json(path)
    if not isinstance(manifest, dict):
        raise SchemaError("Manifest must be a JSON object", path)
    return manifest


async def add_dependency(
    manifest_path: str | Path,
    name: str,
    version: str,
    dev: bool = False,
) -> dict[str, Any]:
    """Insert or overwrite a dependency and re-sort the dependency maps.

    Args:
        manifest_path: Path to ``package.json``.
        name: npm package name.
        version: Version range written verbatim.
        dev: Add to ``devDependencies`` (created if missing) instead of
            ``dependencies``.

    Returns:
        The manifest as written.

    Raises:
        SchemaError: If ``dependencies`` is missing and ``dev`` is false.
    """
    path = Path(manifest_path)
    manifest = await _load_manifest(path)

    if dev:
        manifest.setdefault("devDependencies", {})[name] = version
    else:
        if not isinstance(manifest.get("dependencies"), dict):
            raise SchemaError(f"{path} has no 'dependencies' map", path)
        manifest["dependencies"][name] = version

    if isinstance(manifest.get("dependencies"), dict):
        manifest["dependencies"] = sort_keys(manifest["dependencies"])
    if isinstance(manifest.get("devDependencies"), dict):
        manifest["devDependencies"] = sort_keys(manifest["devDependencies"])

    await save_json(manifest, path)
    return manifest


async def add_npm_package(
    manifest_path: str | Path,
    name: str,
    versions: dict[str, str],
    dev: bool = False,
) -> dict[str, Any]:
    """Add *name* at the version pinned in *versions*."""
    version = resolve_version(versions, name)
    return await add_dependency(manifest_path, name, version, dev=dev)


async def add_script(
    manifest_path: str | Path,
    name: str,
    command: str,
) -> dict[str, Any]:
    """Insert or overwrite ``scripts[name]``.  Scripts keep their order."""
    path = Path(manifest_path)
    manifest = await _load_manifest(path)
    scripts = manifest.setdefault("scripts", {})
    if not isinstance(scripts, dict):
        raise SchemaError(f"{path} has a non-object 'scripts' entry", path)
    scripts[name] = command
    await save_json(manifest, path)
    return manifest
