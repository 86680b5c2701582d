"""megagen command-line interface.

Usage::

    megagen prepare                      # new session, prints its id
    megagen inject build/abc/app.js PASSPORT_REQUIRE modules/passport/require.js --indent-level 1
    megagen add-dep abc express
    megagen strip-tree abc
    megagen zip out.zip app.js package.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from megagen.config import Config
from megagen.editor import InjectOptions, inject, strip_marked, strip_tree
from megagen.env_file import add_env
from megagen.package_json import (
    SchemaError,
    UnknownPackageError,
    add_dependency,
    add_npm_package,
    add_script,
    load_dependency_versions,
)
from megagen.templates import TemplateRenderError, TemplateRenderer
from megagen.utils import console, print_error, print_success
from megagen.workspace import ArchiveError, SessionWorkspace, build_zip

CLI_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    ValueError,
    SchemaError,
    UnknownPackageError,
    TemplateRenderError,
    ArchiveError,
    ValidationError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="megagen",
        description="megagen -- boilerplate generation helpers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  megagen prepare\n"
            "  megagen add-dep <session> express\n"
            "  megagen add-env <session> SESSION_SECRET=changeme\n"
        ),
    )
    parser.add_argument("--config", default=None, help="JSON or YAML config file")
    parser.add_argument("--base-dir", default=None, help="Override the base directory")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("prepare", help="Create an empty session directory")
    p.add_argument("session_id", nargs="?", default=None)

    p = sub.add_parser("cleanup", help="Delete a session directory")
    p.add_argument("session_id")

    p = sub.add_parser("strip", help="Delete lines containing a marker")
    p.add_argument("path")
    p.add_argument("marker")

    p = sub.add_parser("strip-tree", help="Strip placeholder lines from a whole session")
    p.add_argument("session_id")

    p = sub.add_parser("inject", help="Replace placeholder lines with a file's contents")
    p.add_argument("target")
    p.add_argument("token")
    p.add_argument("source")
    p.add_argument("--indent-level", type=int, default=0)
    p.add_argument("--indent-spaces", type=int, default=0)
    p.add_argument("--leading-blank-line", action="store_true")
    p.add_argument(
        "--anchored",
        action="store_true",
        help="Require the token to start the line as well as end it",
    )

    p = sub.add_parser("render", help="Render a file in place as a template")
    p.add_argument("path")
    p.add_argument("--data", default="{}", help="JSON object with template variables")
    p.add_argument("--style", choices=["jinja", "erb"], default="jinja")

    p = sub.add_parser("add-dep", help="Add an npm dependency to package.json")
    p.add_argument("session_id")
    p.add_argument("name")
    p.add_argument("--dev", action="store_true")
    p.add_argument("--version", default=None, help="Version (default: from the version table)")

    p = sub.add_parser("add-script", help="Add an npm script to package.json")
    p.add_argument("session_id")
    p.add_argument("name")
    p.add_argument("script_command", metavar="command")

    p = sub.add_parser("add-env", help="Append KEY=VALUE pairs to .env")
    p.add_argument("session_id")
    p.add_argument("pairs", nargs="+", metavar="KEY=VALUE")

    p = sub.add_parser("zip", help="Zip files (stored under their basenames)")
    p.add_argument("output")
    p.add_argument("files", nargs="+")

    p = sub.add_parser("serve", help="Serve the download endpoint")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=23010)

    return parser


def load_config(args: argparse.Namespace) -> Config:
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    if args.base_dir:
        config = config.model_copy(update={"base_dir": Path(args.base_dir)})
    return config


def parse_pairs(pairs: list[str]) -> dict[str, str]:
    data: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got: {pair!r}")
        data[key] = value
    return data


async def run(args: argparse.Namespace, config: Config) -> None:
    """Execute one parsed command."""
    workspace = SessionWorkspace(config)
    command = args.command

    if command == "prepare":
        session_id = await workspace.prepare(args.session_id)
        console.print(session_id)
    elif command == "cleanup":
        await workspace.cleanup(args.session_id)
        print_success(f"Removed {args.session_id}")
    elif command == "strip":
        changed = await strip_marked(args.path, args.marker)
        print_success(f"{args.path}: {'updated' if changed else 'unchanged'}")
    elif command == "strip-tree":
        visited = await strip_tree(workspace.path(args.session_id), config.placeholder_marker)
        print_success(f"Stripped placeholders from {len(visited)} files")
    elif command == "inject":
        options = InjectOptions(
            indent_level=args.indent_level,
            indent_spaces=args.indent_spaces,
            indent_width=config.indent_width,
            leading_blank_line=args.leading_blank_line,
            anchored=args.anchored,
        )
        count = await inject(
            args.target,
            args.token,
            args.source,
            options,
            preserve_token=config.preserve_token,
            preserve_blank_lines=config.preserve_blank_lines,
        )
        print_success(f"Replaced {count} placeholder line(s) in {args.target}")
    elif command == "render":
        data: Any = json.loads(args.data)
        if not isinstance(data, dict):
            raise ValueError("--data must be a JSON object")
        await TemplateRenderer(style=args.style).render_file(args.path, data)
        print_success(f"Rendered {args.path}")
    elif command == "add-dep":
        manifest = config.manifest_path(args.session_id)
        if args.version:
            await add_dependency(manifest, args.name, args.version, dev=args.dev)
        else:
            if config.dependency_versions_path is None:
                raise ValueError("No version given and no dependency version table configured")
            versions = await load_dependency_versions(config.dependency_versions_path)
            await add_npm_package(manifest, args.name, versions, dev=args.dev)
        print_success(f"Added {args.name} to {manifest}")
    elif command == "add-script":
        await add_script(config.manifest_path(args.session_id), args.name, args.script_command)
        print_success(f"Added script {args.name}")
    elif command == "add-env":
        await add_env(config.env_path(args.session_id), parse_pairs(args.pairs))
        print_success(f"Updated {config.env_path(args.session_id)}")
    elif command == "zip":
        archive = await build_zip(args.files)
        await asyncio.to_thread(Path(args.output).write_bytes, archive)
        print_success(f"Archive wrote {len(archive)} bytes to {args.output}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``megagen`` / ``python -m megagen``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
        if args.command == "serve":
            import uvicorn

            from megagen.server import create_app

            uvicorn.run(create_app(config), host=args.host, port=args.port)
            return
        asyncio.run(run(args, config))
    except CLI_ERRORS as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
