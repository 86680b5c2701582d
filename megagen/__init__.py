"""megagen -- boilerplate generation helpers.

Edits scaffold files copied into a per-session build directory: injects
code at placeholder lines, strips leftover placeholders, renders templates,
updates ``package.json`` and ``.env``, and zips the result.

Quick usage::

    from megagen import Config, SessionWorkspace
    from megagen.editor import inject, strip_tree

    workspace = SessionWorkspace(Config(base_dir=Path("/srv/megagen")))
    session_id = await workspace.prepare()
"""

from megagen.config import Config
from megagen.workspace import SessionWorkspace, generate_session_id

__all__ = [
    "Config",
    "SessionWorkspace",
    "generate_session_id",
]
