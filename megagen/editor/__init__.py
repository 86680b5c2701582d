"""Line-oriented editors for scaffold files.

Quick usage::

    from megagen.editor import InjectOptions, inject, strip_marked

    await inject(app_js, "PASSPORT_REQUIRE", "modules/passport/require.js",
                 InjectOptions(indent_level=1))
    await strip_marked(app_js, "//=")
"""

from megagen.editor.inject import InjectOptions, build_block, indent_code, inject
from megagen.editor.lines import edit_file, edit_lines, load_lines, save_lines
from megagen.editor.strip import strip_marked, strip_tree

__all__ = [
    "InjectOptions",
    "build_block",
    "edit_file",
    "edit_lines",
    "indent_code",
    "inject",
    "load_lines",
    "save_lines",
    "strip_marked",
    "strip_tree",
]
