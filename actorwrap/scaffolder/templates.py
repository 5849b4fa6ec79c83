"""Jinja2 rendering for ``.template`` files.

Provides the TemplateRenderer class which loads template files from the
template root being merged and renders them with the binding map as context.
Template files use ``{{ name }}`` expressions for bound values.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path, PurePath
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template files found under a template root.

    Unbound expressions render as empty strings.  Output is never
    HTML-escaped and trailing newlines are kept so rendered source files stay
    byte-compatible with their templates.
    """

    def __init__(self, template_root: str | Path) -> None:
        self.template_root = Path(template_root)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_root)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, relative_path: str | PurePath, context: Mapping[str, Any]) -> str:
        """Render a single template file with the provided context.

        Args:
            relative_path: Path relative to the template root (e.g.
                ``"{projectFolder}/main.template.py"``).
            context: Variables available inside the template.

        Returns:
            The rendered content as a string.
        """
        template = self.env.get_template(PurePath(relative_path).as_posix())
        return template.render(**context)

    async def render_to_file(
        self,
        relative_path: str | PurePath,
        output_path: str | Path,
        context: Mapping[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        The parent directory must already exist; the merge creates
        directories before their children.
        """
        content = self.render(relative_path, context)
        out = Path(output_path)
        await asyncio.to_thread(out.write_text, content, encoding="utf-8")
        return out
