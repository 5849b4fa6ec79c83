"""Template-relative to target-relative path translation."""

from __future__ import annotations

from pathlib import PurePath

from actorwrap.errors import MissingBindingError

from .bindings import BindingMap, resolve_segment


def translate(template_relative_path: str | PurePath, bindings: BindingMap) -> PurePath:
    """Rewrite a template-relative path by resolving each segment.

    Segments are resolved independently; file extensions and the template
    marker are left alone.

    Raises:
        MissingBindingError: If any placeholder segment is unbound.  The
            error carries the template-relative path.
    """
    rel = PurePath(template_relative_path)
    try:
        parts = [resolve_segment(part, bindings) for part in rel.parts]
    except MissingBindingError as exc:
        raise MissingBindingError(exc.name, template_path=rel) from None
    return PurePath(*parts) if parts else PurePath()
