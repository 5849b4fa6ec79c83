"""Placeholder segments and binding resolution.

A path segment is a placeholder only when a single pair of braces spans the
whole segment (``{projectFolder}``).  Everything else is a literal, including
``{}``, ``{a}{b}`` and ``prefix{a}``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePath
from types import MappingProxyType
from typing import Union

from actorwrap.errors import MissingBindingError

BindingMap = Mapping[str, str]

_PLACEHOLDER_RE = re.compile(r"^\{([^{}]+)\}$")


@dataclass(frozen=True)
class Literal:
    """A path segment copied to the target unchanged."""

    text: str


@dataclass(frozen=True)
class Placeholder:
    """A path segment replaced by the value bound to ``name``."""

    name: str


Segment = Union[Literal, Placeholder]


def parse_segment(segment: str) -> Segment:
    """Classify a single path segment as a literal or a placeholder."""
    match = _PLACEHOLDER_RE.match(segment)
    if match:
        return Placeholder(match.group(1))
    return Literal(segment)


def resolve_segment(segment: str, bindings: BindingMap) -> str:
    """Resolve one path segment against *bindings*.

    Literal segments are returned unchanged.  A placeholder whose name is
    missing, or bound to an empty string, raises ``MissingBindingError``.
    """
    parsed = parse_segment(segment)
    if isinstance(parsed, Literal):
        return parsed.text
    value = bindings.get(parsed.name)
    if not value:
        raise MissingBindingError(parsed.name)
    return value


def freeze_bindings(bindings: Mapping[str, str]) -> BindingMap:
    """Return a read-only copy of *bindings* for the duration of a merge."""
    return MappingProxyType(dict(bindings))


def find_placeholders(relative_path: str | PurePath) -> list[str]:
    """Return placeholder names used by *relative_path*, in path order."""
    names: list[str] = []
    for part in PurePath(relative_path).parts:
        parsed = parse_segment(part)
        if isinstance(parsed, Placeholder):
            names.append(parsed.name)
    return names


def _iter_relative_paths(template_root: Path) -> Iterator[PurePath]:
    for dirpath, dirnames, filenames in os.walk(template_root):
        dirnames.sort()
        base = Path(dirpath)
        for name in dirnames + sorted(filenames):
            yield (base / name).relative_to(template_root)


def collect_placeholders(template_root: str | Path) -> set[str]:
    """Return every placeholder name appearing in the template tree's paths."""
    names: set[str] = set()
    for rel in _iter_relative_paths(Path(template_root)):
        names.update(find_placeholders(rel))
    return names


def check_bindings(template_root: str | Path, bindings: BindingMap) -> None:
    """Fail before any write if a path placeholder in the tree is unbound.

    Raises:
        MissingBindingError: For the first unbound placeholder, carrying the
            template-relative path where it appears.
    """
    for rel in _iter_relative_paths(Path(template_root)):
        for name in find_placeholders(rel):
            if not bindings.get(name):
                raise MissingBindingError(name, template_path=rel)
