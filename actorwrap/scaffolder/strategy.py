"""Per-node merge strategy selection.

The decision is a pure function of the template node and whether something
already exists at the destination, so it can be tested without touching the
filesystem.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath

from actorwrap.config import DEFAULT_CONCATENABLE_FILES, DEFAULT_TEMPLATE_MARKER


class NodeKind(str, Enum):
    """Kind of a template tree entry.

    Attributes:
        FILE: A regular file.
        DIRECTORY: A real directory (symlinks to directories are OTHER).
        OTHER: Symlinks and special files. Always skipped.
    """

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


class MergeStrategy(str, Enum):
    """What the merge does with one template entry.

    Attributes:
        ENSURE_DIRECTORY: Create the target directory if it is missing.
        RENDER_TEMPLATE: Render a marked file and write it without the marker.
        APPEND_CONCAT: Append to an existing allow-listed file.
        COPY_OVERWRITE: Copy the file, replacing any existing target.
        SKIP: Leave the target alone and record the entry in the report.
    """

    ENSURE_DIRECTORY = "ensure-directory"
    RENDER_TEMPLATE = "render-template"
    APPEND_CONCAT = "append-concat"
    COPY_OVERWRITE = "copy-overwrite"
    SKIP = "skip"


@dataclass(frozen=True)
class TemplateNode:
    """One filesystem entry under the template root."""

    relative_path: PurePath
    source: Path
    kind: NodeKind

    @property
    def name(self) -> str:
        return self.relative_path.name

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass(frozen=True)
class MergePlanEntry:
    """The resolved decision for one template node."""

    node: TemplateNode
    target_path: Path
    strategy: MergeStrategy
    reason: str = ""


def is_template(name: str, marker: str = DEFAULT_TEMPLATE_MARKER) -> bool:
    return marker in name


def strip_marker(name: str, marker: str = DEFAULT_TEMPLATE_MARKER) -> str:
    """Remove the first occurrence of *marker* from a file name."""
    return name.replace(marker, "", 1)


def select_strategy(
    node: TemplateNode,
    destination_exists: bool,
    *,
    target_name: str | None = None,
    marker: str = DEFAULT_TEMPLATE_MARKER,
    concatenable: Collection[str] = DEFAULT_CONCATENABLE_FILES,
) -> MergeStrategy:
    """Choose how a template node is merged into the target.

    First matching rule wins: unsupported nodes are skipped, directories are
    ensured, marked files are rendered, existing allow-listed ignore files
    are appended to, everything else is copied over the destination.

    Args:
        node: The template node.
        destination_exists: Whether the translated target path exists.
        target_name: Basename of the translated target path.  Defaults to the
            node's own name.
        marker: Substring identifying template files.
        concatenable: Basenames that are appended to instead of replaced.
    """
    if node.kind is NodeKind.OTHER:
        return MergeStrategy.SKIP
    if node.kind is NodeKind.DIRECTORY:
        return MergeStrategy.ENSURE_DIRECTORY
    if is_template(node.name, marker):
        return MergeStrategy.RENDER_TEMPLATE
    if destination_exists and (target_name or node.name) in concatenable:
        return MergeStrategy.APPEND_CONCAT
    return MergeStrategy.COPY_OVERWRITE
