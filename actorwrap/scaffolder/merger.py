"""Template tree merger.

Walks a template directory tree and merges it into an existing project
directory.  Each template node is translated to a target path, assigned a
``MergeStrategy`` and executed before the next node is planned, so a
directory always exists before anything inside it is written.

The merge is not transactional: if a node fails, nodes merged before it stay
in place.  Run it against a target you are prepared to leave partially
modified on failure.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from jinja2 import TemplateError

from actorwrap.config import WrapConfig
from actorwrap.errors import MergeIOError, TemplateRenderError

from .bindings import BindingMap, freeze_bindings
from .paths import translate
from .strategy import (
    MergePlanEntry,
    MergeStrategy,
    NodeKind,
    TemplateNode,
    is_template,
    select_strategy,
    strip_marker,
)
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Merge report
# ---------------------------------------------------------------------------


@dataclass
class MergeReport:
    """Summary of one merge run, grouped by strategy."""

    template_root: Path
    target_root: Path
    directories: list[Path] = field(default_factory=list)
    rendered: list[Path] = field(default_factory=list)
    appended: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)
    skipped: list[tuple[PurePath, str]] = field(default_factory=list)

    def record(self, entry: MergePlanEntry) -> None:
        if entry.strategy is MergeStrategy.ENSURE_DIRECTORY:
            self.directories.append(entry.target_path)
        elif entry.strategy is MergeStrategy.RENDER_TEMPLATE:
            self.rendered.append(entry.target_path)
        elif entry.strategy is MergeStrategy.APPEND_CONCAT:
            self.appended.append(entry.target_path)
        elif entry.strategy is MergeStrategy.COPY_OVERWRITE:
            self.copied.append(entry.target_path)
        else:
            self.skipped.append((entry.node.relative_path, entry.reason))

    @property
    def files_written(self) -> list[Path]:
        return self.rendered + self.appended + self.copied

    def as_summary(self) -> dict[str, str]:
        """Return a label -> value mapping suitable for a summary table."""
        return {
            "Template": str(self.template_root),
            "Target": str(self.target_root),
            "Directories": str(len(self.directories)),
            "Rendered": str(len(self.rendered)),
            "Appended": str(len(self.appended)),
            "Copied": str(len(self.copied)),
            "Skipped": str(len(self.skipped)),
        }


# ---------------------------------------------------------------------------
# TreeMerger
# ---------------------------------------------------------------------------


class TreeMerger:
    """Merges a template tree into a target directory.

    Attributes:
        bindings: Read-only binding map used for path placeholders and
            template rendering.
        config: Marker and concatenable-file settings.
    """

    def __init__(self, bindings: Mapping[str, str], config: WrapConfig | None = None) -> None:
        self.bindings: BindingMap = freeze_bindings(bindings)
        self.config = config or WrapConfig()

    # -- Public API --------------------------------------------------------

    async def merge(self, template_root: str | Path, target_root: str | Path) -> MergeReport:
        """Merge *template_root* into the existing *target_root*.

        Returns:
            A ``MergeReport`` listing every target path touched and every
            skipped node.

        Raises:
            MissingBindingError: A path placeholder has no value.  Nothing
                is written for that node or anything after it.
            TemplateRenderError: A ``.template`` file could not be rendered.
            MergeIOError: A filesystem operation failed.
        """
        template_root = Path(template_root)
        target_root = Path(target_root)
        if not template_root.is_dir():
            raise MergeIOError(f"Template root is not a directory: {template_root}", template_root)
        if not target_root.is_dir():
            raise MergeIOError(f"Target root is not a directory: {target_root}", target_root)

        renderer = TemplateRenderer(template_root)
        report = MergeReport(template_root=template_root, target_root=target_root)
        for entry in self.plan(template_root, target_root):
            await self._execute(entry, renderer)
            report.record(entry)
        return report

    def plan(self, template_root: str | Path, target_root: str | Path) -> Iterator[MergePlanEntry]:
        """Yield a ``MergePlanEntry`` per template node, depth-first pre-order.

        Uses an explicit stack instead of recursion.  Children of a directory
        are listed only after its entry has been consumed, and symlinked
        directories are never descended into.
        """
        template_root = Path(template_root)
        target_root = Path(target_root)
        stack = list(reversed(self._children(template_root, PurePath())))
        while stack:
            node = stack.pop()
            entry = self._plan_node(node, target_root)
            yield entry
            if entry.strategy is MergeStrategy.ENSURE_DIRECTORY:
                stack.extend(reversed(self._children(template_root, node.relative_path)))

    # -- Planning ----------------------------------------------------------

    def _children(self, template_root: Path, rel_dir: PurePath) -> list[TemplateNode]:
        directory = template_root / rel_dir
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            raise MergeIOError(
                f"Cannot list template directory {directory}: {exc}", directory
            ) from exc
        return [_make_node(entry, rel_dir) for entry in entries]

    def _plan_node(self, node: TemplateNode, target_root: Path) -> MergePlanEntry:
        target = target_root / translate(node.relative_path, self.bindings)

        if node.kind is NodeKind.OTHER:
            return MergePlanEntry(
                node=node,
                target_path=target,
                strategy=MergeStrategy.SKIP,
                reason=_unsupported_reason(node.source),
            )

        marker = self.config.template_marker
        if node.kind is NodeKind.FILE and is_template(node.name, marker):
            stripped = strip_marker(target.name, marker)
            if not stripped:
                return MergePlanEntry(
                    node=node,
                    target_path=target,
                    strategy=MergeStrategy.SKIP,
                    reason="file name is empty without the template marker",
                )
            target = target.with_name(stripped)

        strategy = select_strategy(
            node,
            target.exists(),
            target_name=target.name,
            marker=marker,
            concatenable=self.config.concatenable_files,
        )
        return MergePlanEntry(node=node, target_path=target, strategy=strategy)

    # -- Execution ---------------------------------------------------------

    async def _execute(self, entry: MergePlanEntry, renderer: TemplateRenderer) -> None:
        strategy = entry.strategy
        source = entry.node.source
        target = entry.target_path
        try:
            if strategy is MergeStrategy.ENSURE_DIRECTORY:
                await asyncio.to_thread(target.mkdir, exist_ok=True)
            elif strategy is MergeStrategy.RENDER_TEMPLATE:
                await renderer.render_to_file(entry.node.relative_path, target, self.bindings)
            elif strategy is MergeStrategy.APPEND_CONCAT:
                await asyncio.to_thread(_append_file, source, target)
            elif strategy is MergeStrategy.COPY_OVERWRITE:
                await asyncio.to_thread(shutil.copyfile, source, target)
        except (TemplateError, UnicodeDecodeError) as exc:
            raise TemplateRenderError(
                f"Cannot render template {entry.node.relative_path}: {exc}",
                entry.node.relative_path,
            ) from exc
        except OSError as exc:
            raise MergeIOError(
                f"Failed to {strategy.value} {target}: {exc}", target, strategy.value
            ) from exc


async def merge(
    template_root: str | Path,
    target_root: str | Path,
    bindings: Mapping[str, str],
    config: WrapConfig | None = None,
) -> MergeReport:
    """Merge *template_root* into *target_root* using *bindings*."""
    return await TreeMerger(bindings, config).merge(template_root, target_root)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _make_node(entry: os.DirEntry, rel_dir: PurePath) -> TemplateNode:
    if entry.is_symlink():
        kind = NodeKind.OTHER
    elif entry.is_dir(follow_symlinks=False):
        kind = NodeKind.DIRECTORY
    elif entry.is_file(follow_symlinks=False):
        kind = NodeKind.FILE
    else:
        kind = NodeKind.OTHER
    return TemplateNode(relative_path=rel_dir / entry.name, source=Path(entry.path), kind=kind)


def _unsupported_reason(source: Path) -> str:
    if source.is_symlink():
        return "symbolic link"
    return "not a regular file or directory"


def _append_file(source: Path, target: Path) -> None:
    """Synchronous helper: append the bytes of *source* to *target*."""
    data = source.read_bytes()
    with target.open("ab") as fh:
        fh.write(data)
