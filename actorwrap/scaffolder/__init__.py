"""actorwrap scaffolder -- merges a template tree into an existing project.

This package resolves ``{name}`` path placeholders against a binding map,
renders ``.template`` files with Jinja2, appends ignore-pattern files and
copies everything else into the target project.  It also patches the
project's INI configuration to mark it as wrapped.

Quick usage::

    from actorwrap.scaffolder import TreeMerger, append_section

    merger = TreeMerger({"projectFolder": "books", "botName": "books"})
    report = await merger.merge("/tmp/template", "/path/to/project")
    append_section("/path/to/project/scrapy.cfg", "apify", {"mainpy_location": "books"})
"""

from actorwrap.scaffolder.bindings import (
    Literal,
    Placeholder,
    check_bindings,
    collect_placeholders,
    parse_segment,
    resolve_segment,
)
from actorwrap.scaffolder.config_patcher import ConfigDocument, append_section, has_section
from actorwrap.scaffolder.merger import MergeReport, TreeMerger, merge
from actorwrap.scaffolder.paths import translate
from actorwrap.scaffolder.strategy import (
    MergePlanEntry,
    MergeStrategy,
    NodeKind,
    TemplateNode,
    select_strategy,
)
from actorwrap.scaffolder.templates import TemplateRenderer

__all__ = [
    "ConfigDocument",
    "Literal",
    "MergePlanEntry",
    "MergeReport",
    "MergeStrategy",
    "NodeKind",
    "Placeholder",
    "TemplateNode",
    "TemplateRenderer",
    "TreeMerger",
    "append_section",
    "check_bindings",
    "collect_placeholders",
    "has_section",
    "merge",
    "parse_segment",
    "resolve_segment",
    "select_strategy",
    "translate",
]
