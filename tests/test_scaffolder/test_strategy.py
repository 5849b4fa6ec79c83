"""Unit tests for merge strategy selection (actorwrap.scaffolder.strategy).

Tests cover:
- Every row of the decision table and its precedence
- Custom marker / concatenable allow-list
- strip_marker
"""

from __future__ import annotations

from pathlib import Path, PurePath

import pytest

from actorwrap.scaffolder.strategy import (
    MergeStrategy,
    NodeKind,
    TemplateNode,
    is_template,
    select_strategy,
    strip_marker,
)

pytestmark = pytest.mark.unit


def _node(rel: str, kind: NodeKind = NodeKind.FILE) -> TemplateNode:
    return TemplateNode(relative_path=PurePath(rel), source=Path("/tpl") / rel, kind=kind)


class TestSelectStrategy:
    def test_directory(self):
        node = _node("{projectFolder}", NodeKind.DIRECTORY)
        assert select_strategy(node, False) is MergeStrategy.ENSURE_DIRECTORY
        assert select_strategy(node, True) is MergeStrategy.ENSURE_DIRECTORY

    def test_directory_named_like_template_is_still_directory(self):
        node = _node("docs.template", NodeKind.DIRECTORY)
        assert select_strategy(node, False) is MergeStrategy.ENSURE_DIRECTORY

    def test_unsupported_node_skipped(self):
        assert select_strategy(_node("link", NodeKind.OTHER), False) is MergeStrategy.SKIP

    @pytest.mark.parametrize("exists", [True, False])
    def test_template_file_rendered(self, exists):
        node = _node("books/main.template.py")
        assert select_strategy(node, exists) is MergeStrategy.RENDER_TEMPLATE

    def test_template_wins_over_concat(self):
        node = _node(".gitignore.template")
        assert select_strategy(node, True) is MergeStrategy.RENDER_TEMPLATE

    @pytest.mark.parametrize("name", [".gitignore", ".dockerignore"])
    def test_existing_ignore_file_appended(self, name):
        assert select_strategy(_node(name), True) is MergeStrategy.APPEND_CONCAT

    def test_new_ignore_file_copied(self):
        assert select_strategy(_node(".gitignore"), False) is MergeStrategy.COPY_OVERWRITE

    @pytest.mark.parametrize("exists", [True, False])
    def test_other_files_copied(self, exists):
        assert select_strategy(_node("Dockerfile"), exists) is MergeStrategy.COPY_OVERWRITE

    def test_target_name_used_for_allow_list(self):
        node = _node("{ignoreFile}")
        strategy = select_strategy(node, True, target_name=".gitignore")
        assert strategy is MergeStrategy.APPEND_CONCAT

    def test_custom_marker_and_allow_list(self):
        assert select_strategy(_node("main.py.j2"), False, marker=".j2") is MergeStrategy.RENDER_TEMPLATE
        assert select_strategy(_node("main.template.py"), False, marker=".j2") is MergeStrategy.COPY_OVERWRITE
        assert select_strategy(
            _node(".npmignore"), True, concatenable=[".npmignore"]
        ) is MergeStrategy.APPEND_CONCAT
        assert select_strategy(
            _node(".gitignore"), True, concatenable=[".npmignore"]
        ) is MergeStrategy.COPY_OVERWRITE


class TestMarkerHelpers:
    def test_is_template(self):
        assert is_template("main.template.py")
        assert is_template("README.md.template")
        assert not is_template("main.py")

    def test_strip_marker_middle(self):
        assert strip_marker("main.template.py") == "main.py"

    def test_strip_marker_suffix(self):
        assert strip_marker("README.md.template") == "README.md"

    def test_strip_only_first_occurrence(self):
        assert strip_marker("a.template.template") == "a.template"

    def test_node_properties(self):
        node = _node("books/main.py")
        assert node.name == "main.py"
        assert not node.is_directory
        assert _node("books", NodeKind.DIRECTORY).is_directory


class TestEnums:
    @pytest.mark.parametrize("enum_cls", [NodeKind, MergeStrategy])
    def test_every_member_documented(self, enum_cls):
        for member in enum_cls:
            assert f"{member.name}:" in enum_cls.__doc__

    def test_strategy_values_used_in_messages(self):
        assert MergeStrategy.ENSURE_DIRECTORY.value == "ensure-directory"
        assert MergeStrategy.COPY_OVERWRITE.value == "copy-overwrite"
