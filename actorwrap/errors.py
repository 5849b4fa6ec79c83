"""actorwrap exception hierarchy.

Every failure raised by the merge engine and the config patcher derives from
``WrapError`` and carries an ``ErrorCategory`` so the CLI layer can decide how
to present it.  The engine itself never prints or exits.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any


class ErrorCategory(str, Enum):
    """Error category used by the CLI to choose a message.

    Attributes:
        BINDING: A template placeholder has no value.
        CONFIGURATION: The project configuration is in an unexpected state.
        IO: A filesystem operation failed.
        TEMPLATE: A template file could not be rendered.
    """

    BINDING = "binding"
    CONFIGURATION = "configuration"
    IO = "io"
    TEMPLATE = "template"


class WrapError(Exception):
    """Base exception for all actorwrap errors.

    Attributes:
        message: Human-readable error description
        category: Error category
        details: Additional debugging information
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}


class MissingBindingError(WrapError):
    """Raised when a ``{name}`` path segment has no bound value."""

    def __init__(self, name: str, template_path: str | Path | None = None) -> None:
        self.name = name
        self.template_path = str(template_path) if template_path is not None else None
        message = f"Binding for '{name}' not found"
        if self.template_path:
            message += f" (template path: {self.template_path})"
        super().__init__(
            message,
            ErrorCategory.BINDING,
            {"name": name, "template_path": self.template_path},
        )


class SectionAlreadyExistsError(WrapError):
    """Raised when a config section is already present.

    For the wrapper section this means the project has already been wrapped.
    """

    def __init__(self, section: str, path: str | Path | None = None) -> None:
        self.section = section
        self.path = Path(path) if path is not None else None
        message = f"Section [{section}] already exists"
        if self.path is not None:
            message += f" in {self.path}"
        super().__init__(
            message,
            ErrorCategory.CONFIGURATION,
            {"section": section, "path": str(self.path) if self.path else None},
        )


class MergeIOError(WrapError):
    """Raised when a filesystem operation fails during a merge."""

    def __init__(self, message: str, path: str | Path, strategy: str | None = None) -> None:
        self.path = Path(path)
        self.strategy = strategy
        super().__init__(
            message,
            ErrorCategory.IO,
            {"path": str(self.path), "strategy": strategy},
        )


class TemplateRenderError(WrapError):
    """Raised when a ``.template`` file cannot be decoded or compiled."""

    def __init__(self, message: str, template_path: str | Path) -> None:
        self.template_path = str(template_path)
        super().__init__(
            message,
            ErrorCategory.TEMPLATE,
            {"template_path": self.template_path},
        )


class ConfigIOError(WrapError):
    """Raised when a config file cannot be read, parsed, or written."""

    def __init__(self, message: str, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(message, ErrorCategory.IO, {"path": str(self.path)})


class SpiderPathError(WrapError):
    """Raised when an absolute spider path lies outside the project."""

    def __init__(self, spider_path: str | Path, project_path: str | Path) -> None:
        self.spider_path = Path(spider_path)
        self.project_path = Path(project_path)
        super().__init__(
            f"Spider {self.spider_path} is not inside the project {self.project_path}",
            ErrorCategory.CONFIGURATION,
            {"spider_path": str(self.spider_path), "project_path": str(self.project_path)},
        )
