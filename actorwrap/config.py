"""actorwrap configuration.

Typed configuration for the merge engine and the wrapping command.  Settings
use a Pydantic v2 model so they are validated at construction time and can be
loaded from JSON or environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_TEMPLATE_MARKER = ".template"

# Ignore-pattern files are merged additively instead of overwritten.
DEFAULT_CONCATENABLE_FILES: tuple[str, ...] = (".dockerignore", ".gitignore")


class WrapConfig(BaseModel):
    """Settings shared by the merge engine, config patcher and CLI.

    Instances are created once by the CLI entry point (or by tests) and then
    passed through the rest of the system.
    """

    template_marker: str = Field(
        default=DEFAULT_TEMPLATE_MARKER,
        min_length=1,
        description="File-name substring marking files rendered as templates",
    )
    concatenable_files: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONCATENABLE_FILES),
        description="Basenames appended to an existing destination instead of overwritten",
    )
    config_filename: str = Field(default="scrapy.cfg", min_length=1)
    section_name: str = Field(default="apify", min_length=1)
    main_location_key: str = Field(default="mainpy_location", min_length=1)
    template_dir: Path | None = Field(
        default=None,
        description="Local, already materialised template root",
    )

    @field_validator("concatenable_files")
    @classmethod
    def _strip_names(cls, value: list[str]) -> list[str]:
        return [name.strip() for name in value if name.strip()]

    def config_path(self, project_path: str | Path) -> Path:
        """Path of the project configuration file inside *project_path*."""
        return Path(project_path) / self.config_filename

    @classmethod
    def load(cls, path: str | Path) -> "WrapConfig":
        """Load a configuration from a JSON file.

        Args:
            path: The JSON file to read.

        Returns:
            A validated ``WrapConfig`` instance.
        """
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "WrapConfig":
        """Build a ``WrapConfig`` from environment variables.

        Recognised variables (all optional):
            ACTORWRAP_TEMPLATE_MARKER, ACTORWRAP_CONCATENABLE_FILES,
            ACTORWRAP_CONFIG_FILENAME, ACTORWRAP_SECTION_NAME,
            ACTORWRAP_TEMPLATE_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ACTORWRAP_TEMPLATE_MARKER"):
            kwargs["template_marker"] = os.environ["ACTORWRAP_TEMPLATE_MARKER"]
        if os.environ.get("ACTORWRAP_CONCATENABLE_FILES"):
            kwargs["concatenable_files"] = os.environ["ACTORWRAP_CONCATENABLE_FILES"].split(",")
        if os.environ.get("ACTORWRAP_CONFIG_FILENAME"):
            kwargs["config_filename"] = os.environ["ACTORWRAP_CONFIG_FILENAME"]
        if os.environ.get("ACTORWRAP_SECTION_NAME"):
            kwargs["section_name"] = os.environ["ACTORWRAP_SECTION_NAME"]
        if os.environ.get("ACTORWRAP_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["ACTORWRAP_TEMPLATE_DIR"])
        return cls(**kwargs)
