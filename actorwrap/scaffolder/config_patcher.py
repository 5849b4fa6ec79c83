"""INI configuration patching.

The wrapper marks a project as wrapped by adding a section to its
``scrapy.cfg``.  The document is loaded, mutated and written back as a whole
in one scoped operation; the write goes to a temporary file in the same
directory which then replaces the original, so a crash mid-write cannot leave
a truncated config behind.

The text of a loaded file is kept as it was read, comments and layout
included; sections added afterwards are serialised and appended to it.
"""

from __future__ import annotations

import configparser
import io
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from actorwrap.errors import ConfigIOError, SectionAlreadyExistsError


class ConfigDocument:
    """Ordered section -> key -> value view of an INI file."""

    def __init__(self) -> None:
        self._parser = _new_parser()
        # Text as read from disk, and sections added since.
        self._text = ""
        self._added: dict[str, dict[str, str]] = {}

    # -- Loading -----------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path) -> "ConfigDocument":
        """Load *path*, or return an empty document if it does not exist."""
        doc = cls()
        path = Path(path)
        if not path.exists():
            return doc
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigIOError(f"Cannot read {path}: {exc}", path) from exc
        try:
            doc._parser.read_string(text, source=str(path))
        except configparser.Error as exc:
            raise ConfigIOError(f"Cannot parse {path}: {exc}", path) from exc
        doc._text = text
        return doc

    @classmethod
    def from_string(cls, text: str) -> "ConfigDocument":
        doc = cls()
        doc._parser.read_string(text)
        doc._text = text
        return doc

    # -- Queries -----------------------------------------------------------

    def has_section(self, section: str) -> bool:
        return self._parser.has_section(section)

    def sections(self) -> list[str]:
        return self._parser.sections()

    def items(self, section: str) -> dict[str, str]:
        """Return the keys of *section* in file order."""
        return {key: self._parser.get(section, key) for key in self._parser.options(section)}

    def get(self, section: str, key: str, default: str | None = None) -> str | None:
        return self._parser.get(section, key, fallback=default)

    # -- Mutation ----------------------------------------------------------

    def add_section(self, section: str, values: Mapping[str, str]) -> None:
        """Append a new section after all existing ones.

        Raises:
            SectionAlreadyExistsError: If *section* is already present.
        """
        if self._parser.has_section(section):
            raise SectionAlreadyExistsError(section)
        self._parser.add_section(section)
        for key, value in values.items():
            self._parser.set(section, key, str(value))
        self._added[section] = {key: str(value) for key, value in values.items()}

    # -- Serialisation -----------------------------------------------------

    def dumps(self) -> str:
        """Return the original text followed by any added sections."""
        added = _new_parser()
        for section, values in self._added.items():
            added.add_section(section)
            for key, value in values.items():
                added.set(section, key, value)
        buffer = io.StringIO()
        added.write(buffer)

        text = self._text if self._text.strip() else ""
        if text:
            if not text.endswith("\n"):
                text += "\n"
            if self._added and not text.endswith("\n\n"):
                text += "\n"
        return text + buffer.getvalue()

    def save(self, path: str | Path) -> Path:
        """Atomically write the full document to *path*."""
        path = Path(path)
        content = self.dumps()
        tmp_path: Path | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            if path.exists():
                os.chmod(tmp_path, path.stat().st_mode & 0o7777)
            tmp_path.replace(path)
        except OSError as exc:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise ConfigIOError(f"Cannot write {path}: {exc}", path) from exc
        return path


def has_section(config_path: str | Path, section: str) -> bool:
    """Return ``True`` if the config file at *config_path* has *section*."""
    return ConfigDocument.load(config_path).has_section(section)


def append_section(
    config_path: str | Path,
    section: str,
    values: Mapping[str, str],
) -> ConfigDocument:
    """Add *section* with *values* to the config file at *config_path*.

    The file is created if it does not exist.  When the section is already
    present the file is left untouched.

    Raises:
        SectionAlreadyExistsError: If *section* already exists.
        ConfigIOError: If the file cannot be read, parsed or written.
    """
    config_path = Path(config_path)
    doc = ConfigDocument.load(config_path)
    if doc.has_section(section):
        raise SectionAlreadyExistsError(section, config_path)
    doc.add_section(section, values)
    doc.save(config_path)
    return doc


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    # Keep key case as written.
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser
