"""Scrapy project wrapper.

Wraps an existing Scrapy project so it can run as an actor:

1. Refuse to run if the project's ``scrapy.cfg`` already has the wrapper
   section (the project was wrapped before).
2. Build the binding map from the analysed project metadata.
3. Merge the locally materialised wrapper template into the project.
4. Record the wrapper section in ``scrapy.cfg``.

Usage::

    python -m actorwrap.wrapper ./books --template ./templates/python-scrapy \\
        --bot-name books --spider-class BooksSpider --spider-path books/spiders/books.py
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from actorwrap.config import WrapConfig
from actorwrap.errors import (
    MissingBindingError,
    SectionAlreadyExistsError,
    SpiderPathError,
    WrapError,
)
from actorwrap.scaffolder import (
    ConfigDocument,
    MergeReport,
    TreeMerger,
    append_section,
    check_bindings,
    has_section,
)
from actorwrap.utils import (
    format_duration,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    sanitize_actor_name,
)


# ---------------------------------------------------------------------------
# Analyzer output
# ---------------------------------------------------------------------------


class ScrapyProjectInfo(BaseModel):
    """Metadata about the Scrapy project being wrapped.

    Produced by whatever analyses the project (spider discovery, settings
    lookup); the wrapper only consumes it.
    """

    bot_name: str = Field(..., min_length=1, description="BOT_NAME from the Scrapy settings")
    settings_module: str = Field(..., min_length=1, description="Dotted Scrapy settings module")
    spider_class_name: str = Field(..., min_length=1, description="Class name of the spider to run")
    spider_path: Path = Field(..., description="Spider source file, absolute or project-relative")


def spider_module_name(project_path: str | Path, spider_path: str | Path) -> str:
    """Return the spider's module path relative to the bot package.

    The first path component (the bot package itself) is dropped and the
    ``.py`` suffix removed, e.g. ``books/spiders/books.py`` becomes
    ``.spiders.books``.

    Raises:
        SpiderPathError: An absolute *spider_path* is outside *project_path*.
    """
    project_path = Path(project_path)
    spider_path = Path(spider_path)
    if spider_path.is_absolute():
        try:
            rel = spider_path.resolve().relative_to(project_path.resolve())
        except ValueError:
            raise SpiderPathError(spider_path, project_path) from None
    else:
        rel = spider_path
    parts = list(rel.parts[1:])
    if parts and parts[-1].endswith(".py"):
        parts[-1] = parts[-1][: -len(".py")]
    return "." + ".".join(parts)


def build_bindings(project_path: str | Path, info: ScrapyProjectInfo) -> dict[str, str]:
    """Build the template binding map for *info*.

    Keys match the placeholders used by the Scrapy wrapper template, both in
    path segments (``{projectFolder}``) and inside ``.template`` files.
    """
    return {
        "botName": sanitize_actor_name(info.bot_name),
        "scrapy_settings_module": info.settings_module,
        "apify_module_path": f"{info.bot_name}.apify",
        "spider_class_name": info.spider_class_name,
        "spider_module_name": spider_module_name(project_path, info.spider_path),
        "projectFolder": info.bot_name,
    }


# ---------------------------------------------------------------------------
# Wrapping operation
# ---------------------------------------------------------------------------


async def wrap_project(
    project_path: str | Path,
    template_root: str | Path,
    info: ScrapyProjectInfo,
    config: WrapConfig | None = None,
) -> MergeReport:
    """Wrap the Scrapy project at *project_path* with the template.

    Raises:
        SectionAlreadyExistsError: The project is already wrapped.  Raised
            before anything is written.
        MissingBindingError: The template uses a placeholder with no value.
            Raised before anything is written.
        SpiderPathError: The spider file is outside the project.  Raised
            before anything is written.
        MergeIOError: A filesystem operation failed mid-merge.  Files merged
            before the failure stay in place.
    """
    config = config or WrapConfig()
    project_path = Path(project_path)
    config_path = config.config_path(project_path)

    if has_section(config_path, config.section_name):
        raise SectionAlreadyExistsError(config.section_name, config_path)

    bindings = build_bindings(project_path, info)
    check_bindings(template_root, bindings)

    report = await TreeMerger(bindings, config).merge(template_root, project_path)

    append_section(
        config_path,
        config.section_name,
        {config.main_location_key: info.bot_name},
    )
    return report


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``actorwrap`` / ``python -m actorwrap.wrapper``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Wrap an existing Scrapy project so it runs as an actor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  actorwrap ./books --template ./python-scrapy --bot-name books \\\n"
            "      --spider-class BooksSpider --spider-path books/spiders/books.py\n"
        ),
    )
    parser.add_argument(
        "project",
        nargs="?",
        default=".",
        help="Path to the Scrapy project (default: current directory)",
    )
    parser.add_argument(
        "--template", "-t",
        default=None,
        help="Local template directory (default: ACTORWRAP_TEMPLATE_DIR)",
    )
    parser.add_argument("--bot-name", required=True, help="Scrapy BOT_NAME")
    parser.add_argument("--spider-class", required=True, help="Spider class name to wrap")
    parser.add_argument(
        "--spider-path",
        required=True,
        help="Spider source file, absolute or relative to the project",
    )
    parser.add_argument(
        "--settings-module",
        default=None,
        help="Scrapy settings module (default: [settings] default in scrapy.cfg)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON file with actorwrap settings (default: environment variables)",
    )

    args = parser.parse_args(argv)

    try:
        config = WrapConfig.load(args.config) if args.config else WrapConfig.from_env()
    except (OSError, ValueError) as exc:
        print_error(f"Error: Invalid configuration: {exc}")
        sys.exit(1)

    project_path = Path(args.project)
    if not project_path.is_dir():
        print_error(f"Error: Project directory not found: {project_path}")
        sys.exit(1)

    template = args.template or config.template_dir
    if template is None:
        print_error("Error: No template directory given (use --template or ACTORWRAP_TEMPLATE_DIR)")
        sys.exit(1)
    template_root = Path(template)

    try:
        settings_module = args.settings_module or ConfigDocument.load(
            config.config_path(project_path)
        ).get("settings", "default")
    except WrapError as exc:
        print_error(f"Error: {exc.message}")
        sys.exit(1)
    if not settings_module:
        print_error(
            f"Error: No settings module found in {config.config_path(project_path)} "
            "(use --settings-module)"
        )
        sys.exit(1)

    try:
        info = ScrapyProjectInfo(
            bot_name=args.bot_name,
            settings_module=settings_module,
            spider_class_name=args.spider_class,
            spider_path=Path(args.spider_path),
        )
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        print_error(f"Error: Invalid project information: {problems}")
        sys.exit(1)

    print_info("Wrapping the Scrapy project...")
    start = time.monotonic()
    try:
        report = asyncio.run(wrap_project(project_path, template_root, info, config))
    except SectionAlreadyExistsError:
        print_error(
            "The Scrapy project configuration already contains Apify settings. "
            "Are you sure you didn't already wrap this project? Aborting."
        )
        sys.exit(1)
    except (MissingBindingError, SpiderPathError) as exc:
        print_error(f"Error: {exc.message}")
        sys.exit(1)
    except WrapError as exc:
        print_error(f"Error: {exc.message}")
        print_warning("The project may have been partially modified.")
        sys.exit(1)

    for rel_path, reason in report.skipped:
        print_warning(f"Skipped unsupported template entry {rel_path} ({reason})")

    summary = report.as_summary()
    summary["Duration"] = format_duration(time.monotonic() - start)
    print_summary_table(summary, title="Merge summary")
    print_success("The Scrapy project has been wrapped successfully.")


if __name__ == "__main__":
    main()
