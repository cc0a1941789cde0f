"""Command line interface for notion-edit.

Two commands share the same options:

- ``fetch`` exports a Notion page to a Markdown file.
- ``push`` replaces the content of a Notion page with a Markdown file.

A push is not transactional: the page is erased before the new content is
created, so a failed push can leave it empty or partially recreated.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import Config, load_config, load_yaml_config
from .core.async_utils import init_semaphore
from .core.client import NotionClient
from .errors import CreateBlocksError, NotionEditError
from .logger import setup_logging
from .page_id import PageIdError, parse_page_id
from .sync import (
    SyncEngine,
    format_create_failure,
    format_push_report,
    report_to_json,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def page_id_type(value: str) -> str:
    """argparse type for page ids given as a UUID or a Notion URL."""
    try:
        return parse_page_id(value)
    except PageIdError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notion-edit",
        description="Edit Notion pages as Markdown files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export a page to Markdown
  notion-edit fetch -p https://www.notion.so/team/Notes-0b89a6e8f0064acc8ec6e6902b039e3a -f notes.md

  # Replace the page content with the edited file
  notion-edit push -p 0b89a6e8f0064acc8ec6e6902b039e3a -f notes.md

  # Print the push summary as JSON
  notion-edit push -p <page> -f notes.md --json

  # Read settings from a YAML config file
  notion-edit --config notion-edit.yaml fetch -p <page> -f notes.md

The API key is read from NOTION_API_KEY (a .env file is honoured).
        """,
    )
    parser.add_argument(
        "--api-key",
        help="Notion integration token (takes precedence over NOTION_API_KEY env var and config files)"
        " (visible in process list -- prefer NOTION_API_KEY env var for security)",
    )
    parser.add_argument(
        "--config",
        help="YAML config file whose 'notion' section provides fallback settings",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also append log records to this file",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log record format: text (default) or one JSON object per line",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"notion-edit version {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    commands = {}
    for name, help_text in (
        ("fetch", "Export a Notion page to a Markdown file"),
        ("push", "Replace a Notion page's content with a Markdown file"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument(
            "-p",
            "--page-id",
            required=True,
            type=page_id_type,
            help="Page UUID or Notion page URL",
        )
        command.add_argument(
            "-f",
            "--file",
            required=True,
            type=Path,
            help="Markdown file to write (fetch) or read (push)",
        )
        commands[name] = command

    commands["push"].add_argument(
        "--json",
        action="store_true",
        help="Print the push summary as JSON",
    )
    return parser


async def fetch(config: Config, page_id: str, path: Path) -> None:
    """Export ``page_id`` as Markdown into ``path``."""
    init_semaphore(config.max_parallel_requests)
    engine = SyncEngine(NotionClient(config))
    markdown = await engine.export_markdown(page_id)
    path.write_text(markdown, encoding="utf-8")
    logger.info("Wrote %s", path)
    print(f"Fetched page {page_id} into {path}")


async def push(
    config: Config, page_id: str, path: Path, as_json: bool = False
) -> None:
    """Replace the content of ``page_id`` with the Markdown in ``path``."""
    markdown = path.read_text(encoding="utf-8")
    init_semaphore(config.max_parallel_requests)
    engine = SyncEngine(NotionClient(config))
    report = await engine.push_markdown(page_id, markdown)
    if as_json:
        print(json.dumps(report_to_json(report), indent=2))
    else:
        print(format_push_report(report))


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the command and return the exit code.

    Usage errors exit with status 2 through argparse.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # NOTE: a missing .env file is not a problem
    load_dotenv()

    setup_logging(
        debug=args.debug,
        log_file=args.log_file,
        debug_format=args.log_format,
    )

    try:
        yaml_fallbacks = load_yaml_config(args.config) if args.config else None
        config = load_config(
            api_key=args.api_key,
            debug=args.debug,
            yaml_fallbacks=yaml_fallbacks,
        )
    except (OSError, ValueError) as e:
        logger.error("Configuration error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if config.debug and not args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "fetch":
        command = fetch(config, args.page_id, args.file)
    else:
        command = push(config, args.page_id, args.file, as_json=args.json)
    try:
        asyncio.run(command)
    except CreateBlocksError as e:
        logger.error("Push failed: %s", e)
        print(format_create_failure(e), file=sys.stderr)
        return EXIT_FAILURE
    except NotionEditError as e:
        logger.error("%s failed: %s", args.command.capitalize(), e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        logger.error("Cannot access %s: %s", args.file, e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
