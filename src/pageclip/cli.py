"""Command-line interface for pageclip."""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import __version__
from .extraction import PageDataExtractor, SoupPage
from .logging_config import setup_logging
from .models.blocks import BlockType, ContentBlock
from .models.config import ClipConfig
from .parsing import MarkdownParser

console = Console()
err_console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="pageclip",
        description="Clip saved web pages to Markdown and parse Markdown into content blocks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render the main content of a saved page as Markdown
  pageclip extract article.html --url https://blog.example.com/post

  # Full clip payload (title, description, images, body) as JSON
  pageclip extract article.html --url https://blog.example.com/post --json

  # Show the blocks a Markdown file parses into
  pageclip parse notes.md
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML configuration file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only log errors",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser("extract", help="Extract page data from a saved HTML file")
    extract_parser.add_argument("file", type=Path, help="HTML file")
    extract_parser.add_argument(
        "--url",
        "-u",
        required=True,
        help="URL the page was saved from (for resolving relative links)",
    )
    extract_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full page data as JSON instead of the Markdown body",
    )

    parse_parser = subparsers.add_parser("parse", help="Parse a Markdown file into content blocks")
    parse_parser.add_argument("file", type=Path, help="Markdown file ('-' for stdin)")
    parse_parser.add_argument(
        "--json",
        action="store_true",
        help="Print blocks as JSON instead of a table",
    )

    return parser


def load_config(args: argparse.Namespace) -> ClipConfig:
    """Build the configuration from the config file and log flags."""
    config = ClipConfig.from_yaml_file(args.config) if args.config else ClipConfig()
    if args.verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    elif args.quiet:
        config = config.model_copy(update={"log_level": "ERROR"})
    return config


def run_extract(args: argparse.Namespace, config: ClipConfig) -> int:
    try:
        html = args.file.read_bytes()
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Cannot read {args.file}: {e}")
        return 1

    page = SoupPage(html, args.url)
    page_data = PageDataExtractor(config).extract(page)

    if args.json:
        print(json.dumps(page_data.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(page_data.body_markdown)
    return 0


def _describe(block: ContentBlock) -> str:
    if block.type == BlockType.HEADING:
        return f"h{block.heading_level}"
    if block.type == BlockType.CODE:
        return f"{block.language}, {len(block.code_lines)} lines"
    if block.type == BlockType.TASK_ITEM:
        return "done" if block.checked else "open"
    return ""


def run_parse(args: argparse.Namespace) -> int:
    try:
        if str(args.file) == "-":
            markdown = sys.stdin.read()
        else:
            markdown = args.file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(f"[red]Error:[/red] Cannot read {args.file}: {e}")
        return 1

    blocks = MarkdownParser().parse(markdown)

    if args.json:
        print(json.dumps([block.to_dict() for block in blocks], indent=2, ensure_ascii=False))
        return 0

    table = Table(title=f"{len(blocks)} blocks")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Info", style="magenta")
    table.add_column("Segments")
    for index, block in enumerate(blocks, start=1):
        segments = " ".join(f"[{segment.type.value}] {segment.text!r}" for segment in block.segments)
        table.add_row(str(index), block.type.value, _describe(block), Text(segments))
    console.print(table)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except (OSError, ValidationError, ValueError) as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(level=config.log_level, log_file=config.log_file)

    if args.command == "extract":
        return run_extract(args, config)
    return run_parse(args)


if __name__ == "__main__":
    sys.exit(main())
