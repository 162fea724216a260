"""
Command-line interface for mailframe.

Usage:
    mailframe export design.json --output out/
    mailframe export design.json --absolute --credits credits.json
    mailframe inspect design.json
    mailframe version
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ExportConfig
from .credits import JsonCreditLedger
from .exceptions import MailframeError
from .exporter import Exporter
from .host import StaticDesignHost
from .models.loader import load_design
from .utils.logger import LOG_LEVELS, setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mailframe",
        description="mailframe - compile design frames into e-mail HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mailframe export newsletter.json --output build/
  mailframe export newsletter.json --absolute
  mailframe inspect newsletter.json
  mailframe version
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Log level (default: WARNING)"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this (rotated) file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    export_parser = subparsers.add_parser("export", help="Export a design frame to HTML")
    export_parser.add_argument("input", help="Design JSON file")
    export_parser.add_argument(
        "-o", "--output",
        help="Output directory (default: next to the input file)"
    )
    export_parser.add_argument(
        "--absolute",
        action="store_true",
        help="Keep absolute positioning instead of compiling to table layout"
    )
    export_parser.add_argument(
        "--credits",
        help="JSON credit ledger charged one credit per [table] region"
    )
    export_parser.add_argument("--title", help="Document title (default: Mailer)")

    inspect_parser = subparsers.add_parser("inspect", help="Show the frame's row structure")
    inspect_parser.add_argument("input", help="Design JSON file")
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON"
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def cmd_export(args) -> int:
    """Handle export command."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    config = ExportConfig().with_overrides(title=args.title)
    ledger = JsonCreditLedger(args.credits) if args.credits else None
    output_dir = Path(args.output) if args.output else input_path.parent

    try:
        root, images = load_design(input_path)
        exporter = Exporter(StaticDesignHost(images), ledger, config)
        result = asyncio.run(exporter.export([root], use_table_layout=not args.absolute))
        html_path = result.write_to(output_dir)
    except MailframeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Unexpected export failure")
        print(f"Error: Backend error: {e}", file=sys.stderr)
        return 1

    print(f"Saved: {html_path}")
    print(f"   Assets: {len(result.assets)}  Previews: {len(result.preview_assets)}")
    if result.link_placeholders:
        print(f"   Link placeholders: {len(result.link_placeholders)}")
    if result.gif_placeholders:
        print(f"   GIF placeholders: {', '.join(p.id for p in result.gif_placeholders)}")
    return 0


def cmd_inspect(args) -> int:
    """Handle inspect command."""
    from .analysis import LayoutAnalyzer
    from .models.node import ContainerNode

    input_path = Path(args.input)
    try:
        root, _ = load_design(input_path)
    except MailframeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Unexpected failure reading design")
        print(f"Error: Backend error: {e}", file=sys.stderr)
        return 1
    if not isinstance(root, ContainerNode):
        print("Error: the design root is not a frame", file=sys.stderr)
        return 1

    summary = LayoutAnalyzer(root).summary()
    if args.json:
        print(json.dumps(summary, indent=2, ensure_ascii=False))
        return 0

    console = Console()
    table = Table(title=f"{escape(summary['name'])} ({summary['width']}x{summary['height']})")
    table.add_column("Row", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Nodes")
    for index, row in enumerate(summary["rows"], start=1):
        nodes = ", ".join(f"{n['name']} [{n['kind']}] @x={n['x']}" for n in row["nodes"])
        table.add_row(str(index), str(row["y"]), str(row["height"]), escape(nodes))
    console.print(table)
    console.print(f"Table regions: {summary['table_regions']}")
    for warning in summary["warnings"]:
        console.print(f"[yellow]warning:[/yellow] {escape(warning)}")
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"mailframe v{__version__}")
    print("Design frame to e-mail HTML compiler")
    return 0


def main(argv=None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, log_file=args.log_file)

    if args.command == "export":
        return cmd_export(args)
    elif args.command == "inspect":
        return cmd_inspect(args)
    elif args.command == "version":
        return cmd_version(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
