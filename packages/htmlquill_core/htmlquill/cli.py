"""
Command-line interface for HtmlQuill.

Usage:
    htmlquill convert page.html --format xml --output body.xml
    htmlquill convert page.html --format json --base-url https://example.com/
    htmlquill version
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_MAX_CONCURRENCY
from .converter import HtmlConverter
from .exceptions import HtmlQuillError
from .export import JSONExporter, WordMLExporter
from .utils.rich_logger import RichLogger, setup_logging

FORMATS = {
    "xml": ".xml",
    "json": ".json",
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="htmlquill",
        description="HtmlQuill - tolerant HTML to WordprocessingML converter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  htmlquill convert page.html --format xml --output body.xml
  htmlquill convert page.html --format json
  htmlquill convert - --format json < page.html
  htmlquill version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    convert_parser = subparsers.add_parser("convert", help="Convert HTML to a document format")
    convert_parser.add_argument("input", help="Input HTML file ('-' reads stdin)")
    convert_parser.add_argument(
        "-f", "--format",
        choices=sorted(FORMATS),
        default="xml",
        help="Output format (default: xml)",
    )
    convert_parser.add_argument(
        "-o", "--output",
        help="Output file path (default: stdout)",
    )
    convert_parser.add_argument(
        "--base-url",
        help="Base URL or directory for relative image sources (default: input directory)",
    )
    convert_parser.add_argument(
        "--max-concurrency",
        type=int,
        default=DEFAULT_MAX_CONCURRENCY,
        help=f"Maximum parallel image fetches (default: {DEFAULT_MAX_CONCURRENCY})",
    )
    convert_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def _default_base_url(input_path: Path) -> str:
    return input_path.resolve().parent.as_uri() + "/"


def cmd_convert(args) -> int:
    """Handle convert command."""
    setup_logging("DEBUG" if args.verbose else "WARNING")
    reporter = RichLogger()

    if args.input == "-":
        markup = sys.stdin.buffer.read()
        base_url = args.base_url
    else:
        input_path = Path(args.input)
        if not input_path.is_file():
            reporter.failure(f"File not found: {input_path}")
            return 1
        markup = input_path.read_bytes()
        base_url = args.base_url or _default_base_url(input_path)

    output_path = Path(args.output) if args.output else None
    if args.format == "json":
        sink = JSONExporter(output_path)
    else:
        sink = WordMLExporter(output_path)

    try:
        with HtmlConverter(base_image_url=base_url, max_concurrency=args.max_concurrency) as converter:
            result = converter.convert(markup, sink)
    except HtmlQuillError as e:
        reporter.failure(str(e))
        return 1

    if output_path is None:
        sys.stdout.write(result)
        sys.stdout.write("\n")
    else:
        reporter.success(f"Saved: {output_path}")
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"HtmlQuill v{__version__}")
    print("Tolerant HTML to WordprocessingML converter")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "convert":
        return cmd_convert(args)
    if args.command == "version":
        return cmd_version(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
