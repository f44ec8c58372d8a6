"""
Command-line interface for quillpress.

Usage:
    quillpress convert input.xlsx --output output.pdf
    quillpress convert slides.pptx --page-size 842x595 --margin 40
    quillpress info input.docx --json
    quillpress version
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import SUPPORTED_FORMATS, ConversionOptions
from .engine.geometry import PageGeometry
from .exceptions import QuillpressError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="quillpress",
        description="quillpress - Convert spreadsheets, slides and documents to PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  quillpress convert report.xlsx
  quillpress convert deck.pptx -o deck.pdf --no-slide-numbers
  quillpress convert letter.docx --font /usr/share/fonts/DejaVuSans.ttf
  quillpress info book.epub --json
  quillpress version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert a document to PDF")
    convert_parser.add_argument("input", help="Input file (xlsx, pptx, docx, rtf, epub)")
    convert_parser.add_argument(
        "-o", "--output",
        help="Output file path (default: input name with .pdf extension)"
    )
    convert_parser.add_argument(
        "-f", "--format",
        choices=list(SUPPORTED_FORMATS),
        help="Input format (default: detected from extension or content)"
    )
    convert_parser.add_argument(
        "--font",
        help="TrueType font file used for all text (default: $QUILLPRESS_FONT or Helvetica)"
    )
    convert_parser.add_argument(
        "--quality",
        choices=["low", "medium", "high"],
        default="medium",
        help="Image quality preset (default: medium)"
    )
    convert_parser.add_argument(
        "--page-size",
        help="Page size as WIDTHxHEIGHT in points or a name (a4, a4-landscape, letter, letter-landscape)"
    )
    convert_parser.add_argument(
        "--margin",
        type=float,
        help="Page margin in points (default depends on the format)"
    )
    convert_parser.add_argument(
        "--sheet-titles",
        action="store_true",
        help="Print each worksheet's name above its table"
    )
    convert_parser.add_argument(
        "--no-slide-numbers",
        action="store_true",
        help="Do not number slides"
    )
    convert_parser.add_argument("--title", help="PDF document title")
    convert_parser.add_argument("--author", help="PDF document author")
    convert_parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)")

    # Info command
    info_parser = subparsers.add_parser("info", help="Show document information")
    info_parser.add_argument("input", help="Input file")
    info_parser.add_argument(
        "-f", "--format",
        choices=list(SUPPORTED_FORMATS),
        help="Input format (default: detected)"
    )
    info_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON"
    )
    info_parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def build_options(args, fmt: str) -> ConversionOptions:
    """Map convert flags onto the format's default options."""
    options = ConversionOptions.for_format(
        fmt,
        font_path=Path(args.font) if args.font else None,
        quality=args.quality,
        title=args.title,
        author=args.author,
    )
    if args.page_size or args.margin is not None:
        margin = args.margin if args.margin is not None else options.geometry.margin
        if args.page_size:
            geometry = PageGeometry.parse(args.page_size, margin)
        else:
            geometry = PageGeometry(options.geometry.width, options.geometry.height, margin)
        options = options.with_overrides(geometry=geometry)
    return options.with_overrides(
        sheet_titles=args.sheet_titles or None,
        slide_numbers=False if args.no_slide_numbers else None,
    )


def cmd_convert(args):
    """Handle convert command."""
    from .api import convert, detect_format

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else input_path.with_suffix(".pdf")
    data = input_path.read_bytes()
    try:
        fmt = args.format or detect_format(input_path.name, data)
        options = build_options(args, fmt)
        print(f"📄 Opening: {input_path} ({fmt})")
        pdf = convert(data, fmt, options=options)
    except QuillpressError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output_path.write_bytes(pdf)
    print(f"✅ Saved: {output_path}")
    return 0


def cmd_info(args):
    """Handle info command."""
    from .api import detect_format, document_info

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    data = input_path.read_bytes()
    try:
        fmt = args.format or detect_format(input_path.name, data)
        info = document_info(data, fmt)
    except QuillpressError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    info = {"file": str(input_path), "size_bytes": len(data), **info}
    if args.json:
        print(json.dumps(info, indent=2, ensure_ascii=False, default=str))
    else:
        print(f"📄 File: {input_path}")
        print(f"   Size: {len(data):,} bytes")
        print(f"   Format: {info['format']}")
        if info.get("title"):
            print(f"   Title: {info['title']}")
        print()
        print("📊 Statistics:")
        print(f"   units: {info['units']}")
        print(f"   pages: {info['pages']}")
        for kind, count in info["blocks"].items():
            print(f"   {kind}: {count}")

    return 0


def cmd_version(args=None):
    """Handle version command."""
    from .version import __version__
    print(f"quillpress v{__version__}")
    print("Document to PDF conversion for xlsx, pptx, docx, rtf and epub")
    return 0


def main(argv=None):
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(getattr(args, "verbose", 0))

    if args.command == "convert":
        return cmd_convert(args)
    elif args.command == "info":
        return cmd_info(args)
    elif args.command == "version":
        return cmd_version(args)

    # No command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
