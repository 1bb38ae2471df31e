"""
Command-line interface for image_keeper.

Usage:
    image-keeper process rendered.docx --output final.docx
    image-keeper process rendered.odt --lenient --materialize
    image-keeper probe file:///tmp/logo.png
    image-keeper version
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .exceptions import ImageKeeperError
from .export.package_writer import write_package
from .media.image_probe import probe_payload
from .parser.package_reader import read_package
from .postprocessor import ImagePostprocessor, ProcessingOptions
from .utils.logger import add_file_handler
from .utils.rich_logger import RichLogger, setup_rich_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="image-keeper",
        description="Substitute dynamic placeholder images in rendered DOCX/ODT templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  image-keeper process rendered.docx -o final.docx
  image-keeper process rendered.docx --materialize --fail-fast
  image-keeper probe "data:image/png;base64,iVBORw0..."
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Console log level (default: WARNING)"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Postprocess images of a package")
    process_parser.add_argument("input", help="Input DOCX or ODT file")
    process_parser.add_argument(
        "-o", "--output",
        help="Output file path (default: <input>_images<ext>)"
    )
    process_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip unparsable parts instead of reporting them as errors"
    )
    process_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first error"
    )
    process_parser.add_argument(
        "--no-scrub",
        action="store_true",
        help="Keep leaked payload text in the document"
    )
    process_parser.add_argument(
        "--anchors-only",
        action="store_true",
        help="Ignore inline drawings"
    )
    process_parser.add_argument(
        "--materialize",
        action="store_true",
        help="Replace payload media entries with image bytes (files, base64, QR codes)"
    )
    process_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON"
    )

    probe_parser = subparsers.add_parser("probe", help="Show the dimensions of an image payload")
    probe_parser.add_argument("payload", help="file:// path, absolute path or base64 data URI")

    subparsers.add_parser("version", help="Show version information")

    return parser


def default_output(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}_images{input_path.suffix}")


def cmd_process(args, console_logger: RichLogger) -> int:
    """Handle process command."""
    input_path = Path(args.input)
    if not input_path.exists():
        console_logger.failure(f"File not found: {input_path}")
        return 1

    options = ProcessingOptions(
        strict_parsing=not args.lenient,
        fail_fast=args.fail_fast,
        scrub_payload_text=not args.no_scrub,
        include_inline=not args.anchors_only,
        materialize_media=args.materialize,
    )
    output_path = Path(args.output) if args.output else default_output(input_path)

    try:
        package = read_package(input_path)
        report = ImagePostprocessor(options).execute(package)
        write_package(package, output_path)
    except ImageKeeperError as e:
        console_logger.failure(str(e))
        return 1

    if args.json:
        data = report.to_dict()
        data["output"] = str(output_path)
        data["error_messages"] = [str(e) for e in report.errors]
        print(json.dumps(data, indent=2))
    else:
        console_logger.table(f"Images: {input_path.name}", report.to_dict())
        for error in report.errors:
            console_logger.failure(str(error))
        console_logger.success(f"Saved: {output_path}")

    return 0 if report.ok else 1


def cmd_probe(args, console_logger: RichLogger) -> int:
    """Handle probe command."""
    dimensions = probe_payload(args.payload)
    if dimensions is None:
        console_logger.failure("No dimensions available for this payload")
        return 1
    print(f"{dimensions.width}x{dimensions.height}")
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"image-keeper v{__version__}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    console = setup_rich_logging(args.log_level)
    if args.log_file:
        add_file_handler(logging.getLogger(), args.log_file, args.log_level)
    console_logger = RichLogger("image_keeper.cli", args.log_level, console=console)

    if args.command == "process":
        return cmd_process(args, console_logger)
    elif args.command == "probe":
        return cmd_probe(args, console_logger)
    elif args.command == "version":
        return cmd_version(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
