# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for exifgraft

Provides commands for reading EXIF metadata, listing JPEG marker
segments and copying EXIF segments between files.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from exifgraft.config import DEFAULT_MAX_FILE_SIZE, ExifOptions
from exifgraft.exceptions import ExifGraftError
from exifgraft.exif_parser import parse_exif_data, read_orientation
from exifgraft.file_io import read_file
from exifgraft.jpeg_modifier import copy_exif
from exifgraft.jpeg_scanner import scan_markers


def format_output(metadata: Dict[str, Any], format_type: str = "text") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Dictionary of metadata
        format_type: Output format ('text', 'json', 'csv')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False)
    elif format_type == "csv":
        lines = ["Tag,Value"]
        for tag, value in metadata.items():
            # Escape quotes in CSV
            value_str = str(value).replace('"', '""')
            lines.append(f'"{tag}","{value_str}"')
        return "\n".join(lines)
    else:  # text format (default)
        width = max((len(tag) for tag in metadata), default=0)
        return "\n".join(f"{tag:<{width}} : {value}" for tag, value in metadata.items())


def _cmd_read(args: argparse.Namespace, options: ExifOptions) -> int:
    try:
        info = parse_exif_data(args.file, options)
    except ExifGraftError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.partial_info is not None and args.partial:
            print(format_output(e.partial_info.to_dict(), args.format))
        return 1
    print(format_output(info.to_dict(), args.format))
    return 0


def _cmd_orientation(args: argparse.Namespace, options: ExifOptions) -> int:
    orientation = read_orientation(args.file, options)
    print(f"{orientation.name} ({int(orientation)})")
    return 0


def _cmd_segments(args: argparse.Namespace, options: ExifOptions) -> int:
    try:
        data = read_file(args.file, options.max_file_size)
        result = scan_markers(data, require_eoi=args.require_eoi)
    except ExifGraftError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    for segment in result.segments:
        print(f"{segment.offset:>10}  {segment.size:>8}  0x{segment.signature:02X}{segment.marker:02X}  {segment.name}")
    if result.has_exif:
        print(f"EXIF segment: offset {result.exif_offset}, {len(result.exif_data)} bytes")
    return 0


def _cmd_copy(args: argparse.Namespace, options: ExifOptions) -> int:
    if not copy_exif(args.source, args.dest, options):
        print(f"Error: could not copy EXIF from {args.source} to {args.dest}", file=sys.stderr)
        return 1
    print(f"EXIF copied from {args.source} to {args.dest}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exifgraft",
        description="exifgraft - Read and transplant EXIF metadata in JPEG files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read decoded metadata
  exifgraft read image.jpg

  # Print orientation only
  exifgraft orientation image.jpg

  # Restore EXIF on a resized copy
  exifgraft copy original.jpg resized.jpg
""",
    )
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log output (-v info, -vv debug)')
    parser.add_argument('--max-size', type=int, default=DEFAULT_MAX_FILE_SIZE,
                        help='Refuse files of this many bytes or more')

    subparsers = parser.add_subparsers(dest='command', required=True)

    read_parser = subparsers.add_parser('read', help='Print decoded EXIF fields')
    read_parser.add_argument('file', type=Path)
    read_parser.add_argument('-f', '--format', choices=['text', 'json', 'csv'], default='text')
    read_parser.add_argument('--partial', action='store_true',
                             help='Print fields decoded before an error')
    read_parser.add_argument('--require-eoi', action='store_true',
                             help='Reject files that do not end with EOI')
    read_parser.set_defaults(handler=_cmd_read)

    orientation_parser = subparsers.add_parser('orientation', help='Print image orientation')
    orientation_parser.add_argument('file', type=Path)
    orientation_parser.set_defaults(handler=_cmd_orientation)

    segments_parser = subparsers.add_parser('segments', help='List JPEG marker segments')
    segments_parser.add_argument('file', type=Path)
    segments_parser.add_argument('--require-eoi', action='store_true',
                                 help='Reject files that do not end with EOI')
    segments_parser.set_defaults(handler=_cmd_segments)

    copy_parser = subparsers.add_parser('copy', help='Copy the EXIF segment into another JPEG')
    copy_parser.add_argument('source', type=Path)
    copy_parser.add_argument('dest', type=Path)
    copy_parser.add_argument('--no-atomic', action='store_true',
                             help='Overwrite the destination in place')
    copy_parser.set_defaults(handler=_cmd_copy)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        options = ExifOptions(
            max_file_size=args.max_size,
            require_eoi=getattr(args, 'require_eoi', False),
            atomic_write=not getattr(args, 'no_atomic', False),
        )
    except ValueError as e:
        parser.error(str(e))
    return args.handler(args, options)


if __name__ == "__main__":
    sys.exit(main())
