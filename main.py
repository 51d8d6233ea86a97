#!/usr/bin/env python3
"""
Telegram Desktop media cache deserializer - Entry Point

Rebuilds a playable media stream from a decrypted, serialized media_cache
file. Decryption is done beforehand, for example with
https://github.com/lilydjwg/telegram-cache-decryption

Larger media is split over several cache files. Only the first one is
serialized; the others are raw continuation data that can be appended with
--append, after the contiguous part of the reconstructed stream.
"""

import argparse
import json
import sys
from pathlib import Path

from core.config import Config
from core.errors import DeserializeError, UsageError
from core.part_order import report_to_dict
from core.reconstruct import deserialize_file
from utils.file_utils import format_size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='telegram-media-deserialize',
        description="Deserialize a Telegram Desktop media cache file.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""
Examples:
  telegram-media-deserialize cache.bin video.mp4
    (Reconstructs video.mp4 from a single serialized cache file)

  telegram-media-deserialize cache.bin video.mp4 --append cache2.bin --append cache3.bin
    (Appends raw continuation cache files after the contiguous prefix)

  telegram-media-deserialize cache.bin video.mp4 --quiet --report json > report.json
    (Writes a structured summary of the run to report.json)
"""
    )
    parser.add_argument('serialized_file', type=Path, help='The decrypted, serialized cache file to read')
    parser.add_argument('deserialized_file', type=Path, help='The output file to create (must not exist)')
    parser.add_argument('--append', dest='segments', type=Path, action='append', default=[],
                        metavar='SEGMENT', help='Raw continuation cache file to append (repeatable)')
    parser.add_argument('--report', choices=['text', 'json'], help='Summary format')
    parser.add_argument('--quiet', action='store_true', help='Do not print per-slice and per-part lines')
    parser.add_argument('--no-progress', action='store_true', help='Do not show a progress bar')
    parser.add_argument('--buffer-size', type=int, help='Read buffer size for payload copies')
    parser.add_argument('--config', type=Path, help='Configuration file to use')
    return parser


def load_run_config(args) -> Config:
    """Loads the configuration file and applies command-line overrides."""
    config = Config(args.config) if args.config else Config()
    if args.quiet:
        config.set('verbose', False)
    if args.no_progress:
        config.set('show_progress', False)
    if args.buffer_size is not None:
        config.set('read_buffer_size', args.buffer_size)
    if args.report:
        config.set('report_format', args.report)

    buffer_size = config.get('read_buffer_size')
    # bool is an int subclass
    if not isinstance(buffer_size, int) or isinstance(buffer_size, bool) or buffer_size <= 0:
        raise UsageError(f"invalid buffer size: {buffer_size!r}")
    return config


def print_summary(args, scan, ordered, summary, report_format: str):
    if report_format == 'json':
        result = {
            "serialized_file": str(args.serialized_file),
            "deserialized_file": str(args.deserialized_file),
            "file_size": scan.file_size,
            "slices": scan.slices,
            "parts": len(scan.parts),
            "stop": scan.stop._asdict(),
            "contiguity": report_to_dict(ordered),
            "bytes_written": summary.bytes_written,
            "appended_bytes": summary.appended_bytes,
            "output_size": summary.output_size,
        }
        print(json.dumps(result, indent=2))
        return

    print(f"\nParsed {scan.slices} slice(s), {len(scan.parts)} part(s) "
          f"(stopped: {scan.stop.reason}, {scan.stop.remaining} bytes left unparsed)", file=sys.stderr)
    if ordered.report is not None:
        print(f"Contiguous up to {ordered.report.last_contiguous_offset} bytes "
              f"({format_size(ordered.report.last_contiguous_offset)})", file=sys.stderr)
    if summary.appended_bytes:
        print(f"Appended {format_size(summary.appended_bytes)} of continuation data", file=sys.stderr)
    print(f"Wrote {args.deserialized_file} "
          f"({format_size(summary.output_size)})", file=sys.stderr)


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_run_config(args)
        scan, ordered, summary = deserialize_file(
            args.serialized_file, args.deserialized_file, config, args.segments
        )
    except DeserializeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_summary(args, scan, ordered, summary, config.get('report_format', 'text'))
    return 0


if __name__ == "__main__":
    sys.exit(main())
