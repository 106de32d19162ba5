#!/usr/bin/env python3
"""
stegpng Command Line Interface

Hide data in PNG files and get it back out.

Usage:
    stegpng embed [OPTIONS]
    stegpng extract [OPTIONS]
    stegpng capacity [OPTIONS]
    stegpng info [OPTIONS]
    stegpng --version
    stegpng --help
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from stegpng_core import __version__
from stegpng_core.errors import StegoError
from stegpng_core.png import ChecksumScope, describe, parse_png
from stegpng_core.stego import ContainerFormat, EncodingMethod, FileEncodingSupport, PngFormat

logger = logging.getLogger("stegpng")


def non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero but not negative."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


class StegPNGCLI:
    """Main CLI application for stegpng."""

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose else logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

        if hasattr(parsed, 'func'):
            try:
                return parsed.func(parsed)
            except (StegoError, OSError) as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
        else:
            parser.print_help()
            return 0

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="stegpng",
            description="LSB steganography for PNG files",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    stegpng embed --carrier image.png --data secret.txt --output stego.png
    stegpng extract --carrier stego.png --bytes 42 --output secret.txt
    stegpng capacity --carrier image.png --method lsb_2bit
    stegpng info --carrier image.png --json
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version=f'stegpng v{__version__}'
        )
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Verbose output')
        parser.add_argument('--legacy-crc', action='store_true',
                            help='Validate chunk CRCs over the type code only')

        subparsers = parser.add_subparsers(title='commands', dest='command')

        self.add_embed_command(subparsers)
        self.add_extract_command(subparsers)
        self.add_capacity_command(subparsers)
        self.add_info_command(subparsers)

        return parser

    def _add_method_argument(self, cmd):
        cmd.add_argument('--method', '-m', default=EncodingMethod.LSB.value,
                         choices=[m.value for m in EncodingMethod],
                         help='Embedding method')

    def add_embed_command(self, subparsers):
        """Add embed command to parser."""
        cmd = subparsers.add_parser('embed', help='Embed data in a carrier file')
        cmd.add_argument('--carrier', '-c', required=True, help='Carrier file')
        cmd.add_argument('--data', '-d', required=True, help='File to hide')
        cmd.add_argument('--output', '-o', required=True, help='Output file')
        self._add_method_argument(cmd)
        cmd.set_defaults(func=self.handle_embed)

    def add_extract_command(self, subparsers):
        """Add extract command to parser."""
        cmd = subparsers.add_parser('extract', help='Extract data from a carrier file')
        cmd.add_argument('--carrier', '-c', required=True, help='Carrier file')
        size = cmd.add_mutually_exclusive_group(required=True)
        size.add_argument('--bits', type=non_negative_int, help='Number of payload bits')
        size.add_argument('--bytes', type=non_negative_int, help='Number of payload bytes')
        cmd.add_argument('--output', '-o', help='Output file (stdout if omitted)')
        self._add_method_argument(cmd)
        cmd.set_defaults(func=self.handle_extract)

    def add_capacity_command(self, subparsers):
        """Add capacity command to parser."""
        cmd = subparsers.add_parser('capacity', help='Show embedding capacity')
        cmd.add_argument('--carrier', '-c', required=True, help='Carrier file')
        self._add_method_argument(cmd)
        cmd.set_defaults(func=self.handle_capacity)

    def add_info_command(self, subparsers):
        """Add info command to parser."""
        cmd = subparsers.add_parser('info', help='Show header and chunk layout')
        cmd.add_argument('--carrier', '-c', required=True, help='Carrier file')
        cmd.add_argument('--json', action='store_true',
                         help='Output as JSON')
        cmd.set_defaults(func=self.handle_info)

    def _checksum_scope(self, args) -> ChecksumScope:
        return ChecksumScope.TYPE_ONLY if args.legacy_crc else ChecksumScope.TYPE_AND_DATA

    def _detect_format(self, file_bytes: bytes, args) -> ContainerFormat:
        formats = [PngFormat(checksum_scope=self._checksum_scope(args))]
        for container_format in formats:
            if container_format.matches(file_bytes):
                return container_format
        raise StegoError(f"Unrecognized carrier format: {args.carrier}")

    def _support_for(self, file_bytes: bytes, args) -> FileEncodingSupport:
        return FileEncodingSupport(container_format=self._detect_format(file_bytes, args))

    def handle_embed(self, args):
        """Handle embed command."""
        carrier = Path(args.carrier).read_bytes()
        data = Path(args.data).read_bytes()
        support = self._support_for(carrier, args)

        print(f"Embedding {args.data} in {args.carrier} -> {args.output}")
        stego = support.embed_payload(carrier, data, args.method)
        Path(args.output).write_bytes(stego)
        print(f"Embedded {len(data)} bytes ({len(data) * 8} bits) using {args.method}")
        return 0

    def handle_extract(self, args):
        """Handle extract command."""
        carrier = Path(args.carrier).read_bytes()
        bit_count = args.bits if args.bits is not None else args.bytes * 8
        support = self._support_for(carrier, args)

        data = support.extract_payload(carrier, bit_count, args.method)
        if args.output:
            Path(args.output).write_bytes(data)
            print(f"Extracted {len(data)} bytes to {args.output}")
        else:
            sys.stdout.buffer.write(data)
            sys.stdout.flush()
        return 0

    def handle_capacity(self, args):
        """Handle capacity command."""
        carrier = Path(args.carrier).read_bytes()
        support = self._support_for(carrier, args)

        bits = support.calculate_capacity(carrier, args.method)
        print(f"{args.carrier}: {bits} bits ({bits // 8} bytes) using {args.method}")
        return 0

    def handle_info(self, args):
        """Handle info command."""
        carrier = Path(args.carrier).read_bytes()
        container = parse_png(carrier, self._checksum_scope(args))
        header = container.header

        chunks = [
            {
                'type': chunk.type.name,
                'length': chunk.length,
                'critical': chunk.type.is_critical,
                'private': chunk.type.is_private,
                'reserved': chunk.type.reserved_set,
                'safe_to_copy': chunk.type.safe_to_copy,
                'description': describe(chunk.type),
            }
            for chunk in container.chunks
        ]
        info = {
            'width': header.width,
            'height': header.height,
            'bit_depth': header.bit_depth,
            'color_type': header.color_type,
            'compression_method': header.compression_method,
            'filter_method': header.filter_method,
            'interlace_method': header.interlace_method,
            'chunks': chunks,
            'trailing_bytes': len(container.trailing),
        }

        if args.json:
            print(json.dumps(info, indent=2))
            return 0

        print(f"{args.carrier}: {header.width}x{header.height}, bit depth {header.bit_depth}, "
              f"color type {header.color_type}, interlace {header.interlace_method}")
        for chunk in chunks:
            flags = ''.join([
                'C' if chunk['critical'] else 'a',
                'P' if chunk['private'] else '-',
                'R' if chunk['reserved'] else '-',
                'S' if chunk['safe_to_copy'] else '-',
            ])
            print(f"  {chunk['type']:<4} {chunk['length']:>10} {flags}  {chunk['description'] or 'unknown'}")
        return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    cli = StegPNGCLI()
    sys.exit(cli.run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":
    main()
