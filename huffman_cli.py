#!/usr/bin/env python3
"""
Command line front end for the Huffman codec.

Run with:
    huffman-codec compress INPUT OUTPUT
    huffman-codec decompress INPUT OUTPUT
    huffman-codec inspect INPUT
"""
import argparse
import logging
import sys
from pathlib import Path

from huffman_core import HuffmanLogic
from huffman_errors import HuffmanError
from huffman_service import HEADER_SIZE, HuffmanService, read_frequency_table


def cmd_compress(args):
    data = Path(args.input).read_bytes()
    out = HuffmanService().compress(data)
    Path(args.output).write_bytes(out)
    ratio = len(out) / len(data) if data else 0.0
    print(f"{args.input}: {len(data)} -> {len(out)} bytes (ratio {ratio:.3f})")
    return 0


def cmd_decompress(args):
    data = Path(args.input).read_bytes()
    out = HuffmanService().decompress(data)
    Path(args.output).write_bytes(out)
    print(f"{args.input}: {len(data)} -> {len(out)} bytes")
    return 0


def cmd_inspect(args):
    data = Path(args.input).read_bytes()
    frequencies, total, unique, max_freq = read_frequency_table(data)
    logic = HuffmanLogic()
    tree = logic.build_tree(frequencies, max_freq)
    codes = logic.generate_codes(tree)

    print(f"File: {args.input}")
    print(f"  Original length: {total}")
    print(f"  Distinct symbols: {unique}")
    print(f"  Packed payload: {len(data) - HEADER_SIZE} bytes")
    for symbol in logic.sort_symbols(frequencies, max_freq):
        code = codes[symbol]
        bits = format(code.value, f"0{code.length}b") if code.length else "-"
        print(f"  0x{symbol:02x}  count={frequencies[symbol]:<10} {bits}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="Byte-oriented Huffman codec")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compress", help="Compress INPUT into OUTPUT")
    p.add_argument("input")
    p.add_argument("output")
    p.set_defaults(func=cmd_compress)

    p = sub.add_parser("decompress", help="Decompress INPUT into OUTPUT")
    p.add_argument("input")
    p.add_argument("output")
    p.set_defaults(func=cmd_decompress)

    p = sub.add_parser("inspect", help="Show the frequency table and codes of INPUT")
    p.add_argument("input")
    p.set_defaults(func=cmd_inspect)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except HuffmanError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
