#!/usr/bin/env python3
"""Dump the contents of a Quake 3 MD3 model as text.

Usage:
    python dump_md3.py [input] [--tags] [--shaders] [--strict] [--gltf <output>]

Examples:
    # Dump a model file
    python dump_md3.py models/players/sarge/head.md3

    # Read the model from standard input
    python dump_md3.py < head.md3

    # Include tags and shaders, and also write a GLB of the first frame
    python dump_md3.py upper.md3 --tags --shaders --gltf upper.glb
"""
import argparse
import sys

from gltf_exporter import GLTFExporter
from md3_dump import Md3Dumper
from md3_reader import Md3ReadError


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Examine a Quake 3 MD3 model file"
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Input MD3 file (default: standard input)",
    )
    parser.add_argument(
        "--tags",
        action="store_true",
        help="Also dump tag records",
    )
    parser.add_argument(
        "--shaders",
        action="store_true",
        help="Also dump surface shader records",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on text fields without a NUL terminator",
    )
    parser.add_argument(
        "--gltf",
        metavar="OUTPUT",
        help="Also export the first frame to a glTF binary (.glb)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    try:
        if args.input:
            with open(args.input, "rb") as f:
                data = f.read()
        else:
            data = sys.stdin.buffer.read()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Read {len(data)} bytes from {args.input or '<stdin>'}", file=sys.stderr)

    try:
        Md3Dumper(
            data,
            show_tags=args.tags,
            show_shaders=args.shaders,
            strict=args.strict,
        ).dump()
    except Md3ReadError as e:
        sys.stdout.flush()
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.gltf:
        try:
            GLTFExporter(data).export(args.gltf, include_tags=args.tags)
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if args.verbose:
            print(f"Exported: {args.gltf}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
