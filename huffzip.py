"""
Command line front end: compress and decompress single files.

How to run:
  huffzip compress notes.txt                 # writes notes.txt.huff
  huffzip decompress notes.txt.huff -o out.txt
  huffzip info notes.txt.huff
"""

from __future__ import annotations

import argparse
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from loguru import logger

import container
import huffman as huff

SUFFIX = ".huff"


def default_output(input_path: Path, mode: str) -> Path:
    if mode == "compress":
        return input_path.with_name(input_path.name + SUFFIX)
    if input_path.suffix == SUFFIX:
        return input_path.with_suffix("")
    return input_path.with_name(input_path.name + ".out")


def write_atomic(path: Path, data: bytes) -> None:
    # Temp file lives next to the target so os.replace stays on one filesystem
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise


def run_codec(mode: str, input_path: Path, output_path: Path, force: bool) -> int:
    if output_path.exists() and not force:
        logger.error(f"[huffzip] {output_path} already exists (use --force to overwrite)")
        return 1

    data = input_path.read_bytes()
    if mode == "compress":
        result = container.compress(data)
    else:
        result = container.decompress(data)
    write_atomic(output_path, result)

    ratio = len(result) / max(1, len(data))
    logger.info(f"[huffzip] {mode}ed {input_path} -> {output_path}")
    print(f"{input_path}: {len(data)} -> {len(result)} bytes (ratio {ratio:.3f})")
    return 0


def run_info(input_path: Path) -> int:
    c = container.read_container(input_path.read_bytes())
    print(f"file:          {input_path}")
    print(f"alphabet size: {len(c.frequencies)}")
    print(f"symbols:       {c.symbol_count}")
    print(f"header bytes:  {c.header_size}")
    print(f"payload bytes: {len(c.payload)} ({c.payload_bits} bits, {c.pad_bits} pad)")
    return 0


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huffzip", description="Huffman file compressor")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    sub = ap.add_subparsers(dest="command", required=True)

    for mode in ("compress", "decompress"):
        p = sub.add_parser(mode, help=f"{mode.capitalize()} a single file")
        p.add_argument("input", type=Path, help="Input file")
        p.add_argument("-o", "--output", type=Path, default=None,
                       help=f"Output file (default derived from input and {SUFFIX})")
        p.add_argument("-f", "--force", action="store_true", help="Overwrite an existing output file")

    p = sub.add_parser("info", help="Show the header of a compressed file")
    p.add_argument("input", type=Path, help="Compressed file")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "info":
            return run_info(args.input)
        output = args.output or default_output(args.input, args.command)
        return run_codec(args.command, args.input, output, args.force)
    except huff.HuffmanError as e:
        logger.error(f"[huffzip] {args.command} failed for {args.input}: {e}")
        return 1
    except OSError as e:
        logger.error(f"[huffzip] {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
