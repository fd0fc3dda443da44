"""
Container format for Huffman-compressed data.

Layout (big-endian, fixed-width fields, no delimiters):
    [4B]  MAGIC          b"HUF1"
    [2B]  alphabet size  (uint16, 0..256)
    [9B each] (symbol uint8, count uint64), ascending symbol order
    [1B]  pad bits       (uint8, 0..7)
    [N B] packed code stream (MSB-first)

Only the frequency table is persisted; decompression rebuilds the same
tree from it.
"""
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Dict

from loguru import logger

import huffman as huff

MAGIC = b"HUF1"

_HEADER = struct.Struct(">4sH")
_ENTRY = struct.Struct(">BQ")
_PAD = struct.Struct(">B")

MAX_ALPHABET = 256


class MalformedContainerError(huff.HuffmanError):
    pass


@dataclass
class Container:
    frequencies: Dict[int, int] = field(default_factory=dict)
    pad_bits: int = 0
    payload: bytes = b""

    @property
    def symbol_count(self) -> int:
        return sum(self.frequencies.values())

    @property
    def payload_bits(self) -> int:
        return len(self.payload) * 8 - self.pad_bits if self.payload else 0

    @property
    def header_size(self) -> int:
        return _HEADER.size + _ENTRY.size * len(self.frequencies) + _PAD.size


def write_container(container: Container) -> bytes:
    out = bytearray(_HEADER.pack(MAGIC, len(container.frequencies)))
    for symbol in sorted(container.frequencies):
        out += _ENTRY.pack(symbol, container.frequencies[symbol])
    out += _PAD.pack(container.pad_bits)
    out += container.payload
    return bytes(out)


def read_container(blob: bytes) -> Container:
    if len(blob) < _HEADER.size:
        raise MalformedContainerError(f"container is {len(blob)} bytes, shorter than the {_HEADER.size} byte header")

    magic, alphabet_size = _HEADER.unpack_from(blob, 0)
    if magic != MAGIC:
        raise MalformedContainerError(f"bad magic {magic!r}, expected {MAGIC!r}")
    if alphabet_size > MAX_ALPHABET:
        raise MalformedContainerError(f"alphabet size {alphabet_size} exceeds {MAX_ALPHABET}")

    offset = _HEADER.size
    table_end = offset + alphabet_size * _ENTRY.size
    if len(blob) < table_end + _PAD.size:
        raise MalformedContainerError(
            f"frequency table declares {alphabet_size} symbols but only {len(blob) - offset} bytes follow the header"
        )

    frequencies: Dict[int, int] = {}
    for symbol, count in _ENTRY.iter_unpack(blob[offset:table_end]):
        if symbol in frequencies:
            raise MalformedContainerError(f"symbol {symbol} appears twice in the frequency table")
        if count == 0:
            raise MalformedContainerError(f"symbol {symbol} has a zero count")
        frequencies[symbol] = count

    (pad_bits,) = _PAD.unpack_from(blob, table_end)
    if pad_bits > 7:
        raise MalformedContainerError(f"pad bits must be in 0..7, got {pad_bits}")

    payload = blob[table_end + _PAD.size:]
    if not payload and pad_bits:
        raise MalformedContainerError(f"{pad_bits} pad bits declared but the payload is empty")

    return Container(frequencies, pad_bits, payload)


def compress(data: bytes) -> bytes:
    ft = huff.freq_table(data)
    root = huff.build_huffman_tree(ft)
    code_map = huff.generate_huffman_codes(root)
    payload, pad_bits = huff.huffman_encode(data, code_map)

    blob = write_container(Container(ft, pad_bits, payload))
    logger.debug(
        f"[container] compressed {len(data)} bytes -> {len(blob)} bytes "
        f"(alphabet={len(ft)}, payload={len(payload)}B, pad={pad_bits})"
    )
    return blob


def decompress(blob: bytes) -> bytes:
    container = read_container(blob)
    if not container.frequencies and container.payload:
        raise MalformedContainerError(f"empty frequency table but {len(container.payload)} payload bytes")

    root = huff.build_huffman_tree(container.frequencies)
    try:
        data = huff.huffman_decode(container.payload, container.pad_bits, root,
                                   expected_symbols=container.symbol_count)
    except huff.CorruptStreamError as e:
        raise MalformedContainerError(f"corrupt code stream: {e}") from e

    logger.debug(f"[container] decompressed {len(blob)} bytes -> {len(data)} bytes")
    return data


def compress_stream(src: BinaryIO, dst: BinaryIO) -> int:
    """Compress everything readable from src into dst; returns bytes written."""
    blob = compress(src.read())
    return dst.write(blob)


def decompress_stream(src: BinaryIO, dst: BinaryIO) -> int:
    """Decompress a whole container from src into dst; dst is untouched on failure."""
    data = decompress(src.read())
    return dst.write(data)
