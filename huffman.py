import heapq
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union


class HuffmanError(ValueError):
    """Base class for every failure raised by the codec."""


class MissingCodeError(HuffmanError):
    pass


class CorruptStreamError(HuffmanError):
    pass


@dataclass(frozen=True)
class Leaf: # Leaf of the Huffman tree, carries exactly one symbol
    symbol: int # byte value 0..255
    frequency: int


@dataclass(frozen=True)
class Internal: # Internal node, carries no symbol
    frequency: int # sum of both children's frequencies
    left: "Node"
    right: "Node"


Node = Union[Leaf, Internal]


def freq_table(data: bytes) -> Dict[int, int]: # data: raw input bytes
    ft: Dict[int, int] = {}
    for b in data:
        ft[b] = ft.get(b, 0) + 1
    return ft


def build_huffman_tree(frequency_table: Dict[int, int]) -> Optional[Node]: # frequency_table: dict of symbol -> frequency
    """
    Greedy merge of the two lightest nodes until one root remains.

    Heap entries are (frequency, serial, node). Serials are handed out in
    creation order and leaves are seeded in ascending symbol order, so equal
    frequencies always pop in the same order and the same table always
    rebuilds the same tree. The first node popped becomes the left child.
    """
    priority_queue = []
    serial = 0
    for symbol in sorted(frequency_table):
        frequency = frequency_table[symbol]
        if frequency <= 0:
            raise ValueError(f"frequency for symbol {symbol} must be positive, got {frequency}")
        priority_queue.append((frequency, serial, Leaf(symbol, frequency)))
        serial += 1
    heapq.heapify(priority_queue)

    if not priority_queue:
        return None

    # Build the tree
    while len(priority_queue) > 1:
        left_freq, _, left = heapq.heappop(priority_queue)
        right_freq, _, right = heapq.heappop(priority_queue)
        merged = Internal(left_freq + right_freq, left, right)
        heapq.heappush(priority_queue, (merged.frequency, serial, merged))
        serial += 1

    return priority_queue[0][2] # root of the tree


def count_nodes(root: Optional[Node]) -> Tuple[int, int]:
    """Return (leaves, internal nodes) under root."""
    leaves = internals = 0
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            leaves += 1
        else:
            internals += 1
            stack.append(node.left)
            stack.append(node.right)
    return leaves, internals


def leaf_frequency_sum(root: Optional[Node]) -> int:
    total = 0
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            total += node.frequency
        else:
            stack.append(node.left)
            stack.append(node.right)
    return total


def generate_huffman_codes(root: Optional[Node]) -> Dict[int, str]: # root: root of the Huffman tree
    codes: Dict[int, str] = {}
    if root is None:
        return codes

    # Lone leaf has an empty path, give it a one bit code so every occurrence costs a bit
    if isinstance(root, Leaf):
        codes[root.symbol] = "0"
        return codes

    def generate_codes_helper(node: Node, current_code: str) -> None:
        if isinstance(node, Leaf):
            codes[node.symbol] = current_code
            return
        generate_codes_helper(node.left, current_code + "0")
        generate_codes_helper(node.right, current_code + "1")

    generate_codes_helper(root, "")
    return codes # mapping of symbols to their Huffman codes


def encoded_bit_length(data: bytes, code_map: Dict[int, str]) -> int:
    ft = freq_table(data)
    try:
        return sum(len(code_map[symbol]) * count for symbol, count in ft.items())
    except KeyError as e:
        raise MissingCodeError(f"no code for symbol {e.args[0]}") from None


def huffman_encode(data: bytes, code_map: Dict[int, str]) -> Tuple[bytes, int]:
    """
    Converts Huffman codes into packed bytes, MSB first.
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for offset, b in enumerate(data):
        bits = code_map.get(b)
        if bits is None:
            raise MissingCodeError(f"no code for symbol {b} at offset {offset}")
        for ch in bits:
            acc = (acc << 1) | (1 if ch == "1" else 0)
            acc_bits += 1
            if acc_bits == 8:
                out.append(acc)
                acc = 0
                acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        out.append((acc << pad_bits) & 0xFF)

    return bytes(out), pad_bits


def huffman_decode(packed: bytes, pad_bits: int, root: Optional[Node],
                   expected_symbols: Optional[int] = None) -> bytes:
    """
    Decode packed bits by walking the Huffman tree from the root.

    The last pad_bits bits of packed are padding and never decoded. Running
    out of bits anywhere but on a symbol boundary raises CorruptStreamError,
    as does a symbol count that differs from expected_symbols.
    """
    if not 0 <= pad_bits <= 7:
        raise CorruptStreamError(f"pad bits must be in 0..7, got {pad_bits}")
    if not packed:
        if pad_bits:
            raise CorruptStreamError(f"{pad_bits} pad bits declared for an empty stream")
        if expected_symbols:
            raise CorruptStreamError(f"expected {expected_symbols} symbols, stream is empty")
        return b""
    if root is None:
        raise CorruptStreamError(f"{len(packed)} payload bytes but no Huffman tree to decode them")

    total_bits = len(packed) * 8 - pad_bits
    decoded = bytearray()
    bit_index = 0

    if isinstance(root, Leaf):
        # Only one symbol, every bit is its code "0"
        for byte in packed:
            for i in range(7, -1, -1):
                if bit_index >= total_bits:
                    break
                if (byte >> i) & 1:
                    raise CorruptStreamError(f"unexpected 1 bit at position {bit_index} for single symbol tree")
                decoded.append(root.symbol)
                bit_index += 1
    else:
        node = root
        for byte in packed:
            for i in range(7, -1, -1):
                if bit_index >= total_bits:
                    break
                node = node.right if (byte >> i) & 1 else node.left
                if isinstance(node, Leaf):
                    decoded.append(node.symbol)
                    node = root
                bit_index += 1
        if node is not root:
            raise CorruptStreamError(f"stream ends mid-code after {len(decoded)} symbols")

    if expected_symbols is not None and len(decoded) != expected_symbols:
        raise CorruptStreamError(f"expected {expected_symbols} symbols, decoded {len(decoded)}")

    return bytes(decoded)
