import random

import pytest

import huffman as huff


def test_freq_table_abracadabra():
    ft = huff.freq_table(b"abracadabra")
    assert ft == {ord("a"): 5, ord("b"): 2, ord("r"): 2, ord("c"): 1, ord("d"): 1}
    assert sum(ft.values()) == 11


def test_freq_table_empty():
    assert huff.freq_table(b"") == {}


def test_build_tree_empty_table():
    assert huff.build_huffman_tree({}) is None
    assert huff.generate_huffman_codes(None) == {}


def test_build_tree_rejects_zero_count():
    with pytest.raises(ValueError):
        huff.build_huffman_tree({1: 3, 2: 0})


def test_single_symbol_tree_gets_one_bit_code():
    root = huff.build_huffman_tree({ord("a"): 4})
    assert root == huff.Leaf(ord("a"), 4)
    assert huff.generate_huffman_codes(root) == {ord("a"): "0"}


def test_symbol_zero_is_a_real_leaf():
    root = huff.build_huffman_tree({0: 3, 1: 1})
    codes = huff.generate_huffman_codes(root)
    assert set(codes) == {0, 1}


@pytest.mark.parametrize("data", [
    b"abracadabra",
    b"aaaaaaaab",
    bytes(range(256)),
    b"the quick brown fox jumps over the lazy dog\n\t \x00",
])
def test_tree_conserves_frequencies(data):
    ft = huff.freq_table(data)
    root = huff.build_huffman_tree(ft)
    leaves, internals = huff.count_nodes(root)
    assert leaves == len(ft)
    assert internals == len(ft) - 1
    assert huff.leaf_frequency_sum(root) == len(data)
    assert root.frequency == len(data)


def test_codes_are_prefix_free():
    rng = random.Random(7)
    data = bytes(rng.choice(b"aaaaabbbccdefg\x00\n ") for _ in range(500))
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(huff.freq_table(data)))
    items = list(codes.items())
    for a, code_a in items:
        assert code_a
        for b, code_b in items:
            if a != b:
                assert not code_b.startswith(code_a)


def test_tie_break_is_deterministic():
    # Every symbol has the same count, so only the tie-break decides the shape
    ft = {s: 1 for s in b"zyxwvu"}
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(ft))
    reordered = dict(reversed(list(ft.items())))
    assert huff.generate_huffman_codes(huff.build_huffman_tree(reordered)) == codes


def test_tie_break_prefers_lower_symbol_on_the_left():
    root = huff.build_huffman_tree({ord("b"): 1, ord("a"): 1})
    assert root.left == huff.Leaf(ord("a"), 1)
    assert root.right == huff.Leaf(ord("b"), 1)


def test_abracadabra_code_lengths():
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(huff.freq_table(b"abracadabra")))
    assert len(codes[ord("a")]) == 1
    assert huff.encoded_bit_length(b"abracadabra", codes) == 23


def test_encode_packs_bits_msb_first():
    packed, pad = huff.huffman_encode(b"abba", {ord("a"): "0", ord("b"): "1"})
    assert packed == bytes([0b01100000])
    assert pad == 4


def test_encode_full_byte_has_no_padding():
    packed, pad = huff.huffman_encode(b"a" * 8, {ord("a"): "0"})
    assert packed == b"\x00"
    assert pad == 0


def test_encode_missing_code_raises():
    with pytest.raises(huff.MissingCodeError):
        huff.huffman_encode(b"abc", {ord("a"): "0", ord("b"): "1"})


def test_encoded_bit_length_missing_code_raises():
    with pytest.raises(huff.MissingCodeError):
        huff.encoded_bit_length(b"ax", {ord("a"): "0"})


def test_compactness_on_skewed_input():
    data = b"aaaaaaaab"
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(huff.freq_table(data)))
    assert huff.encoded_bit_length(data, codes) < 8 * len(data)


@pytest.mark.parametrize("data", [
    b"abracadabra",
    b"aaaa",
    b"x",
    bytes(range(256)) * 3,
])
def test_encode_decode_roundtrip(data):
    root = huff.build_huffman_tree(huff.freq_table(data))
    packed, pad = huff.huffman_encode(data, huff.generate_huffman_codes(root))
    assert huff.huffman_decode(packed, pad, root, expected_symbols=len(data)) == data


def test_decode_empty_stream():
    assert huff.huffman_decode(b"", 0, None) == b""


def test_decode_stream_ending_mid_code():
    root = huff.build_huffman_tree(huff.freq_table(b"abracadabra"))
    codes = huff.generate_huffman_codes(root)
    long_code = max(codes.values(), key=len)
    # Only the first bit of a multi-bit code, everything else padding
    first = int(long_code[0])
    with pytest.raises(huff.CorruptStreamError):
        huff.huffman_decode(bytes([first << 7]), 7, root)


def test_decode_single_leaf_rejects_one_bits():
    root = huff.build_huffman_tree({ord("a"): 2})
    assert huff.huffman_decode(b"\x00", 6, root) == b"aa"
    with pytest.raises(huff.CorruptStreamError):
        huff.huffman_decode(b"\x80", 6, root)


def test_decode_symbol_count_mismatch():
    root = huff.build_huffman_tree({ord("a"): 2})
    with pytest.raises(huff.CorruptStreamError):
        huff.huffman_decode(b"\x00", 6, root, expected_symbols=3)


@pytest.mark.parametrize("packed,pad", [(b"\x00", 8), (b"", 3), (b"\x00", -1)])
def test_decode_bad_padding(packed, pad):
    root = huff.build_huffman_tree({1: 1, 2: 1})
    with pytest.raises(huff.CorruptStreamError):
        huff.huffman_decode(packed, pad, root)


def test_decode_payload_without_tree():
    with pytest.raises(huff.CorruptStreamError):
        huff.huffman_decode(b"\x01", 0, None)


def test_errors_are_value_errors():
    assert issubclass(huff.CorruptStreamError, ValueError)
    assert issubclass(huff.MissingCodeError, huff.HuffmanError)
