#!/usr/bin/env python3
"""
Tests for the high-level codec API, statistics and file helpers.
"""

import sys
import tempfile
from pathlib import Path
import numpy as np

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from phased_in.params import derive_params, MAX_SYMBOLS
from phased_in.codec import (
    encode, decode, check_symbols, infer_num_symbols, verify_roundtrip
)
from phased_in.analysis import (
    compute_entropy, expected_code_length, compute_code_efficiency, fixed_width_bits
)
from phased_in.file_format import (
    compress_file, decompress_file, write_encoded, read_encoded
)
from phased_in.encoder import encode_all


def test_roundtrip_all_alphabets():
    """decode(encode(S)) == S for every N in [1, 256]."""
    np.random.seed(42)

    for n in range(1, MAX_SYMBOLS + 1):
        params = derive_params(n)
        data = np.random.randint(0, n, size=257).astype(np.uint8).tobytes()

        assert decode(params, encode(params, data)) == data, f"Roundtrip failed for N={n}"

    print("✓ Roundtrip for N in [1, 256]")


def test_roundtrip_six():
    """N=6 scenario produces the known buffer."""
    params = derive_params(6)
    data = bytes([0, 1, 2, 3, 4, 5])

    buffer = encode(params, data)

    assert buffer == bytes([0, 0x19, 0x77])
    assert decode(params, buffer) == data

    print("✓ Roundtrip N=6")


def test_roundtrip_empty():
    """Empty input encodes to a lone zero header."""
    params = derive_params(9)

    assert encode(params, b'') == b'\x00'
    assert decode(params, b'\x00') == b''

    print("✓ Roundtrip empty")


def test_check_symbols():
    """Out-of-range symbols are reported with their position."""
    params = derive_params(6)

    check_symbols(bytes([0, 5, 3]), params)

    with pytest.raises(ValueError, match="position 2"):
        check_symbols(bytes([0, 5, 6]), params)

    with pytest.raises(ValueError):
        check_symbols([-1], params)

    with pytest.raises(ValueError):
        encode(params, bytes([7]))

    print("✓ check_symbols")


def test_infer_num_symbols():
    """Alphabet size from the observed maximum."""
    assert infer_num_symbols(bytes([3, 0, 8, 2])) == 9
    assert infer_num_symbols(b'') == 1
    assert infer_num_symbols(bytes([255])) == 256

    print("✓ infer_num_symbols")


def test_verify_roundtrip():
    """verify_roundtrip with explicit and inferred N."""
    np.random.seed(42)
    data = np.random.randint(0, 37, size=5000).astype(np.uint8)

    assert verify_roundtrip(data)
    assert verify_roundtrip(data, num_symbols=37)
    assert verify_roundtrip(data.tobytes(), num_symbols=200)

    print("✓ verify_roundtrip")


def test_compression_on_small_alphabet():
    """Uniform data over N=6 costs 16/6 bits per symbol."""
    params = derive_params(6)
    data = bytes(range(6)) * 1000

    stream = encode_all(data, params)
    buffer = encode(params, data)

    assert stream.bits_per_symbol == pytest.approx(16 / 6)
    assert len(buffer) == stream.serialized_size
    assert stream.compression_ratio > 2.9

    print(f"✓ Compression N=6 (ratio: {stream.compression_ratio:.2f}x)")


def test_entropy():
    """Entropy of balanced data is log2(N)."""
    assert compute_entropy(bytes(range(8)) * 10, 8) == pytest.approx(3.0)
    assert compute_entropy(bytes(10), 8) == 0.0
    assert compute_entropy(b'', 8) == 0.0

    print("✓ compute_entropy")


def test_expected_code_length():
    """Mean codeword length is within 0.09 bits of log2(N) for uniform data."""
    assert expected_code_length(derive_params(8)) == pytest.approx(3.0)
    assert expected_code_length(derive_params(6)) == pytest.approx(16 / 6)

    for n in range(2, MAX_SYMBOLS + 1):
        length = expected_code_length(derive_params(n))
        assert np.log2(n) <= length < np.log2(n) + 0.09, f"N={n}: {length}"

    # All mass on a short symbol
    probs = np.zeros(6)
    probs[0] = 1.0
    assert expected_code_length(derive_params(6), probs) == pytest.approx(2.0)

    print("✓ expected_code_length")


def test_code_efficiency():
    """Savings against a fixed-width code."""
    params = derive_params(6)
    stats = compute_code_efficiency(bytes(range(6)) * 10, params)

    assert stats['n_symbols'] == 60
    assert stats['fixed_bits'] == 3
    assert stats['total_bits'] == 160
    assert stats['bits_per_symbol'] == pytest.approx(16 / 6)
    assert stats['savings_percent'] == pytest.approx((1 - (16 / 6) / 3) * 100)
    assert stats['entropy'] == pytest.approx(np.log2(6))

    assert fixed_width_bits(1) == 1
    assert fixed_width_bits(2) == 1
    assert fixed_width_bits(9) == 4
    assert fixed_width_bits(256) == 8

    print(f"✓ Code efficiency ({stats['savings_percent']:.1f}% saved)")


def test_file_roundtrip():
    """compress_file / decompress_file restore the input."""
    np.random.seed(42)
    data = np.random.randint(0, 26, size=10_000).astype(np.uint8).tobytes()

    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        raw_path = tmp / "input.bin"
        packed_path = tmp / "input.pic"
        restored_path = tmp / "restored.bin"
        raw_path.write_bytes(data)

        stats = compress_file(raw_path, packed_path, 26, progress=False)
        assert stats.input_bytes == len(data)
        assert stats.output_bytes == packed_path.stat().st_size
        assert stats.compression_ratio > 1.5

        restored = decompress_file(packed_path, restored_path, 26, progress=False)
        assert restored_path.read_bytes() == data
        assert restored.input_bytes == stats.output_bytes
        assert restored.output_bytes == len(data)
        assert restored.compression_ratio == stats.compression_ratio

    print("✓ File roundtrip")


def test_file_stats_when_encoding_grows():
    """N=256 spends 8 bits per symbol, so the header makes the file larger."""
    data = bytes(range(256)) * 4

    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        raw_path = tmp / "input.bin"
        packed_path = tmp / "input.pic"
        empty_path = tmp / "empty.bin"
        raw_path.write_bytes(data)
        empty_path.write_bytes(b'')

        stats = compress_file(raw_path, packed_path, 256, progress=False)
        assert (stats.raw_bytes, stats.encoded_bytes) == (1024, 1025)
        assert stats.compression_ratio == 1024 / 1025
        assert stats.compression_ratio < 1

        restored = decompress_file(packed_path, tmp / "restored.bin", 256, progress=False)
        assert (restored.raw_bytes, restored.encoded_bytes) == (1024, 1025)
        assert restored.compression_ratio < 1

        # Zero raw bytes still cost the header byte
        empty = compress_file(empty_path, tmp / "empty.pic", 9, progress=False)
        assert empty.encoded_bytes == 1
        assert empty.compression_ratio == 0.0

    print(f"✓ File stats for N=256 (ratio: {stats.compression_ratio:.4f}x)")


def test_write_read_encoded():
    """Streams survive a trip through disk."""
    params = derive_params(15)
    stream = encode_all(bytes(range(15)), params)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "stream.pic"
        written = write_encoded(path, stream)

        assert written == stream.serialized_size
        assert read_encoded(path) == stream

    print("✓ write_encoded / read_encoded")


def test_compress_file_rejects_large_symbols():
    """Bytes outside the alphabet stop compression before writing."""
    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        raw_path = tmp / "input.bin"
        raw_path.write_bytes(bytes([0, 1, 2, 200]))

        with pytest.raises(ValueError):
            compress_file(raw_path, tmp / "out.pic", 4, progress=False)

        assert not (tmp / "out.pic").exists()

    print("✓ compress_file rejects out-of-range bytes")


def run_all_tests():
    """Run all tests."""
    print("="*60)
    print(" Phased-In Codec Tests")
    print("="*60)

    test_roundtrip_all_alphabets()
    test_roundtrip_six()
    test_roundtrip_empty()
    test_check_symbols()
    test_infer_num_symbols()
    test_verify_roundtrip()
    test_compression_on_small_alphabet()
    test_entropy()
    test_expected_code_length()
    test_code_efficiency()
    test_file_roundtrip()
    test_file_stats_when_encoding_grows()
    test_write_read_encoded()
    test_compress_file_rejects_large_symbols()

    print("\n" + "="*60)
    print(" All tests passed!")
    print("="*60)


if __name__ == "__main__":
    run_all_tests()
