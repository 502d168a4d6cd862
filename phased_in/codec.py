"""
High-level phased-in codec API.

    params = derive_params(6)
    buffer = encode(params, b'\\x00\\x01\\x02\\x03\\x04\\x05')
    assert decode(params, buffer) == b'\\x00\\x01\\x02\\x03\\x04\\x05'

The buffer does not record N, so the same params must be used on both
sides.
"""

import numpy as np
from typing import Optional

from .params import PhasedInParams, derive_params
from .encoder import PhasedInEncoder, as_symbol_array
from .decoder import PhasedInDecoder


def check_symbols(data, params: PhasedInParams) -> None:
    """
    Ensure every symbol in `data` lies in [0, N).

    Raises:
        ValueError: naming the first out-of-range symbol and its position
    """
    symbols = as_symbol_array(data)
    bad = np.flatnonzero((symbols < 0) | (symbols >= params.num_symbols))
    if bad.size:
        i = int(bad[0])
        raise ValueError(
            f"Symbol {int(symbols[i])} at position {i} is outside the "
            f"alphabet [0, {params.num_symbols})"
        )


def infer_num_symbols(data) -> int:
    """Smallest alphabet size that covers `data` (max symbol + 1)."""
    symbols = as_symbol_array(data)
    if symbols.size == 0:
        return 1
    return int(symbols.max()) + 1


def encode(params: PhasedInParams, data) -> bytes:
    """Encode `data` into a header-prefixed buffer."""
    check_symbols(data, params)
    return PhasedInEncoder(params).encode_bytes(data)


def decode(params: PhasedInParams, buffer: bytes) -> bytes:
    """Decode a buffer produced by `encode` with the same params."""
    return PhasedInDecoder(params).decode_bytes(buffer)


def verify_roundtrip(data, num_symbols: Optional[int] = None) -> bool:
    """Verify lossless roundtrip."""
    symbols = as_symbol_array(data)
    if num_symbols is None:
        num_symbols = infer_num_symbols(symbols)

    params = derive_params(num_symbols)
    decoded = decode(params, encode(params, symbols))

    return np.array_equal(symbols, np.frombuffer(decoded, dtype=np.uint8))
