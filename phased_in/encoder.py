"""
Phased-in symbol encoder.

Short class (symbol < P):
    codeword = symbol, m bits
Long class (symbol >= P):
    offset   = symbol - P
    codeword = ((P + offset // 2) << 1) | (offset & 1), m + 1 bits

Long symbols are paired on a shared m-bit prefix >= P and told apart by
one trailing bit, so every m-bit prefix below P is a complete codeword
and every prefix at or above P announces one more bit.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Tuple

from .params import PhasedInParams
from .bitstream import EncodedStream


# ============================================================================
# Single-symbol encoding
# ============================================================================

def encode_symbol(symbol: int, params: PhasedInParams) -> Tuple[int, int]:
    """
    Encode one symbol in [0, N) to (code, length).

    The symbol is not range-checked; see codec.check_symbols.
    """
    m, P = params.m, params.P

    # N = 1: a single zero bit keeps the stream length tied to the symbol count
    if m == 0:
        return 0, 1

    mask = (1 << m) - 1

    if symbol < P:
        return symbol & mask, m

    offset = symbol - P
    base = (P + offset // 2) & mask
    return (base << 1) | (offset & 1), m + 1


def format_codeword(code: int, length: int) -> str:
    """Render a codeword as a bit string, e.g. (0b1110, 4) -> '1110'."""
    return format(code, f'0{length}b')


def codebook(params: PhasedInParams) -> List[Tuple[int, int]]:
    """Codewords for every symbol of the alphabet, indexed by symbol."""
    return [encode_symbol(s, params) for s in range(params.num_symbols)]


# ============================================================================
# Lookup table
# ============================================================================

@dataclass
class CodeTable:
    """Precomputed codewords for a whole alphabet."""
    codes: np.ndarray     # uint16, indexed by symbol
    lengths: np.ndarray   # uint8, indexed by symbol
    params: PhasedInParams

    @classmethod
    def from_params(cls, params: PhasedInParams) -> 'CodeTable':
        """Build the table once per alphabet."""
        entries = codebook(params)
        codes = np.array([c for c, _ in entries], dtype=np.uint16)
        lengths = np.array([n for _, n in entries], dtype=np.uint8)
        return cls(codes=codes, lengths=lengths, params=params)

    def __len__(self) -> int:
        return len(self.codes)


def as_symbol_array(data) -> np.ndarray:
    """Flatten bytes-like or integer input into a 1-D integer array."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(data), dtype=np.uint8)
    return np.asarray(data, dtype=np.int64).flatten()


# ============================================================================
# Batch encoding
# ============================================================================

def encode_all(data, params: PhasedInParams, table: CodeTable = None) -> EncodedStream:
    """
    Encode every symbol of `data` in order and pack the codewords.

    Symbols must already be known to lie in [0, N).
    """
    if table is None:
        table = CodeTable.from_params(params)

    symbols = as_symbol_array(data)
    codes = table.codes[symbols]
    lengths = table.lengths[symbols]

    return EncodedStream.from_codes(codes, lengths)


# ============================================================================
# High-Level API
# ============================================================================

class PhasedInEncoder:
    def __init__(self, params: PhasedInParams):
        self.params = params
        self.table = CodeTable.from_params(params)

    def encode_symbol(self, symbol: int) -> Tuple[int, int]:
        return int(self.table.codes[symbol]), int(self.table.lengths[symbol])

    def encode(self, data) -> EncodedStream:
        return encode_all(data, self.params, self.table)

    def encode_bytes(self, data) -> bytes:
        return self.encode(data).to_bytes()
