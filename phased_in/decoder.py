"""
Phased-in symbol decoder.

Walks the bit stream left to right:
    v = next m bits
    v <  P  ->  symbol v,                      advance m
    v >= P  ->  b = next bit
                symbol P + (v - P) * 2 + b,    advance m + 1

The (m + 1)-bit window at every bit position is computed up front with
numpy, so the walk only hops from one codeword start to the next.
"""

import numpy as np

from .params import PhasedInParams
from .bitstream import EncodedStream, bit_windows


DECODE_CHUNK = 1 << 16  # Bit positions evaluated per vectorized step


# ============================================================================
# Decoder
# ============================================================================

def _codeword_table(bits: np.ndarray, params: PhasedInParams):
    """Symbol and codeword length for a codeword starting at each position."""
    m, P = params.m, params.P

    windows = bit_windows(bits, m + 1)
    prefix = windows >> 1
    is_long = prefix >= P

    symbols = np.where(is_long, P + (prefix - P) * 2 + (windows & 1), prefix)
    steps = np.where(is_long, m + 1, m)
    return symbols, steps


def decode_bits(bits: np.ndarray, params: PhasedInParams) -> np.ndarray:
    """
    Decode a packed bit sequence back into symbols.

    The sequence must be an exact concatenation of codewords for the
    same alphabet size. A different N, or a corrupted buffer, decodes
    into wrong symbols without notice.

    Raises:
        ValueError: if the last codeword is cut off by the end of `bits`
    """
    bits = np.asarray(bits, dtype=np.uint8).ravel()
    n_bits = bits.size
    m = params.m

    # N = 1: one zero bit per symbol
    if m == 0:
        return np.zeros(n_bits, dtype=np.uint8)

    pieces = []
    cursor = 0
    last_start = 0

    while cursor < n_bits:
        chunk_end = min(cursor + DECODE_CHUNK, n_bits)

        # Lookahead so windows near chunk_end see real bits
        segment = bits[cursor:chunk_end + m + 1]
        symbols, steps = _codeword_table(segment, params)
        step_list = steps.tolist()

        starts = []
        local = 0
        limit = chunk_end - cursor
        while local < limit:
            starts.append(local)
            local += step_list[local]

        pieces.append(symbols[starts].astype(np.uint8))
        last_start = cursor + starts[-1]
        cursor += local

    if cursor > n_bits:
        raise ValueError(
            f"Truncated codeword at bit {last_start}: need {cursor - last_start} "
            f"bits, {n_bits - last_start} left"
        )

    if not pieces:
        return np.zeros(0, dtype=np.uint8)
    return np.concatenate(pieces)


# ============================================================================
# High-Level API
# ============================================================================

class PhasedInDecoder:
    def __init__(self, params: PhasedInParams):
        self.params = params

    def decode_stream(self, stream: EncodedStream) -> np.ndarray:
        return decode_bits(stream.bits, self.params)

    def decode_bytes(self, data: bytes) -> bytes:
        """Decode a header-prefixed buffer produced by the encoder."""
        stream = EncodedStream.from_encoded_bytes(data)
        return self.decode_stream(stream).tobytes()
