"""
Phased-in code parameters.

For an alphabet of N symbols:
    m = floor(log2(N))    short codeword length
    p = N - 2^m           symbols that need m+1 bits
    P = 2^m - p           symbols that fit in m bits (indices 0..P-1)

Example (N = 9):  m = 3, p = 1, P = 7
    symbols 0..6 -> 3-bit codes 000..110
    symbols 7, 8 -> 4-bit codes 1110, 1111
"""

import numpy as np
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

MAX_SYMBOLS = 256       # One byte per symbol


# ============================================================================
# Data Structures
# ============================================================================

@dataclass(frozen=True)
class PhasedInParams:
    """Parameters shared by the encoder and decoder."""
    num_symbols: int
    m: int
    p: int
    P: int

    @classmethod
    def from_num_symbols(cls, num_symbols: int) -> 'PhasedInParams':
        """Derive (m, p, P) for an alphabet of `num_symbols` symbols."""
        if isinstance(num_symbols, bool) or not isinstance(num_symbols, (int, np.integer)):
            raise ValueError(f"Alphabet size must be an integer, got {num_symbols!r}")
        num_symbols = int(num_symbols)
        if not 1 <= num_symbols <= MAX_SYMBOLS:
            raise ValueError(
                f"Alphabet size must be in [1, {MAX_SYMBOLS}], got {num_symbols}"
            )

        m = num_symbols.bit_length() - 1
        p = num_symbols - (1 << m)
        P = (1 << m) - p

        return cls(num_symbols=num_symbols, m=m, p=p, P=P)

    @property
    def short_code_count(self) -> int:
        return self.P

    @property
    def long_code_count(self) -> int:
        # N = 1 has no long class in (m, p, P) terms but still spends one bit
        return self.num_symbols - self.P

    @property
    def max_code_length(self) -> int:
        if self.p > 0 or self.m == 0:
            return self.m + 1
        return self.m


def derive_params(num_symbols: int) -> PhasedInParams:
    """Derive phased-in parameters for `num_symbols` (1..256)."""
    return PhasedInParams.from_num_symbols(num_symbols)

