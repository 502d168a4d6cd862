"""
Code-length statistics for phased-in codes.

Compares achieved bits per symbol with the data's Shannon entropy and
with a fixed-width ceil(log2 N)-bit code.
"""

import numpy as np
from typing import Optional

from .params import PhasedInParams
from .encoder import CodeTable, as_symbol_array


def fixed_width_bits(num_symbols: int) -> int:
    """Bits per symbol of a plain fixed-width code for N symbols."""
    return max((num_symbols - 1).bit_length(), 1)


def compute_entropy(data, num_symbols: int) -> float:
    """
    Compute Shannon entropy of `data` in bits per symbol.

    For uniform data over N symbols, entropy = log2(N).
    """
    symbols = as_symbol_array(data)
    if symbols.size == 0:
        return 0.0

    counts = np.bincount(symbols, minlength=num_symbols)
    probs = counts / counts.sum()
    probs = probs[probs > 0]  # Avoid log(0)

    return float(-np.sum(probs * np.log2(probs)))


def expected_code_length(params: PhasedInParams, probs: Optional[np.ndarray] = None) -> float:
    """
    Mean codeword length under a symbol distribution.

    Defaults to the uniform distribution, where phased-in codes are
    within 0.086 bits of log2(N).
    """
    lengths = CodeTable.from_params(params).lengths.astype(np.float64)
    if probs is None:
        return float(lengths.mean())

    probs = np.asarray(probs, dtype=np.float64)
    return float(np.dot(probs / probs.sum(), lengths))


def compute_code_efficiency(data, params: PhasedInParams) -> dict:
    """
    Analyze how well the phased-in code fits `data`.

    Returns:
        Dictionary with entropy, fixed-width bits, achieved bits per
        symbol, savings and compression ratio over fixed width.
    """
    symbols = as_symbol_array(data)
    table = CodeTable.from_params(params)

    n_symbols = int(symbols.size)
    total_bits = int(table.lengths[symbols].astype(np.int64).sum())
    bits_per_symbol = total_bits / n_symbols if n_symbols > 0 else 0.0

    fixed_bits = fixed_width_bits(params.num_symbols)
    savings_percent = (1 - bits_per_symbol / fixed_bits) * 100 if n_symbols else 0.0
    compression_ratio = fixed_bits / bits_per_symbol if bits_per_symbol > 0 else float('inf')

    return {
        'n_symbols': n_symbols,
        'entropy': compute_entropy(symbols, params.num_symbols),
        'fixed_bits': fixed_bits,
        'bits_per_symbol': bits_per_symbol,
        'total_bits': total_bits,
        'savings_percent': savings_percent,
        'compression_ratio': compression_ratio,
    }
