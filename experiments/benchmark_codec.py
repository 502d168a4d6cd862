#!/usr/bin/env python3
"""
Experiment: Benchmark phased-in codec encode/decode throughput.

Measures:
1. Encode throughput (symbols/sec)
2. Decode throughput (symbols/sec)
3. Bits per symbol vs entropy and vs a fixed-width code
"""

import sys
from pathlib import Path
import argparse
import time
import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from phased_in.params import derive_params
from phased_in.encoder import PhasedInEncoder
from phased_in.decoder import PhasedInDecoder
from phased_in.analysis import compute_code_efficiency


def benchmark_synthetic(n_elements: int, num_symbols: int, n_trials: int = 3) -> dict:
    """Benchmark on uniform random symbols."""
    np.random.seed(42)

    params = derive_params(num_symbols)
    symbols = np.random.randint(0, num_symbols, size=n_elements).astype(np.uint8)
    efficiency = compute_code_efficiency(symbols, params)

    encoder = PhasedInEncoder(params)
    decoder = PhasedInDecoder(params)

    # Benchmark encode
    encode_times = []
    for _ in range(n_trials):
        t0 = time.perf_counter()
        buffer = encoder.encode_bytes(symbols)
        encode_times.append(time.perf_counter() - t0)

    avg_encode = np.mean(encode_times)

    # Benchmark decode
    decode_times = []
    for _ in range(n_trials):
        t0 = time.perf_counter()
        decoded = decoder.decode_bytes(buffer)
        decode_times.append(time.perf_counter() - t0)

    avg_decode = np.mean(decode_times)

    # Verify correctness
    is_correct = decoded == symbols.tobytes()

    return {
        'n_elements': n_elements,
        'num_symbols': num_symbols,
        'm': params.m,
        'entropy': efficiency['entropy'],
        'fixed_bits': efficiency['fixed_bits'],
        'bits_per_symbol': efficiency['bits_per_symbol'],
        'savings_percent': efficiency['savings_percent'],
        'compressed_bytes': len(buffer),
        'encode_time_ms': avg_encode * 1000,
        'decode_time_ms': avg_decode * 1000,
        'encode_throughput_M': n_elements / avg_encode / 1e6,
        'decode_throughput_M': n_elements / avg_decode / 1e6,
        'is_correct': is_correct,
    }


def main():
    parser = argparse.ArgumentParser(description="Benchmark phased-in codes")
    parser.add_argument("--sizes", type=int, nargs="+", default=[10_000, 100_000],
                        help="Number of symbols per run")
    parser.add_argument("--symbols", type=int, nargs="+", default=[3, 6, 26, 100, 200],
                        help="Alphabet sizes to test")
    parser.add_argument("--trials", type=int, default=3, help="Timing trials per run")
    args = parser.parse_args()

    print("="*78)
    print(" Phased-In Codec Benchmark")
    print("="*78)

    print(f"{'Size':<10} {'N':>4} {'Entropy':>8} {'Fixed':>6} {'Bits/sym':>9} "
          f"{'Saved':>7} {'Encode':>12} {'Decode':>12}")
    print("-"*78)

    all_correct = True
    for size in args.sizes:
        for n in args.symbols:
            r = benchmark_synthetic(size, n, args.trials)
            all_correct &= r['is_correct']
            print(f"{size:<10,} {n:>4} {r['entropy']:>8.3f} {r['fixed_bits']:>6} "
                  f"{r['bits_per_symbol']:>9.3f} {r['savings_percent']:>6.1f}% "
                  f"{r['encode_throughput_M']:>8.2f} M/s "
                  f"{r['decode_throughput_M']:>8.2f} M/s")

    print("\n" + "="*78)
    print(f" Lossless: {'YES' if all_correct else 'NO'}")
    print("="*78)


if __name__ == "__main__":
    main()
