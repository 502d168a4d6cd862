"""
Bit-stream packing for phased-in codewords.

Serialized layout:
  - byte 0:   number of unused (padding) bits in the last payload byte, 0..7
  - bytes 1+: codeword bits, MSB-first within each byte

The alphabet size is not part of the layout; the decoder must be given
the same N the encoder used.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

BYTE_BITS = 8
HEADER_BYTES = 1


# ============================================================================
# Packing
# ============================================================================

PACK_CHUNK = 1 << 14    # Codewords per vectorized packing step


def _pack_chunk(codes: np.ndarray, lengths: np.ndarray) -> np.ndarray:
    codes = codes.astype(np.int64)
    lengths = lengths.astype(np.int64)

    # Row i, column j holds bit (length_i - 1 - j) of code_i
    width = int(lengths.max())
    shifts = lengths[:, None] - 1 - np.arange(width)[None, :]
    valid = shifts >= 0

    bits = (codes[:, None] >> np.where(valid, shifts, 0)) & 1

    # Boolean indexing walks rows in order, so codeword order is kept
    return bits[valid].astype(np.uint8)


def pack_codes(codes: np.ndarray, lengths: np.ndarray) -> np.ndarray:
    """
    Concatenate variable-length codewords into one bit array.

    For each (code, length) pair the low `length` bits of `code` are
    emitted most significant first. No padding between codewords.
    Codewords are expanded PACK_CHUNK at a time, so working memory
    stays bounded apart from the output itself.

    Returns:
        uint8 array of 0/1 values
    """
    codes = np.asarray(codes, dtype=np.uint16).ravel()
    lengths = np.asarray(lengths, dtype=np.uint8).ravel()

    out = np.empty(int(lengths.sum(dtype=np.int64)), dtype=np.uint8)
    pos = 0

    for start in range(0, codes.size, PACK_CHUNK):
        chunk = _pack_chunk(codes[start:start + PACK_CHUNK],
                            lengths[start:start + PACK_CHUNK])
        out[pos:pos + chunk.size] = chunk
        pos += chunk.size

    return out


def bit_windows(bits: np.ndarray, width: int) -> np.ndarray:
    """
    MSB-first integer value of bits[i:i + width] for every position i.

    Windows that run past the end read zeros.
    """
    bits = np.asarray(bits, dtype=np.uint8)
    n = bits.size
    padded = np.concatenate([bits, np.zeros(width, dtype=np.uint8)])

    windows = np.zeros(n, dtype=np.int32)
    for k in range(width):
        windows = (windows << 1) | padded[k:k + n]
    return windows


# ============================================================================
# Data Structures
# ============================================================================

@dataclass(eq=False)
class EncodedStream:
    """Packed codeword bits plus bookkeeping for serialization."""
    bits: np.ndarray                   # uint8 0/1 values, MSB-first
    n_symbols: Optional[int] = None    # Unknown when rebuilt from bytes

    @classmethod
    def from_codes(cls, codes: np.ndarray, lengths: np.ndarray) -> 'EncodedStream':
        """Build a stream from parallel code/length arrays."""
        return cls(bits=pack_codes(codes, lengths), n_symbols=len(codes))

    @classmethod
    def from_encoded_bytes(cls, data: bytes) -> 'EncodedStream':
        """
        Deserialize a header-prefixed buffer produced by `to_bytes`.

        Raises:
            ValueError: if the header byte is missing or inconsistent
                with the payload length
        """
        raw = np.frombuffer(bytes(data), dtype=np.uint8)
        if raw.size < HEADER_BYTES:
            raise ValueError("Encoded buffer is empty, expected a header byte")

        unused = int(raw[0])
        if unused >= BYTE_BITS:
            raise ValueError(f"Invalid padding header: {unused} (must be 0..7)")

        payload = np.unpackbits(raw[HEADER_BYTES:])
        n_used = payload.size - unused
        if n_used < 0:
            raise ValueError(
                f"Padding header {unused} exceeds payload of {payload.size} bits"
            )

        return cls(bits=payload[:n_used])

    @classmethod
    def from_bytes(cls, data: bytes) -> 'EncodedStream':
        """Treat every bit of a raw (headerless) buffer as stream content."""
        raw = np.frombuffer(bytes(data), dtype=np.uint8)
        return cls(bits=np.unpackbits(raw))

    def to_bytes(self) -> bytes:
        """Serialize to header byte + MSB-first payload."""
        payload = np.packbits(self.bits)  # zero-pads the final byte
        return bytes([self.unused_bits]) + payload.tobytes()

    @property
    def n_bits(self) -> int:
        return int(self.bits.size)

    @property
    def unused_bits(self) -> int:
        return (-self.n_bits) % BYTE_BITS

    @property
    def serialized_size(self) -> int:
        return HEADER_BYTES + (self.n_bits + BYTE_BITS - 1) // BYTE_BITS

    @property
    def bits_per_symbol(self) -> float:
        if not self.n_symbols:
            return 0.0
        return self.n_bits / self.n_symbols

    @property
    def compression_ratio(self) -> float:
        """Raw size (one byte per symbol) over serialized size."""
        if self.n_symbols is None:
            return float('nan')
        return self.n_symbols / self.serialized_size

    def __len__(self) -> int:
        return self.n_bits

    def __eq__(self, other) -> bool:
        if not isinstance(other, EncodedStream):
            return NotImplemented
        return np.array_equal(self.bits, other.bits)

    def __repr__(self) -> str:
        return (f"EncodedStream(n_bits={self.n_bits}, n_symbols={self.n_symbols}, "
                f"unused_bits={self.unused_bits})")
