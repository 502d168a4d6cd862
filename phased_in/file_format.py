"""
On-disk files for phased-in encoded data.

A compressed file is exactly the serialized buffer:

  - Padding: 1 byte (unused bits in the last payload byte)
  - Payload: packed codewords, MSB-first

No magic, no alphabet size. Callers keep N next to the file.
"""

from pathlib import Path
from dataclasses import dataclass

from .params import derive_params
from .bitstream import EncodedStream
from .codec import encode, decode


@dataclass
class FileStats:
    """Sizes recorded by a compress/decompress call."""
    input_path: Path
    output_path: Path
    raw_bytes: int        # Symbol file size, one byte per symbol
    encoded_bytes: int    # Serialized buffer size, header included
    num_symbols: int
    compressed: bool      # True for compress_file, False for decompress_file

    @property
    def input_bytes(self) -> int:
        return self.raw_bytes if self.compressed else self.encoded_bytes

    @property
    def output_bytes(self) -> int:
        return self.encoded_bytes if self.compressed else self.raw_bytes

    @property
    def compression_ratio(self) -> float:
        """Raw size over encoded size; below 1 when encoding grew the data."""
        return self.raw_bytes / self.encoded_bytes


def write_encoded(path: Path, stream: EncodedStream) -> int:
    """Write a stream in serialized form. Returns bytes written."""
    data = stream.to_bytes()
    with open(path, 'wb') as f:
        f.write(data)
    return len(data)


def read_encoded(path: Path) -> EncodedStream:
    """Read a file written by `write_encoded`."""
    with open(path, 'rb') as f:
        data = f.read()
    return EncodedStream.from_encoded_bytes(data)


def compress_file(
    input_path: Path,
    output_path: Path,
    num_symbols: int,
    progress: bool = True,
) -> FileStats:
    """
    Encode every byte of `input_path` into `output_path`.

    Args:
        input_path: File of raw symbols, one byte each
        output_path: Destination for the serialized buffer
        num_symbols: Alphabet size N; every input byte must be < N
        progress: Print a summary line

    Returns:
        FileStats with input/output sizes
    """
    input_path, output_path = Path(input_path), Path(output_path)
    params = derive_params(num_symbols)

    raw = input_path.read_bytes()
    encoded = encode(params, raw)
    output_path.write_bytes(encoded)

    stats = FileStats(
        input_path=input_path,
        output_path=output_path,
        raw_bytes=len(raw),
        encoded_bytes=len(encoded),
        num_symbols=num_symbols,
        compressed=True,
    )

    if progress:
        print(f"  {input_path.name[:40]:<40} {stats.input_bytes:>10,} -> "
              f"{stats.output_bytes:>10,} bytes  {stats.compression_ratio:.2f}x "
              f"(N={num_symbols}, m={params.m})")

    return stats


def decompress_file(
    input_path: Path,
    output_path: Path,
    num_symbols: int,
    progress: bool = True,
) -> FileStats:
    """Decode a file written by `compress_file` with the same `num_symbols`."""
    input_path, output_path = Path(input_path), Path(output_path)
    params = derive_params(num_symbols)

    encoded = input_path.read_bytes()
    decoded = decode(params, encoded)
    output_path.write_bytes(decoded)

    stats = FileStats(
        input_path=input_path,
        output_path=output_path,
        raw_bytes=len(decoded),
        encoded_bytes=len(encoded),
        num_symbols=num_symbols,
        compressed=False,
    )

    if progress:
        print(f"  {input_path.name[:40]:<40} {stats.input_bytes:>10,} -> "
              f"{stats.output_bytes:>10,} bytes (N={num_symbols})")

    return stats
