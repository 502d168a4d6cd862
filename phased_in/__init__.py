"""
Phased-In (Minimal Binary) Codes

A small codec that assigns near-equal-length, prefix-free codewords
to a fixed alphabet of N symbols, packed into a header-prefixed
byte stream.
"""

__version__ = "0.1.0"

from .params import PhasedInParams, derive_params
from .encoder import CodeTable, PhasedInEncoder, encode_symbol, encode_all, codebook
from .bitstream import EncodedStream, pack_codes
from .decoder import PhasedInDecoder, decode_bits
from .codec import encode, decode, check_symbols, infer_num_symbols, verify_roundtrip
