"""
Steganography layer.

Modules:
    pixel: Format-independent LSB codec over flat channel bytes
    formats: Container format bindings (PNG)
    encoding: Whole-file embed / extract facade

Usage:
    >>> from stegpng_core.stego import embed_payload, extract_payload
    >>> stego_png = embed_payload(png_bytes, b"secret", "lsb")
    >>> extract_payload(stego_png, 48, "lsb")
    b'secret'
"""

from .encoding import (
    FileEncodingSupport,
    calculate_capacity,
    embed_payload,
    extract_payload,
    get_encoding_support,
)
from .formats import CarrierView, ContainerFormat, PngFormat
from .methods import EncodingMethod
from .pixel import PixelLSBCodec, bits_to_bytes, bytes_to_bits, embed_lsb, extract_lsb

__all__ = [
    "FileEncodingSupport",
    "calculate_capacity",
    "embed_payload",
    "extract_payload",
    "get_encoding_support",
    "CarrierView",
    "ContainerFormat",
    "PngFormat",
    "EncodingMethod",
    "PixelLSBCodec",
    "bits_to_bytes",
    "bytes_to_bits",
    "embed_lsb",
    "extract_lsb",
]
