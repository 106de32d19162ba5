"""
PNG container layer.

Modules:
    chunk_types: Chunk type codes and their property-bit predicates
    chunks: Chunk framing (length, type, data, CRC) and signature handling
    header: IHDR field decoding
    scanlines: IDAT inflate / unfilter and filter-0 re-encoding
    container: Whole-file parse / serialise
"""

from .chunk_types import (
    ChunkType,
    KNOWN_CHUNK_TYPES,
    describe,
    is_critical,
    is_known,
    is_private,
    reserved_set,
    safe_to_copy,
)
from .chunks import (
    PNG_SIGNATURE,
    ChecksumScope,
    ChunkRecord,
    compute_crc,
    read_next_chunk,
    read_signature,
    write_chunk,
    write_signature,
)
from .container import PngContainer, parse_png, serialize_png
from .header import ColorType, HeaderFields, parse_header
from .scanlines import decode_image_data, encode_image_data, inflate, unfilter_scanlines

__all__ = [
    "ChunkType",
    "KNOWN_CHUNK_TYPES",
    "describe",
    "is_critical",
    "is_known",
    "is_private",
    "reserved_set",
    "safe_to_copy",
    "PNG_SIGNATURE",
    "ChecksumScope",
    "ChunkRecord",
    "compute_crc",
    "read_next_chunk",
    "read_signature",
    "write_chunk",
    "write_signature",
    "PngContainer",
    "parse_png",
    "serialize_png",
    "ColorType",
    "HeaderFields",
    "parse_header",
    "decode_image_data",
    "encode_image_data",
    "inflate",
    "unfilter_scanlines",
]
