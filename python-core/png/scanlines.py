"""
PNG scanline decoding.

The IDAT chunks of a file together carry one zlib stream. Inflated, it
holds ``height`` scanlines, each a filter-type byte followed by
``row_bytes`` of filtered sample data:

    +--------+---------------------------------+
    | filter | row_bytes of filtered samples   |   x height
    +--------+---------------------------------+

decode_image_data undoes the filters and returns the bare sample bytes.
encode_image_data writes them back with filter type 0 on every row, so
each sample byte is stored exactly as given.
"""

import logging
import zlib

from ..errors import InvalidImageDataError
from .header import HeaderFields

logger = logging.getLogger(__name__)

FILTER_NONE = 0
FILTER_SUB = 1
FILTER_UP = 2
FILTER_AVERAGE = 3
FILTER_PAETH = 4


def inflate(data: bytes) -> bytes:
    """Decompress a complete zlib stream."""
    decompressor = zlib.decompressobj()
    try:
        raw = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as e:
        raise InvalidImageDataError(f"Image data is not a valid zlib stream: {e}") from e
    if not decompressor.eof:
        raise InvalidImageDataError(
            "Image data ends before the end of the zlib stream",
            details={"compressed": len(data), "inflated": len(raw)},
        )
    return raw


def _paeth(a: int, b: int, c: int) -> int:
    p = a + b - c
    pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
    if pa <= pb and pa <= pc:
        return a
    if pb <= pc:
        return b
    return c


def unfilter_scanlines(raw: bytes, row_bytes: int, height: int, stride: int) -> bytes:
    """
    Reverse the per-row filters of inflated image data.

    Args:
        raw: Inflated scanlines, filter byte first on every row
        row_bytes: Sample bytes per row
        height: Number of rows
        stride: Bytes per complete pixel (at least 1)

    Returns:
        ``height * row_bytes`` sample bytes with filter bytes removed

    Raises:
        InvalidImageDataError: If rows are missing or a filter type is unknown
    """
    line_size = row_bytes + 1
    if len(raw) < line_size * height:
        raise InvalidImageDataError(
            f"Image data holds {len(raw)} bytes, header describes {line_size * height}",
            details={"required": line_size * height, "available": len(raw)},
        )

    out = bytearray()
    prior = bytearray(row_bytes)
    for y in range(height):
        start = y * line_size
        filter_type = raw[start]
        line = bytearray(raw[start + 1:start + line_size])

        if filter_type == FILTER_SUB:
            for i in range(stride, row_bytes):
                line[i] = (line[i] + line[i - stride]) & 0xFF
        elif filter_type == FILTER_UP:
            for i in range(row_bytes):
                line[i] = (line[i] + prior[i]) & 0xFF
        elif filter_type == FILTER_AVERAGE:
            for i in range(row_bytes):
                left = line[i - stride] if i >= stride else 0
                line[i] = (line[i] + ((left + prior[i]) >> 1)) & 0xFF
        elif filter_type == FILTER_PAETH:
            for i in range(row_bytes):
                left = line[i - stride] if i >= stride else 0
                upper_left = prior[i - stride] if i >= stride else 0
                line[i] = (line[i] + _paeth(left, prior[i], upper_left)) & 0xFF
        elif filter_type != FILTER_NONE:
            raise InvalidImageDataError(
                f"Unknown filter type {filter_type} on row {y}",
                details={"row": y, "filter_type": filter_type},
            )

        out += line
        prior = line

    return bytes(out)


def decode_image_data(data: bytes, header: HeaderFields) -> bytes:
    """Inflate and unfilter concatenated IDAT data into bare sample bytes."""
    raw = inflate(data)
    samples = unfilter_scanlines(raw, header.row_bytes, header.height, header.filter_stride)
    logger.debug(f"Decoded {header.height} scanlines of {header.row_bytes} bytes from {len(data)} compressed bytes")
    return samples


def encode_image_data(samples: bytes, header: HeaderFields) -> bytes:
    """Store sample bytes as filter-0 scanlines and deflate them."""
    row_bytes = header.row_bytes
    if len(samples) != row_bytes * header.height:
        raise ValueError(f"samples must be {row_bytes * header.height} bytes, got {len(samples)}")

    raw = b"".join(
        bytes([FILTER_NONE]) + samples[y * row_bytes:(y + 1) * row_bytes]
        for y in range(header.height)
    )
    return zlib.compress(raw)
