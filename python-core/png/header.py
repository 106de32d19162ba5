"""PNG image header (IHDR) fields."""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from ..errors import MalformedHeaderError

HEADER_LENGTH = 13

_HEADER = struct.Struct(">IIBBBBB")


class ColorType(IntEnum):
    """PNG colour types."""

    GRAYSCALE = 0
    RGB = 2
    PALETTE = 3
    GRAYSCALE_ALPHA = 4
    RGBA = 6


# Samples per pixel, in the order they are stored
CHANNELS = {
    ColorType.GRAYSCALE: 1,
    ColorType.RGB: 3,
    ColorType.PALETTE: 1,
    ColorType.GRAYSCALE_ALPHA: 2,
    ColorType.RGBA: 4,
}


@dataclass(frozen=True)
class HeaderFields:
    """
    Structured view of the 13-byte IHDR payload.

    Values are taken as-is; checking colour type / bit depth combinations
    is left to callers that need strict conformance.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        bit_depth: Bits per sample (or per palette index)
        color_type: PNG colour type code
        compression_method: Always 0 in conforming files
        filter_method: Always 0 in conforming files
        interlace_method: 0 (none) or 1 (Adam7)
    """

    width: int
    height: int
    bit_depth: int
    color_type: int
    compression_method: int
    filter_method: int
    interlace_method: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "HeaderFields":
        if len(data) < HEADER_LENGTH:
            raise MalformedHeaderError(
                f"Header data too short: {len(data)} bytes (need {HEADER_LENGTH})",
                details={"required": HEADER_LENGTH, "available": len(data)},
            )
        return cls(*_HEADER.unpack_from(data))

    def to_bytes(self) -> bytes:
        return _HEADER.pack(
            self.width,
            self.height,
            self.bit_depth,
            self.color_type,
            self.compression_method,
            self.filter_method,
            self.interlace_method,
        )

    @property
    def channels(self) -> Optional[int]:
        """Samples per pixel, or None for an unknown colour type."""
        try:
            return CHANNELS[ColorType(self.color_type)]
        except ValueError:
            return None

    @property
    def alpha_channel(self) -> Optional[int]:
        if self.color_type == ColorType.GRAYSCALE_ALPHA:
            return 1
        if self.color_type == ColorType.RGBA:
            return 3
        return None

    @property
    def sample_size(self) -> int:
        """Bytes per sample (sub-byte depths share a byte)."""
        return 2 if self.bit_depth == 16 else 1

    @property
    def row_bytes(self) -> int:
        """Bytes of sample data per scanline, excluding the filter byte."""
        return -(-self.width * (self.channels or 0) * self.bit_depth // 8)

    @property
    def filter_stride(self) -> int:
        """Byte distance to the corresponding byte of the previous pixel."""
        return max(1, -(-(self.channels or 0) * self.bit_depth // 8))


def parse_header(data: bytes) -> HeaderFields:
    """Decode IHDR chunk data into HeaderFields."""
    return HeaderFields.from_bytes(data)
