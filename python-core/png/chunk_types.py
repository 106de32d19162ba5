"""
PNG chunk type registry.

A chunk type is a 4-byte code. Bit 5 (value 32) of each byte is a property
flag:

    byte 0: ancillary bit     (clear = critical)
    byte 1: private bit       (set = private)
    byte 2: reserved bit      (set = invalid type code)
    byte 3: safe-to-copy bit  (set = editors may copy it when unknown)

The named constants below cover the chunk types the container layer
recognises explicitly. Anything else is carried through opaquely.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union

_PROPERTY_BIT = 32


@dataclass(frozen=True)
class ChunkType:
    """
    Immutable 4-byte chunk type code.

    Example:
        >>> ChunkType(b"IDAT").is_critical
        True
    """

    code: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.code, (bytes, bytearray, memoryview)):
            raise TypeError("chunk type code must be a bytes-like object")
        code = bytes(self.code)
        if len(code) != 4:
            raise ValueError(f"chunk type code must be exactly 4 bytes, got {len(code)}")
        object.__setattr__(self, "code", code)

    @property
    def name(self) -> str:
        return self.code.decode("latin-1")

    @property
    def is_critical(self) -> bool:
        return is_critical(self)

    @property
    def is_private(self) -> bool:
        return is_private(self)

    @property
    def reserved_set(self) -> bool:
        return reserved_set(self)

    @property
    def safe_to_copy(self) -> bool:
        return safe_to_copy(self)

    def __bytes__(self) -> bytes:
        return self.code

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ChunkType({self.code!r})"


ChunkTypeLike = Union[ChunkType, bytes, bytearray]


def _code(chunk_type: ChunkTypeLike) -> bytes:
    if isinstance(chunk_type, ChunkType):
        return chunk_type.code
    return ChunkType(chunk_type).code


def is_critical(chunk_type: ChunkTypeLike) -> bool:
    """Return True if the chunk must be understood by every reader."""
    return _code(chunk_type)[0] & _PROPERTY_BIT == 0


def is_private(chunk_type: ChunkTypeLike) -> bool:
    """Return True if the chunk type is vendor-private."""
    return _code(chunk_type)[1] & _PROPERTY_BIT != 0


def reserved_set(chunk_type: ChunkTypeLike) -> bool:
    """
    Return True if the reserved bit of the type code is set.

    A set reserved bit makes the type code invalid.
    """
    return _code(chunk_type)[2] & _PROPERTY_BIT != 0


def safe_to_copy(chunk_type: ChunkTypeLike) -> bool:
    """Return True if an editor may copy the chunk unmodified when it does not know it."""
    return _code(chunk_type)[3] & _PROPERTY_BIT != 0


# -- Critical chunks --

IHDR = ChunkType(b"IHDR")
PLTE = ChunkType(b"PLTE")
IDAT = ChunkType(b"IDAT")
IEND = ChunkType(b"IEND")

# -- Ancillary chunks --

TRNS = ChunkType(b"tRNS")
BKGD = ChunkType(b"bKGD")
TIME = ChunkType(b"tIME")
PHYS = ChunkType(b"pHYs")
CHRM = ChunkType(b"cHRM")
GAMA = ChunkType(b"gAMA")
SRGB = ChunkType(b"sRGB")
ICCP = ChunkType(b"iCCP")
CICP = ChunkType(b"cICP")
MDCV = ChunkType(b"mDCV")
CLLI = ChunkType(b"cLLI")
EXIF = ChunkType(b"eXIf")
TEXT = ChunkType(b"tEXt")
ZTXT = ChunkType(b"zTXt")
ITXT = ChunkType(b"iTXt")
SBIT = ChunkType(b"sBIT")

# -- Animation extension chunks --

ACTL = ChunkType(b"acTL")
FCTL = ChunkType(b"fcTL")
FDAT = ChunkType(b"fdAT")


KNOWN_CHUNK_TYPES: Mapping[ChunkType, str] = MappingProxyType({
    IHDR: "Image header",
    PLTE: "Palette",
    IDAT: "Image data",
    IEND: "Image trailer",
    TRNS: "Transparency",
    BKGD: "Background colour",
    TIME: "Image last-modification time",
    PHYS: "Physical pixel dimensions",
    CHRM: "Primary chromaticities and white point",
    GAMA: "Image gamma",
    SRGB: "Standard RGB colour space",
    ICCP: "Embedded ICC profile",
    CICP: "Coding-independent code points",
    MDCV: "Mastering display colour volume",
    CLLI: "Content light level information",
    EXIF: "Exchangeable image file profile",
    TEXT: "Latin-1 textual data",
    ZTXT: "Compressed Latin-1 textual data",
    ITXT: "International (UTF-8) textual data",
    SBIT: "Significant bits",
    ACTL: "Animation control",
    FCTL: "Frame control",
    FDAT: "Frame data",
})


def is_known(chunk_type: ChunkTypeLike) -> bool:
    return ChunkType(_code(chunk_type)) in KNOWN_CHUNK_TYPES


def describe(chunk_type: ChunkTypeLike) -> Optional[str]:
    """Return a human description of a recognised chunk type, else None."""
    return KNOWN_CHUNK_TYPES.get(ChunkType(_code(chunk_type)))
