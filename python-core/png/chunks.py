"""
PNG chunk stream codec.

Reads and writes the framing shared by every chunk:

    +--------------+-------------+----------------+---------------+
    | length (u32) | type (4 B)  | data (length)  | CRC-32 (u32)  |
    +--------------+-------------+----------------+---------------+

All integers are big-endian. The codec knows nothing about what a chunk
means; it only frames records and checks their integrity.
"""

import logging
import struct
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from ..errors import ChecksumMismatchError, InvalidSignatureError, TruncatedStreamError
from .chunk_types import ChunkType

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_U32 = struct.Struct(">I")


class ChecksumScope(Enum):
    """
    Bytes covered by the chunk CRC.

    TYPE_AND_DATA is the PNG contract. TYPE_ONLY accepts files written by
    older tooling that computed the CRC over the type code alone; it has to
    be requested explicitly.
    """

    TYPE_AND_DATA = "type_and_data"
    TYPE_ONLY = "type_only"


def compute_crc(chunk_type: ChunkType, data: bytes, scope: ChecksumScope = ChecksumScope.TYPE_AND_DATA) -> int:
    crc = zlib.crc32(chunk_type.code)
    if scope is ChecksumScope.TYPE_AND_DATA:
        crc = zlib.crc32(data, crc)
    return crc & 0xFFFFFFFF


@dataclass(frozen=True)
class ChunkRecord:
    """
    A single chunk: its type code and data bytes.

    The length and CRC fields are derived, never stored, so a record
    can't disagree with its own framing.
    """

    type: ChunkType
    data: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.type, ChunkType):
            object.__setattr__(self, "type", ChunkType(self.type))
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def crc(self) -> int:
        return compute_crc(self.type, self.data)


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    offset = stream.tell()
    buf = stream.read(size)
    if len(buf) < size:
        raise TruncatedStreamError(
            f"Stream ended while reading {what}: need {size} bytes at offset {offset}, got {len(buf)}",
            details={"offset": offset, "field": what, "required": size, "available": len(buf)},
        )
    return buf


def read_signature(stream: BinaryIO) -> None:
    """Consume the 8-byte PNG signature, failing if it is absent."""
    magic = stream.read(len(PNG_SIGNATURE))
    if magic != PNG_SIGNATURE:
        raise InvalidSignatureError(
            f"Not a PNG stream: expected signature {PNG_SIGNATURE.hex()}, got {magic.hex() or 'nothing'}",
            details={"expected": PNG_SIGNATURE, "actual": magic},
        )


def write_signature(stream: BinaryIO) -> None:
    stream.write(PNG_SIGNATURE)


def read_next_chunk(stream: BinaryIO, checksum_scope: ChecksumScope = ChecksumScope.TYPE_AND_DATA) -> ChunkRecord:
    """
    Read one chunk record from the stream.

    Consumes exactly 12 + length bytes.

    Args:
        stream: Binary stream positioned at the start of a chunk
        checksum_scope: Bytes the stored CRC is checked against

    Returns:
        The parsed ChunkRecord

    Raises:
        TruncatedStreamError: If any of the four fields is cut short
        ChecksumMismatchError: If the stored CRC does not validate
    """
    start = stream.tell()
    (length,) = _U32.unpack(_read_exact(stream, 4, "length"))
    chunk_type = ChunkType(_read_exact(stream, 4, "type"))
    data = _read_exact(stream, length, f"{chunk_type.name} data")
    (stored_crc,) = _U32.unpack(_read_exact(stream, 4, f"{chunk_type.name} CRC"))

    expected_crc = compute_crc(chunk_type, data, checksum_scope)
    if stored_crc != expected_crc:
        raise ChecksumMismatchError(
            f"CRC mismatch in {chunk_type.name} chunk at offset {start}: "
            f"stored {stored_crc:08x}, computed {expected_crc:08x}",
            details={
                "offset": start,
                "chunk_type": chunk_type.name,
                "stored": stored_crc,
                "computed": expected_crc,
                "scope": checksum_scope.value,
            },
        )

    logger.debug(f"Read {chunk_type.name} chunk at offset {start}, length={length}")
    return ChunkRecord(chunk_type, data)


def write_chunk(stream: BinaryIO, record: ChunkRecord) -> None:
    """Write a chunk record with a CRC computed over type and data."""
    stream.write(_U32.pack(record.length))
    stream.write(record.type.code)
    stream.write(record.data)
    stream.write(_U32.pack(record.crc))
