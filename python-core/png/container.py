"""
Whole-file PNG parsing and serialisation.

Builds on the chunk stream codec: checks the signature, reads chunks up to
the IEND trailer, decodes the header and writes everything back out.
"""

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional

from ..errors import MalformedHeaderError, TruncatedStreamError, UnsupportedChunkError
from .chunk_types import IDAT, IEND, IHDR, is_known
from .chunks import ChecksumScope, ChunkRecord, read_next_chunk, read_signature, write_chunk, write_signature
from .header import HeaderFields

logger = logging.getLogger(__name__)


@dataclass
class PngContainer:
    """
    Parsed PNG file.

    Attributes:
        chunks: Every chunk in file order, IHDR first and IEND last
        header: Decoded IHDR fields
        trailing: Bytes found after IEND, kept so they survive a rewrite
    """

    chunks: List[ChunkRecord]
    header: HeaderFields
    trailing: bytes = field(default=b"")

    def image_data_chunks(self) -> List[ChunkRecord]:
        return [chunk for chunk in self.chunks if chunk.type == IDAT]

    def image_data(self) -> bytes:
        """Concatenated payload of all IDAT chunks."""
        return b"".join(chunk.data for chunk in self.image_data_chunks())

    def with_image_data(self, data: bytes, chunk_size: Optional[int] = None) -> "PngContainer":
        """
        Return a copy whose image data is ``data``.

        The IDAT run is replaced in place by chunks of at most ``chunk_size``
        bytes (default: the largest existing IDAT chunk). Every other chunk
        keeps its position and content.
        """
        idat_chunks = self.image_data_chunks()
        if not idat_chunks:
            raise ValueError("container has no IDAT chunk")

        size = chunk_size or max(chunk.length for chunk in idat_chunks) or len(data) or 1
        pieces = [data[i:i + size] for i in range(0, len(data), size)] or [b""]

        chunks = []
        inserted = False
        for chunk in self.chunks:
            if chunk.type != IDAT:
                chunks.append(chunk)
            elif not inserted:
                chunks.extend(ChunkRecord(IDAT, piece) for piece in pieces)
                inserted = True
        return PngContainer(chunks=chunks, header=self.header, trailing=self.trailing)


def parse_png(
    file_bytes: bytes,
    checksum_scope: ChecksumScope = ChecksumScope.TYPE_AND_DATA,
    strict: bool = False,
) -> PngContainer:
    """
    Parse a complete PNG file.

    Args:
        file_bytes: The whole file
        checksum_scope: CRC scope used to validate every chunk
        strict: Reject unknown critical chunks and reserved type codes

    Returns:
        PngContainer holding every chunk and the decoded header

    Raises:
        InvalidSignatureError: If the magic signature is wrong
        TruncatedStreamError: If the data ends before IEND
        ChecksumMismatchError: If any chunk fails its CRC
        MalformedHeaderError: If IHDR is not first or is too short
        UnsupportedChunkError: In strict mode, for chunks that must not pass
    """
    chunks: List[ChunkRecord] = []
    with BytesIO(file_bytes) as stream:
        read_signature(stream)
        while True:
            if stream.tell() >= len(file_bytes):
                raise TruncatedStreamError(
                    "Stream ended before the IEND chunk",
                    details={"offset": stream.tell(), "chunks_read": len(chunks)},
                )
            chunk = read_next_chunk(stream, checksum_scope)
            if not chunks and chunk.type != IHDR:
                raise MalformedHeaderError(
                    f"First chunk must be IHDR, found {chunk.type.name}",
                    details={"offset": 8, "chunk_type": chunk.type.name},
                )
            if strict:
                _check_strict(chunk)
            chunks.append(chunk)
            if chunk.type == IEND:
                break
        trailing = stream.read()

    if trailing:
        logger.warning(f"Ignoring {len(trailing)} bytes after IEND")

    header = HeaderFields.from_bytes(chunks[0].data)
    logger.debug(
        f"Parsed PNG {header.width}x{header.height}, depth={header.bit_depth}, "
        f"color_type={header.color_type}, chunks={len(chunks)}"
    )
    return PngContainer(chunks=chunks, header=header, trailing=trailing)


def _check_strict(chunk: ChunkRecord) -> None:
    if chunk.type.reserved_set:
        raise UnsupportedChunkError(
            f"Chunk type {chunk.type.name} has the reserved bit set",
            details={"chunk_type": chunk.type.name},
        )
    if chunk.type.is_critical and not is_known(chunk.type):
        raise UnsupportedChunkError(
            f"Unknown critical chunk {chunk.type.name}",
            details={"chunk_type": chunk.type.name},
        )


def serialize_png(container: PngContainer) -> bytes:
    """Write a container back out with freshly computed CRCs."""
    with BytesIO() as stream:
        write_signature(stream)
        for chunk in container.chunks:
            write_chunk(stream, chunk)
        stream.write(container.trailing)
        return stream.getvalue()
