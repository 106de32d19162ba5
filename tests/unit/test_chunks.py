"""
Unit Tests for the chunk stream codec

Covers chunk framing, CRC validation (both scopes), truncation and the
signature check.
"""

import io
import struct
import zlib

import pytest

from stegpng_core.errors import ChecksumMismatchError, InvalidSignatureError, TruncatedStreamError
from stegpng_core.png.chunks import (
    PNG_SIGNATURE,
    ChecksumScope,
    ChunkRecord,
    compute_crc,
    read_next_chunk,
    read_signature,
    write_chunk,
)
from stegpng_core.png.chunk_types import ChunkType, IDAT, IEND


def written(record):
    buf = io.BytesIO()
    write_chunk(buf, record)
    return buf.getvalue()


class TestChunkFraming:
    """Test cases for write_chunk / read_next_chunk."""

    @pytest.fixture
    def record(self):
        return ChunkRecord(ChunkType(b"tEXt"), b"Title\x00Carrier image")

    def test_write_layout(self, record):
        raw = written(record)

        assert raw[:4] == struct.pack(">I", len(record.data))
        assert raw[4:8] == b"tEXt"
        assert raw[8:-4] == record.data
        assert raw[-4:] == struct.pack(">I", zlib.crc32(b"tEXt" + record.data))
        assert len(raw) == 12 + record.length

    def test_read_returns_record(self, record):
        assert read_next_chunk(io.BytesIO(written(record))) == record

    def test_read_consumes_exactly_one_chunk(self, record):
        stream = io.BytesIO(written(record) + written(ChunkRecord(IEND)))

        read_next_chunk(stream)

        assert stream.tell() == 12 + record.length
        assert read_next_chunk(stream).type == IEND

    def test_empty_data(self):
        record = ChunkRecord(IEND, b"")
        raw = written(record)
        assert raw == bytes.fromhex("0000000049454e44ae426082")
        assert read_next_chunk(io.BytesIO(raw)) == record

    def test_record_accepts_raw_type(self):
        record = ChunkRecord(b"IDAT", bytearray(b"\x01\x02"))
        assert record.type == IDAT
        assert record.data == b"\x01\x02"
        assert record.length == 2

    def test_unknown_type_passes_through(self):
        record = ChunkRecord(ChunkType(b"vpAg"), b"\x00" * 9)
        assert read_next_chunk(io.BytesIO(written(record))) == record


class TestChecksum:
    """Test cases for CRC validation."""

    @pytest.fixture
    def raw(self):
        return written(ChunkRecord(IDAT, bytes(range(32))))

    @pytest.mark.parametrize("index", [8, 20, 39])
    def test_flipped_data_byte_detected(self, raw, index):
        corrupted = bytearray(raw)
        corrupted[index] ^= 0x01

        with pytest.raises(ChecksumMismatchError) as exc_info:
            read_next_chunk(io.BytesIO(bytes(corrupted)))

        assert exc_info.value.details["chunk_type"] == "IDAT"
        assert exc_info.value.details["offset"] == 0

    def test_flipped_crc_byte_detected(self, raw):
        corrupted = bytearray(raw)
        corrupted[-1] ^= 0x80

        with pytest.raises(ChecksumMismatchError):
            read_next_chunk(io.BytesIO(bytes(corrupted)))

    def test_type_only_scope_accepts_legacy_crc(self):
        data = b"legacy"
        legacy = struct.pack(">I", len(data)) + b"IDAT" + data + struct.pack(">I", zlib.crc32(b"IDAT"))

        with pytest.raises(ChecksumMismatchError):
            read_next_chunk(io.BytesIO(legacy))

        record = read_next_chunk(io.BytesIO(legacy), ChecksumScope.TYPE_ONLY)
        assert record.data == data

    def test_type_only_scope_ignores_data(self):
        assert compute_crc(IDAT, b"a", ChecksumScope.TYPE_ONLY) == compute_crc(IDAT, b"b", ChecksumScope.TYPE_ONLY)
        assert compute_crc(IDAT, b"a") != compute_crc(IDAT, b"b")


class TestTruncation:
    """Test cases for short streams."""

    @pytest.fixture
    def raw(self):
        return written(ChunkRecord(IDAT, b"0123456789"))

    @pytest.mark.parametrize("cut,field", [
        (0, "length"),
        (3, "length"),
        (6, "type"),
        (12, "IDAT data"),
        (19, "IDAT CRC"),
    ])
    def test_each_field(self, raw, cut, field):
        with pytest.raises(TruncatedStreamError) as exc_info:
            read_next_chunk(io.BytesIO(raw[:cut]))

        assert exc_info.value.details["field"] == field

    def test_counts_reported(self, raw):
        with pytest.raises(TruncatedStreamError) as exc_info:
            read_next_chunk(io.BytesIO(raw[:12]))

        details = exc_info.value.details
        assert details["offset"] == 8
        assert details["required"] == 10
        assert details["available"] == 4


class TestSignature:
    """Test cases for the PNG magic signature."""

    def test_valid(self):
        stream = io.BytesIO(PNG_SIGNATURE + b"rest")
        read_signature(stream)
        assert stream.tell() == 8

    @pytest.mark.parametrize("data", [
        b"",
        PNG_SIGNATURE[:7],
        b"GIF89a\x00\x00",
        b"\x89PNG\r\n\x1a\x0b",
    ])
    def test_invalid(self, data):
        with pytest.raises(InvalidSignatureError):
            read_signature(io.BytesIO(data))
