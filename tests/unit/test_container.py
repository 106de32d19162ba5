"""
Unit Tests for whole-file PNG parsing and serialisation
"""

import io
import struct
import zlib

import pytest

from stegpng_core.errors import (
    ChecksumMismatchError,
    InvalidSignatureError,
    MalformedHeaderError,
    TruncatedStreamError,
    UnsupportedChunkError,
)
from stegpng_core.png import (
    PNG_SIGNATURE,
    ChecksumScope,
    ChunkRecord,
    ChunkType,
    PngContainer,
    parse_png,
    serialize_png,
    write_chunk,
)
from stegpng_core.png.chunk_types import IDAT, IEND, IHDR

from conftest import build_png


class TestParsePng:
    """Test cases for parse_png."""

    def test_parse_pillow_image(self, rgb_png):
        container = parse_png(rgb_png)

        assert container.chunks[0].type == IHDR
        assert container.chunks[-1].type == IEND
        assert container.header.width == 16
        assert container.header.height == 16
        assert container.header.bit_depth == 8
        assert container.header.color_type == 2
        assert container.trailing == b""
        assert len(container.image_data_chunks()) >= 1

    def test_round_trip(self, rgb_png, split_idat_png):
        for file_bytes in (rgb_png, split_idat_png):
            parsed = parse_png(file_bytes)
            assert parse_png(serialize_png(parsed)) == parsed
            assert serialize_png(parsed) == file_bytes

    def test_split_idat(self, split_idat_png):
        container = parse_png(split_idat_png)

        assert [c.type.name for c in container.chunks] == ["IHDR", "tEXt", "IDAT", "IDAT", "IDAT", "IEND"]
        assert container.image_data() == b"".join(c.data for c in container.image_data_chunks())

    def test_bad_signature(self, rgb_png):
        with pytest.raises(InvalidSignatureError):
            parse_png(b"BM" + rgb_png[2:])

    def test_corrupted_chunk(self, rgb_png):
        corrupted = bytearray(rgb_png)
        corrupted[-20] ^= 0xFF
        with pytest.raises(ChecksumMismatchError):
            parse_png(bytes(corrupted))

    def test_missing_iend(self, rgb_png):
        with pytest.raises(TruncatedStreamError):
            parse_png(rgb_png[:-12])

    def test_cut_inside_chunk(self, rgb_png):
        with pytest.raises(TruncatedStreamError):
            parse_png(rgb_png[:40])

    def test_ihdr_must_come_first(self):
        buf = io.BytesIO()
        buf.write(PNG_SIGNATURE)
        write_chunk(buf, ChunkRecord(IDAT, b"\x00"))
        write_chunk(buf, ChunkRecord(IEND))

        with pytest.raises(MalformedHeaderError):
            parse_png(buf.getvalue())

    def test_short_ihdr(self):
        buf = io.BytesIO()
        buf.write(PNG_SIGNATURE)
        write_chunk(buf, ChunkRecord(IHDR, bytes(12)))
        write_chunk(buf, ChunkRecord(IEND))

        with pytest.raises(MalformedHeaderError):
            parse_png(buf.getvalue())

    def test_trailing_bytes_kept(self, rgb_png):
        container = parse_png(rgb_png + b"extra")

        assert container.trailing == b"extra"
        assert serialize_png(container) == rgb_png + b"extra"

    def test_legacy_checksum_scope(self):
        legacy = PNG_SIGNATURE + b"".join(
            struct.pack(">I", len(data)) + code + data + struct.pack(">I", zlib.crc32(code))
            for code, data in [
                (b"IHDR", bytes.fromhex("00000001000000010800000000")),
                (b"IDAT", b"\x00\x7f"),
                (b"IEND", b""),
            ]
        )

        with pytest.raises(ChecksumMismatchError):
            parse_png(legacy)

        container = parse_png(legacy, ChecksumScope.TYPE_ONLY)
        assert container.image_data() == b"\x00\x7f"
        # Rewriting upgrades every CRC to the full scope
        assert parse_png(serialize_png(container)) == container


class TestStrictParsing:
    """Test cases for strict chunk checks."""

    def _with_chunk(self, code):
        return build_png(1, 1, 8, 0, [b"\x00\x00"], before_idat=[ChunkRecord(ChunkType(code), b"x")])

    def test_unknown_critical_passes_by_default(self):
        container = parse_png(self._with_chunk(b"ABCD"))
        assert container.chunks[1].type == ChunkType(b"ABCD")

    def test_unknown_critical_rejected_when_strict(self):
        with pytest.raises(UnsupportedChunkError):
            parse_png(self._with_chunk(b"ABCD"), strict=True)

    def test_reserved_bit_rejected_when_strict(self):
        with pytest.raises(UnsupportedChunkError):
            parse_png(self._with_chunk(b"abcd"), strict=True)

    def test_unknown_ancillary_allowed_when_strict(self):
        container = parse_png(self._with_chunk(b"vpAg"), strict=True)
        assert len(container.chunks) == 4


class TestWithImageData:
    """Test cases for rewriting IDAT payloads."""

    def test_default_size_is_largest_idat(self, split_idat_png):
        container = parse_png(split_idat_png)

        updated = container.with_image_data(bytes([0xAA]) * 70)

        assert [c.type.name for c in updated.chunks] == ["IHDR", "tEXt", "IDAT", "IDAT", "IDAT", "IEND"]
        assert [c.length for c in updated.image_data_chunks()] == [33, 33, 4]
        assert updated.image_data() == bytes([0xAA]) * 70
        assert updated.chunks[1] == container.chunks[1]

    def test_explicit_chunk_size(self, split_idat_png):
        container = parse_png(split_idat_png)

        updated = container.with_image_data(bytes(50), chunk_size=25)

        assert [c.length for c in updated.image_data_chunks()] == [25, 25]
        assert updated.chunks[-1].type == IEND

    def test_original_untouched(self, split_idat_png):
        container = parse_png(split_idat_png)
        before = container.image_data()

        container.with_image_data(b"new")

        assert container.image_data() == before
        assert parse_png(serialize_png(container.with_image_data(b"new"))).image_data() == b"new"

    def test_no_idat(self):
        header_record = ChunkRecord(IHDR, struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0))
        container = PngContainer(chunks=[header_record, ChunkRecord(IEND, b"")], header=None)
        with pytest.raises(ValueError):
            container.with_image_data(b"data")
