# stegpng test configuration
# Shared fixtures for building PNG carriers in memory

import io
import struct
import zlib

import numpy as np
import pytest
from PIL import Image

from stegpng_core.png import ChunkRecord, ChunkType, write_chunk, write_signature


def png_from_array(array: np.ndarray, **save_args) -> bytes:
    """Encode a uint8 array as PNG with Pillow."""
    buf = io.BytesIO()
    Image.fromarray(array).save(buf, format="PNG", **save_args)
    return buf.getvalue()


def scanlines(rows, filter_type=0):
    """Deflate sample rows, each prefixed with the given filter byte."""
    return zlib.compress(b"".join(bytes([filter_type]) + bytes(row) for row in rows))


def build_png(width, height, bit_depth, color_type, idat_parts, before_idat=(), interlace=0):
    """Assemble a PNG chunk by chunk from raw IDAT payload pieces."""
    ihdr = struct.pack(">IIBBBBB", width, height, bit_depth, color_type, 0, 0, interlace)
    buf = io.BytesIO()
    write_signature(buf)
    write_chunk(buf, ChunkRecord(ChunkType(b"IHDR"), ihdr))
    for record in before_idat:
        write_chunk(buf, record)
    for part in idat_parts:
        write_chunk(buf, ChunkRecord(ChunkType(b"IDAT"), part))
    write_chunk(buf, ChunkRecord(ChunkType(b"IEND"), b""))
    return buf.getvalue()


@pytest.fixture
def temp_directory(tmp_path):
    """Provide a temporary directory for test operations."""
    return tmp_path


@pytest.fixture
def rgb_array():
    """16x16 RGB image with a red background and a green square."""
    img_array = np.zeros((16, 16, 3), dtype=np.uint8)
    img_array[:, :, 0] = 255
    img_array[4:12, 4:12, 1] = 255
    return img_array


@pytest.fixture
def rgb_png(rgb_array):
    """PNG bytes for a 16x16 RGB image."""
    return png_from_array(rgb_array)


@pytest.fixture
def rgba_png():
    """PNG bytes for an 8x8 RGBA image at full opacity."""
    img_array = np.zeros((8, 8, 4), dtype=np.uint8)
    img_array[:, :, 0] = 128
    img_array[:, :, 3] = 255
    return png_from_array(img_array)


@pytest.fixture
def gray16_png():
    """2x2 16-bit grayscale PNG, samples 0x4041, 0x4243, ..."""
    return build_png(2, 2, 16, 0, [scanlines([range(0x40, 0x44), range(0x44, 0x48)])])


@pytest.fixture
def split_idat_png():
    """4x4 RGB PNG with its image data spread over three IDAT chunks."""
    raw = zlib.compress(bytes(4 * (1 + 4 * 3)), 0)
    parts = [raw[:10], raw[10:30], raw[30:]]
    text = ChunkRecord(ChunkType(b"tEXt"), b"Comment\x00carrier")
    return build_png(4, 4, 8, 2, parts, before_idat=[text])


@pytest.fixture
def sample_data(temp_directory):
    """Provide sample data for testing."""
    data_file = temp_directory / "sample.txt"
    data_file.write_text("Hello, World! This is hidden in a PNG.")
    return data_file


def decode_png(file_bytes: bytes) -> np.ndarray:
    """Decode PNG bytes to a numpy array with Pillow."""
    with Image.open(io.BytesIO(file_bytes)) as img:
        img.load()
        return np.array(img)


@pytest.fixture
def noisy_rgba_array():
    """12x10 RGBA image of random samples, alpha included."""
    rng = np.random.default_rng(2024)
    return rng.integers(0, 256, size=(10, 12, 4), dtype=np.uint8)
