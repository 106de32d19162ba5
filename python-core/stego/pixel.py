"""
Pixel LSB codec.

Embeds and extracts payload bits in a flat sequence of pixel channel
bytes. The codec does not know about any container format: it sees a
1-D uint8 array in which every ``channels_per_pixel`` consecutive values
form one pixel.

Traversal order (shared by embed and extract):
    - pixels left to right
    - within a pixel, the selected channels in index order
    - within a channel byte, bit 0 upward to ``bits_per_channel - 1``

Only the low ``bits_per_channel`` bits of a touched byte are modified,
so each channel value moves by at most ``2**bits_per_channel - 1``.
"""

import logging
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from ..errors import InsufficientCapacityError, PayloadTooLargeError

logger = logging.getLogger(__name__)

BitsLike = Union[np.ndarray, Sequence[int]]


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Convert bytes to a 0/1 array, most significant bit first."""
    return np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))


def bits_to_bytes(bits: BitsLike) -> bytes:
    """Convert a 0/1 array to bytes, zero-padding the final partial byte."""
    return np.packbits(np.asarray(bits, dtype=np.uint8)).tobytes()


class PixelLSBCodec:
    """
    LSB embedding over a flat array of channel bytes.

    Attributes:
        channels_per_pixel: Number of samples making up one pixel
        channels: Channel indices (within a pixel) that carry payload
        bits_per_channel: Low bits used in every selected channel byte

    Example:
        >>> codec = PixelLSBCodec(channels_per_pixel=3)
        >>> stego = codec.embed(pixels, bytes_to_bits(b"hi"))
        >>> bits_to_bytes(codec.extract(stego, 16))
        b'hi'
    """

    def __init__(
        self,
        channels_per_pixel: int = 1,
        channels: Optional[Iterable[int]] = None,
        bits_per_channel: int = 1,
    ):
        if channels_per_pixel < 1:
            raise ValueError("channels_per_pixel must be at least 1")
        if not 1 <= bits_per_channel <= 8:
            raise ValueError("bits_per_channel must be between 1 and 8")

        if channels is None:
            channels = range(channels_per_pixel)
        selected = sorted(set(channels))
        if not selected or selected[0] < 0 or selected[-1] >= channels_per_pixel:
            raise ValueError(f"channels must be a non-empty subset of 0..{channels_per_pixel - 1}")

        self.channels_per_pixel = channels_per_pixel
        self.channels = tuple(selected)
        self.bits_per_channel = bits_per_channel

    def _slots(self, pixels: np.ndarray) -> np.ndarray:
        """Indices of the channel bytes that carry payload, in traversal order."""
        index = np.arange(pixels.size)
        if len(self.channels) == self.channels_per_pixel:
            return index
        return index[np.isin(index % self.channels_per_pixel, self.channels)]

    def capacity(self, pixels: np.ndarray) -> int:
        """Number of payload bits the pixel array can hold."""
        return self._slots(np.asarray(pixels)).size * self.bits_per_channel

    def embed(self, pixels: np.ndarray, payload_bits: BitsLike) -> np.ndarray:
        """
        Write payload bits into the low bits of the channel bytes.

        Args:
            pixels: Flat uint8 array of channel bytes (left untouched)
            payload_bits: Sequence of 0/1 values

        Returns:
            A new array with the payload embedded

        Raises:
            PayloadTooLargeError: If there are more bits than capacity
        """
        pixels = np.asarray(pixels, dtype=np.uint8).ravel()
        bits = np.asarray(payload_bits, dtype=np.uint8).ravel() & 1
        slots = self._slots(pixels)
        capacity = slots.size * self.bits_per_channel

        if bits.size > capacity:
            raise PayloadTooLargeError(
                f"Payload of {bits.size} bits exceeds carrier capacity of {capacity} bits",
                details={"required": int(bits.size), "available": int(capacity)},
            )

        stego = pixels.copy()
        position = np.arange(bits.size)
        targets = slots[position // self.bits_per_channel]
        bit_positions = position % self.bits_per_channel

        for bit in range(self.bits_per_channel):
            selected = bit_positions == bit
            index = targets[selected]
            clear_mask = np.uint8(0xFF ^ (1 << bit))
            stego[index] = (stego[index] & clear_mask) | (bits[selected] << np.uint8(bit))

        logger.debug(f"Embedded {bits.size} bits into {len(np.unique(targets))} channel bytes")
        return stego

    def extract(self, pixels: np.ndarray, bit_count: int) -> np.ndarray:
        """
        Read ``bit_count`` bits back in embedding order.

        Raises:
            InsufficientCapacityError: If the array holds fewer bits
        """
        if bit_count < 0:
            raise ValueError("bit_count must not be negative")

        pixels = np.asarray(pixels, dtype=np.uint8).ravel()
        slots = self._slots(pixels)
        capacity = slots.size * self.bits_per_channel

        if bit_count > capacity:
            raise InsufficientCapacityError(
                f"Requested {bit_count} bits but the carrier holds only {capacity}",
                details={"required": int(bit_count), "available": int(capacity)},
            )

        position = np.arange(bit_count)
        values = pixels[slots[position // self.bits_per_channel]]
        return ((values >> (position % self.bits_per_channel)) & 1).astype(np.uint8)


def embed_lsb(pixels: np.ndarray, payload_bits: BitsLike, channels_per_pixel: int = 1) -> np.ndarray:
    """Embed one bit per channel byte across all channels."""
    return PixelLSBCodec(channels_per_pixel).embed(pixels, payload_bits)


def extract_lsb(pixels: np.ndarray, bit_count: int, channels_per_pixel: int = 1) -> np.ndarray:
    return PixelLSBCodec(channels_per_pixel).extract(pixels, bit_count)
