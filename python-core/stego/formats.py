"""
Container format bindings.

A ContainerFormat turns a carrier file into a flat array of channel bytes
the pixel codec can work on, and puts a modified array back into an
otherwise unchanged file. Supporting a new file type means adding a
subclass here; the pixel codec and the facade stay as they are.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, FrozenSet, Optional

import numpy as np

from ..errors import MalformedHeaderError, UnsupportedCarrierError
from ..png.chunks import PNG_SIGNATURE, ChecksumScope
from ..png.container import parse_png, serialize_png
from ..png.scanlines import decode_image_data, encode_image_data
from .methods import EncodingMethod

logger = logging.getLogger(__name__)


@dataclass
class CarrierView:
    """
    Channel-byte view of a parsed carrier.

    Attributes:
        channel_bytes: Flat uint8 array of the bytes that may carry payload
        channels_per_pixel: Samples per pixel in ``channel_bytes``
        alpha_channel: Index of the alpha sample within a pixel, if any
        state: Format-specific parse result needed to reassemble the file
    """

    channel_bytes: np.ndarray
    channels_per_pixel: int
    alpha_channel: Optional[int]
    state: Any


class ContainerFormat(ABC):
    """Parse / reassemble capability set for one carrier file type."""

    name: str = ""
    supported_methods: FrozenSet[EncodingMethod] = frozenset()

    @abstractmethod
    def matches(self, file_bytes: bytes) -> bool:
        """Return True if the bytes look like this format."""

    @abstractmethod
    def parse_container(self, file_bytes: bytes) -> CarrierView:
        """Parse the file and expose its channel bytes."""

    @abstractmethod
    def reassemble_container(self, view: CarrierView, channel_bytes: np.ndarray) -> bytes:
        """Write modified channel bytes back and serialise the file."""


class PngFormat(ContainerFormat):
    """
    PNG binding.

    The IDAT stream is inflated and unfiltered; the channel bytes are the
    decoded samples in R,G,B[,A] (or gray[,alpha]) order, taking the
    low-order byte of 16-bit samples. On the way back every scanline is
    stored with filter type 0 and re-deflated, so the embedded bits reach
    the decoded pixels unchanged. Non-IDAT chunks are kept as they are.
    """

    name = "png"
    supported_methods = frozenset({
        EncodingMethod.LSB,
        EncodingMethod.LSB_2BIT,
        EncodingMethod.LSB_COLOR,
    })

    def __init__(self, checksum_scope: ChecksumScope = ChecksumScope.TYPE_AND_DATA, strict: bool = False):
        self.checksum_scope = checksum_scope
        self.strict = strict

    def matches(self, file_bytes: bytes) -> bool:
        return bytes(file_bytes[:len(PNG_SIGNATURE)]) == PNG_SIGNATURE

    def parse_container(self, file_bytes: bytes) -> CarrierView:
        container = parse_png(file_bytes, self.checksum_scope, self.strict)
        header = container.header

        if header.channels is None:
            raise MalformedHeaderError(
                f"Unknown color type {header.color_type}",
                details={"color_type": header.color_type},
            )
        if header.interlace_method != 0:
            raise UnsupportedCarrierError(
                "Interlaced PNG images are not supported as carriers",
                details={"interlace_method": header.interlace_method},
            )

        samples = decode_image_data(container.image_data(), header)

        if header.bit_depth >= 8:
            channels_per_pixel = header.channels
            alpha_channel = header.alpha_channel
        else:
            # Sub-byte samples share bytes, so pixels don't align with bytes
            channels_per_pixel = 1
            alpha_channel = None

        stride = header.sample_size
        channel_bytes = np.frombuffer(samples, dtype=np.uint8)[stride - 1::stride].copy()

        return CarrierView(
            channel_bytes=channel_bytes,
            channels_per_pixel=channels_per_pixel,
            alpha_channel=alpha_channel,
            state=(container, samples),
        )

    def reassemble_container(self, view: CarrierView, channel_bytes: np.ndarray) -> bytes:
        container, samples = view.state
        channel_bytes = np.asarray(channel_bytes, dtype=np.uint8).ravel()
        if channel_bytes.size != view.channel_bytes.size:
            raise ValueError(
                f"channel_bytes must hold {view.channel_bytes.size} values, got {channel_bytes.size}"
            )

        header = container.header
        stride = header.sample_size
        data = np.frombuffer(samples, dtype=np.uint8).copy()
        data[stride - 1::stride] = channel_bytes

        encoded = encode_image_data(data.tobytes(), header)
        logger.debug(f"Re-encoded image data: {len(container.image_data())} -> {len(encoded)} bytes")
        return serialize_png(container.with_image_data(encoded))
