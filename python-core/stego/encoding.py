"""
Encoding Support Module.

Single entry point for callers that hold a whole carrier file in memory.
FileEncodingSupport ties a ContainerFormat (which knows the file layout)
to the PixelLSBCodec (which knows the bits), picking the codec parameters
from the requested EncodingMethod.

Usage:
    >>> support = FileEncodingSupport()
    >>> stego_png = support.embed_payload(png_bytes, b"secret", EncodingMethod.LSB)
    >>> support.extract_payload(stego_png, 6 * 8, EncodingMethod.LSB)
    b'secret'
"""

import logging
from typing import Any, Dict, Optional, Union

from ..errors import UnsupportedEncodingMethodError
from ..png.chunks import ChecksumScope
from .formats import CarrierView, ContainerFormat, PngFormat
from .methods import EncodingMethod
from .pixel import PixelLSBCodec, bits_to_bytes, bytes_to_bits

logger = logging.getLogger(__name__)

MethodLike = Union[EncodingMethod, str]


class FileEncodingSupport:
    """
    Whole-file embed / extract for one container format.

    Attributes:
        container_format: Format binding used to parse and rebuild files
        settings: Per-method codec settings

    Example:
        >>> support = FileEncodingSupport(checksum_scope=ChecksumScope.TYPE_ONLY)
        >>> support.calculate_capacity(png_bytes, "lsb")
        3072
    """

    # Codec parameters per method
    DEFAULT_SETTINGS: Dict[EncodingMethod, Dict[str, Any]] = {
        EncodingMethod.LSB: {
            "bits_per_channel": 1,
            "skip_alpha": False,
        },
        EncodingMethod.LSB_2BIT: {
            "bits_per_channel": 2,
            "skip_alpha": False,
        },
        EncodingMethod.LSB_COLOR: {
            "bits_per_channel": 1,
            "skip_alpha": True,
        },
    }

    def __init__(
        self,
        container_format: Optional[ContainerFormat] = None,
        checksum_scope: ChecksumScope = ChecksumScope.TYPE_AND_DATA,
        settings: Optional[Dict[EncodingMethod, Dict[str, Any]]] = None,
    ):
        self._format = container_format or PngFormat(checksum_scope=checksum_scope)
        self._settings = {method: dict(values) for method, values in self.DEFAULT_SETTINGS.items()}
        for method, overrides in (settings or {}).items():
            self._settings.setdefault(method, {}).update(overrides)

        logger.debug(f"FileEncodingSupport initialized for format={self._format.name}")

    @property
    def container_format(self) -> ContainerFormat:
        return self._format

    @property
    def settings(self) -> Dict[EncodingMethod, Dict[str, Any]]:
        return self._settings

    def _resolve_method(self, method: MethodLike) -> EncodingMethod:
        if not isinstance(method, EncodingMethod):
            try:
                method = EncodingMethod(str(method).lower())
            except ValueError:
                raise UnsupportedEncodingMethodError(
                    f"Unknown encoding method: {method}",
                    details={"method": str(method), "format": self._format.name},
                ) from None

        if method not in self._format.supported_methods or method not in self._settings:
            raise UnsupportedEncodingMethodError(
                f"Encoding method {method.value} not supported for {self._format.name}",
                details={
                    "method": method.value,
                    "format": self._format.name,
                    "supported": sorted(m.value for m in self._format.supported_methods),
                },
            )
        return method

    def _codec_for(self, view: CarrierView, method: EncodingMethod) -> PixelLSBCodec:
        settings = self._settings[method]
        channels = list(range(view.channels_per_pixel))
        if settings.get("skip_alpha") and view.alpha_channel is not None:
            channels.remove(view.alpha_channel)
        return PixelLSBCodec(
            channels_per_pixel=view.channels_per_pixel,
            channels=channels,
            bits_per_channel=settings.get("bits_per_channel", 1),
        )

    def calculate_capacity(self, file_bytes: bytes, method: MethodLike = EncodingMethod.LSB) -> int:
        """Return how many payload bits the carrier can hold with ``method``."""
        method = self._resolve_method(method)
        view = self._format.parse_container(file_bytes)
        return self._codec_for(view, method).capacity(view.channel_bytes)

    def embed_payload(
        self,
        file_bytes: bytes,
        payload_bytes: bytes,
        method: MethodLike = EncodingMethod.LSB,
    ) -> bytes:
        """
        Embed a payload in a carrier file.

        Args:
            file_bytes: The complete carrier file
            payload_bytes: Data to hide
            method: Embedding derivation

        Returns:
            The complete modified file; the input is not changed

        Raises:
            UnsupportedEncodingMethodError: If the method is not available
            PayloadTooLargeError: If the payload exceeds capacity
            StegoError: Any structural error raised while parsing
        """
        method = self._resolve_method(method)
        view = self._format.parse_container(file_bytes)
        codec = self._codec_for(view, method)

        bits = bytes_to_bits(payload_bytes)
        logger.info(
            f"Embedding {len(payload_bytes)} bytes using {method.value}, "
            f"capacity={codec.capacity(view.channel_bytes)} bits"
        )
        stego_bytes = codec.embed(view.channel_bytes, bits)
        return self._format.reassemble_container(view, stego_bytes)

    def extract_payload(
        self,
        file_bytes: bytes,
        expected_bit_count: int,
        method: MethodLike = EncodingMethod.LSB,
    ) -> bytes:
        """
        Extract ``expected_bit_count`` payload bits from a carrier file.

        Bits are packed most significant first; a final partial byte is
        zero-padded.

        Raises:
            UnsupportedEncodingMethodError: If the method is not available
            InsufficientCapacityError: If the carrier holds fewer bits
            StegoError: Any structural error raised while parsing
        """
        method = self._resolve_method(method)
        view = self._format.parse_container(file_bytes)
        codec = self._codec_for(view, method)

        logger.info(f"Extracting {expected_bit_count} bits using {method.value}")
        bits = codec.extract(view.channel_bytes, expected_bit_count)
        return bits_to_bytes(bits)


def get_encoding_support() -> FileEncodingSupport:
    """Return a FileEncodingSupport for PNG with default settings."""
    return FileEncodingSupport()


def embed_payload(file_bytes: bytes, payload_bytes: bytes, method: MethodLike = EncodingMethod.LSB) -> bytes:
    return get_encoding_support().embed_payload(file_bytes, payload_bytes, method)


def extract_payload(file_bytes: bytes, expected_bit_count: int, method: MethodLike = EncodingMethod.LSB) -> bytes:
    return get_encoding_support().extract_payload(file_bytes, expected_bit_count, method)


def calculate_capacity(file_bytes: bytes, method: MethodLike = EncodingMethod.LSB) -> int:
    return get_encoding_support().calculate_capacity(file_bytes, method)
