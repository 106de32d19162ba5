"""
Error types for the stegpng core.

Every failure raised by the PNG container layer, the pixel codec and the
encoding facade derives from StegoError. Each error carries a numeric code
and a details dictionary with the offsets or required/available counts
needed to diagnose the failure.
"""

from typing import Any, Dict, Optional


class StegoError(Exception):
    """Base exception for all stegpng errors."""

    default_code: Optional[int] = None

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"{type(self).__name__}: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class InvalidSignatureError(StegoError):
    """The stream does not start with the PNG magic signature."""

    default_code = 1001


class TruncatedStreamError(StegoError):
    """Fewer bytes remain than a read requires."""

    default_code = 1002


class ChecksumMismatchError(StegoError):
    """A chunk's stored CRC does not match the computed one."""

    default_code = 1003


class MalformedHeaderError(StegoError):
    """The header chunk is missing, misplaced or too short."""

    default_code = 1004


class PayloadTooLargeError(StegoError):
    """More payload bits than the carrier can hold."""

    default_code = 1005


class InsufficientCapacityError(StegoError):
    """More bits requested for extraction than the carrier holds."""

    default_code = 1006


class UnsupportedEncodingMethodError(StegoError):
    """The requested method is not implemented for the container format."""

    default_code = 1007


class UnsupportedChunkError(StegoError):
    """Strict parsing met a chunk type it must not pass through."""

    default_code = 1008


class InvalidImageDataError(StegoError):
    """The IDAT stream does not inflate to the scanlines the header describes."""

    default_code = 1009


class UnsupportedCarrierError(StegoError):
    """The image layout cannot carry a payload (e.g. interlaced)."""

    default_code = 1010


__all__ = [
    "StegoError",
    "InvalidSignatureError",
    "TruncatedStreamError",
    "ChecksumMismatchError",
    "MalformedHeaderError",
    "PayloadTooLargeError",
    "InsufficientCapacityError",
    "UnsupportedEncodingMethodError",
    "UnsupportedChunkError",
    "InvalidImageDataError",
    "UnsupportedCarrierError",
]
