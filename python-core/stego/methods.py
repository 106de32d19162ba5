"""Embedding derivations."""

from enum import Enum


class EncodingMethod(Enum):
    """
    How payload bits are derived into channel bytes.

    Attributes:
        LSB: One bit in every channel
        LSB_2BIT: Two low bits in every channel
        LSB_COLOR: One bit per colour channel, alpha left untouched
        DCT: Frequency-domain embedding (lossy carriers only)
    """

    LSB = "lsb"
    LSB_2BIT = "lsb_2bit"
    LSB_COLOR = "lsb_color"
    DCT = "dct"
