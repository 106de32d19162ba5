"""
stegpng core package.

Hides payload bytes in the pixel-channel bytes of PNG files using LSB
steganography while keeping the chunk stream valid.

Subpackages:
    png: Chunk registry, chunk stream codec, header parser, container
    stego: Pixel LSB codec, format bindings, encoding facade

Version: 1.0.0
"""

from . import errors
from . import png
from . import stego
from .errors import StegoError

__all__ = ['errors', 'png', 'stego', 'StegoError']

__version__ = "1.0.0"
