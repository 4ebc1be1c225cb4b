# core/image_access.py

"""
Image file access: extension filter, full decode, and header-only
dimension lookup.
"""

from pathlib import Path
from typing import Tuple, Union

from PIL import Image

from core.errors import UnreadableImageError

PathLike = Union[str, Path]

SUPPORTED_EXTENSIONS = frozenset({'.jpg', '.jpeg', '.png', '.bmp', '.gif', '.tiff', '.webp'})

# Errors Pillow raises for missing, unknown, truncated or corrupt files
_DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


def is_supported_image(path: PathLike) -> bool:
    """
    Classify a file by extension only.

    Matching is case-insensitive: `photo.JPG` and `photo.jpg` are both
    images. `.tif` is not in the set.
    """
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def decode(path: PathLike) -> Image.Image:
    """
    Open and fully decode an image into memory.

    Raises:
        UnreadableImageError: on I/O failure or unsupported/corrupt data
    """
    try:
        with Image.open(path) as img:
            img.load()
            # load() keeps the pixels; detach them from the file handle
            return img.copy()
    except _DECODE_ERRORS as e:
        raise UnreadableImageError(path, str(e) or type(e).__name__) from e


def peek_dimensions(path: PathLike) -> Tuple[int, int]:
    """
    Return (width, height) without decoding pixel data.

    Pillow's open() is lazy and only parses the header, so this stays
    cheap even for very large files.
    """
    try:
        with Image.open(path) as img:
            width, height = img.size
    except _DECODE_ERRORS as e:
        raise UnreadableImageError(path, str(e) or type(e).__name__) from e

    return width, height
