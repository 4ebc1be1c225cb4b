# core/signature.py

import hashlib
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps

from core.errors import SignatureFailedError, UnreadableImageError
from core.image_access import decode

CANONICAL_MODE = 'RGBA'
HASH_CHUNK_SIZE = 1024 * 1024


def create_thumbnail(img: Image.Image, size: int) -> Image.Image:
    """
    Normalize an image to a `size` x `size` RGBA thumbnail.

    The image is centre-cropped to a square and scaled with Lanczos, so
    copies saved at different resolutions converge to the same pixels.
    """
    if img.mode != CANONICAL_MODE:
        img = img.convert(CANONICAL_MODE)
    return ImageOps.fit(img, (size, size), method=Image.Resampling.LANCZOS)


def thumbnail_to_bytes(thumb: Image.Image) -> bytes:
    """
    Canonical byte layout for hashing: a `<w>x<h>:RGBA:` header followed
    by the raw row-major uint8 pixel dump.
    """
    pixels = np.ascontiguousarray(np.asarray(thumb, dtype=np.uint8))
    header = f"{thumb.width}x{thumb.height}:{thumb.mode}:".encode('ascii')
    return header + pixels.tobytes()


def generate_signature(file_path: Union[str, Path], thumb_size: int) -> str:
    """
    Compute the content signature of an image file.

    The image is decoded, normalized to a square thumbnail and dumped to
    canonical bytes; the signature is the MD5 hex digest of those bytes.
    Two files with the same signature are treated as duplicates whatever
    their format, size or dimensions.

    Args:
        file_path: Image to sign
        thumb_size: Edge length of the normalization thumbnail

    Returns:
        32-character lowercase hex string

    Raises:
        ValueError: if thumb_size is not positive
        SignatureFailedError: if any step of the pipeline fails
    """
    if thumb_size <= 0:
        raise ValueError(f"Thumbnail size must be positive, got {thumb_size}")

    try:
        img = decode(file_path)
    except UnreadableImageError as e:
        raise SignatureFailedError(file_path, e.reason) from e

    try:
        thumb = create_thumbnail(img, thumb_size)
        data = thumbnail_to_bytes(thumb)
    except (OSError, ValueError, MemoryError) as e:
        raise SignatureFailedError(file_path, f"normalization failed: {e}") from e

    return hashlib.md5(data).hexdigest()


def generate_file_hash(file_path: Union[str, Path]) -> str:
    """MD5 of the raw file contents, for spotting byte-identical copies"""
    md5 = hashlib.md5()
    try:
        with open(file_path, 'rb') as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b''):
                md5.update(chunk)
    except OSError as e:
        raise UnreadableImageError(file_path, str(e)) from e

    return md5.hexdigest()
