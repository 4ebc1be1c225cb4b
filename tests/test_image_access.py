# tests/test_image_access.py

import pytest
import numpy as np
import cv2

from core.errors import UnreadableImageError
from core.image_access import decode, is_supported_image, peek_dimensions


@pytest.mark.parametrize("name", [
    "a.jpg", "a.jpeg", "a.png", "a.bmp", "a.gif", "a.tiff", "a.webp",
    "A.JPG", "photo.Png", "dir.with.dots/x.WebP"
])
def test_supported_extensions(name):
    assert is_supported_image(name)


@pytest.mark.parametrize("name", [
    "a.txt", "a.tif", "a.heic", "jpg", "archive.jpg.zip", "noext", ".png.bak"
])
def test_unsupported_extensions(name):
    assert not is_supported_image(name)


def test_decode_returns_full_image(tmp_path):
    img = np.random.randint(0, 255, (50, 80, 3), dtype=np.uint8)
    path = tmp_path / "sample.png"
    cv2.imwrite(str(path), img)

    decoded = decode(path)

    assert decoded.size == (80, 50)
    # pixels are in memory, not tied to the closed file
    assert decoded.getpixel((0, 0)) is not None


def test_decode_corrupt_file(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"definitely not a jpeg")

    with pytest.raises(UnreadableImageError) as exc:
        decode(path)

    assert exc.value.path == str(path)


def test_decode_missing_file(tmp_path):
    with pytest.raises(UnreadableImageError):
        decode(tmp_path / "missing.png")


def test_peek_dimensions(tmp_path, solid_image):
    path = solid_image(tmp_path / "wide.png", size=(320, 40))

    assert peek_dimensions(path) == (320, 40)


def test_peek_dimensions_reads_header_only(tmp_path):
    """A truncated file still reports its size but cannot be decoded"""
    img = np.random.randint(0, 255, (64, 64, 3), dtype=np.uint8)
    path = tmp_path / "truncated.png"
    cv2.imwrite(str(path), img)
    data = path.read_bytes()
    path.write_bytes(data[:len(data) // 2])

    assert peek_dimensions(path) == (64, 64)
    with pytest.raises(UnreadableImageError):
        decode(path)


def test_peek_dimensions_unreadable(tmp_path):
    path = tmp_path / "junk.png"
    path.write_bytes(b"\x00" * 32)

    with pytest.raises(UnreadableImageError):
        peek_dimensions(path)
