"""
Tests for image re-encoding before upload.
"""
import io

import pytest
from PIL import Image

from conftest import make_image_bytes
from portfolio.utils.image_converter import (
    ImageDecodeError,
    prepare_additional_image,
    reencode_for_upload,
)


def _open(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data))


def test_jpeg_is_reencoded_as_jpeg():
    data, image_format = reencode_for_upload(make_image_bytes("JPEG"))
    assert image_format == "JPEG"
    assert _open(data).format == "JPEG"


def test_png_stays_png():
    original = make_image_bytes("PNG", mode="RGBA")
    data, image_format = reencode_for_upload(original)
    assert image_format == "PNG"
    reopened = _open(data)
    assert reopened.format == "PNG"
    assert reopened.mode == "RGBA"


def test_other_formats_pass_through():
    original = make_image_bytes("GIF")
    data, image_format = reencode_for_upload(original)
    assert image_format == "GIF"
    assert data == original


def test_unreadable_bytes_pass_through():
    data, image_format = reencode_for_upload(b"not an image")
    assert data == b"not an image"
    assert image_format is None


def test_additional_image_fits_inside_bounds():
    data = prepare_additional_image(make_image_bytes("PNG", size=(2400, 1200)))
    image = _open(data)
    assert image.format == "JPEG"
    assert image.size == (1200, 600)


def test_additional_image_is_never_upscaled():
    image = _open(prepare_additional_image(make_image_bytes("JPEG", size=(300, 200))))
    assert image.size == (300, 200)


def test_additional_image_flattens_alpha():
    image = _open(prepare_additional_image(make_image_bytes("PNG", mode="RGBA")))
    assert image.mode == "RGB"


def test_additional_image_rejects_garbage():
    with pytest.raises(ImageDecodeError):
        prepare_additional_image(b"\x00\x01garbage")
