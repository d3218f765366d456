"""
Test for image format detection and decoding
"""
import io

import pytest
from PIL import Image

from gltf_import.core.codec import ImageCodec, ImageFormat, guess_format, resolve_format
from gltf_import.core.errors import CodecError, UnsupportedImageEncoding
from gltf_import.core.models import PixelFormat
from helpers import make_png


class TestResolveFormat:
    """Test resolve_format()"""

    def test_trusts_known_mime_type(self, jpeg_bytes):
        """Test a recognised hint wins over the magic bytes"""
        assert resolve_format(jpeg_bytes, "image/png") == ImageFormat.PNG
        assert resolve_format(b"", "image/jpeg") == ImageFormat.JPEG

    def test_sniffs_without_hint(self, png_bytes, jpeg_bytes):
        assert resolve_format(png_bytes) == ImageFormat.PNG
        assert resolve_format(jpeg_bytes, None) == ImageFormat.JPEG

    def test_sniffs_with_unknown_hint(self, png_bytes):
        assert resolve_format(png_bytes, "image/webp") == ImageFormat.PNG

    def test_unrecognised_bytes(self):
        with pytest.raises(UnsupportedImageEncoding):
            resolve_format(b"GIF89a....", "image/gif")
        with pytest.raises(UnsupportedImageEncoding):
            resolve_format(b"")

    def test_guess_format(self):
        assert guess_format(b"\x89PNG\r\n\x1a\n rest") == ImageFormat.PNG
        assert guess_format(b"\xff\xd8\xff\xe0abc") == ImageFormat.JPEG
        assert guess_format(b"BM") is None


class TestImageCodec:
    """Test ImageCodec"""

    def test_decode_png(self, png_bytes):
        image = ImageCodec().decode(png_bytes, ImageFormat.PNG)
        assert (image.width, image.height) == (1, 1)
        assert image.format == PixelFormat.R8G8B8A8
        assert image.pixels == bytes([255, 0, 0, 255])

    def test_decode_jpeg(self, jpeg_bytes):
        image = ImageCodec().decode(jpeg_bytes, ImageFormat.JPEG)
        assert (image.width, image.height) == (2, 2)
        assert image.format == PixelFormat.R8G8B8
        assert len(image.pixels) == 2 * 2 * 3

    def test_decode_grayscale(self):
        image = ImageCodec().decode(make_png("L", (3, 2), 7), ImageFormat.PNG)
        assert image.format == PixelFormat.R8
        assert image.pixels == bytes([7] * 6)

    def test_decode_palette_converted(self):
        """Test palette images are expanded to RGB"""
        buf = io.BytesIO()
        Image.new("RGB", (2, 2), (10, 20, 30)).convert("P").save(buf, format="PNG")
        image = ImageCodec().decode(buf.getvalue(), ImageFormat.PNG)
        assert image.format in (PixelFormat.R8G8B8, PixelFormat.R8G8B8A8)
        assert (image.width, image.height) == (2, 2)

    def test_decode_garbage(self):
        with pytest.raises(CodecError) as exc_info:
            ImageCodec().decode(b"\x89PNG\r\n\x1a\nnot really", ImageFormat.PNG)
        assert exc_info.value.__cause__ is not None

    def test_decode_wrong_format(self, jpeg_bytes):
        """Test JPEG bytes declared as PNG fail to decode"""
        with pytest.raises(CodecError):
            ImageCodec().decode(jpeg_bytes, ImageFormat.PNG)
