"""
Image format detection and decoding
"""
from __future__ import annotations

import io
from enum import Enum
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .errors import CodecError, UnsupportedImageEncoding
from .models import ImageData, PixelFormat

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


class ImageFormat(str, Enum):
    """Encodings accepted by glTF images (values are Pillow format names)"""
    PNG = "PNG"
    JPEG = "JPEG"


_MIME_FORMATS = {
    "image/png": ImageFormat.PNG,
    "image/jpeg": ImageFormat.JPEG,
}

_MODE_FORMATS = {
    "L": PixelFormat.R8,
    "LA": PixelFormat.R8G8,
    "RGB": PixelFormat.R8G8B8,
    "RGBA": PixelFormat.R8G8B8A8,
    "I;16": PixelFormat.R16,
}

# Modes without a direct pixel format and the mode they are converted to.
_MODE_CONVERSIONS = {
    "1": "L",
    "I": "I;16",
    "F": "L",
    "PA": "RGBA",
    "La": "LA",
    "RGBa": "RGBA",
    "CMYK": "RGB",
    "YCbCr": "RGB",
    "LAB": "RGB",
    "HSV": "RGB",
}


def guess_format(data: bytes) -> Optional[ImageFormat]:
    """Detect PNG or JPEG from the leading magic bytes"""
    header = data[:8]
    if header.startswith(PNG_SIGNATURE):
        return ImageFormat.PNG
    if header.startswith(JPEG_SIGNATURE):
        return ImageFormat.JPEG
    return None


def resolve_format(data: bytes, mime_type: Optional[str] = None) -> ImageFormat:
    """
    Pick the encoding of an image

    A recognised MIME type wins; otherwise the bytes are sniffed.

    Raises:
        UnsupportedImageEncoding: Neither the hint nor the bytes identify
            PNG or JPEG
    """
    if mime_type in _MIME_FORMATS:
        return _MIME_FORMATS[mime_type]

    detected = guess_format(data)
    if detected is None:
        raise UnsupportedImageEncoding(
            f"Unsupported image encoding (mime type: {mime_type or 'none'})"
        )
    return detected


class ImageCodec:
    """Decode PNG/JPEG bytes into raw pixels using Pillow"""

    def decode(self, data: bytes, image_format: ImageFormat) -> ImageData:
        try:
            with Image.open(io.BytesIO(data), formats=[image_format.value]) as image:
                image.load()
                return self._to_image_data(image)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
            raise CodecError(f"Unable to decode {image_format.value} image") from exc

    @staticmethod
    def _to_image_data(image: "Image.Image") -> ImageData:
        if image.mode not in _MODE_FORMATS:
            if image.mode == "P":
                target = "RGBA" if "transparency" in image.info else "RGB"
            else:
                target = _MODE_CONVERSIONS.get(image.mode, "RGBA")
            image = image.convert(target)

        width, height = image.size
        return ImageData(
            format=_MODE_FORMATS[image.mode],
            width=width,
            height=height,
            pixels=image.tobytes(),
        )


def decode_image(codec: ImageCodec, data: bytes, mime_type: Optional[str] = None) -> ImageData:
    """Resolve the encoding of ``data`` and decode it with ``codec``"""
    return codec.decode(data, resolve_format(data, mime_type))
