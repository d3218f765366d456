"""
Error types raised while resolving glTF resources
"""
from __future__ import annotations

from typing import Any


class GltfImportError(RuntimeError):
    """Base class for every failure that aborts an import."""


class InvalidDocument(GltfImportError):
    """Raised when the glTF JSON or GLB container is malformed."""


class UnsupportedScheme(GltfImportError):
    """Raised when a URI cannot be resolved to a location."""

    def __init__(self, uri: str, reason: str = "unsupported URI scheme"):
        self.uri = uri
        super().__init__(f"{reason}: {uri!r}")


class MissingBlob(GltfImportError):
    """Raised when the binary chunk or a referenced buffer is unavailable."""


class InvalidEncoding(GltfImportError):
    """Raised when a data URI payload is not valid base64."""


class BufferLength(GltfImportError):
    """Raised when a buffer holds fewer bytes than the document declares."""

    def __init__(self, buffer: int, expected: int, actual: int):
        self.buffer = buffer
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Buffer {buffer} has {actual} bytes, expected at least {expected}"
        )


class UnsupportedImageEncoding(GltfImportError):
    """Raised when image bytes are neither PNG nor JPEG."""


class ExternalReferenceInSliceImport(GltfImportError):
    """Raised when an image points outside the document but no base was given."""


class IoError(GltfImportError):
    """Raised when the loader could not deliver a location."""

    def __init__(self, location: Any):
        self.location = location
        super().__init__(f"Unable to load {location}")


class CodecError(GltfImportError):
    """Raised when the image codec rejects encoded bytes."""
