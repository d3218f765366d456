"""
gltf_import - resolve the buffers and images of glTF 2.0 documents

This package classifies buffer and image URIs, fetches external resources
in one batch per phase, validates and pads buffers, and decodes PNG/JPEG
images into raw pixels.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .codec import ImageCodec, ImageFormat, resolve_format
from .config import ImporterSettings, load_settings
from .document import Document, Gltf
from .errors import GltfImportError
from .importer import GltfImporter, ImportState
from .loader import LoadedBundle, Loader, ResourceLoader
from .models import BufferData, ImageData, ImportedModel, ImportResult, PixelFormat
from .scheme import classify

__all__ = [
    "BufferData",
    "Document",
    "Gltf",
    "GltfImportError",
    "GltfImporter",
    "ImageCodec",
    "ImageData",
    "ImageFormat",
    "ImportResult",
    "ImportState",
    "ImportedModel",
    "ImporterSettings",
    "LoadedBundle",
    "Loader",
    "PixelFormat",
    "ResourceLoader",
    "classify",
    "load_settings",
    "resolve_format",
]
