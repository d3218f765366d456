"""
gltf-import - load glTF 2.0 buffers and images into memory

This is the main public API module.
"""

from .core.document import Gltf
from .core.importer import GltfImporter
from .core.models import ImportedModel, ImportResult

__version__ = "0.1.0"
__all__ = [
    "Gltf",
    "GltfImporter",
    "ImportedModel",
    "ImportResult",
]
