"""
Data models for gltf_import
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Optional, Union

if TYPE_CHECKING:
    from .document import Document
    from .errors import GltfImportError


# A filesystem path or an http(s) URL string.
Location = Union[Path, str]


class PixelFormat(str, Enum):
    """Channel layout of decoded pixels"""
    R8 = "R8"
    R8G8 = "R8G8"
    R8G8B8 = "R8G8B8"
    R8G8B8A8 = "R8G8B8A8"
    B8G8R8 = "B8G8R8"
    B8G8R8A8 = "B8G8R8A8"
    R16 = "R16"
    R16G16 = "R16G16"
    R16G16B16 = "R16G16B16"
    R16G16B16A16 = "R16G16B16A16"


@dataclass(frozen=True)
class BufferData:
    """Bytes of a resolved buffer, zero-padded to a 4 byte boundary"""
    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, key):
        return self.data[key]


@dataclass(frozen=True)
class ImageData:
    """A decoded image"""
    format: PixelFormat
    width: int
    height: int
    pixels: bytes = field(repr=False)

    def __str__(self):
        return f"Image: {self.width}x{self.height} {self.format.value}"


# Planning results. Each document entry produces exactly one plan, which is
# consumed once when the phase assembles its mapping.

@dataclass
class ResolvedBuffer:
    index: int
    data: bytes
    length: int


@dataclass
class PendingBuffer:
    index: int
    location: Location
    length: int


@dataclass
class ResolvedImage:
    index: int
    image: ImageData


@dataclass
class PendingImage:
    index: int
    location: Location
    mime_type: Optional[str] = None


BufferPlan = Union[ResolvedBuffer, PendingBuffer]
ImagePlan = Union[ResolvedImage, PendingImage]


@dataclass(frozen=True)
class ImportedModel:
    """A document together with all of its buffers and images"""
    buffers: Mapping[int, BufferData]
    images: Mapping[int, ImageData]
    document: "Document"

    @classmethod
    def create(
        cls,
        buffers: Mapping[int, BufferData],
        images: Mapping[int, ImageData],
        document: "Document",
    ) -> "ImportedModel":
        return cls(
            buffers=MappingProxyType(dict(buffers)),
            images=MappingProxyType(dict(images)),
            document=document,
        )

    def __str__(self):
        return f"ImportedModel ({len(self.buffers)} buffers, {len(self.images)} images)"


@dataclass(frozen=True)
class ImportResult:
    """Terminal outcome of an import: a model or the first error"""
    model: Optional[ImportedModel] = None
    error: Optional["GltfImportError"] = None

    def __post_init__(self):
        if (self.model is None) == (self.error is None):
            raise ValueError("ImportResult needs exactly one of model or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ImportedModel:
        """Return the model, raising the stored error if the import failed"""
        if self.error is not None:
            raise self.error
        return self.model
