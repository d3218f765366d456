"""
Read-only glTF document model and container parsing (.gltf / .glb)
"""
from __future__ import annotations

import json
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import InvalidDocument, IoError

GLB_MAGIC = b"glTF"
GLB_HEADER = struct.Struct("<4sII")
GLB_CHUNK_HEADER = struct.Struct("<II")
CHUNK_JSON = 0x4E4F534A
CHUNK_BIN = 0x004E4942


class _Entry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    index: int = Field(ge=0)
    name: Optional[str] = None


class BufferEntry(_Entry):
    """A ``buffers[]`` entry. ``uri`` is None for the GLB binary chunk."""

    uri: Optional[str] = None
    byte_length: int = Field(alias="byteLength", ge=0)


class BufferViewEntry(_Entry):
    buffer: int = Field(ge=0)
    byte_offset: int = Field(default=0, alias="byteOffset", ge=0)
    byte_length: int = Field(alias="byteLength", ge=0)
    byte_stride: Optional[int] = Field(default=None, alias="byteStride")


class ImageEntry(_Entry):
    """An ``images[]`` entry, sourced either from a URI or a buffer view."""

    uri: Optional[str] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    buffer_view: Optional[int] = Field(default=None, alias="bufferView", ge=0)

    @model_validator(mode="after")
    def _check_source(self) -> "ImageEntry":
        if (self.uri is None) == (self.buffer_view is None):
            raise ValueError("image must define exactly one of 'uri' or 'bufferView'")
        return self


class Document(BaseModel):
    """The parts of a glTF document that reference binary resources.

    The remaining scene graph (nodes, meshes, materials, ...) is kept
    untouched in ``raw``.
    """

    model_config = ConfigDict(frozen=True)

    buffers: List[BufferEntry] = Field(default_factory=list)
    buffer_views: List[BufferViewEntry] = Field(default_factory=list)
    images: List[ImageEntry] = Field(default_factory=list)
    raw: Dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, root: Dict[str, Any]) -> "Document":
        if not isinstance(root, dict):
            raise InvalidDocument("glTF root must be a JSON object")
        try:
            return cls(
                buffers=_indexed(BufferEntry, root.get("buffers")),
                buffer_views=_indexed(BufferViewEntry, root.get("bufferViews")),
                images=_indexed(ImageEntry, root.get("images")),
                raw=root,
            )
        except ValidationError as exc:
            raise InvalidDocument(f"Invalid glTF document: {exc}") from exc

    def buffer_view(self, index: int) -> BufferViewEntry:
        for view in self.buffer_views:
            if view.index == index:
                return view
        raise InvalidDocument(f"bufferView {index} is not defined")


def _indexed(model: type, entries: Any) -> list:
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise InvalidDocument(f"Expected a list of {model.__name__} objects")
    result = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidDocument(f"{model.__name__} {idx} must be a JSON object")
        result.append(model.model_validate({**entry, "index": idx}))
    return result


@dataclass(frozen=True)
class Gltf:
    """A parsed document plus the GLB binary chunk, if any"""
    document: Document
    blob: Optional[bytes] = None

    @classmethod
    def open(cls, path: str) -> "Gltf":
        """Read and parse a ``.gltf`` or ``.glb`` file"""
        source = Path(path).expanduser()
        try:
            data = source.read_bytes()
        except OSError as exc:
            raise IoError(source) from exc
        return cls.from_slice(data)

    @classmethod
    def from_slice(cls, data: bytes) -> "Gltf":
        if data[:4] == GLB_MAGIC:
            root, blob = _parse_glb(data)
        else:
            root, blob = _parse_json(data), None
        return cls(document=Document.from_json(root), blob=blob)


def _parse_json(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidDocument("glTF JSON could not be decoded") from exc


def _parse_glb(data: bytes):
    if len(data) < GLB_HEADER.size:
        raise InvalidDocument("GLB header is truncated")
    _, version, total_length = GLB_HEADER.unpack_from(data, 0)
    if version != 2:
        raise InvalidDocument(f"Unsupported GLB version {version}")
    if total_length > len(data):
        raise InvalidDocument(
            f"GLB declares {total_length} bytes but only {len(data)} are present"
        )

    root = None
    blob: Optional[bytes] = None
    offset = GLB_HEADER.size
    while offset + GLB_CHUNK_HEADER.size <= total_length:
        chunk_length, chunk_type = GLB_CHUNK_HEADER.unpack_from(data, offset)
        start = offset + GLB_CHUNK_HEADER.size
        end = start + chunk_length
        if end > total_length:
            raise InvalidDocument("GLB chunk extends past the end of the file")

        if root is None:
            if chunk_type != CHUNK_JSON:
                raise InvalidDocument("First GLB chunk must be JSON")
            root = _parse_json(data[start:end])
        elif chunk_type == CHUNK_BIN and blob is None:
            blob = bytes(data[start:end])
        # Unknown chunk types are skipped.
        offset = end

    if root is None:
        raise InvalidDocument("GLB has no JSON chunk")
    return root, blob
