"""
Resource planning - decide for each buffer and image whether its bytes are
already available or must be fetched
"""
from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import List, Mapping, Optional, Union
from urllib.parse import unquote, urljoin

from .codec import ImageCodec, decode_image
from .document import Document
from .errors import (
    BufferLength,
    ExternalReferenceInSliceImport,
    InvalidEncoding,
    MissingBlob,
    UnsupportedScheme,
)
from .models import (
    BufferData,
    BufferPlan,
    ImagePlan,
    Location,
    PendingBuffer,
    PendingImage,
    ResolvedBuffer,
    ResolvedImage,
)
from .scheme import EmbeddedData, ExternalUrl, LocalFile, RelativePath, classify

# Directory path or http(s) URL prefix that relative URIs are resolved against.
Base = Union[Path, str]


class BlobSlot:
    """Holds the GLB binary chunk until one buffer takes it"""

    def __init__(self, blob: Optional[bytes]):
        self._blob = blob
        self._taken = False

    def take(self) -> bytes:
        if self._taken:
            raise MissingBlob("Binary chunk is already claimed by another buffer")
        if self._blob is None:
            raise MissingBlob("Buffer refers to the binary chunk but none was supplied")
        self._taken = True
        blob, self._blob = self._blob, None
        return blob


def decode_data_uri(payload: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEncoding("Data URI payload is not valid base64") from exc


def join_base(base: Base, uri: str) -> Location:
    """Resolve a relative URI against a directory or URL base"""
    if isinstance(base, str):
        return urljoin(base if base.endswith("/") else base + "/", uri)
    return base / unquote(uri)


def plan_buffers(
    document: Document,
    blob: Optional[bytes] = None,
    base: Optional[Base] = None,
    allow_local_files: bool = True,
) -> List[BufferPlan]:
    """
    Plan every buffer of a document

    Args:
        document: Parsed glTF document
        blob: GLB binary chunk, if the document came from a .glb
        base: Directory or URL that relative URIs are resolved against
        allow_local_files: Whether ``file:`` URIs may be used

    Returns:
        One plan per buffer, in document order

    Raises:
        MissingBlob, InvalidEncoding, UnsupportedScheme
    """
    slot = BlobSlot(blob)
    plans: List[BufferPlan] = []

    for buffer in document.buffers:
        if buffer.uri is None:
            plans.append(ResolvedBuffer(buffer.index, slot.take(), buffer.byte_length))
            continue

        kind = classify(buffer.uri, allow_local_files=allow_local_files)
        if isinstance(kind, EmbeddedData):
            plan: BufferPlan = ResolvedBuffer(
                buffer.index, decode_data_uri(kind.payload), buffer.byte_length
            )
        elif isinstance(kind, LocalFile):
            plan = PendingBuffer(buffer.index, Path(kind.path), buffer.byte_length)
        elif isinstance(kind, RelativePath):
            if base is None:
                raise UnsupportedScheme(buffer.uri, "relative URI without a base directory")
            plan = PendingBuffer(buffer.index, join_base(base, buffer.uri), buffer.byte_length)
        elif isinstance(kind, ExternalUrl):
            plan = PendingBuffer(buffer.index, kind.url, buffer.byte_length)
        else:
            raise UnsupportedScheme(buffer.uri)
        plans.append(plan)

    return plans


def plan_images(
    document: Document,
    buffers: Mapping[int, BufferData],
    codec: ImageCodec,
    base: Optional[Base] = None,
    allow_local_files: bool = True,
) -> List[ImagePlan]:
    """
    Plan every image of a document

    Embedded and buffer-view images are decoded immediately. Images that
    point to files or URLs are left pending. Any image declared by URI,
    including ``data:`` URIs, requires a base.

    Raises:
        MissingBlob, BufferLength, InvalidEncoding, UnsupportedScheme,
        ExternalReferenceInSliceImport, UnsupportedImageEncoding, CodecError
    """
    plans: List[ImagePlan] = []

    for image in document.images:
        if image.buffer_view is not None:
            view = document.buffer_view(image.buffer_view)
            parent = buffers.get(view.buffer)
            if parent is None:
                raise MissingBlob(f"Image {image.index} refers to unresolved buffer {view.buffer}")
            end = view.byte_offset + view.byte_length
            if end > len(parent):
                raise BufferLength(view.buffer, expected=end, actual=len(parent))
            encoded = parent[view.byte_offset:end]
            plans.append(ResolvedImage(image.index, decode_image(codec, encoded, image.mime_type)))
            continue

        uri = image.uri or ""
        if base is None:
            raise ExternalReferenceInSliceImport(
                f"Image {image.index} references {uri[:64]!r} but no base directory was given"
            )

        kind = classify(uri, allow_local_files=allow_local_files)
        if isinstance(kind, EmbeddedData):
            decoded = decode_image(
                codec, decode_data_uri(kind.payload), kind.media_type or image.mime_type
            )
            plans.append(ResolvedImage(image.index, decoded))
            continue

        if not isinstance(kind, (LocalFile, RelativePath, ExternalUrl)):
            raise UnsupportedScheme(uri)

        if isinstance(kind, LocalFile):
            location: Location = Path(kind.path)
        elif isinstance(kind, ExternalUrl):
            location = kind.url
        else:
            location = join_base(base, uri)
        plans.append(PendingImage(image.index, location, image.mime_type))

    return plans
