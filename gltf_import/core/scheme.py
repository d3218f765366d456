"""
URI scheme classification for buffer and image references
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

DATA_PREFIX = "data:"
BASE64_MARKER = ";base64,"
URL_PREFIXES = ("http:", "https:")


@dataclass(frozen=True)
class EmbeddedData:
    """``data:[<media type>];base64,<payload>``"""
    media_type: Optional[str]
    payload: str


@dataclass(frozen=True)
class LocalFile:
    """``file:[//]<absolute path>`` (no authority component)"""
    path: str


@dataclass(frozen=True)
class RelativePath:
    """``../foo.bin`` and friends, resolved against a base directory"""


@dataclass(frozen=True)
class ExternalUrl:
    """``http[s]://<host>/<path>``"""
    url: str


@dataclass(frozen=True)
class Unsupported:
    pass


ReferenceKind = Union[EmbeddedData, LocalFile, RelativePath, ExternalUrl, Unsupported]


def classify(uri: str, allow_local_files: bool = True) -> ReferenceKind:
    """
    Classify a glTF URI

    Args:
        uri: Value of a buffer or image ``uri`` property
        allow_local_files: False on targets without filesystem access, where
            ``file:`` URIs degrade to ``Unsupported``

    Returns:
        The matching reference kind
    """
    if ":" not in uri:
        return RelativePath()

    if uri.startswith(DATA_PREFIX):
        media_type, marker, payload = uri[len(DATA_PREFIX):].partition(BASE64_MARKER)
        if not marker:
            return Unsupported()
        return EmbeddedData(media_type=media_type or None, payload=payload)

    for prefix in ("file://", "file:"):
        if uri.startswith(prefix):
            if not allow_local_files:
                return Unsupported()
            return LocalFile(path=uri[len(prefix):])

    if uri.startswith(URL_PREFIXES):
        return ExternalUrl(url=uri)

    return Unsupported()
