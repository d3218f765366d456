"""
Shared builders for test assets
"""
import base64
import io
import json
import struct
from typing import Dict, List, Optional

from PIL import Image

from gltf_import.core.loader import LoadedBundle, Loader


def make_png(mode: str = "RGBA", size=(1, 1), color=(255, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


def make_jpeg(size=(2, 2), color=(0, 128, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="JPEG")
    return buf.getvalue()


def data_uri(data: bytes, media_type: str = "application/octet-stream") -> str:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def make_glb(root: dict, blob: Optional[bytes] = None) -> bytes:
    json_chunk = json.dumps(root).encode("utf-8")
    json_chunk += b" " * (-len(json_chunk) % 4)
    body = struct.pack("<II", len(json_chunk), 0x4E4F534A) + json_chunk
    if blob is not None:
        bin_chunk = blob + b"\x00" * (-len(blob) % 4)
        body += struct.pack("<II", len(bin_chunk), 0x004E4942) + bin_chunk
    return struct.pack("<4sII", b"glTF", 2, 12 + len(body)) + body


class FakeLoader(Loader):
    """Serves bytes from a dict and records every batch it receives"""

    def __init__(self, files: Optional[Dict] = None, defer: bool = False):
        self.files = dict(files or {})
        self.defer = defer
        self.calls: List[List] = []
        self.pending = []

    def load(self, locations, on_done):
        self.calls.append(list(locations))
        bundle = LoadedBundle(
            {loc: self.files[loc] for loc in locations if loc in self.files}
        )
        if self.defer:
            self.pending.append((on_done, bundle))
        else:
            on_done(bundle)

    def flush(self) -> None:
        while self.pending:
            on_done, bundle = self.pending.pop(0)
            on_done(bundle)
