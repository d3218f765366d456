"""
Test for the batch fetch adapter and the buffer/image resolution phases
"""
from pathlib import Path

import pytest

from gltf_import.core.buffers import pad_to_alignment, resolve_buffers
from gltf_import.core.codec import ImageCodec
from gltf_import.core.errors import BufferLength, CodecError, IoError
from gltf_import.core.fetch import FetchedBatch, fetch_all, pending_locations
from gltf_import.core.images import resolve_images
from gltf_import.core.loader import LoadedBundle
from gltf_import.core.models import PendingBuffer, PendingImage, ResolvedBuffer
from helpers import FakeLoader


class TestFetchAdapter:
    """Test pending_locations() and fetch_all()"""

    def test_pending_locations_are_distinct_and_ordered(self):
        plans = [
            PendingBuffer(0, Path("/m/b.bin"), 4),
            ResolvedBuffer(1, b"abcd", 4),
            PendingBuffer(2, Path("/m/a.bin"), 4),
            PendingBuffer(3, Path("/m/b.bin"), 4),
        ]
        assert pending_locations(plans) == [Path("/m/b.bin"), Path("/m/a.bin")]

    def test_nothing_pending_skips_loader(self, fake_loader):
        batches = []
        fetch_all(fake_loader, [], batches.append)
        assert fake_loader.calls == []
        assert len(batches) == 1

    def test_single_loader_call(self):
        loader = FakeLoader({"https://h/a": b"A", "https://h/b": b"B"})
        batches = []
        fetch_all(loader, ["https://h/a", "https://h/b"], batches.append)
        assert loader.calls == [["https://h/a", "https://h/b"]]
        assert batches[0].bytes_for("https://h/b") == b"B"

    def test_missing_location_is_io_error(self):
        batch = FetchedBatch(LoadedBundle({"https://h/a": OSError("boom")}))
        with pytest.raises(IoError) as exc_info:
            batch.bytes_for("https://h/a")
        assert exc_info.value.location == "https://h/a"
        with pytest.raises(IoError):
            batch.bytes_for("https://h/other")


class TestBufferPhase:
    """Test resolve_buffers()"""

    def test_pad_to_alignment(self):
        assert pad_to_alignment(b"") == b""
        assert pad_to_alignment(b"abcd") == b"abcd"
        assert pad_to_alignment(b"abcde") == b"abcde\x00\x00\x00"

    def test_padding_invariant(self):
        plans = [
            ResolvedBuffer(0, b"12345", 5),
            PendingBuffer(3, "https://h/x.bin", 6),
        ]
        batch = FetchedBatch(LoadedBundle({"https://h/x.bin": b"abcdefg"}))
        buffers = resolve_buffers(plans, batch)
        assert sorted(buffers) == [0, 3]
        for index, declared in ((0, 5), (3, 6)):
            assert len(buffers[index]) % 4 == 0
            assert len(buffers[index]) >= declared
        assert buffers[3].data == b"abcdefg\x00"

    def test_longer_than_declared_is_kept(self):
        buffers = resolve_buffers([ResolvedBuffer(0, b"abcdefgh", 2)], FetchedBatch())
        assert buffers[0].data == b"abcdefgh"

    def test_buffer_length(self):
        plans = [PendingBuffer(0, "https://h/x.bin", 10)]
        batch = FetchedBatch(LoadedBundle({"https://h/x.bin": b"abcd"}))
        with pytest.raises(BufferLength) as exc_info:
            resolve_buffers(plans, batch)
        assert (exc_info.value.buffer, exc_info.value.expected, exc_info.value.actual) == (0, 10, 4)

    def test_first_error_in_document_order(self):
        """Test the earliest failing buffer is reported"""
        plans = [
            ResolvedBuffer(0, b"ab", 8),
            PendingBuffer(1, "https://h/missing.bin", 4),
        ]
        with pytest.raises(BufferLength):
            resolve_buffers(plans, FetchedBatch())


class TestImagePhase:
    """Test resolve_images()"""

    def test_fetched_image_decoded(self, jpeg_bytes):
        plans = [PendingImage(0, "https://h/a.jpg", "image/jpeg")]
        batch = FetchedBatch(LoadedBundle({"https://h/a.jpg": jpeg_bytes}))
        images = resolve_images(plans, batch, ImageCodec())
        assert images[0].width == 2

    def test_fetched_image_sniffed(self, png_bytes):
        plans = [PendingImage(4, "https://h/a", None)]
        batch = FetchedBatch(LoadedBundle({"https://h/a": png_bytes}))
        images = resolve_images(plans, batch, ImageCodec())
        assert list(images) == [4]

    def test_fetched_image_corrupt(self):
        plans = [PendingImage(0, "https://h/a.png", "image/png")]
        batch = FetchedBatch(LoadedBundle({"https://h/a.png": b"nope"}))
        with pytest.raises(CodecError):
            resolve_images(plans, batch, ImageCodec())
