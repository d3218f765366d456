"""
Image resolution - decode fetched images and assemble the image mapping
"""
from __future__ import annotations

from typing import Dict, Sequence

from .codec import ImageCodec, decode_image
from .fetch import FetchedBatch
from .models import ImageData, ImagePlan, PendingImage


def resolve_images(
    plans: Sequence[ImagePlan],
    batch: FetchedBatch,
    codec: ImageCodec,
) -> Dict[int, ImageData]:
    """
    Build the index -> image mapping once the batch has been fetched

    Fetched images are decoded with their declared MIME type as hint. The
    first failure in document order is raised.
    """
    resolved: Dict[int, ImageData] = {}
    for plan in plans:
        if isinstance(plan, PendingImage):
            encoded = batch.bytes_for(plan.location)
            resolved[plan.index] = decode_image(codec, encoded, plan.mime_type)
        else:
            resolved[plan.index] = plan.image
    return resolved
