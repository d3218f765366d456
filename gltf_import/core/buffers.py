"""
Buffer resolution - length validation and alignment padding
"""
from __future__ import annotations

from typing import Dict, Sequence

from .errors import BufferLength
from .fetch import FetchedBatch
from .models import BufferData, BufferPlan, PendingBuffer

ALIGNMENT = 4


def pad_to_alignment(data: bytes, alignment: int = ALIGNMENT) -> bytes:
    """Append zero bytes until ``len(data)`` is a multiple of ``alignment``"""
    remainder = -len(data) % alignment
    return data + b"\x00" * remainder if remainder else data


def finalize_buffer(index: int, data: bytes, length: int) -> BufferData:
    if len(data) < length:
        raise BufferLength(index, expected=length, actual=len(data))
    return BufferData(pad_to_alignment(bytes(data)))


def resolve_buffers(plans: Sequence[BufferPlan], batch: FetchedBatch) -> Dict[int, BufferData]:
    """
    Build the index -> buffer mapping once the batch has been fetched

    The first failure in document order is raised.
    """
    resolved: Dict[int, BufferData] = {}
    for plan in plans:
        if isinstance(plan, PendingBuffer):
            data = batch.bytes_for(plan.location)
        else:
            data = plan.data
        resolved[plan.index] = finalize_buffer(plan.index, data, plan.length)
    return resolved
