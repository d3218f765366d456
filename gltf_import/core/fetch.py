"""
Batch fetch adapter - one loader call per resolution phase
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .errors import IoError
from .loader import LoadedBundle, Loader, ResourceLoadError
from .models import BufferPlan, ImagePlan, Location, PendingBuffer, PendingImage

logger = logging.getLogger(__name__)

Plan = Union[BufferPlan, ImagePlan]


class FetchedBatch:
    """Bytes delivered by the loader for one phase"""

    def __init__(self, bundle: Optional[LoadedBundle] = None):
        self._bundle = bundle or LoadedBundle()

    def bytes_for(self, location: Location) -> bytes:
        try:
            return self._bundle.bytes(location)
        except ResourceLoadError as exc:
            raise IoError(location) from exc


def pending_locations(plans: Iterable[Plan]) -> List[Location]:
    """Distinct locations of the pending plans, in document order"""
    locations: List[Location] = []
    seen = set()
    for plan in plans:
        if isinstance(plan, (PendingBuffer, PendingImage)) and plan.location not in seen:
            seen.add(plan.location)
            locations.append(plan.location)
    return locations


def fetch_all(
    loader: Loader,
    locations: Sequence[Location],
    on_done: Callable[[FetchedBatch], None],
) -> None:
    """
    Fetch ``locations`` with a single loader call

    ``on_done`` runs once the whole batch has completed. Nothing is
    dispatched when there is nothing to fetch.
    """
    if not locations:
        on_done(FetchedBatch())
        return

    logger.debug("Dispatching batch of %d location(s)", len(locations))
    loader.load(list(locations), lambda bundle: on_done(FetchedBatch(bundle)))
