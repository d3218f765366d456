"""
Import orchestration - resolve buffers, then images, then hand back the model
"""
from __future__ import annotations

import logging
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .buffers import resolve_buffers
from .codec import ImageCodec
from .config import ImporterSettings
from .document import Gltf
from .errors import GltfImportError
from .fetch import FetchedBatch, fetch_all, pending_locations
from .images import resolve_images
from .loader import Loader, ResourceLoader
from .models import BufferData, BufferPlan, ImagePlan, ImportedModel, ImportResult
from .planner import Base, plan_buffers, plan_images
from .scheme import URL_PREFIXES

logger = logging.getLogger(__name__)


class ImportState(str, Enum):
    START = "start"
    BUFFERS_PENDING = "buffers-pending"
    BUFFERS_RESOLVED = "buffers-resolved"
    IMAGES_PENDING = "images-pending"
    DONE = "done"
    FAILED = "failed"


class GltfImporter:
    """Resolve all buffers and images of a glTF document"""

    def __init__(
        self,
        loader: Optional[Loader] = None,
        codec: Optional[ImageCodec] = None,
        settings: Optional[ImporterSettings] = None,
    ):
        """
        Initialize importer

        Args:
            loader: Batch loader used for files and URLs
            codec: Image decoder
            settings: Importer settings (defaults read from the environment)
        """
        self.settings = settings or ImporterSettings()
        self.loader = loader or ResourceLoader(self.settings)
        self.codec = codec or ImageCodec()

    def import_model(
        self,
        gltf: Gltf,
        base: Optional[Base] = None,
        on_done: Optional[Callable[[ImportResult], None]] = None,
    ) -> "ImportRun":
        """
        Start an import

        ``on_done`` is called exactly once, with either the model or the
        first error. With an asynchronous loader this may happen after the
        method has returned.

        Args:
            gltf: Parsed document and optional GLB binary chunk
            base: Directory (or http(s) URL) for relative references. Without
                it, images may only be embedded or stored in buffer views.
            on_done: Completion callback

        Returns:
            The running import, exposing its current state
        """
        run = ImportRun(self, gltf, normalize_base(base), on_done or (lambda result: None))
        run.start()
        return run

    def import_blocking(self, gltf: Gltf, base: Optional[Base] = None) -> ImportedModel:
        """Import with a loader that completes synchronously and return the model"""
        outcome: List[ImportResult] = []
        self.import_model(gltf, base, outcome.append)
        if not outcome:
            raise RuntimeError(
                "Loader did not complete synchronously; use import_model() with a callback"
            )
        return outcome[0].unwrap()

    def import_file(self, path: str) -> ImportedModel:
        """Open a .gltf/.glb file and import it relative to its directory"""
        source = Path(path).expanduser().resolve()
        gltf = Gltf.open(str(source))
        return self.import_blocking(gltf, base=source.parent)


class ImportRun:
    """A single import moving through the resolution states"""

    def __init__(
        self,
        importer: GltfImporter,
        gltf: Gltf,
        base: Optional[Base],
        on_done: Callable[[ImportResult], None],
    ):
        self.state = ImportState.START
        self._importer = importer
        self._gltf = gltf
        self._base = base
        self._on_done = on_done
        self._completed = False

    @property
    def completed(self) -> bool:
        return self._completed

    def start(self) -> None:
        settings = self._importer.settings
        try:
            plans = plan_buffers(
                self._gltf.document,
                blob=self._gltf.blob,
                base=self._base,
                allow_local_files=settings.allow_local_files,
            )
        except GltfImportError as exc:
            self._fail(exc)
            return

        self._dispatch(
            plans,
            ImportState.BUFFERS_PENDING,
            partial(self._on_buffers_fetched, plans),
        )

    def _dispatch(self, plans, pending_state: ImportState, continuation) -> None:
        locations = pending_locations(plans)
        if locations:
            self._transition(pending_state)
        fetch_all(self._importer.loader, locations, _once(continuation))

    def _on_buffers_fetched(self, plans: List[BufferPlan], batch: FetchedBatch) -> None:
        settings = self._importer.settings
        try:
            buffers = resolve_buffers(plans, batch)
            self._transition(ImportState.BUFFERS_RESOLVED)
            image_plans = plan_images(
                self._gltf.document,
                buffers,
                self._importer.codec,
                base=self._base,
                allow_local_files=settings.allow_local_files,
            )
        except GltfImportError as exc:
            self._fail(exc)
            return

        self._dispatch(
            image_plans,
            ImportState.IMAGES_PENDING,
            partial(self._on_images_fetched, buffers, image_plans),
        )

    def _on_images_fetched(
        self,
        buffers: Dict[int, BufferData],
        plans: List[ImagePlan],
        batch: FetchedBatch,
    ) -> None:
        try:
            images = resolve_images(plans, batch, self._importer.codec)
        except GltfImportError as exc:
            self._fail(exc)
            return

        self._transition(ImportState.DONE)
        model = ImportedModel.create(buffers, images, self._gltf.document)
        self._complete(ImportResult(model=model))

    def _transition(self, state: ImportState) -> None:
        logger.debug("Import %s -> %s", self.state.value, state.value)
        self.state = state

    def _fail(self, error: GltfImportError) -> None:
        logger.warning("Import failed during %s: %s", self.state.value, error)
        self.state = ImportState.FAILED
        self._complete(ImportResult(error=error))

    def _complete(self, result: ImportResult) -> None:
        if self._completed:
            raise RuntimeError("Import already completed")
        self._completed = True
        self._on_done(result)


def normalize_base(base: Optional[Base]) -> Optional[Base]:
    """Keep http(s) URL bases as strings, turn anything else into a Path"""
    if base is None:
        return None
    if isinstance(base, str) and base.startswith(URL_PREFIXES):
        return base
    return Path(base)


def _once(continuation):
    called = False

    def wrapper(batch: FetchedBatch) -> None:
        nonlocal called
        if called:
            raise RuntimeError("Loader delivered the same batch twice")
        called = True
        continuation(batch)

    return wrapper
