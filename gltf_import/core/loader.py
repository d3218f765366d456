"""
Batch resource loading - reads files and downloads URLs
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Union

import requests

from .config import ImporterSettings
from .models import Location
from .scheme import URL_PREFIXES

logger = logging.getLogger(__name__)


class ResourceLoadError(RuntimeError):
    """Raised when a location cannot be retrieved."""


class LoadedBundle:
    """Outcome of one batch: bytes or the error for every requested location"""

    def __init__(self, results: Optional[Dict[Location, Union[bytes, Exception]]] = None):
        self._results: Dict[Location, Union[bytes, Exception]] = dict(results or {})

    def bytes(self, location: Location) -> bytes:
        """
        Get the bytes loaded for a location

        Raises:
            ResourceLoadError: The location was not part of the batch or
                failed to load
        """
        if location not in self._results:
            raise ResourceLoadError(f"{location} was not loaded")
        result = self._results[location]
        if isinstance(result, Exception):
            raise ResourceLoadError(f"Failed to load {location}") from result
        return result

    def __contains__(self, location: Location) -> bool:
        return location in self._results

    def __len__(self) -> int:
        return len(self._results)


class Loader(ABC):
    """Interface for fetching a batch of locations"""

    @abstractmethod
    def load(
        self,
        locations: Sequence[Location],
        on_done: Callable[[LoadedBundle], None],
    ) -> None:
        """Fetch every location, then call ``on_done`` once with the bundle."""


class ResourceLoader(Loader):
    """Loads filesystem paths and http(s) URLs, fetching a batch in parallel."""

    def __init__(
        self,
        settings: Optional[ImporterSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or ImporterSettings()
        self.session = session or requests.Session()

    def load(
        self,
        locations: Sequence[Location],
        on_done: Callable[[LoadedBundle], None],
    ) -> None:
        unique = list(dict.fromkeys(locations))
        results: Dict[Location, Union[bytes, Exception]] = {}

        if unique:
            workers = min(self.settings.max_workers, len(unique))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = pool.map(self._load_one, unique)
                for location, outcome in zip(unique, outcomes):
                    results[location] = outcome

        on_done(LoadedBundle(results))

    def _load_one(self, location: Location) -> Union[bytes, Exception]:
        try:
            if _is_url(location):
                data = self._http_get(str(location))
            else:
                data = self._read_file(Path(location))
        except ResourceLoadError as exc:
            logger.debug("Failed to load %s: %s", location, exc)
            return exc
        logger.debug("Loaded %s (%d bytes)", location, len(data))
        return data

    def _read_file(self, path: Path) -> bytes:
        if not self.settings.allow_local_files:
            raise ResourceLoadError(f"Local file access is disabled: {path}")
        try:
            return path.read_bytes()
        except (OSError, ValueError) as exc:
            raise ResourceLoadError(f"Unable to read file: {path}") from exc

    def _http_get(self, url: str) -> bytes:
        headers = {"User-Agent": self.settings.user_agent}
        try:
            response = self.session.get(
                url, headers=headers, timeout=self.settings.http_timeout
            )
            response.raise_for_status()
            return response.content
        except requests.RequestException as exc:
            raise ResourceLoadError(f"Request failed: {url}") from exc


def _is_url(location: Location) -> bool:
    return isinstance(location, str) and location.startswith(URL_PREFIXES)
