"""Track catalogs for castplayback.

This module provides an in-memory catalog and a JSON catalog source fetched
over HTTP using aiohttp.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, cast
from urllib.parse import urljoin

import aiohttp

import castplayback.errors as _errors
import castplayback.types as _types

_LOGGER = logging.getLogger(__name__)


class MemoryCatalog(_types.Catalog):
    """Catalog backed by a dictionary of tracks keyed by music id."""

    def __init__(self, tracks: Iterable[_types.TrackDescriptor] = ()) -> None:
        """Initialize the catalog.

        :param tracks: Tracks to add to the catalog.
        """
        self._tracks: dict[str, _types.TrackDescriptor] = {}
        for track in tracks:
            self.add(track)

    def add(self, track: _types.TrackDescriptor) -> None:
        """Add or replace a track.

        :param track: The track to store.
        :returns: None
        """
        self._tracks[track.music_id] = track

    def get_music(self, music_id: str) -> _types.TrackDescriptor | None:
        """Return the track for an identifier, or None when unknown.

        :param music_id: Catalog identifier of the track.
        :returns: TrackDescriptor or None.
        """
        return self._tracks.get(music_id)

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[_types.TrackDescriptor]:
        return iter(self._tracks.values())


def _music_id_for(source: str) -> _types.MusicID:
    return _types.MusicID(hashlib.sha1(source.encode("utf-8")).hexdigest())


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def track_from_json(entry: Mapping[str, Any], base_url: str) -> _types.TrackDescriptor:
    """Build a TrackDescriptor from one entry of a JSON catalog.

    Relative ``source`` and ``image`` references are resolved against the
    catalog URL; ``duration`` is given in seconds.

    :param entry: Mapping describing the track.
    :param base_url: URL the catalog was fetched from.
    :returns: The parsed TrackDescriptor.
    :raises CatalogError: If the entry has no source or is malformed.
    """
    source = entry.get("source")
    if not source:
        raise _errors.CatalogError(f"Catalog entry without source: {entry!r}")
    source = urljoin(base_url, str(source))
    image = entry.get("image")
    artist = entry.get("artist")

    try:
        duration = _optional_int(entry.get("duration"))
        return _types.TrackDescriptor(
            music_id=_types.MusicID(str(entry["id"])) if entry.get("id") else _music_id_for(source),
            source=source,
            title=entry.get("title"),
            subtitle=entry.get("subtitle", artist),
            album=entry.get("album"),
            artist=artist,
            album_artist=entry.get("albumArtist", artist),
            genre=entry.get("genre"),
            art_uri=urljoin(base_url, str(image)) if image else None,
            duration_ms=duration * 1000 if duration is not None else None,
            track_number=_optional_int(entry.get("trackNumber")),
            total_track_count=_optional_int(entry.get("totalTrackCount")),
        )
    except (TypeError, ValueError) as e:
        raise _errors.CatalogError(f"Malformed catalog entry: {e}") from e


class JsonCatalogSource:
    """Source fetching a JSON catalog of the form ``{"music": [...]}``."""

    def __init__(self, url: str, *, timeout: float = 30.0) -> None:
        """Initialize the source.

        :param url: URL of the JSON catalog.
        :param timeout: Request timeout in seconds.
        """
        self._url = url
        self._timeout = timeout

    @property
    def url(self) -> str:
        """URL of the JSON catalog."""
        return self._url

    async def fetch(self, session: aiohttp.ClientSession | None = None) -> MemoryCatalog:
        """Fetch and parse the catalog.

        :param session: Optional session to reuse; a private one is created
            otherwise.
        :returns: MemoryCatalog holding the fetched tracks.
        :raises CatalogError: If the request fails or the document is invalid.
        """
        _LOGGER.info("Fetching catalog from %s", self._url)
        try:
            if session is None:
                async with aiohttp.ClientSession() as own_session:
                    document = await self._get_json(own_session)
            else:
                document = await self._get_json(session)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise _errors.CatalogError(f"Unable to fetch catalog: {e}") from e

        entries = document.get("music") if isinstance(document, dict) else None
        if not isinstance(entries, list):
            raise _errors.CatalogError("Catalog document has no 'music' list")

        catalog = MemoryCatalog()
        for entry in cast(list[Any], entries):
            if not isinstance(entry, dict):
                _LOGGER.warning("Skipping malformed catalog entry: %r", entry)
                continue
            try:
                track = track_from_json(cast(dict[str, Any], entry), self._url)
            except _errors.CatalogError as e:
                _LOGGER.warning("Skipping malformed catalog entry: %s", e)
                continue
            catalog.add(track)
        _LOGGER.debug("Loaded %d tracks", len(catalog))
        return catalog

    def fetch_sync(self) -> MemoryCatalog:
        """Run the async fetch in a synchronous context.

        Note: This calls asyncio.run and must not be used from inside an
        already-running event loop.

        :returns: MemoryCatalog holding the fetched tracks.
        """
        return asyncio.run(self.fetch())

    async def _get_json(self, session: aiohttp.ClientSession) -> Any:
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        async with session.get(self._url, timeout=timeout) as response:
            response.raise_for_status()
            try:
                # Static hosts often serve catalogs as text/plain
                return await response.json(content_type=None)
            except ValueError as e:
                raise _errors.CatalogError(f"Catalog is not valid JSON: {e}") from e


__all__ = ["JsonCatalogSource", "MemoryCatalog", "track_from_json"]
