"""Helpers for hierarchical media identifiers.

A media identifier locates a track inside the host's browse tree, for
example ``__BY_GENRE__/Rock|1234``: categories are joined with ``/`` and the
music identifier of the leaf follows ``|``. Browse trees are rooted at a
reserved category written as ``__NAME__`` (``__ROOT__``, ``__BY_GENRE__``).
"""

from __future__ import annotations

import castplayback.types as _types

CATEGORY_SEPARATOR = "/"
LEAF_SEPARATOR = "|"
MEDIA_ID_ROOT = "__ROOT__"


def _is_reserved_category(category: str) -> bool:
    return len(category) > 4 and category.startswith("__") and category.endswith("__")


def create_media_id(music_id: str | None, *categories: str) -> _types.MediaID:
    """Build a media identifier from a music id and its browse categories.

    :param music_id: Leaf music identifier, or None for a browseable node.
    :param categories: Browse categories from the root down.
    :returns: The combined media identifier.
    :raises ValueError: If a category contains a separator character.
    """
    for category in categories:
        if CATEGORY_SEPARATOR in category or LEAF_SEPARATOR in category:
            raise ValueError(f"Invalid category: {category!r}")
    media_id = CATEGORY_SEPARATOR.join(categories)
    if music_id is not None:
        media_id += LEAF_SEPARATOR + music_id
    return _types.MediaID(media_id)


def extract_music_id(media_id: str) -> _types.MusicID:
    """Return the music identifier a media identifier points at.

    An identifier without a leaf separator is a bare music identifier.

    :param media_id: Hierarchical media identifier.
    :returns: The music identifier.
    """
    _, sep, leaf = media_id.partition(LEAF_SEPARATOR)
    return _types.MusicID(leaf if sep else media_id)


def is_browseable(media_id: str) -> bool:
    """Return True when the identifier names a category rather than a track.

    :param media_id: Hierarchical media identifier.
    :returns: True for ids without a leaf rooted at a reserved category.
    """
    if LEAF_SEPARATOR in media_id:
        return False
    return _is_reserved_category(media_id.split(CATEGORY_SEPARATOR, 1)[0])


__all__ = [
    "CATEGORY_SEPARATOR",
    "LEAF_SEPARATOR",
    "MEDIA_ID_ROOT",
    "create_media_id",
    "extract_music_id",
    "is_browseable",
]
