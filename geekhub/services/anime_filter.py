"""Separate anime from other animated shows in TMDb TV search results.

TMDb has no anime flag, so results are judged by the animation genre plus a Japanese
language or origin country. When fewer than ``STRICT_MATCH_THRESHOLD`` results pass that
test, every animated result is kept instead.
"""

from __future__ import annotations

from typing import Sequence

from geekhub.schema.providers import TmdbTv

ANIMATION_GENRE_ID = 16
STRICT_MATCH_THRESHOLD = 5


def _is_animated(item: TmdbTv) -> bool:
    return ANIMATION_GENRE_ID in (item.genre_ids or [])


def _is_japanese(item: TmdbTv) -> bool:
    return item.original_language == "ja" or "JP" in (item.origin_country or [])


def filter_anime_candidates(results: Sequence[TmdbTv]) -> list[TmdbTv]:
    """Return the results to treat as anime, preserving their order."""
    strict = [item for item in results if _is_animated(item) and _is_japanese(item)]
    if len(strict) >= STRICT_MATCH_THRESHOLD:
        return strict
    return [item for item in results if _is_animated(item)]
