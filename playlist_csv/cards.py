"""
Projection of tokenized rows into video cards, plus ordering and paging.

Row 0 is the header. Every later row is read through the header map; values
are stripped, absent columns read as "". A card needs at least a video id, a
url or a title to be kept.
"""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Sequence
from urllib.parse import parse_qs, urlparse

from .headers import HeaderMap, map_headers
from .models import CardPage, VideoCard
from .rules import DEFAULT_SORT, PAGE_SIZE, THUMBNAIL_URL, WATCH_URL

logger = logging.getLogger(__name__)


def extract_video_id(url: str) -> str:
    if not url:
        return ""
    try:
        parsed = urlparse(url)
    except ValueError:
        logger.warning("invalid video url %r", url)
        return ""

    host = (parsed.hostname or "").lower()
    if "youtube.com" in host:
        return parse_qs(parsed.query).get("v", [""])[0]
    if host == "youtu.be":
        return parsed.path.replace("/", "", 1)

    logger.warning("not a youtube url %r", url)
    return ""


def format_duration(seconds) -> str:
    """Render seconds as M:SS, or H:MM:SS from one hour up."""
    try:
        total = float(seconds)
    except (TypeError, ValueError):
        return ""
    if not math.isfinite(total) or total <= 0:
        return ""

    hrs = int(total // 3600)
    mins = int((total % 3600) // 60)
    secs = int(total % 60)
    if hrs > 0:
        return f"{hrs}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def thumbnail_url(video_id: str) -> str:
    return THUMBNAIL_URL.format(video_id=video_id) if video_id else ""


def _read(row: Sequence[str], header_map: HeaderMap, key: str) -> str:
    index = header_map.get(key, -1)
    if index < 0 or index >= len(row):
        return ""
    return row[index].strip()


def project_row(row: Sequence[str], header_map: HeaderMap) -> VideoCard:
    url = _read(row, header_map, "url")
    video_id = _read(row, header_map, "video_id") or extract_video_id(url)
    if not url and video_id:
        url = WATCH_URL.format(video_id=video_id)

    return VideoCard(
        title=_read(row, header_map, "title"),
        url=url,
        added=_read(row, header_map, "added"),
        channel=_read(row, header_map, "channel"),
        description=_read(row, header_map, "description"),
        video_id=video_id,
        duration=_read(row, header_map, "duration"),
        thumbnail=thumbnail_url(video_id),
    )


def build_cards(rows: Sequence[Sequence[str]]) -> List[VideoCard]:
    if not rows:
        return []

    header_map = map_headers(rows[0])
    cards = [project_row(row, header_map) for row in rows[1:]]
    kept = [c for c in cards if c.video_id or c.url or c.title]

    dropped = len(cards) - len(kept)
    if dropped:
        logger.info("dropped %d rows without id, url or title", dropped)
    return kept


def shuffle(cards: Sequence[VideoCard], rng: Optional[random.Random] = None) -> List[VideoCard]:
    rng = rng or random.Random()
    copy = list(cards)
    for i in range(len(copy) - 1, 0, -1):
        j = rng.randint(0, i)
        copy[i], copy[j] = copy[j], copy[i]
    return copy


def sort_cards(
    cards: Sequence[VideoCard],
    mode: str = DEFAULT_SORT,
    rng: Optional[random.Random] = None,
) -> List[VideoCard]:
    """
    Order cards by title or added date, or shuffle them.

    Unknown modes fall back to newest-added first. The input is left untouched.
    """
    if mode == "random":
        return shuffle(cards, rng)
    if mode == "title_asc":
        return sorted(cards, key=lambda c: c.title)
    if mode == "title_desc":
        return sorted(cards, key=lambda c: c.title, reverse=True)
    if mode == "added_asc":
        return sorted(cards, key=lambda c: c.added)
    return sorted(cards, key=lambda c: c.added, reverse=True)


def paginate(cards: Sequence[VideoCard], page: int = 0, page_size: int = PAGE_SIZE) -> CardPage:
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")

    start = page * page_size
    batch = list(cards[start:start + page_size])
    return CardPage(
        cards=batch,
        page=page,
        page_size=page_size,
        total=len(cards),
        has_more=start + len(batch) < len(cards),
    )
