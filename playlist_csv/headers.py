"""
Header row -> semantic field mapping.

Playlist exports name their columns differently depending on the tool and the
UI language, so each field carries an ordered list of candidate names. Matching
is case-insensitive substring containment; the first candidate that hits any
header wins, and -1 marks a field the file does not have.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

HEADER_CANDIDATES: Dict[str, List[str]] = {
    "title": ["title", "video title", "video_title", "nazwatytuł", "tytuł", "nazwa filmu"],
    "url": ["url", "link", "video url", "video_url", "adres"],
    "video_id": ["id", "video id", "video_id", "identyfikator filmu", "identyfikator", "id filmu"],
    "added": [
        "time",
        "time added",
        "date",
        "added",
        "data",
        "time_added",
        "sygnatura czasowa utworzenia filmu z playlisty",
    ],
    "channel": ["channel", "channel title", "channel_name", "autor", "autor kanału"],
    "description": ["description", "opis"],
    "duration": ["duration", "length", "czas trwania", "długość"],
}

HeaderMap = Dict[str, int]


def normalize_header(value: str) -> str:
    return value.strip().lower()


def find_column_index(headers: Sequence[str], candidates: Sequence[str]) -> int:
    normalized = [normalize_header(h) for h in headers]
    for candidate in candidates:
        for index, header in enumerate(normalized):
            if candidate in header:
                return index
    return -1


def map_headers(headers: Sequence[str]) -> HeaderMap:
    """Resolve every known field against one header row."""
    return {
        key: find_column_index(headers, candidates)
        for key, candidates in HEADER_CANDIDATES.items()
    }
