"""
Title/channel/duration lookup for cards the export left incomplete.

Lookups go through noembed. A failed lookup is logged and yields empty
metadata; only successful lookups are cached. The cache belongs to whoever
builds the client, there is no process-wide one.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Iterable, List, Optional

import httpx

from .cards import format_duration
from .models import VideoCard, VideoMetadata
from .rules import METADATA_CACHE_SIZE, METADATA_TIMEOUT, NOEMBED_URL, WATCH_URL

logger = logging.getLogger(__name__)


class MetadataCache:
    """
    Successful lookups keyed by video id.

    Least recently used entries are evicted past `maxsize`. Safe to share
    between threads.
    """

    def __init__(self, maxsize: int = METADATA_CACHE_SIZE):
        if maxsize <= 0:
            raise ValueError(f"maxsize must be > 0, got {maxsize}")
        self.maxsize = maxsize
        self._entries: OrderedDict[str, VideoMetadata] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, video_id: str) -> Optional[VideoMetadata]:
        with self._lock:
            metadata = self._entries.get(video_id)
            if metadata is not None:
                self._entries.move_to_end(video_id)
            return metadata

    def put(self, video_id: str, metadata: VideoMetadata) -> None:
        with self._lock:
            self._entries[video_id] = metadata
            self._entries.move_to_end(video_id)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def __contains__(self, video_id: str) -> bool:
        return video_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class MetadataClient:
    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        cache: Optional[MetadataCache] = None,
        base_url: str = NOEMBED_URL,
        timeout: float = METADATA_TIMEOUT,
    ):
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(timeout=timeout)
        self.cache = cache if cache is not None else MetadataCache()
        self.base_url = base_url

    def close(self) -> None:
        if self._owns_client:
            self.http.close()

    def __enter__(self) -> "MetadataClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def fetch(self, video_id: str) -> VideoMetadata:
        if not video_id:
            return VideoMetadata()

        cached = self.cache.get(video_id)
        if cached is not None:
            return cached

        params = {"url": WATCH_URL.format(video_id=video_id)}
        try:
            response = self.http.get(self.base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("metadata lookup failed for %s: %s", video_id, e)
            return VideoMetadata()

        if not isinstance(payload, dict):
            logger.warning("unexpected metadata payload for %s", video_id)
            return VideoMetadata()

        if "error" in payload:
            # noembed answers unknown ids with 200 and an error body
            logger.warning("metadata lookup failed for %s: %s", video_id, payload["error"])
            return VideoMetadata()

        raw_duration = payload.get("duration") or ""
        result = VideoMetadata(
            title=str(payload.get("title") or ""),
            channel=str(payload.get("author_name") or ""),
            duration=format_duration(raw_duration) or str(raw_duration),
        )
        self.cache.put(video_id, result)
        return result


def needs_metadata(card: VideoCard) -> bool:
    return bool(card.video_id) and not (card.title and card.channel and card.duration)


def enrich_cards(cards: Iterable[VideoCard], client: MetadataClient) -> List[VideoCard]:
    """Fill missing title, channel and duration; values already present win."""
    enriched = []
    for card in cards:
        if not needs_metadata(card):
            enriched.append(card)
            continue

        meta = client.fetch(card.video_id)
        enriched.append(card.model_copy(update={
            "title": card.title or meta.title,
            "channel": card.channel or meta.channel,
            "duration": card.duration or meta.duration,
        }))
    return enriched
