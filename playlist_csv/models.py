from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class VideoCard(BaseModel):
    title: str = ""
    url: str = ""
    added: str = ""
    channel: str = ""
    description: str = ""
    video_id: str = ""
    duration: str = ""
    thumbnail: str = ""


class VideoMetadata(BaseModel):
    title: str = ""
    channel: str = ""
    duration: str = ""


class CardPage(BaseModel):
    cards: List[VideoCard] = Field(default_factory=list)
    page: int = 0
    page_size: int
    total: int = 0
    has_more: bool = False


class ScanReport(BaseModel):
    rows: int = 0
    max_columns: int = 0
    ragged_rows: int = 0
    stray_quotes: int = 0
    unterminated_quote: bool = False


class EncodingReport(BaseModel):
    detected: Optional[str] = None
    decode_used: str = Field(default="utf-8", examples=["utf-8"])
    decode_fallback: bool = False


class ParseResponse(BaseModel):
    rows: List[List[str]]
    report: ScanReport
    encoding: EncodingReport


class ImportResponse(BaseModel):
    headers: List[str] = Field(default_factory=list)
    header_map: Dict[str, int] = Field(default_factory=dict)
    sort: str
    page: CardPage
    report: ScanReport
    encoding: EncodingReport


class HealthResponse(BaseModel):
    ok: bool = True
