import asyncio
import logging
import os
import random
from typing import List, Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query

from .cards import build_cards, paginate, sort_cards
from .decoding import DecodedText, decode_upload
from .headers import map_headers
from .metadata import MetadataCache, MetadataClient, enrich_cards
from .models import (
    EncodingReport,
    HealthResponse,
    ImportResponse,
    ParseResponse,
    ScanReport,
    VideoCard,
)
from .rules import ACCEPTED_EXTENSIONS, DEFAULT_DELIMITER, DEFAULT_SORT, MAX_PAGE_SIZE, PAGE_SIZE, SORT_MODES
from .tokenizer import ScanResult, scan

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger("playlist_csv")

app = FastAPI(
    title="playlist-csv",
    description="Lenient CSV import for video playlist exports",
    version="0.1.0",
)

# Shared across requests so repeated imports of the same playlist reuse lookups.
metadata_cache = MetadataCache()


def _check_filename(file: UploadFile) -> None:
    if not (file.filename or "").lower().endswith(ACCEPTED_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")


def _scan_upload(decoded: DecodedText, delimiter: str) -> ScanResult:
    try:
        result = scan(decoded.text, delimiter)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if result.unterminated_quote or result.stray_quotes:
        logger.info(
            "recovered malformed quoting: unterminated=%s stray_quotes=%d",
            result.unterminated_quote,
            result.stray_quotes,
        )
    return result


def _scan_report(result: ScanResult) -> ScanReport:
    return ScanReport(
        rows=len(result.rows),
        max_columns=result.max_columns,
        ragged_rows=result.ragged_rows,
        stray_quotes=result.stray_quotes,
        unterminated_quote=result.unterminated_quote,
    )


def _enrich_page(cards: List[VideoCard]) -> List[VideoCard]:
    with MetadataClient(cache=metadata_cache) as client:
        return enrich_cards(cards, client)


def _encoding_report(decoded: DecodedText) -> EncodingReport:
    return EncodingReport(
        detected=decoded.detected,
        decode_used=decoded.decode_used,
        decode_fallback=decoded.decode_fallback,
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/parse", response_model=ParseResponse)
async def parse_csv(
    file: UploadFile = File(...),
    delimiter: str = Query(DEFAULT_DELIMITER),
):
    _check_filename(file)

    decoded = decode_upload(await file.read())
    result = _scan_upload(decoded, delimiter)
    return ParseResponse(
        rows=result.rows,
        report=_scan_report(result),
        encoding=_encoding_report(decoded),
    )


@app.post("/import", response_model=ImportResponse)
async def import_playlist(
    file: UploadFile = File(...),
    delimiter: str = Query(DEFAULT_DELIMITER),
    sort: str = Query(DEFAULT_SORT),
    page: int = Query(0, ge=0),
    page_size: int = Query(PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    seed: Optional[int] = Query(None),
    enrich: bool = Query(False),
):
    _check_filename(file)
    if sort not in SORT_MODES:
        raise HTTPException(status_code=422, detail=f"Unknown sort mode: {sort}")

    decoded = decode_upload(await file.read())
    result = _scan_upload(decoded, delimiter)
    rows = result.rows

    cards = sort_cards(build_cards(rows), sort, random.Random(seed))
    batch = paginate(cards, page, page_size)

    if enrich and batch.cards:
        # lookups block on network I/O, keep them off the event loop
        batch.cards = await asyncio.to_thread(_enrich_page, batch.cards)

    headers = rows[0] if rows else []
    logger.info("imported %d cards from %d rows", len(cards), len(rows))
    return ImportResponse(
        headers=headers,
        header_map=map_headers(headers) if headers else {},
        sort=sort,
        page=batch,
        report=_scan_report(result),
        encoding=_encoding_report(decoded),
    )
