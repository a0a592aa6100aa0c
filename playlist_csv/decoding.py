"""
Bytes -> text for uploaded playlist exports.

Rules:
- Detect encoding best-effort via charset-normalizer.
- A UTF-8 BOM is stripped rather than kept as a stray first header character.
- If the detected encoding fails, fall back to UTF-8, then to UTF-8 with
  replacement characters so the import can continue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"
_UTF8_NAMES = ("utf_8", "utf8", "utf_8_sig")

DECODE_REPLACE = "utf-8 (replace)"


@dataclass
class DecodedText:
    text: str
    detected: Optional[str]
    decode_used: str
    decode_fallback: bool = False


def decode_upload(raw: bytes) -> DecodedText:
    if not raw:
        return DecodedText(text="", detected=None, decode_used="utf-8")

    if raw.startswith(_UTF8_BOM):
        # utf-8-sig so the BOM does not end up in the first header
        detected = "utf_8"
        decode_used = "utf-8-sig"
    else:
        match = from_bytes(raw).best()
        detected = match.encoding if match is not None else None
        decode_used = detected or "utf-8"

    try:
        return DecodedText(text=raw.decode(decode_used), detected=detected, decode_used=decode_used)
    except (UnicodeDecodeError, LookupError):
        logger.warning("decoding as %s failed", decode_used)

    if decode_used.lower().replace("-", "_") not in _UTF8_NAMES:
        try:
            text = raw.decode("utf-8-sig")
            return DecodedText(text=text, detected=detected, decode_used="utf-8-sig", decode_fallback=True)
        except UnicodeDecodeError:
            logger.warning("utf-8 decoding failed")

    logger.warning("replacing undecodable bytes")
    text = raw.decode("utf-8-sig", errors="replace")
    return DecodedText(text=text, detected=detected, decode_used=DECODE_REPLACE, decode_fallback=True)
