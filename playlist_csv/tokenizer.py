"""
Single-pass CSV tokenizer.

Turns a decoded text blob into rows of string fields. The scanner is lenient on
purpose: it accepts whatever a playlist export throws at it and never raises on
the input text.

Rules:
- A quote always toggles into quoted mode, even in the middle of a field.
- Inside quotes, a doubled quote is one literal quote; a lone quote leaves
  quoted mode without closing the field.
- "\\r" and "\\n" are looked at one character at a time. A newline with nothing
  buffered is a no-op, which absorbs CRLF pairs and blank lines.
- Whatever is buffered at end of input is flushed, unterminated quotes included.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .rules import DEFAULT_DELIMITER, NEWLINE_CHARS, QUOTE_CHAR

Row = List[str]


@dataclass
class ScanResult:
    rows: List[Row] = field(default_factory=list)
    unterminated_quote: bool = False
    stray_quotes: int = 0

    @property
    def max_columns(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    @property
    def ragged_rows(self) -> int:
        if not self.rows:
            return 0
        width = len(self.rows[0])
        return sum(1 for row in self.rows[1:] if len(row) != width)


def check_delimiter(delimiter: str) -> str:
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
    if delimiter == QUOTE_CHAR or delimiter in NEWLINE_CHARS:
        raise ValueError(f"delimiter cannot be {delimiter!r}")
    return delimiter


def scan(text: str, delimiter: str = DEFAULT_DELIMITER) -> ScanResult:
    """
    Tokenize `text` and report how much quote recovery was needed.

    The rows are exactly what `parse` returns; the counters are diagnostics only.
    """
    check_delimiter(delimiter)

    result = ScanResult()
    rows = result.rows
    row: Row = []
    buf: list[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if in_quotes:
            if ch == QUOTE_CHAR:
                if i + 1 < n and text[i + 1] == QUOTE_CHAR:
                    buf.append(QUOTE_CHAR)
                    i += 2
                    continue
                in_quotes = False
            else:
                buf.append(ch)
            i += 1
            continue

        if ch == QUOTE_CHAR:
            if buf:
                result.stray_quotes += 1
            in_quotes = True
        elif ch == delimiter:
            row.append("".join(buf))
            buf = []
        elif ch in NEWLINE_CHARS:
            if buf or row:
                row.append("".join(buf))
                rows.append(row)
                row = []
                buf = []
        else:
            buf.append(ch)
        i += 1

    result.unterminated_quote = in_quotes
    if buf or row:
        row.append("".join(buf))
        rows.append(row)

    return result


def parse(text: str, delimiter: str = DEFAULT_DELIMITER) -> List[Row]:
    """Split `text` into rows of fields. Malformed quoting degrades, never raises."""
    return scan(text, delimiter).rows


def to_csv(rows: List[Row], delimiter: str = DEFAULT_DELIMITER) -> str:
    """
    Serialize rows back to text, quoting only fields that need it.

    Rows that are empty or hold a single empty field have no text form the
    tokenizer would read back as a row, so they do not survive a round trip.
    """
    check_delimiter(delimiter)
    special = (delimiter, QUOTE_CHAR) + NEWLINE_CHARS
    lines = []
    for row in rows:
        cells = []
        for value in row:
            if any(c in value for c in special):
                value = QUOTE_CHAR + value.replace(QUOTE_CHAR, QUOTE_CHAR * 2) + QUOTE_CHAR
            cells.append(value)
        lines.append(delimiter.join(cells))
    return "".join(line + "\n" for line in lines)
