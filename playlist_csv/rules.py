"""
Fixed parsing rules and tunables.

Everything the importer treats as a constant lives here so the non-goals stay
explicit: one quote character, one-character delimiters, no locale collation.
"""

import os

QUOTE_CHAR = '"'
DEFAULT_DELIMITER = ","
NEWLINE_CHARS = ("\n", "\r")

ACCEPTED_EXTENSIONS = (".csv", ".tsv", ".txt")

PAGE_SIZE = int(os.getenv("PLAYLIST_CSV_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = 500

NOEMBED_URL = "https://noembed.com/embed"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
THUMBNAIL_URL = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"
METADATA_TIMEOUT = float(os.getenv("PLAYLIST_CSV_METADATA_TIMEOUT", "5.0"))
METADATA_CACHE_SIZE = int(os.getenv("PLAYLIST_CSV_METADATA_CACHE_SIZE", "1024"))

SORT_MODES = ("title_asc", "title_desc", "added_asc", "added_desc", "random")
DEFAULT_SORT = "added_desc"
