"""
CSV export of a (normalized, filtered) result set.

Text cells are always quoted with inner quotes doubled; numeric cells are
written as plain decimals. Numbers are passed to the csv writer as Decimal
so QUOTE_NONNUMERIC leaves them unquoted while keeping the exact number of
fractional digits.
"""
import csv
import io
import logging
import math
import os
import re
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from ..errors import ExportError
from .models import VideoRecord

logger = logging.getLogger(__name__)

COLUMNS = [
    "Rank",
    "Title",
    "Channel",
    "Views",
    "Likes",
    "Comments",
    "Normalized Score",
    "Age (Hours)",
    "Duration",
    "Engagement Rate",
    "URL",
    "Thumbnail",
]

UNKNOWN_TEXT = "Unknown"
UNKNOWN_DURATION = "00:00"
FALLBACK_FILENAME = "results"

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def _text(value: Optional[str], default: str = UNKNOWN_TEXT) -> str:
    if value is None:
        return default
    value = str(value)
    return value if value.strip() else default


def _count(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


def _decimal(value, places: int) -> Decimal:
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = 0.0
    if not math.isfinite(number):
        number = 0.0
    # + 0.0 keeps "-0.0" out of the file
    return Decimal(f"{number + 0.0:.{places}f}")


def _percent(rate) -> str:
    return f"{_decimal(rate, 6) * 100:.2f}%"


def record_to_row(record: VideoRecord) -> list:
    """Cells of one CSV row, in COLUMNS order."""
    return [
        _count(record.rank),
        _text(record.title),
        _text(record.channel),
        _count(record.views),
        _count(record.likes),
        _count(record.comments),
        _decimal(record.normalized_score, 1),
        _decimal(record.age_hours, 1),
        _text(record.duration_formatted, UNKNOWN_DURATION),
        _percent(record.engagement_rate),
        _text(record.url),
        _text(record.thumbnail),
    ]


def to_delimited_text(records: Sequence[VideoRecord]) -> str:
    """Serialize records as CSV text with a header row.

    Raises:
        ExportError: if there are no records.
    """
    if not records:
        raise ExportError("nothing to export")

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(COLUMNS)
    for record in records:
        writer.writerow(record_to_row(record))

    logger.info("Exported %d records", len(records))
    return buffer.getvalue()


def _sanitize(part: str) -> str:
    return _NON_ALNUM.sub("_", part or "").strip("_")


def derive_filename(query: str, extension: str, now: Optional[datetime] = None) -> str:
    """Build ``<query>_<YYYY-MM-DD>.<extension>`` safe for any filesystem.

    Non-alphanumeric runs in the query become ``_``, so the name can never
    contain path separators or quotes.
    """
    now = now or datetime.now()
    stem = _sanitize(query) or FALLBACK_FILENAME
    suffix = _sanitize(extension) or "csv"
    return f"{stem}_{now.strftime('%Y-%m-%d')}.{suffix}"


def export_to_file(
    records: Sequence[VideoRecord],
    query: str,
    directory: str = ".",
    extension: str = "csv",
    now: Optional[datetime] = None,
) -> str:
    """Write the CSV export as UTF-8 and return the file path."""
    text = to_delimited_text(records)
    path = os.path.join(directory, derive_filename(query, extension, now=now))
    os.makedirs(directory, exist_ok=True)
    with open(path, "wb") as f:
        f.write(text.encode("utf-8"))
    logger.info("Wrote export to %s", path)
    return path
