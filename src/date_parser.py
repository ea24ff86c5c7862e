# Date Parser for Invoice Scan Normalizer
# Normalizes handwritten invoice dates to YYYY-MM-DD

import re
import logging
from datetime import date, datetime, timezone
from typing import Any, Optional, Tuple

from dateutil import parser as date_parser

from .number_parser import to_ascii_digits

logger = logging.getLogger(__name__)

# Invoices come from a region that writes day before month
DAY_FIRST = True

# Two-digit years up to this value are 20YY, above it 19YY
TWO_DIGIT_YEAR_PIVOT = 50

_SEP = r'[-/.]'
_ISO_RE = re.compile(rf'(?<!\d)(\d{{4}}){_SEP}(\d{{1,2}}){_SEP}(\d{{1,2}})(?!\d)')
_DMY_RE = re.compile(rf'(?<!\d)(\d{{1,2}}){_SEP}(\d{{1,2}}){_SEP}(\d{{4}})(?!\d)')
_DMY_SHORT_RE = re.compile(rf'(?<!\d)(\d{{1,2}}){_SEP}(\d{{1,2}}){_SEP}(\d{{2}})(?!\d)')

# Two far-apart defaults; a year that differs between them was never in the text
_PROBE_DEFAULTS = (datetime(2000, 1, 1), datetime(1970, 1, 1))


def _format(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _split_day_month(first: int, second: int) -> Tuple[int, int]:
    """Return (day, month) for two numeric groups written as D-M or M-D."""
    if first > 12:
        return first, second
    if second > 12:
        return second, first
    if DAY_FIRST:
        return first, second
    return second, first


def expand_two_digit_year(year: int) -> int:
    return 2000 + year if year <= TWO_DIGIT_YEAR_PIVOT else 1900 + year


def _parse_generic(raw: str) -> Optional[str]:
    parsed = []
    for default in _PROBE_DEFAULTS:
        try:
            value = date_parser.parse(raw, default=default, dayfirst=DAY_FIRST)
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            return None
        parsed.append(value)

    if parsed[0].year != parsed[1].year:
        return None
    return parsed[0].date().isoformat()


def normalize_invoice_date(value: Any) -> Optional[str]:
    """
    Best-effort conversion of an OCR'd date to YYYY-MM-DD.

    Tries, in order: Y-M-D, D-M-YYYY, D-M-YY, then generic parsing.
    Returns None when nothing yields a real calendar date; callers should
    ask the user instead of assuming a default.
    """
    raw = to_ascii_digits(str(value if value is not None else '').strip())
    if not raw:
        return None

    match = _ISO_RE.search(raw)
    if match:
        result = _format(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        if result:
            return result

    match = _DMY_RE.search(raw)
    if match:
        day, month = _split_day_month(int(match.group(1)), int(match.group(2)))
        result = _format(int(match.group(3)), month, day)
        if result:
            return result

    match = _DMY_SHORT_RE.search(raw)
    if match:
        day, month = _split_day_month(int(match.group(1)), int(match.group(2)))
        result = _format(expand_two_digit_year(int(match.group(3))), month, day)
        if result:
            return result

    result = _parse_generic(raw)
    if result is None:
        logger.debug("Could not determine invoice date from %r", value)
    return result
