# Number Parser for Invoice Scan Normalizer
# Turns OCR'd quantities and prices into floats

import math
import re
import unicodedata
import logging
from typing import Any, Union

logger = logging.getLogger(__name__)

ARABIC_DECIMAL_SEPARATOR = '\u066b'   # ٫
ARABIC_THOUSANDS_SEPARATOR = '\u066c'  # ٬

_THOUSANDS_RE = re.compile(r'[,，]')
_NON_NUMERIC_RE = re.compile(r'[^0-9.\-]')


def to_ascii_digits(text: str) -> str:
    """Replace every Unicode decimal digit (e.g. ٣, ۳, ３) with its ASCII form."""
    out = []
    for ch in text:
        if '0' <= ch <= '9':
            out.append(ch)
            continue
        value = unicodedata.decimal(ch, None)
        out.append(str(value) if value is not None else ch)
    return ''.join(out)


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        # ints beyond float range cannot be priced or multiplied
        try:
            float(value)
        except OverflowError:
            return False
        return True
    return isinstance(value, float) and math.isfinite(value)


def parse_flexible_number(value: Any) -> Union[int, float]:
    """
    Parse a loosely formatted number.
    Numbers pass through unchanged; anything unparseable becomes 0.
    """
    if _is_finite_number(value):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return 0

    raw = to_ascii_digits(str(value if value is not None else '').strip())
    if not raw:
        return 0

    raw = raw.replace(ARABIC_DECIMAL_SEPARATOR, '.').replace(ARABIC_THOUSANDS_SEPARATOR, '')
    cleaned = _NON_NUMERIC_RE.sub('', _THOUSANDS_RE.sub('', raw))
    if not cleaned:
        return 0

    try:
        number = float(cleaned)
    except ValueError:
        logger.debug("Could not parse number from %r", value)
        return 0
    return number if math.isfinite(number) else 0
