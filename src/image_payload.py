# Image Payload helpers for Invoice Scan Normalizer
# Cleans uploaded invoice photos before they go to the OCR endpoint

import re
import base64
import binascii
import logging
from typing import Optional, Tuple
from urllib.parse import unquote

from .errors import ImagePayloadError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = 'image/jpeg'
MAX_BASE64_LENGTH = 2_000_000

_MIME_RE = re.compile(r'^[a-z0-9][a-z0-9!#$&^_.+-]*/[a-z0-9][a-z0-9!#$&^_.+-]*$', re.IGNORECASE)
_DATA_URL_RE = re.compile(r'^data:.*?;base64,(.+)$', re.IGNORECASE | re.DOTALL)


def normalize_mime_type(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_MIME_TYPE
    mime = str(value).strip().lower()
    if not mime or not _MIME_RE.match(mime):
        return DEFAULT_MIME_TYPE
    return mime


def extract_base64_data(value: Optional[str]) -> str:
    """
    Canonical base64 for an uploaded image, or '' if it cannot be decoded.
    Accepts data URLs, percent-encoding, whitespace and URL-safe alphabets.
    """
    raw = str(value or '').strip()
    if not raw:
        return ''

    match = _DATA_URL_RE.match(raw)
    payload = match.group(1) if match else raw
    payload = unquote(payload)
    payload = re.sub(r'\s+', '', payload).replace('-', '+').replace('_', '/')
    if not payload:
        return ''

    remainder = len(payload) % 4
    if remainder == 1:
        return ''
    if remainder:
        payload += '=' * (4 - remainder)

    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return ''
    if not decoded:
        return ''
    return base64.b64encode(decoded).decode('ascii')


def prepare_image_payload(data: Optional[str], mime_type: Optional[str] = None) -> Tuple[str, str]:
    """Return (base64, mime_type) ready to send, or raise ImagePayloadError."""
    normalized = extract_base64_data(data)
    if not normalized:
        raise ImagePayloadError("Invalid image data, please upload the picture again", 400)
    if len(normalized) > MAX_BASE64_LENGTH:
        logger.warning("Image payload too large: %d base64 chars", len(normalized))
        raise ImagePayloadError("Image too large, compress it to under 2MB and retry", 413)
    return normalized, normalize_mime_type(mime_type)
