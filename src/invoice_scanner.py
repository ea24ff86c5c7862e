# Invoice Scanner - two-pass OCR scan for Invoice Scan Normalizer
# Runs the OCR endpoint, normalizes its guess and re-reads the invoice when the first guess looks weak

import logging
from typing import Any, List, Optional

from .errors import ScanError
from .image_payload import prepare_image_payload
from .invoice_normalizer import (
    NormalizedInvoice,
    merge_refined,
    needs_refinement,
    normalize_ocr_result,
)
from .product_matcher import CANDIDATE_LIMIT, prepare_candidates
from .prompts import REFINE_PROMPT, build_analyze_prompt

logger = logging.getLogger(__name__)

ANALYZE_TEMPERATURE = 0.05
REFINE_TEMPERATURE = 0.0


class InvoiceScanner:
    """Scans invoice photos into catalog-reconciled line items"""

    def __init__(self, client, candidate_limit: int = CANDIDATE_LIMIT, blend_tokens: bool = False):
        self.client = client
        self.candidate_limit = candidate_limit
        self.blend_tokens = blend_tokens

    def scan(self, base64_data: str, mime_type: Optional[str] = None,
             candidate_products: Any = None) -> NormalizedInvoice:
        """
        Scan one invoice image.
        Raises ScanError if the image is unusable or the first OCR pass fails.
        """
        image, mime = prepare_image_payload(base64_data, mime_type)
        candidates = prepare_candidates(candidate_products, self.candidate_limit)

        result = self.client.analyze(image, mime, build_analyze_prompt(candidates), ANALYZE_TEMPERATURE)
        if not result.get('success'):
            raise ScanError(result.get('error') or 'OCR call failed', result.get('status_code') or 502)

        invoice = normalize_ocr_result(result.get('body') or {}, candidates, self.blend_tokens)
        logger.info(f"First pass: {len(invoice.items)} item(s), date {invoice.sale_date or 'missing'}")

        if needs_refinement(invoice):
            invoice = self._refine(image, mime, candidates, invoice)

        return invoice

    def _refine(self, image: str, mime: str, candidates: List[str],
                invoice: NormalizedInvoice) -> NormalizedInvoice:
        result = self.client.analyze(image, mime, REFINE_PROMPT, REFINE_TEMPERATURE)
        if not result.get('success'):
            logger.warning(f"Refinement pass failed, keeping first pass: {result.get('error', 'unknown')}")
            return invoice
        refined = normalize_ocr_result(result.get('body') or {}, candidates, self.blend_tokens)
        return merge_refined(invoice, refined)
