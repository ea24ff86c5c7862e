# Invoice Scan Normalizer
# Cleans AI-OCR invoice guesses and reconciles them with the product catalog

__version__ = '0.1.0'

from .number_parser import parse_flexible_number, to_ascii_digits
from .date_parser import normalize_invoice_date
from .similarity import CONTAINMENT_SCORE, score_name_similarity, levenshtein_distance
from .product_matcher import MATCH_THRESHOLD, CANDIDATE_LIMIT, match_product, prepare_candidates
from .invoice_normalizer import (
    NormalizedItem,
    NormalizedInvoice,
    normalize_items,
    normalize_ocr_result,
    needs_refinement,
    merge_refined,
)
from .errors import ScanError, ImagePayloadError
from .ocr_client import OcrClient, StubOcrClient
from .invoice_scanner import InvoiceScanner

__all__ = [
    'parse_flexible_number',
    'to_ascii_digits',
    'normalize_invoice_date',
    'CONTAINMENT_SCORE',
    'score_name_similarity',
    'levenshtein_distance',
    'MATCH_THRESHOLD',
    'CANDIDATE_LIMIT',
    'match_product',
    'prepare_candidates',
    'NormalizedItem',
    'NormalizedInvoice',
    'normalize_items',
    'normalize_ocr_result',
    'needs_refinement',
    'merge_refined',
    'ScanError',
    'ImagePayloadError',
    'OcrClient',
    'StubOcrClient',
    'InvoiceScanner',
]
