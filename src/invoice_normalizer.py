# Invoice Normalizer for Invoice Scan Normalizer
# Cleans an OCR guess into catalog-reconciled line items

import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .date_parser import normalize_invoice_date
from .number_parser import parse_flexible_number
from .product_matcher import MATCH_THRESHOLD, match_product

logger = logging.getLogger(__name__)


def _compact(value: Union[int, float]) -> Union[int, float]:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class NormalizedItem:
    """A line item that survived cleaning"""
    product_name: str
    quantity: float
    unit_price: float
    total_amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productName': self.product_name,
            'quantity': _compact(self.quantity),
            'unitPrice': _compact(self.unit_price),
            'totalAmount': _compact(self.total_amount),
        }


@dataclass
class NormalizedInvoice:
    """Normalized result of one OCR pass"""
    items: List[NormalizedItem] = field(default_factory=list)
    sale_date: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'items': [item.to_dict() for item in self.items]}
        if self.sale_date:
            result['saleDate'] = self.sale_date
        if self.error:
            result['error'] = self.error
        return result


def normalize_item(raw: Any, candidates: List[str],
                   blend_tokens: bool = False) -> Optional[NormalizedItem]:
    """Normalize one raw OCR row; None if it has no name or no positive quantity."""
    if not isinstance(raw, dict):
        raw = {}

    name = str(raw.get('productName') or '').strip()
    quantity = parse_flexible_number(raw.get('quantity'))
    unit_price = parse_flexible_number(raw.get('unitPrice'))
    total_amount = parse_flexible_number(raw.get('totalAmount'))

    if not total_amount and quantity > 0 and unit_price > 0:
        total_amount = round(quantity * unit_price, 3)

    if name and candidates:
        matched = match_product(name, candidates, MATCH_THRESHOLD, blend_tokens)
        if matched is not None:
            name = matched

    if not name or quantity <= 0:
        logger.debug("Dropping OCR row %r", raw)
        return None

    return NormalizedItem(
        product_name=name,
        quantity=quantity,
        unit_price=unit_price,
        total_amount=total_amount,
    )


def normalize_items(raw_items: Any, candidates: List[str],
                    blend_tokens: bool = False) -> List[NormalizedItem]:
    """
    Normalize OCR rows against the catalog.
    Rows that cannot be salvaged are dropped; survivors keep input order.
    """
    if not isinstance(raw_items, list):
        return []
    result = []
    for raw in raw_items:
        item = normalize_item(raw, candidates, blend_tokens)
        if item is not None:
            result.append(item)
    if len(result) < len(raw_items):
        logger.info("Kept %d of %d OCR rows", len(result), len(raw_items))
    return result


def normalize_ocr_result(payload: Any, candidates: List[str],
                         blend_tokens: bool = False) -> NormalizedInvoice:
    """Normalize a whole OCR response ({items, saleDate, error})."""
    if not isinstance(payload, dict):
        return NormalizedInvoice()
    error = payload.get('error')
    if not isinstance(error, str) or not error.strip():
        error = None
    return NormalizedInvoice(
        items=normalize_items(payload.get('items'), candidates, blend_tokens),
        sale_date=normalize_invoice_date(payload.get('saleDate')),
        error=error.strip() if error else None,
    )


def model_code_score(name: str) -> float:
    """How much a name looks like a model code (digits and hyphens, few letters)."""
    value = str(name or '')
    digits = len(re.findall(r'\d', value))
    letters = len(re.findall(r'[a-zA-Z]', value))
    hyphens = len(re.findall(r'[-_]', value))
    return digits * 1.3 + hyphens * 0.6 - letters * 0.45


def needs_refinement(invoice: NormalizedInvoice) -> bool:
    """
    True when a second OCR pass is worth it: the date is missing, or a
    name carries only a few digits (likely a truncated model code).
    """
    if not invoice.sale_date:
        return True
    for item in invoice.items:
        digit_count = len(re.findall(r'\d', item.product_name))
        if 0 < digit_count < 4:
            return True
    return False


def merge_refined(primary: NormalizedInvoice, refined: NormalizedInvoice) -> NormalizedInvoice:
    """Combine the first pass with a refinement pass."""
    items = primary.items
    if refined.items:
        first_a = primary.items[0] if primary.items else None
        first_b = refined.items[0]
        if first_a is None or model_code_score(first_b.product_name) > model_code_score(first_a.product_name):
            logger.info("Using refined items (%d rows)", len(refined.items))
            items = refined.items

    return NormalizedInvoice(
        items=items,
        sale_date=primary.sale_date or refined.sale_date,
        error=primary.error,
    )
