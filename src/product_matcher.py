# Fuzzy product name matching for Invoice Scan Normalizer
# Snaps OCR'd names back onto the caller's catalog spelling

import logging
from typing import Any, List, Optional, Tuple

from .similarity import score_name_similarity

logger = logging.getLogger(__name__)

# Minimum similarity for an OCR'd name to be replaced by a catalog name
MATCH_THRESHOLD = 0.72

# Catalog names sent along with one scan
CANDIDATE_LIMIT = 120


def prepare_candidates(raw: Any, limit: int = CANDIDATE_LIMIT) -> List[str]:
    """Trim catalog names, drop blanks, keep the first `limit`."""
    if not isinstance(raw, list):
        return []
    names = [str(item if item is not None else '').strip() for item in raw]
    return [name for name in names if name][:limit]


def rank_candidates(receipt_name: str, candidates: List[str],
                    blend_tokens: bool = False) -> List[Tuple[str, float]]:
    """
    Score every candidate against receipt_name, best first.
    Equal scores keep the candidates' original order.
    """
    scored = [(candidate, score_name_similarity(receipt_name, candidate, blend_tokens))
              for candidate in candidates]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def match_product(receipt_name: str, candidates: List[str],
                  threshold: float = MATCH_THRESHOLD,
                  blend_tokens: bool = False) -> Optional[str]:
    """
    Fuzzy match an OCR'd line item name to a catalog name.
    Returns the catalog name or None if nothing scores at least `threshold`.
    """
    if not (receipt_name or "").strip() or not candidates:
        return None
    ranked = rank_candidates(receipt_name, candidates, blend_tokens)
    best_name, best_score = ranked[0]
    if best_score >= threshold:
        logger.debug("Matched '%s' -> '%s' (%.3f)", receipt_name, best_name, best_score)
        return best_name
    logger.debug("No catalog match for '%s' (best '%s' at %.3f)", receipt_name, best_name, best_score)
    return None
