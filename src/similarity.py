# Name Similarity for Invoice Scan Normalizer
# Scores OCR'd product names against catalog names

import re
from typing import Dict, Optional, Set, Tuple

# Score for one normalized name containing the other; below exact, above typical edit scores
CONTAINMENT_SCORE = 0.92

# Weights of the blended score (edit distance vs. token overlap)
EDIT_WEIGHT = 0.65
TOKEN_WEIGHT = 0.35

# Substitution cost between characters handwriting OCR commonly swaps
OCR_CONFUSION_COST = 0.3

_CONFUSABLE_GROUPS = ('0o', '1li', '5s', '8b', '2z')

OCR_CONFUSIONS: Dict[Tuple[str, str], float] = {
    (a, b): OCR_CONFUSION_COST
    for group in _CONFUSABLE_GROUPS
    for a in group
    for b in group
    if a != b
}

_SEPARATORS_RE = re.compile(r'[\s_\-./\\()\[\]{}]+')
_NON_WORD_RE = re.compile(r'[^\u4e00-\u9fffa-z0-9]')
_TOKEN_SPLIT_RE = re.compile(r'[\s_\-./\\()\[\]{},;:]+')


def normalize_for_compare(name: str) -> str:
    """Lowercase and keep only CJK ideographs, a-z and 0-9."""
    s = _SEPARATORS_RE.sub('', (name or '').lower())
    return _NON_WORD_RE.sub('', s)


def levenshtein_distance(a: str, b: str,
                         substitution_costs: Optional[Dict[Tuple[str, str], float]] = None) -> float:
    """
    Full-matrix edit distance.
    substitution_costs overrides the cost of replacing one character with another.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    rows, cols = len(a) + 1, len(b) + 1
    matrix = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            ca, cb = a[i - 1], b[j - 1]
            if ca == cb:
                cost = 0
            elif substitution_costs is not None:
                cost = substitution_costs.get((ca, cb), 1)
            else:
                cost = 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,
                matrix[i][j - 1] + 1,
                matrix[i - 1][j - 1] + cost,
            )

    return matrix[-1][-1]


def _tokens(name: str) -> Set[str]:
    return {t for t in _TOKEN_SPLIT_RE.split((name or '').lower()) if t}


def token_jaccard(source: str, target: str) -> float:
    ta, tb = _tokens(source), _tokens(target)
    if not ta or not tb:
        return 0.0
    return len(ta & tb) / len(ta | tb)


def score_name_similarity(source: str, target: str, blend_tokens: bool = False) -> float:
    """
    Similarity in [0, 1] between an OCR'd name and a catalog name.

    Exact match after normalization scores 1, containment either way scores
    CONTAINMENT_SCORE, anything else falls back to OCR-aware edit distance
    (optionally blended with token overlap).
    """
    a = normalize_for_compare(source)
    b = normalize_for_compare(target)
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return CONTAINMENT_SCORE

    distance = levenshtein_distance(a, b, OCR_CONFUSIONS)
    edit_score = max(0.0, 1 - distance / max(len(a), len(b)))
    if not blend_tokens:
        return edit_score
    return EDIT_WEIGHT * edit_score + TOKEN_WEIGHT * token_jaccard(source, target)
