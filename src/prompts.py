# Prompts sent to the OCR model

from typing import List

ANALYZE_RULES = (
    "Task: extract structured data from a handwritten invoice.\n"
    "Rules:\n"
    "1) DESCRIPTION is productName; keep model codes exactly as written (e.g. 41901-2, 653D-2).\n"
    "2) Read QTY, RATE and AMOUNT as plain numbers.\n"
    "3) Read only the Date field at the top of the page, ignore stamp dates; output YYYY-MM-DD.\n"
    "4) If QTY * RATE disagrees with AMOUNT, trust AMOUNT.\n"
    "5) Ignore empty rows, stamps, signatures, footer terms and areas covered by receipts.\n"
    "6) Output JSON only."
)

REFINE_PROMPT = (
    "Review task: read the same invoice again and extract only the filled-in table rows.\n"
    "DESCRIPTION is usually a model code (digits and hyphens, e.g. 41901-2, 653D-2); "
    "do not read stamps or other areas as product names.\n"
    "Take the date only from the handwritten Date field at the top, ignore stamp dates.\n"
    "Output JSON only."
)


def build_analyze_prompt(candidates: List[str]) -> str:
    """First-pass prompt, listing catalog names the model should prefer when similar."""
    if not candidates:
        return ANALYZE_RULES
    lines = [f"{index}. {name}" for index, name in enumerate(candidates, start=1)]
    return (
        ANALYZE_RULES
        + "\nCandidate products (if similar, use this exact spelling):\n"
        + "\n".join(lines)
    )
