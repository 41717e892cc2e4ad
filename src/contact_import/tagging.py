from __future__ import annotations

import re
from typing import Iterable

PERSON_TYPES = ("client", "vendor", "subcontractor", "team")

VENDOR_KWS = [
    r"\bvendors?\b",
    r"\bsuppliers?\b",
    r"\bllc\b",
    r"\binc\b",
    r"\bcorporation\b",
    r"\bsupply\b",
]
SUBCONTRACTOR_KWS = [
    r"\bsub(contractor)?s?\b",
    r"\btrades?\b",
    r"\bcontractors?\b",
    r"\belectrical\b",
    r"\bplumbing\b",
    r"\bhvac\b",
    r"\broofing\b",
]
CUSTOMER_KWS = [r"\bclients?\b", r"\bcustomers?\b"]


def _any_kw(text: str, patterns: Iterable[str]) -> bool:
    lower = text.lower()
    return any(re.search(pattern, lower) for pattern in patterns)


def detect_person_type(text: str) -> str:
    """Guess which directory an import belongs in from words in the raw text."""
    lower = (text or "").lower()
    if _any_kw(lower, VENDOR_KWS):
        return "vendor"
    if _any_kw(lower, SUBCONTRACTOR_KWS):
        return "subcontractor"
    # a bare work address with no customer wording reads like a colleague
    if "@" in lower and ".com" in lower and not _any_kw(lower, CUSTOMER_KWS):
        return "team"
    return "client"


__all__ = ["PERSON_TYPES", "detect_person_type"]
