from __future__ import annotations

import logging
import re
from typing import Iterable, List

from .models import CandidateContact
from .normalization import is_valid_email_strict

logger = logging.getLogger(__name__)

EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


def validate_client(candidate: CandidateContact, strict_email: bool = False) -> bool:
    """Minimum-content check applied before a candidate reaches the caller.

    A malformed email rejects the whole candidate, not just the field.
    ``strict_email`` additionally runs the address through ``email_validator``.
    """
    if not candidate.name and not candidate.company_name:
        return False
    if candidate.name and not NAME_MIN_LENGTH <= len(candidate.name) <= NAME_MAX_LENGTH:
        return False
    if candidate.email:
        if not EMAIL_SHAPE.match(candidate.email):
            return False
        if strict_email and not is_valid_email_strict(candidate.email):
            return False
    return True


def filter_valid(
    candidates: Iterable[CandidateContact], strict_email: bool = False
) -> List[CandidateContact]:
    kept: List[CandidateContact] = []
    dropped = 0
    for candidate in candidates:
        if validate_client(candidate, strict_email=strict_email):
            kept.append(candidate)
        else:
            dropped += 1
            logger.debug("Rejected candidate %s", candidate.to_dict())
    if dropped:
        logger.info("Dropped %d candidate(s) failing validation", dropped)
    return kept
