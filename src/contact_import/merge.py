from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from .models import CandidateContact
from .normalization import phone_digits

logger = logging.getLogger(__name__)

MERGEABLE_FIELDS = ("name", "company_name", "email", "phone", "address")


def dedupe_keys(candidate: CandidateContact) -> List[str]:
    keys: List[str] = []
    if candidate.email:
        keys.append(f"email:{candidate.email.lower()}")
    if candidate.phone:
        digits = phone_digits(candidate.phone)
        if digits:
            keys.append(f"phone:{digits}")
    if candidate.name and candidate.company_name:
        keys.append(
            f"name-company:{candidate.name.lower()}-{candidate.company_name.lower()}"
        )
    return keys


def fill_empty_fields(
    target: CandidateContact,
    source: CandidateContact,
    fields: Sequence[str] = MERGEABLE_FIELDS,
) -> List[str]:
    """Copy values from ``source`` into fields that are empty on ``target``."""
    filled: List[str] = []
    for field_name in fields:
        value = getattr(source, field_name)
        if value and not getattr(target, field_name):
            setattr(target, field_name, value)
            filled.append(field_name)
    return filled


def deduplicate_clients(candidates: Iterable[CandidateContact]) -> List[CandidateContact]:
    """Collapse candidates sharing an email, phone or name+company key.

    The first candidate seen for a key owns it; later candidates hitting any
    owned key are merged into that owner and dropped. A new owner is registered
    under the keys it has at that moment. Candidates without any key are kept
    as they are. Owners are copies, so the input objects are left untouched.
    """
    owners_by_key: Dict[str, CandidateContact] = {}
    owners: List[CandidateContact] = []
    duplicates = 0

    for candidate in candidates:
        keys = dedupe_keys(candidate)
        owner = next((owners_by_key[key] for key in keys if key in owners_by_key), None)
        if owner is not None:
            duplicates += 1
            filled = fill_empty_fields(owner, candidate)
            if filled:
                logger.debug("Merged %s into %s", ", ".join(filled), owner.name or owner.email)
            continue

        owner = candidate.replace()
        owners.append(owner)
        for key in keys:
            owners_by_key[key] = owner

    if duplicates:
        logger.info("Collapsed %d duplicate candidate(s) into %d", duplicates, len(owners))
    return owners
