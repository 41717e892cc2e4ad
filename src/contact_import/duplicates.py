from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .merge import fill_empty_fields
from .models import (
    CandidateContact,
    DuplicateMatch,
    ExistingClient,
    ImportPlan,
    ImportSummary,
    MergeUpdate,
)
from .normalization import phone_digits, phone_match_key

logger = logging.getLogger(__name__)

IMPORT_ACTIONS = ("skip", "import", "merge")
UPDATABLE_FIELDS = ("email", "phone", "company_name", "address")


def _same_text(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a and b and a.strip().lower() == b.strip().lower())


class DuplicateDetector:
    """Compares fresh candidates with records that are already stored."""

    def __init__(self, threshold: float = 0.5, default_region: str = "US"):
        self.threshold = threshold
        self.default_region = default_region

    def _phones_match(self, a: str, b: str) -> bool:
        if len(phone_digits(a)) < 10 or len(phone_digits(b)) < 10:
            return False
        return phone_match_key(a, self.default_region) == phone_match_key(
            b, self.default_region
        )

    def compute(
        self, candidate: CandidateContact, existing: ExistingClient
    ) -> Optional[Tuple[str, float]]:
        if _same_text(candidate.email, existing.email):
            return "email", 0.95
        if candidate.phone and existing.phone and self._phones_match(
            candidate.phone, existing.phone
        ):
            return "phone", 0.85
        if (
            candidate.name
            and existing.name
            and candidate.company_name
            and existing.company_name
        ):
            name_match = _same_text(candidate.name, existing.name)
            company_match = _same_text(candidate.company_name, existing.company_name)
            if name_match and company_match:
                return "name", 0.8
            if name_match or company_match:
                return ("name" if name_match else "company"), 0.5
            return None
        if _same_text(candidate.name, existing.name):
            return "name", 0.6
        return None

    def find(
        self, candidates: Iterable[CandidateContact], existing: Sequence[ExistingClient]
    ) -> List[DuplicateMatch]:
        matches: List[DuplicateMatch] = []
        for candidate in candidates:
            for record in existing:
                signal = self.compute(candidate, record)
                if signal is None:
                    continue
                match_type, confidence = signal
                if confidence > self.threshold:
                    matches.append(
                        DuplicateMatch(
                            candidate=candidate,
                            existing=record,
                            match_type=match_type,
                            confidence=confidence,
                        )
                    )
                    break
        logger.info("Found %d possible duplicate(s) among existing records", len(matches))
        return matches


def find_duplicates(
    candidates: Iterable[CandidateContact],
    existing: Sequence[ExistingClient],
    threshold: float = 0.5,
    default_region: str = "US",
) -> List[DuplicateMatch]:
    return DuplicateDetector(threshold=threshold, default_region=default_region).find(
        candidates, existing
    )


def merge_updates(candidate: CandidateContact, existing: ExistingClient) -> Dict[str, str]:
    """Fields the candidate can supply that are still empty on the stored record."""
    target = CandidateContact(
        company_name=existing.company_name,
        email=existing.email,
        phone=existing.phone,
        address=existing.address,
    )
    filled = fill_empty_fields(target, candidate, UPDATABLE_FIELDS)
    return {field_name: getattr(target, field_name) for field_name in filled}


def plan_import(
    candidates: Sequence[CandidateContact],
    matches: Sequence[DuplicateMatch],
    actions: Optional[Dict[int, str]] = None,
) -> ImportPlan:
    """Decide what happens to each candidate.

    Candidates without a duplicate match are created. A matched candidate
    follows ``actions[index]`` (``skip`` when absent): ``import`` creates it
    anyway, ``merge`` fills the empty fields of the stored record.
    """
    actions = actions or {}
    match_by_candidate = {id(match.candidate): match for match in matches}
    plan = ImportPlan()
    for index, candidate in enumerate(candidates):
        match = match_by_candidate.get(id(candidate))
        if match is None:
            plan.to_create.append(candidate)
            continue
        action = actions.get(index, "skip")
        if action not in IMPORT_ACTIONS:
            raise ValueError(f"Unsupported import action for candidate {index}: {action!r}")
        if action == "import":
            plan.to_create.append(candidate)
        elif action == "merge":
            plan.to_merge.append(
                MergeUpdate(
                    existing_id=match.existing.id,
                    updates=merge_updates(candidate, match.existing),
                )
            )
        else:
            plan.skipped.append(candidate)
    return plan


def summarize_plan(plan: ImportPlan, source: str) -> ImportSummary:
    imported = len(plan.to_create)
    merged = len(plan.to_merge)
    skipped = len(plan.skipped)
    return ImportSummary(
        total=imported + merged + skipped,
        imported=imported,
        merged=merged,
        skipped=skipped,
        source=source,
    )
