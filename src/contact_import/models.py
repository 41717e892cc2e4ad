from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

CONTACT_FIELDS = ("name", "company_name", "email", "phone", "address")


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class CandidateContact:
    """A contact record extracted from free text.

    ``None`` marks an absent field; empty strings are never stored.
    """

    name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    def __post_init__(self) -> None:
        for field_name in CONTACT_FIELDS:
            setattr(self, field_name, _optional_str(getattr(self, field_name)))

    @classmethod
    def from_mapping(cls, payload: Dict[str, Any]) -> "CandidateContact":
        return cls(
            name=payload.get("name"),
            company_name=payload.get("company_name") or payload.get("company"),
            email=payload.get("email"),
            phone=payload.get("phone"),
            address=payload.get("address"),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "name": self.name,
            "company_name": self.company_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
        }

    def replace(self, **changes: Any) -> "CandidateContact":
        return replace(self, **changes)

    def populated_fields(self) -> List[str]:
        return [name for name in CONTACT_FIELDS if getattr(self, name) is not None]

    def missing_fields(self) -> List[str]:
        return [name for name in CONTACT_FIELDS if getattr(self, name) is None]


@dataclass
class ExistingClient:
    id: Optional[str] = None
    name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Dict[str, Any]) -> "ExistingClient":
        return cls(
            id=_optional_str(payload.get("id")),
            name=_optional_str(payload.get("name")),
            company_name=_optional_str(payload.get("company_name") or payload.get("company")),
            email=_optional_str(payload.get("email")),
            phone=_optional_str(payload.get("phone")),
            address=_optional_str(payload.get("address")),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "id": self.id,
            "name": self.name,
            "company_name": self.company_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
        }


@dataclass(frozen=True)
class DuplicateMatch:
    candidate: CandidateContact
    existing: ExistingClient
    match_type: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate": self.candidate.to_dict(),
            "existing_id": self.existing.id,
            "match_type": self.match_type,
            "confidence": self.confidence,
        }


@dataclass
class ImportResult:
    candidates: List[CandidateContact]
    source: str
    confidence: float
    person_type: str = "client"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "confidence": self.confidence,
            "person_type": self.person_type,
            "candidates": [candidate.to_dict() for candidate in self.candidates],
        }


@dataclass(frozen=True)
class MergeUpdate:
    existing_id: Optional[str]
    updates: Dict[str, str]


@dataclass
class ImportPlan:
    to_create: List[CandidateContact] = field(default_factory=list)
    to_merge: List[MergeUpdate] = field(default_factory=list)
    skipped: List[CandidateContact] = field(default_factory=list)


@dataclass(frozen=True)
class ImportSummary:
    total: int
    imported: int
    merged: int
    skipped: int
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "imported": self.imported,
            "merged": self.merged,
            "skipped": self.skipped,
            "source": self.source,
        }
