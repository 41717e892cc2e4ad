from __future__ import annotations

from typing import Any, Dict, Optional

from .config_loader import ImportConfig, load_import_config
from .merge import deduplicate_clients, dedupe_keys, fill_empty_fields
from .models import CandidateContact, DuplicateMatch, ExistingClient, ImportResult
from .normalization import (
    clean_company_name,
    clean_email,
    clean_name,
    clean_phone,
    extract_address,
    extract_email,
    extract_phone,
    has_company_suffix,
    normalize_whitespace,
    phone_digits,
    phone_match_key,
)
from .validation import filter_valid, validate_client

__all__ = [
    "CandidateContact",
    "DuplicateMatch",
    "ExistingClient",
    "ImportConfig",
    "ImportResult",
    "clean_company_name",
    "clean_email",
    "clean_name",
    "clean_phone",
    "dedupe_keys",
    "deduplicate_clients",
    "ensure_candidate",
    "ensure_existing",
    "extract_address",
    "extract_email",
    "extract_phone",
    "fill_empty_fields",
    "filter_valid",
    "has_company_suffix",
    "load_config",
    "normalize_whitespace",
    "phone_digits",
    "phone_match_key",
    "validate_client",
]


def load_config(args: Optional[Any] = None) -> ImportConfig:
    return load_import_config(args)


def _cleaned_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = dict(payload)
    if cleaned.get("name"):
        cleaned["name"] = clean_name(str(cleaned["name"]))
    company = cleaned.get("company_name") or cleaned.get("company")
    if company:
        cleaned["company_name"] = clean_company_name(str(company))
    if cleaned.get("email"):
        cleaned["email"] = clean_email(str(cleaned["email"]))
    if cleaned.get("phone"):
        cleaned["phone"] = clean_phone(str(cleaned["phone"]))
    return cleaned


def ensure_candidate(obj: Any) -> CandidateContact:
    """Accept a candidate or a structured record from an integration."""
    if isinstance(obj, CandidateContact):
        return obj
    if isinstance(obj, dict):
        return CandidateContact.from_mapping(_cleaned_payload(obj))
    raise TypeError(f"Unsupported contact payload type: {type(obj)!r}")


def ensure_existing(obj: Any) -> ExistingClient:
    if isinstance(obj, ExistingClient):
        return obj
    if isinstance(obj, dict):
        return ExistingClient.from_mapping(obj)
    raise TypeError(f"Unsupported existing record type: {type(obj)!r}")
