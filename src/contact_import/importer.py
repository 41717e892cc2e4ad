from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .common import ensure_candidate, ensure_existing, load_config
from .config_loader import ImportConfig, SourceConfig
from .duplicates import find_duplicates
from .errors import ContactImportError, NoContactsFoundError, UnknownSourceError
from .logging_utils import configure_logging
from .merge import deduplicate_clients
from .models import CandidateContact, DuplicateMatch, ExistingClient, ImportResult
from .normalization import normalize_whitespace
from .parsers import (
    parse_business_cards,
    parse_delimited,
    parse_email_signatures,
    parse_natural_language,
    parse_structured_text,
)
from .report import build_preview_frame, summarize_preview
from .tagging import PERSON_TYPES, detect_person_type
from .validation import filter_valid

logger = logging.getLogger(__name__)

Parser = Callable[[str], List[CandidateContact]]

# order matters: earlier parsers own the dedupe keys
PARSERS: Tuple[Parser, ...] = (
    parse_natural_language,
    parse_structured_text,
    parse_email_signatures,
    parse_business_cards,
    parse_delimited,
)


def collect_candidates(text: Optional[str]) -> List[CandidateContact]:
    """Run every parser over the same normalized text and concatenate the results."""
    normalized = normalize_whitespace(text)
    if not normalized:
        return []
    candidates: List[CandidateContact] = []
    for parser in PARSERS:
        found = parser(normalized)
        logger.debug("%s produced %d candidate(s)", parser.__name__, len(found))
        candidates.extend(found)
    return candidates


def parse_smart_input(
    text: Optional[str], config: Optional[ImportConfig] = None
) -> List[CandidateContact]:
    """Extract validated, deduplicated contacts from free text.

    Never raises for ordinary input; an empty list means nothing usable was
    found.
    """
    strict_email = config.validation.strict_email if config else False
    candidates = collect_candidates(text)
    valid = filter_valid(candidates, strict_email=strict_email)
    return deduplicate_clients(valid)


def _resolve_source(source: str, config: ImportConfig) -> SourceConfig:
    source_config = config.sources.get(source)
    if source_config is None:
        raise UnknownSourceError(source)
    return source_config


def run_import(
    text: Optional[str],
    source: str = "paste",
    config: Optional[ImportConfig] = None,
    person_type: Optional[str] = None,
) -> ImportResult:
    """Parse text captured from one import source into an import preview."""
    config = config or load_config()
    source_config = _resolve_source(source, config)
    if person_type is not None and person_type not in PERSON_TYPES:
        raise ValueError(f"Unsupported person type: {person_type!r}")

    candidates = parse_smart_input(text, config)
    if not candidates:
        raise NoContactsFoundError(source_config.label)

    logger.info("%s: %d candidate(s) ready for review", source_config.label, len(candidates))
    return ImportResult(
        candidates=candidates,
        source=source_config.label,
        confidence=source_config.confidence,
        person_type=person_type or detect_person_type(text or ""),
    )


def import_records(
    records: Iterable[Any],
    source: str,
    config: Optional[ImportConfig] = None,
    person_type: str = "client",
) -> ImportResult:
    """Wrap already-structured records from an integration; no text parsing."""
    config = config or load_config()
    source_config = _resolve_source(source, config)
    candidates = [ensure_candidate(record) for record in records]
    valid = filter_valid(candidates, strict_email=config.validation.strict_email)
    unique = deduplicate_clients(valid)
    if not unique:
        raise NoContactsFoundError(source_config.label)
    return ImportResult(
        candidates=unique,
        source=source_config.label,
        confidence=source_config.confidence,
        person_type=person_type,
    )


def _read_input(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _load_existing(path: Optional[str]) -> List[ExistingClient]:
    if not path:
        return []
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, list):
        raise ValueError(f"Existing records file must hold a JSON array: {path}")
    return [ensure_existing(item) for item in payload]


def build(
    args: argparse.Namespace, config: Optional[ImportConfig] = None
) -> Tuple[ImportResult, List[DuplicateMatch]]:
    config = config or load_config(args)
    text = _read_input(getattr(args, "input", None))
    result = run_import(
        text,
        source=getattr(args, "source", None) or "paste",
        config=config,
        person_type=getattr(args, "person_type", None),
    )
    existing = _load_existing(getattr(args, "existing", None))
    matches = find_duplicates(
        result.candidates,
        existing,
        threshold=config.duplicates.match_threshold,
        default_region=config.duplicates.default_phone_region,
    )
    return result, matches


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract contacts from pasted or dictated text.")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config.")
    parser.add_argument("--input", type=str, default="-", help="Text file to read; '-' for stdin.")
    parser.add_argument("--source", type=str, default="paste")
    parser.add_argument("--person-type", type=str, default=None, choices=PERSON_TYPES)
    parser.add_argument("--existing", type=str, default=None, help="JSON array of stored clients.")
    parser.add_argument("--format", type=str, default="json", choices=("json", "table"))
    parser.add_argument("--strict-email", action="store_true", default=None)
    parser.add_argument("--match-threshold", type=float, default=None)
    parser.add_argument("--default-phone-region", type=str, default=None)
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")
    args = parser.parse_args(argv)

    config = load_config(args)
    configure_logging(config, level_override=args.log_level)
    try:
        result, matches = build(args, config=config)
    except ContactImportError as exc:
        logger.error("%s", exc)
        return 1

    frame = build_preview_frame(result.candidates)
    summary = summarize_preview(frame)
    if args.format == "table":
        print(f"{result.source} ({result.person_type}, confidence {result.confidence:.0%})")
        print(frame.to_string(index=False))
        for match in matches:
            print(
                f"possible duplicate: {match.candidate.name or match.candidate.company_name}"
                f" -> {match.existing.id} ({match.match_type}, {match.confidence:.0%})"
            )
        print(summary)
    else:
        payload = result.to_dict()
        payload["duplicates"] = [match.to_dict() for match in matches]
        payload["summary"] = summary
        print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
