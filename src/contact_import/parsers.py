from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from .models import CandidateContact
from .normalization import (
    COMPANY_SUFFIXES,
    clean_company_name,
    clean_email,
    clean_name,
    clean_phone,
    extract_address,
    extract_email,
    extract_phone,
    find_email,
    find_phone,
    has_company_suffix,
)

logger = logging.getLogger(__name__)

NATURAL_LANGUAGE_PATTERNS = (
    # "Add John Doe from ABC Construction, phone ..."
    re.compile(
        r"\b(?:add|create|new)[ \t]+([A-Za-z \t]+?)[ \t]+(?:from|at|with)[ \t]+"
        r"([A-Za-z0-9 \t&.,'-]+?)(?:,|[ \t]+(?:phone|tel|cell)\b)",
        re.IGNORECASE,
    ),
    # "John Doe, ABC Construction, 555-123-4567"
    re.compile(
        r"^([A-Za-z \t]+?),[ \t]*([A-Za-z0-9 \t&.,'-]+?),[ \t]*([\d \t()+.-]+)$",
        re.MULTILINE,
    ),
    # "Contact: John Doe (ABC Corp) - john@abc.com"
    re.compile(
        r"\b(?:contact|client|customer):[ \t]*([A-Za-z \t]+?)[ \t]*\(([^)\n]+)\)[ \t]*-[ \t]*"
        r"(\S+@\S+|\+?[\d(][\d \t().-]{6,}\d)",
        re.IGNORECASE,
    ),
)

COLUMN_SPLIT = re.compile(r"\t| {2,}|,")

SIGNATURE_SPLIT = re.compile(
    r"--|\u2014|_____|Best regards|Sincerely|Thanks|Regards|Sent from", re.IGNORECASE
)
BLOCK_SPLIT = re.compile(r"\n{2,}")
JOB_TITLE_PATTERN = re.compile(
    r"\b(?:President|CEO|Manager|Director|Owner|Foreman|Supervisor)\b", re.IGNORECASE
)
DIGIT_RUN = re.compile(r"\d{3,}")

DELIMITERS = (",", "\t", "|", ";")

COMPANY_WITH_SUFFIX = re.compile(
    rf"(?:\b[A-Z0-9][\w&.'-]*[ \t]+){{1,4}}(?i:(?:{COMPANY_SUFFIXES})\b|Co\.)"
)
COMPANY_LABEL = re.compile(
    r"\b(?:company|org|organization|employer):[ \t]*([A-Za-z0-9 \t&.,'-]+?)[ \t]*(?:,|$)",
    re.IGNORECASE | re.MULTILINE,
)

CAPITALIZED_WORD = re.compile(r"^[A-Z][A-Za-z'-]*[,:;.]?$")
# Capitalized tokens that label a field rather than name a person.
LABEL_WORDS = {
    "add",
    "address",
    "cell",
    "company",
    "contact",
    "create",
    "email",
    "e-mail",
    "fax",
    "mobile",
    "new",
    "office",
    "phone",
    "tel",
    "website",
}


def _non_empty_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def _phrase_starts(text: str) -> List[int]:
    return sorted({m.start() for p in NATURAL_LANGUAGE_PATTERNS for m in p.finditer(text)})


def _text_after(text: str, match: re.Match, starts: Sequence[int]) -> str:
    """Text between the end of ``match`` and the next recognized phrase."""
    end = next((start for start in starts if start >= match.end()), len(text))
    return text[match.end() : end]


def _fill_from_text(candidate: CandidateContact, text: str) -> None:
    if candidate.email is None:
        candidate.email = extract_email(text)
    if candidate.phone is None:
        candidate.phone = extract_phone(text)
    if candidate.address is None:
        candidate.address = extract_address(text)


def _trailing_address(lines: Sequence[str]) -> Optional[str]:
    return extract_address(" ".join(lines[-3:]))


def parse_natural_language(text: str) -> List[CandidateContact]:
    """Pick contacts out of dictated or conversational text.

    Values captured inside a recognized phrase are used first; whatever is
    still missing is looked up in the text that follows, up to the next
    recognized phrase. When no phrase matches anywhere, the whole input is
    read as a single contact.
    """
    candidates: List[CandidateContact] = []
    starts = _phrase_starts(text)
    for pattern in NATURAL_LANGUAGE_PATTERNS:
        for match in pattern.finditer(text):
            candidate = CandidateContact(
                name=clean_name(match.group(1)),
                company_name=clean_company_name(match.group(2)),
            )
            if pattern.groups >= 3:
                inline = match.group(3)
                candidate.email = extract_email(inline)
                candidate.phone = extract_phone(inline)
            _fill_from_text(candidate, _text_after(text, match, starts))
            if candidate.name:
                candidates.append(candidate)

    if not candidates:
        logger.debug("No natural-language phrase matched; reading input as one contact")
        single = parse_single_contact(text)
        if single is not None:
            candidates.append(single)
    return candidates


def parse_structured_text(text: str) -> List[CandidateContact]:
    """Read a header row followed by tab, wide-space or comma separated rows."""
    lines = _non_empty_lines(text)
    if not lines:
        return []
    header_line = lines[0].lower()
    if not any(keyword in header_line for keyword in ("name", "company", "email")):
        return []

    headers = [header.strip() for header in COLUMN_SPLIT.split(header_line)]
    candidates: List[CandidateContact] = []
    for line in lines[1:]:
        parts = [part.strip() for part in COLUMN_SPLIT.split(line)]
        if len(parts) < 2:
            continue
        candidate = CandidateContact()
        for index, header in enumerate(headers):
            value = parts[index] if index < len(parts) else ""
            if not value:
                continue
            if "name" in header and "company" not in header:
                candidate.name = clean_name(value) or None
            elif "company" in header or "org" in header:
                candidate.company_name = clean_company_name(value) or None
            elif "email" in header:
                candidate.email = clean_email(value) or None
            elif "phone" in header or "tel" in header:
                candidate.phone = clean_phone(value) or None
            elif "address" in header:
                candidate.address = value
        if candidate.name:
            candidates.append(candidate)
    return candidates


def _looks_like_signature_name(line: str) -> bool:
    return (
        len(line) < 50
        and len(line.split()) <= 4
        and "@" not in line
        and not DIGIT_RUN.search(line)
    )


def parse_email_signatures(text: str) -> List[CandidateContact]:
    candidates: List[CandidateContact] = []
    for block in SIGNATURE_SPLIT.split(text):
        if len(block) < 20 or len(block) > 500:
            continue
        # sign-off leftovers such as the comma after "Thanks" are not lines
        lines = [line.strip() for line in block.split("\n") if line.strip(" \t,.;:!")]
        if len(lines) < 2:
            continue

        candidate = CandidateContact()
        if _looks_like_signature_name(lines[0]):
            candidate.name = clean_name(lines[0]) or None

        for line in lines:
            email = extract_email(line)
            phone = extract_phone(line)
            if email and candidate.email is None:
                candidate.email = email
            if phone and candidate.phone is None:
                candidate.phone = phone
            if (
                candidate.company_name is None
                and not email
                and not phone
                and 3 < len(line) < 100
                and has_company_suffix(line)
            ):
                candidate.company_name = clean_company_name(line) or None

        address = _trailing_address(lines)
        if address:
            candidate.address = address

        if candidate.name or (candidate.email and candidate.company_name):
            candidates.append(candidate)
    return candidates


def parse_business_cards(text: str) -> List[CandidateContact]:
    candidates: List[CandidateContact] = []
    for block in BLOCK_SPLIT.split(text):
        lines = _non_empty_lines(block)
        if len(lines) < 2:
            continue

        candidate = CandidateContact()
        name_found = False
        for line in lines:
            if len(line) < 3:
                continue
            email = extract_email(line)
            phone = extract_phone(line)
            if not email and not phone:
                if JOB_TITLE_PATTERN.search(line):
                    continue
                if not name_found and len(line.split()) <= 4 and not has_company_suffix(line):
                    candidate.name = clean_name(line) or None
                    name_found = True
                    continue
                if candidate.company_name is None and has_company_suffix(line):
                    candidate.company_name = clean_company_name(line) or None
                continue
            if email and candidate.email is None:
                candidate.email = email
            if phone and candidate.phone is None:
                candidate.phone = phone

        address = _trailing_address(lines)
        if address:
            candidate.address = address

        if candidate.name or candidate.company_name:
            candidates.append(candidate)
    return candidates


def _strip_quotes(value: str) -> str:
    return re.sub(r'^"|"$', "", value.strip())


def _candidate_from_fields(parts: Sequence[str]) -> CandidateContact:
    candidate = CandidateContact()
    first = parts[0]
    second = parts[1] if len(parts) > 1 else ""
    if first:
        if has_company_suffix(first):
            candidate.company_name = clean_company_name(first) or None
            if second and not extract_email(second):
                candidate.name = clean_name(second) or None
        else:
            candidate.name = clean_name(first) or None
            if second and not extract_email(second):
                candidate.company_name = clean_company_name(second) or None

    last_index = len(parts) - 1
    for index, part in enumerate(parts[1:], start=1):
        if not part:
            continue
        email = extract_email(part)
        if email and candidate.email is None:
            candidate.email = email
            continue
        phone = extract_phone(part)
        if phone and candidate.phone is None:
            candidate.phone = phone
        elif index == last_index:
            candidate.address = extract_address(part)
    return candidate


def parse_delimited(text: str) -> List[CandidateContact]:
    """One contact per line of comma, tab, pipe or semicolon separated fields."""
    candidates: List[CandidateContact] = []
    for line in _non_empty_lines(text):
        lowered = line.lower()
        if "name" in lowered and "email" in lowered:
            continue
        for delimiter in DELIMITERS:
            if delimiter not in line:
                continue
            parts = [_strip_quotes(part) for part in line.split(delimiter)]
            # a trailing comma after a sentence is not a row
            if sum(1 for part in parts if part) < 2:
                continue
            candidate = _candidate_from_fields(parts)
            if candidate.name or candidate.company_name:
                candidates.append(candidate)
                break
    return candidates


def _person_run(run: Sequence[str]) -> Optional[str]:
    if not 2 <= len(run) <= 4:
        return None
    joined = " ".join(run)
    # "Acme Construction Inc" is a company line, not a person
    return None if has_company_suffix(joined) else joined


def _capitalized_name_run(text: str) -> Optional[str]:
    """First run of two to four capitalized words on a single line."""
    for line in text.split("\n"):
        run: List[str] = []
        for token in line.split():
            closes_run = token[-1] in ",:;."
            if CAPITALIZED_WORD.match(token) and token.strip(",:;.").lower() not in LABEL_WORDS:
                run.append(token)
                if not closes_run:
                    continue
            name = _person_run(run)
            if name:
                return name
            run = []
        name = _person_run(run)
        if name:
            return name
    return None


def parse_single_contact(text: str) -> Optional[CandidateContact]:
    """Treat the whole input as describing one contact."""
    candidate = CandidateContact()

    raw_email = find_email(text)
    if raw_email:
        candidate.email = raw_email.lower()
        local_name = re.sub(r"[._-]", " ", candidate.email.split("@", 1)[0])
        if len(local_name) > 2:
            candidate.name = clean_name(local_name) or None

    raw_phone = find_phone(text)
    if raw_phone:
        candidate.phone = clean_phone(raw_phone)

    candidate.address = extract_address(text)

    # a one-word name guessed from the mailbox is replaced by a fuller one
    if candidate.name is None or " " not in candidate.name:
        remainder = text
        for fragment in (raw_email, raw_phone, candidate.address):
            if fragment:
                remainder = remainder.replace(fragment, " ")
        run = _capitalized_name_run(remainder)
        if run:
            candidate.name = clean_name(run) or candidate.name

    company_match = COMPANY_WITH_SUFFIX.search(text)
    if company_match:
        candidate.company_name = clean_company_name(company_match.group(0)) or None
    else:
        label_match = COMPANY_LABEL.search(text)
        if label_match:
            candidate.company_name = clean_company_name(label_match.group(1)) or None

    if candidate.name or candidate.email or candidate.company_name:
        return candidate
    return None
