from __future__ import annotations

import logging
import re
from typing import Optional

import phonenumbers
from email_validator import EmailNotValidError, validate_email

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

PHONE_PATTERNS = (
    # 555-555-5555, 555.555.5555, 555 555 5555
    re.compile(r"\b\d{3}[-. \t]?\d{3}[-. \t]?\d{4}\b"),
    # (555) 555-5555
    re.compile(r"(?<!\w)\(\d{3}\)[ \t]?\d{3}[-. \t]?\d{4}\b"),
    # +1 555-555-5555
    re.compile(r"(?<![\w+])\+?(?:1[-. \t]?)?\d{3}[-. \t]?\d{3}[-. \t]?\d{4}\b"),
    # 5555555555
    re.compile(r"\b\d{10}\b"),
)

_STREET_WORDS = (
    "Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct|Place|Pl|Circle|Cir|Way"
)
_STREET_ABBREVIATIONS = "St|Ave|Rd|Blvd|Ln|Dr|Ct|Pl|Cir|Way"
_CITY_STATE_ZIP = r",[ \t]*[A-Za-z \t]+,[ \t]*[A-Z]{2}[ \t]+\d{5}\b"

ADDRESS_PATTERNS = (
    re.compile(
        rf"\b\d+[ \t]+[A-Za-z \t]+(?:{_STREET_WORDS})\b[^,\n]*{_CITY_STATE_ZIP}", re.IGNORECASE
    ),
    re.compile(
        rf"\b\d+[ \t]+[A-Za-z \t]+(?:{_STREET_ABBREVIATIONS})\b[^,\n]*{_CITY_STATE_ZIP}",
        re.IGNORECASE,
    ),
    re.compile(rf"\b\d+[ \t]+[A-Za-z \t]+{_CITY_STATE_ZIP}", re.IGNORECASE),
)

COMPANY_SUFFIXES = (
    "Inc|LLC|Corp|Company|Ltd|Group|Services|Construction|Electric|Plumbing|HVAC"
)
# "Co." ends in punctuation, so it cannot sit behind a trailing \b.
COMPANY_SUFFIX_PATTERN = re.compile(
    rf"\b(?:(?:{COMPANY_SUFFIXES})\b|Co\.)", re.IGNORECASE
)

_NAME_DISALLOWED = re.compile(r"[^\w\s'-]")
_COMPANY_DISALLOWED = re.compile(r"[^\w\s&.,'-]")
_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: Optional[str]) -> str:
    """Tidy raw input while keeping its line structure.

    Line endings become ``\\n``, every line is trimmed, and runs of blank lines
    collapse to a single blank line so block separators survive.
    """
    s = (text or "").replace("\r\n", "\n").replace("\r", "\n").replace("\u00a0", " ")
    lines = [line.strip() for line in s.split("\n")]
    s = re.sub(r"\n{3,}", "\n\n", "\n".join(lines))
    return s.strip()


def find_email(text: Optional[str]) -> Optional[str]:
    match = EMAIL_PATTERN.search(text or "")
    return match.group(0) if match else None


def extract_email(text: Optional[str]) -> Optional[str]:
    found = find_email(text)
    return found.lower() if found else None


def find_phone(text: Optional[str]) -> Optional[str]:
    """Return the raw phone substring matched by the first pattern that hits."""
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return match.group(0)
    return None


def extract_phone(text: Optional[str]) -> Optional[str]:
    found = find_phone(text)
    return clean_phone(found) if found else None


def extract_address(text: Optional[str]) -> Optional[str]:
    for pattern in ADDRESS_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return match.group(0).strip()
    return None


def clean_name(value: Optional[str]) -> str:
    text = _WHITESPACE.sub(" ", (value or "").strip())
    text = _NAME_DISALLOWED.sub("", text)
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split())


def clean_company_name(value: Optional[str]) -> str:
    text = _WHITESPACE.sub(" ", (value or "").strip())
    text = _COMPANY_DISALLOWED.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def clean_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def phone_digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def clean_phone(value: Optional[str]) -> str:
    digits = phone_digits(value)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+1 ({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    return (value or "").strip()


def has_company_suffix(text: Optional[str]) -> bool:
    return bool(COMPANY_SUFFIX_PATTERN.search(text or ""))


def phone_match_key(value: Optional[str], default_region: str = "US") -> str:
    """Comparable form of a phone number; E.164 when it parses, digits otherwise."""
    s = (value or "").strip()
    if not s:
        return ""
    try:
        region = None if s.startswith("+") else default_region
        parsed = phonenumbers.parse(s, region)
    except phonenumbers.NumberParseException:
        logger.debug("phonenumbers.parse failed for %s", s)
        return phone_digits(s)
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def is_valid_email_strict(value: Optional[str]) -> bool:
    candidate = (value or "").strip()
    if not candidate:
        return False
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
