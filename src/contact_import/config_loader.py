from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml  # type: ignore[import-untyped]


@dataclass
class SourceConfig:
    label: str
    confidence: float


DEFAULT_SOURCES: Dict[str, SourceConfig] = {
    "voice": SourceConfig(label="Voice Input", confidence=0.8),
    "paste": SourceConfig(label="Smart Paste", confidence=0.9),
    "photo": SourceConfig(label="Photo Import", confidence=0.85),
    "email": SourceConfig(label="Email Import", confidence=0.9),
    "calendar": SourceConfig(label="Calendar Import", confidence=0.85),
    "quickbooks": SourceConfig(label="QuickBooks Import", confidence=0.95),
}


def _default_sources() -> Dict[str, SourceConfig]:
    return {key: SourceConfig(s.label, s.confidence) for key, s in DEFAULT_SOURCES.items()}


@dataclass
class ValidationConfig:
    strict_email: bool = False


@dataclass
class DuplicatesConfig:
    match_threshold: float = 0.5
    default_phone_region: str = "US"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ImportConfig:
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    duplicates: DuplicatesConfig = field(default_factory=DuplicatesConfig)
    sources: Dict[str, SourceConfig] = field(default_factory=_default_sources)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _load_yaml(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _load_sources(sources_cfg: Dict[str, Any]) -> Dict[str, SourceConfig]:
    sources = _default_sources()
    for key, raw in (sources_cfg or {}).items():
        raw = raw or {}
        current = sources.get(key)
        sources[key] = SourceConfig(
            label=str(raw.get("label") or (current.label if current else key.title())),
            confidence=float(
                raw.get("confidence", current.confidence if current else 0.5)
            ),
        )
    return sources


def load_import_config(args: Optional[argparse.Namespace] = None) -> ImportConfig:
    """Build the effective config: CLI values win over the YAML file, then defaults."""
    config_data = _load_yaml(getattr(args, "config", None))
    validation_cfg = config_data.get("validation", {}) or {}
    duplicates_cfg = config_data.get("duplicates", {}) or {}
    logging_cfg = config_data.get("logging", {}) or {}

    validation = ValidationConfig(
        strict_email=bool(
            getattr(args, "strict_email", None) or validation_cfg.get("strict_email", False)
        ),
    )

    arg_threshold = getattr(args, "match_threshold", None)
    arg_region = getattr(args, "default_phone_region", None)
    duplicates = DuplicatesConfig(
        match_threshold=float(
            duplicates_cfg.get("match_threshold", 0.5) if arg_threshold is None else arg_threshold
        ),
        default_phone_region=(
            duplicates_cfg.get("default_phone_region", "US") if arg_region is None else arg_region
        ),
    )

    arg_level = getattr(args, "log_level", None)
    effective_level = (arg_level or logging_cfg.get("level") or "WARNING").upper()

    return ImportConfig(
        validation=validation,
        duplicates=duplicates,
        sources=_load_sources(config_data.get("sources", {})),
        logging=LoggingConfig(level=effective_level),
    )
