import json
import logging
from types import SimpleNamespace

import pytest

from contact_import import importer
from contact_import.common import ensure_candidate
from contact_import.config_loader import ImportConfig, load_import_config
from contact_import.errors import NoContactsFoundError, UnknownSourceError
from contact_import.logging_utils import LOG_LEVEL_ENV, _resolve_level, configure_logging
from contact_import.models import CandidateContact

SARAH = (
    "Sarah Williams, Williams HVAC, sarah@williamshvac.com, (555) 234-5678, "
    "456 Oak Ave, Boulder, CO 80301"
)


def _args(**overrides):
    base = dict(
        config=None,
        input=None,
        source="paste",
        person_type=None,
        existing=None,
        strict_email=None,
        match_threshold=None,
        default_phone_region=None,
        log_level=None,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def test_parse_smart_input_add_phrase():
    text = "Add John Doe from ABC Construction, phone 555-123-4567, email john@abcconstruction.com"
    assert importer.parse_smart_input(text) == [
        CandidateContact(
            name="John Doe",
            company_name="ABC Construction",
            email="john@abcconstruction.com",
            phone="(555) 123-4567",
        )
    ]


def test_parse_smart_input_comma_row():
    rows = importer.parse_smart_input(SARAH)
    assert len(rows) == 1
    assert rows[0] == CandidateContact(
        name="Sarah Williams",
        company_name="Williams HVAC",
        email="sarah@williamshvac.com",
        phone="(555) 234-5678",
        address="456 Oak Ave, Boulder, CO 80301",
    )


def test_parse_smart_input_contact_inside_notes():
    text = "\n".join(
        [
            "Met a few people at the trade show today.",
            "Lisa Chen: lisa@chenelectric.com / 555-345-6789",
            "Also talk to Tom about the permit.",
        ]
    )
    rows = importer.parse_smart_input(text)
    assert len(rows) == 1
    assert rows[0].name == "Lisa Chen"
    assert rows[0].email == "lisa@chenelectric.com"
    assert rows[0].phone == "(555) 345-6789"


def test_parse_smart_input_collapses_repeated_blocks():
    text = "\n".join(
        [
            "Bob Smith",
            "Smith Roofing Services",
            "bob@x.com",
            "",
            "Bob Smith",
            "bob@x.com",
            "555-222-3333",
        ]
    )
    assert len(importer.collect_candidates(text)) > 1
    rows = importer.parse_smart_input(text)
    assert rows == [
        CandidateContact(
            name="Bob Smith",
            company_name="Smith Roofing Services",
            email="bob@x.com",
            phone="(555) 222-3333",
        )
    ]


def test_parse_smart_input_rejects_noise():
    assert importer.parse_smart_input("not-an-email") == []
    assert importer.parse_smart_input("") == []
    assert importer.parse_smart_input("   \n\t  ") == []
    assert importer.parse_smart_input(None) == []


def test_run_import_labels_source():
    result = importer.run_import(SARAH, source="paste")
    assert result.source == "Smart Paste"
    assert result.confidence == 0.9
    assert result.person_type == "subcontractor"
    assert len(result.candidates) == 1

    forced = importer.run_import(SARAH, source="photo", person_type="vendor")
    assert forced.source == "Photo Import"
    assert forced.person_type == "vendor"


def test_run_import_errors():
    with pytest.raises(NoContactsFoundError) as excinfo:
        importer.run_import("not-an-email", source="voice")
    assert str(excinfo.value) == "Could not extract any contact information from the voice input."
    with pytest.raises(UnknownSourceError):
        importer.run_import(SARAH, source="fax")


def test_import_records_cleans_and_dedupes():
    result = importer.import_records(
        [
            {"name": "jane roe", "company": "Roe Plumbing", "email": "JANE@roeplumbing.com", "phone": "5551112222"},
            {"name": "Jane Roe", "email": "jane@roeplumbing.com", "address": "9 Pine Rd"},
        ],
        source="quickbooks",
    )
    assert result.source == "QuickBooks Import"
    assert result.confidence == 0.95
    assert result.candidates == [
        CandidateContact(
            name="Jane Roe",
            company_name="Roe Plumbing",
            email="jane@roeplumbing.com",
            phone="(555) 111-2222",
            address="9 Pine Rd",
        )
    ]


def test_ensure_candidate_rejects_other_types():
    with pytest.raises(TypeError):
        ensure_candidate(42)


def test_load_import_config_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "\n".join(
            [
                "validation:",
                "  strict_email: true",
                "duplicates:",
                "  match_threshold: 0.7",
                "sources:",
                "  paste:",
                "    confidence: 0.5",
                "  crm:",
                "    label: CRM Sync",
                "    confidence: 0.75",
                "logging:",
                "  level: debug",
                "",
            ]
        ),
        encoding="utf-8",
    )
    config = load_import_config(_args(config=str(path)))
    assert config.validation.strict_email is True
    assert config.duplicates.match_threshold == 0.7
    assert config.duplicates.default_phone_region == "US"
    assert config.sources["paste"].label == "Smart Paste"
    assert config.sources["paste"].confidence == 0.5
    assert config.sources["crm"].label == "CRM Sync"
    assert config.sources["voice"].confidence == 0.8
    assert config.logging.level == "DEBUG"

    overridden = load_import_config(_args(config=str(path), match_threshold=0.9))
    assert overridden.duplicates.match_threshold == 0.9

    zero = load_import_config(_args(config=str(path), match_threshold=0.0))
    assert zero.duplicates.match_threshold == 0.0


def test_configure_logging_precedence(monkeypatch):
    root = logging.getLogger()
    previous = root.level
    try:
        monkeypatch.setenv(LOG_LEVEL_ENV, "error")
        assert configure_logging(ImportConfig(), level_override="debug") == logging.ERROR
        monkeypatch.delenv(LOG_LEVEL_ENV)
        assert configure_logging(ImportConfig(), level_override="debug") == logging.DEBUG
        assert configure_logging(ImportConfig()) == logging.WARNING
    finally:
        root.setLevel(previous)
    assert _resolve_level("bogus") == logging.WARNING
    assert _resolve_level("debug") == logging.DEBUG
    assert _resolve_level("10") == 10


def test_build_reports_existing_matches(tmp_path):
    text_path = tmp_path / "paste.txt"
    text_path.write_text(SARAH, encoding="utf-8")
    existing_path = tmp_path / "existing.json"
    existing_path.write_text(
        json.dumps([{"id": "c-1", "name": "Sarah W", "phone": "555.234.5678"}]), encoding="utf-8"
    )
    result, matches = importer.build(
        _args(input=str(text_path), existing=str(existing_path))
    )
    assert len(result.candidates) == 1
    assert [(m.existing.id, m.match_type) for m in matches] == [("c-1", "phone")]


def test_main_prints_json(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    root = logging.getLogger()
    previous = root.level
    text_path = tmp_path / "paste.txt"
    text_path.write_text(SARAH, encoding="utf-8")
    existing_path = tmp_path / "existing.json"
    existing_path.write_text(
        json.dumps([{"id": "c-1", "email": "SARAH@williamshvac.com"}]), encoding="utf-8"
    )
    try:
        code = importer.main(["--input", str(text_path), "--existing", str(existing_path)])
    finally:
        root.setLevel(previous)
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["source"] == "Smart Paste"
    assert payload["candidates"][0]["name"] == "Sarah Williams"
    assert payload["duplicates"][0]["existing_id"] == "c-1"
    assert payload["duplicates"][0]["match_type"] == "email"
    assert payload["summary"]["total_candidates"] == 1
    assert payload["summary"]["bucket_counts"]["very_high"] == 1


def test_main_table_and_failure(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    root = logging.getLogger()
    previous = root.level
    good = tmp_path / "good.txt"
    good.write_text(SARAH, encoding="utf-8")
    bad = tmp_path / "bad.txt"
    bad.write_text("not-an-email", encoding="utf-8")
    try:
        assert importer.main(["--input", str(good), "--format", "table"]) == 0
        out = capsys.readouterr().out
        assert "Smart Paste" in out
        assert "Sarah Williams" in out
        assert importer.main(["--input", str(bad), "--source", "voice"]) == 1
    finally:
        root.setLevel(previous)


def test_parse_smart_input_multiline_phrase():
    text = "Add John Doe from ABC Construction,\nemail john@abc.com\nphone 555-123-4567"
    assert importer.parse_smart_input(text) == [
        CandidateContact(
            name="John Doe",
            company_name="ABC Construction",
            email="john@abc.com",
            phone="(555) 123-4567",
        )
    ]
