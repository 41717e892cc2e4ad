from contact_import.models import CandidateContact
from contact_import.parsers import (
    parse_business_cards,
    parse_delimited,
    parse_email_signatures,
    parse_natural_language,
    parse_single_contact,
    parse_structured_text,
)


def test_natural_language_add_phrase():
    text = "Add John Doe from ABC Construction, phone 555-123-4567, email john@abcconstruction.com"
    assert parse_natural_language(text) == [
        CandidateContact(
            name="John Doe",
            company_name="ABC Construction",
            email="john@abcconstruction.com",
            phone="(555) 123-4567",
        )
    ]


def test_natural_language_comma_line():
    rows = parse_natural_language("John Doe, ABC Construction, 555-123-4567")
    assert len(rows) == 1
    assert rows[0].name == "John Doe"
    assert rows[0].company_name == "ABC Construction"
    assert rows[0].phone == "(555) 123-4567"


def test_natural_language_contact_label():
    rows = parse_natural_language("Contact: Jane Roe (Roe Plumbing) - jane@roeplumbing.com")
    assert rows == [
        CandidateContact(
            name="Jane Roe", company_name="Roe Plumbing", email="jane@roeplumbing.com"
        )
    ]


def test_structured_text_with_header():
    text = "Name\tCompany\tEmail\tPhone\nJane Roe\tRoe Plumbing\tjane@roeplumbing.com\t555-111-2222"
    assert parse_structured_text(text) == [
        CandidateContact(
            name="Jane Roe",
            company_name="Roe Plumbing",
            email="jane@roeplumbing.com",
            phone="(555) 111-2222",
        )
    ]
    assert parse_structured_text("just some words\nmore words") == []


def test_email_signature_after_sign_off():
    text = (
        "Thanks for the call.\n\nBest regards,\nMike Ross\nRoss Electric LLC\n"
        "mike@rosselectric.com\n555-777-8888"
    )
    assert parse_email_signatures(text) == [
        CandidateContact(
            name="Mike Ross",
            company_name="Ross Electric LLC",
            email="mike@rosselectric.com",
            phone="(555) 777-8888",
        )
    ]


def test_business_card_skips_titles():
    text = (
        "Dana Scott\nProject Manager\nScott Construction Inc\ndana@scottco.com\n"
        "(555) 444-1212\n\nSingle line"
    )
    assert parse_business_cards(text) == [
        CandidateContact(
            name="Dana Scott",
            company_name="Scott Construction Inc",
            email="dana@scottco.com",
            phone="(555) 444-1212",
        )
    ]
    rows = parse_business_cards("Owner\nPat Lee\npat@lee.com")
    assert [row.name for row in rows] == ["Pat Lee"]


def test_delimited_company_first():
    rows = parse_delimited("Acme Plumbing LLC|Joe Pipe|joe@acme.com|555-999-0000")
    assert rows == [
        CandidateContact(
            name="Joe Pipe",
            company_name="Acme Plumbing LLC",
            email="joe@acme.com",
            phone="(555) 999-0000",
        )
    ]


def test_delimited_skips_header_line():
    rows = parse_delimited("name,email\nJoe,joe@x.com")
    assert rows == [CandidateContact(name="Joe", email="joe@x.com")]


def test_single_contact_prefers_capitalized_name():
    text = (
        "Sarah Williams, Williams HVAC, sarah@williamshvac.com, (555) 234-5678, "
        "456 Oak Ave, Boulder, CO 80301"
    )
    assert parse_single_contact(text) == CandidateContact(
        name="Sarah Williams",
        company_name="Williams HVAC",
        email="sarah@williamshvac.com",
        phone="(555) 234-5678",
        address="456 Oak Ave, Boulder, CO 80301",
    )


def test_single_contact_uses_mailbox_and_company_label():
    found = parse_single_contact("reach out to jordan.blake@gmail.com, company: blake landscaping")
    assert found.name == "Jordan Blake"
    assert found.company_name == "blake landscaping"
    assert parse_single_contact("hello there") is None


def test_natural_language_reads_following_lines():
    text = "Add John Doe from ABC Construction,\nemail john@abc.com\nphone 555-123-4567"
    assert parse_natural_language(text) == [
        CandidateContact(
            name="John Doe",
            company_name="ABC Construction",
            email="john@abc.com",
            phone="(555) 123-4567",
        )
    ]


def test_natural_language_stops_at_next_phrase():
    text = (
        "Add John Doe from ABC Construction, phone 555-123-4567\n"
        "Add Jane Roe from Roe Plumbing, email jane@roe.com"
    )
    rows = parse_natural_language(text)
    assert [row.name for row in rows] == ["John Doe", "Jane Roe"]
    assert rows[0].phone == "(555) 123-4567"
    assert rows[0].email is None
    assert rows[1].email == "jane@roe.com"
    assert rows[1].phone is None


def test_delimited_ignores_trailing_comma():
    assert parse_delimited("Add John Doe from ABC Construction,\nemail john@abc.com") == []


def test_single_contact_ignores_company_run():
    found = parse_single_contact("Acme Construction Inc\njoe@acme.com\n555-111-2222")
    assert found == CandidateContact(
        name="Joe",
        company_name="Acme Construction Inc",
        email="joe@acme.com",
        phone="(555) 111-2222",
    )
