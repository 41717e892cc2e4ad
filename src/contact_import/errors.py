"""Errors raised by the import layers around the extraction engine."""

from __future__ import annotations


class ContactImportError(Exception):
    """Base class for import failures the caller should show to the user."""


class NoContactsFoundError(ContactImportError):
    def __init__(self, source_label: str):
        self.source_label = source_label
        super().__init__(
            f"Could not extract any contact information from the {source_label.lower()}."
        )


class UnknownSourceError(ContactImportError):
    def __init__(self, source: str):
        self.source = source
        super().__init__(f"Unknown import source: {source!r}")
