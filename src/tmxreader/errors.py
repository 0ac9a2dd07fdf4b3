"""Exceptions raised while reading TMX files."""

from __future__ import annotations


class TmxError(Exception):
    """Base class for everything the reader raises."""


class AccessError(TmxError):
    """The file is missing or cannot be read."""


class MalformedDocumentError(TmxError):
    """The document is not well-formed or breaks the reader's policy.

    Covers XML syntax errors, documents declaring entities (the reader
    never expands them), a root element other than ``<tmx>`` and a
    missing ``<body>``.
    """


class MalformedUnitError(TmxError):
    """A ``<tu>`` lacks the segment of its first ``<tuv>``."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"translation unit #{index}: {reason}")
        self.index = index


class FieldParseError(TmxError, ValueError):
    """A single field value (date, confirmation level) cannot be parsed."""


class LoadCancelledError(TmxError):
    """The background unit extraction was cancelled."""
