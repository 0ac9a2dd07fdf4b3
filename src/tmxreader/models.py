"""Data models for parsed translation memories."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from tmxreader.errors import FieldParseError

# ── Inline segment content ──────────────────────────────────────


@dataclass(frozen=True)
class PlainText:
    """A text node of a ``<seg>``, kept verbatim."""

    text: str


@dataclass(frozen=True)
class Tag:
    """An inline element of a ``<seg>`` (``bpt``, ``ph``, ``hi``, ...).

    Only the element itself is described: its children are not part of
    the model.  Attributes keep document order and duplicates.
    """

    format_type: str
    attributes: tuple[tuple[str, str], ...] = ()

    def attribute(self, name: str, default: str = "") -> str:
        for key, value in self.attributes:
            if key == name:
                return value
        return default


TextPart = Union[PlainText, Tag]


def plain_text(parts: tuple[TextPart, ...]) -> str:
    """Concatenate the text of *parts*, dropping inline tags."""
    return "".join(p.text for p in parts if isinstance(p, PlainText))


# ── Confirmation level ──────────────────────────────────────────


class ConfirmationLevel(enum.IntEnum):
    """Review status stored in the ``x-ConfirmationLevel`` property."""

    UNSPECIFIED = 0
    DRAFT = 1
    TRANSLATED = 2
    REJECTED_TRANSLATION = 3
    APPROVED_TRANSLATION = 4
    REJECTED_SIGN_OFF = 5
    APPROVED_SIGN_OFF = 6

    @property
    def label(self) -> str:
        """The spelling TMX producers write, e.g. ``ApprovedSignOff``."""
        return "".join(word.capitalize() for word in self.name.split("_"))

    @classmethod
    def from_text(cls, value: str) -> ConfirmationLevel:
        """Parse a producer label or its integer value.

        Raises:
            FieldParseError: If *value* names no level.
        """
        text = value.strip()
        for level in cls:
            if level.label == text:
                return level
        if text.lstrip("+-").isdigit():
            try:
                return cls(int(text))
            except ValueError:
                pass
        raise FieldParseError(f"unknown confirmation level {value!r}")


# ── Header and units ────────────────────────────────────────────


@dataclass(frozen=True)
class TmxHeader:
    """Document-level metadata from ``<header>``.

    ``target_language`` does not come from the header: it is the first
    attribute of the second ``<tuv>`` of the first ``<tu>``, so a file
    without units has no target language.
    """

    source_language: str = ""
    target_language: str = ""
    domains: tuple[str, ...] = ()
    creation_date: datetime | None = None
    author: str = ""
    # Serialized <header> element, verbatim
    xml: str = field(default="", repr=False)


@dataclass(frozen=True)
class TranslationUnit:
    """One ``<tu>``: positional source/target plus provenance metadata.

    ``target`` is ``None`` when the unit has no second ``<tuv>``, and an
    empty tuple when the second segment exists but is empty.
    """

    source_language: str
    target_language: str
    source: tuple[TextPart, ...]
    target: tuple[TextPart, ...] | None = None
    creation_date: datetime | None = None
    creation_author: str = ""
    change_date: datetime | None = None
    change_author: str = ""
    confirmation_level: ConfirmationLevel = ConfirmationLevel.UNSPECIFIED
    # Unit-level domain is a single value, unlike TmxHeader.domains
    domain: str = ""

    @property
    def has_target(self) -> bool:
        return self.target is not None

    @property
    def source_text(self) -> str:
        return plain_text(self.source)

    @property
    def target_text(self) -> str | None:
        if self.target is None:
            return None
        return plain_text(self.target)
