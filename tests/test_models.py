"""Tests for the value types."""

from __future__ import annotations

import dataclasses

import pytest

from tmxreader.errors import FieldParseError
from tmxreader.models import ConfirmationLevel, PlainText, Tag, TranslationUnit, plain_text


class TestConfirmationLevel:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Draft", ConfirmationLevel.DRAFT),
            ("Translated", ConfirmationLevel.TRANSLATED),
            ("RejectedTranslation", ConfirmationLevel.REJECTED_TRANSLATION),
            ("ApprovedTranslation", ConfirmationLevel.APPROVED_TRANSLATION),
            ("RejectedSignOff", ConfirmationLevel.REJECTED_SIGN_OFF),
            ("ApprovedSignOff", ConfirmationLevel.APPROVED_SIGN_OFF),
            ("Unspecified", ConfirmationLevel.UNSPECIFIED),
            (" Draft\n", ConfirmationLevel.DRAFT),
            ("4", ConfirmationLevel.APPROVED_TRANSLATION),
        ],
    )
    def test_from_text(self, text: str, expected: ConfirmationLevel):
        assert ConfirmationLevel.from_text(text) is expected

    @pytest.mark.parametrize("text", ["draft", "Bogus", "", "7", "-1"])
    def test_unknown(self, text: str):
        with pytest.raises(FieldParseError):
            ConfirmationLevel.from_text(text)

    def test_label(self):
        assert ConfirmationLevel.APPROVED_SIGN_OFF.label == "ApprovedSignOff"


class TestTranslationUnit:
    def test_frozen(self):
        unit = TranslationUnit("en", "de", (PlainText("a"),))
        with pytest.raises(dataclasses.FrozenInstanceError):
            unit.domain = "IT"

    def test_defaults(self):
        unit = TranslationUnit("en", "de", (PlainText("a"),))
        assert unit.target is None
        assert unit.confirmation_level is ConfirmationLevel.UNSPECIFIED
        assert unit.creation_date is None
        assert unit.domain == ""

    def test_plain_text_skips_tags(self):
        parts = (PlainText("a"), Tag("ph"), PlainText("b"))
        assert plain_text(parts) == "ab"
