"""Tests for validation variants (draft, import, wire codec)."""

from dataclasses import dataclass

import pytest

from cmsync.errors import UnsupportedVariantError
from cmsync.models.validation import (
    EnabledMarksValidation,
    EnabledNodeTypesValidation,
    FileSizeValidation,
    LinkContentTypeValidation,
    MimeTypeValidation,
    PredefinedValuesValidation,
    RangeValidation,
    RegexValidation,
    Regexp,
    Size,
    SizeValidation,
    UniqueValidation,
    Validation,
    draft_validation,
    import_validation,
    parse_validation,
)


# --- Draft Tests ---


def test_draft_unique_false_is_a_rule():
    assert draft_validation(Validation(unique=False)) == UniqueValidation(unique=False)


def test_draft_first_populated_slot_wins():
    v = Validation(size=Size(min=1, max=5), regexp=Regexp(pattern="^a"))
    assert draft_validation(v) == SizeValidation(min=1, max=5)


def test_draft_unique_checked_before_everything():
    v = Validation(unique=True, enabled_marks=["bold"])
    assert draft_validation(v) == UniqueValidation(unique=True)


def test_draft_empty_rule_is_unsupported():
    with pytest.raises(UnsupportedVariantError):
        draft_validation(Validation())


def test_draft_empty_lists_are_not_rules():
    with pytest.raises(UnsupportedVariantError):
        draft_validation(Validation(link_content_type=[], enabled_marks=[], message="x"))


def test_draft_carries_message():
    v = Validation(regexp=Regexp(pattern="^[a-z]+$"), message="lowercase only")
    assert draft_validation(v) == RegexValidation(pattern="^[a-z]+$", message="lowercase only")


def test_draft_file_size_has_no_message():
    v = Validation(asset_file_size=Size(max=1024), message="too big")
    assert draft_validation(v) == FileSizeValidation(min=None, max=1024)


def test_draft_predefined_values():
    v = Validation(in_values=["red", "green"])
    assert draft_validation(v) == PredefinedValuesValidation(values=("red", "green"))


# --- Import Tests ---


def test_import_then_draft_preserves_every_variant():
    variants = [
        UniqueValidation(unique=False),
        SizeValidation(min=1, max=255, message="size"),
        RangeValidation(min=0, max=10),
        FileSizeValidation(min=10, max=2048),
        RegexValidation(pattern="^a", message=""),
        LinkContentTypeValidation(content_types=("author",)),
        MimeTypeValidation(mime_type_groups=("image",), message="images only"),
        PredefinedValuesValidation(values=("a", "b")),
        EnabledMarksValidation(marks=("bold", "italic")),
        EnabledNodeTypesValidation(node_types=("heading-1",), message="headings"),
    ]
    for remote in variants:
        assert draft_validation(import_validation(remote)) == remote


def test_import_unknown_variant():
    @dataclass(frozen=True)
    class DateRangeValidation:
        min: str = ""

    with pytest.raises(UnsupportedVariantError) as exc:
        import_validation(DateRangeValidation())
    assert "DateRangeValidation" in str(exc.value)


# --- Wire Tests ---


def test_parse_size_with_message():
    v = parse_validation({"size": {"min": 1}, "message": "at least one"})
    assert v == SizeValidation(min=1, max=None, message="at least one")


def test_parse_regexp():
    v = parse_validation({"regexp": {"pattern": "^\\d+$"}})
    assert v == RegexValidation(pattern="^\\d+$")


def test_parse_unknown_key():
    with pytest.raises(UnsupportedVariantError) as exc:
        parse_validation({"dateRange": {"min": "2020-01-01"}})
    assert "dateRange" in str(exc.value)


def test_payload_omits_absent_bounds_and_message():
    assert SizeValidation(min=1).to_payload() == {"size": {"min": 1}}


def test_payload_keeps_empty_message():
    assert RegexValidation(pattern="x", message="").to_payload() == {
        "regexp": {"pattern": "x"},
        "message": "",
    }


def test_absent_message_differs_from_empty_message():
    assert RegexValidation(pattern="x") != RegexValidation(pattern="x", message="")
