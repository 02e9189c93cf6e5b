import pytest

from fable_blueprints.utils.ids import (
    case_id,
    digest_id,
    format_scalar,
    format_value_label,
    slugify,
    title_case,
    value_key,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Fablr Button", "fablr-button"),
        ("  --Hello, World!--  ", "hello-world"),
        ("variant-Primary", "variant-primary"),
        ("", ""),
    ],
)
def test_slugify(text, expected) -> None:
    assert slugify(text) == expected


def test_title_case_splits_on_separators() -> None:
    assert title_case("fablr-button") == "Fablr Button"
    assert title_case("icon_position") == "Icon Position"
    assert title_case("isOpen") == "IsOpen"


@pytest.mark.parametrize(
    "value,expected",
    [(True, "true"), (False, "false"), (3, "3"), (3.0, "3"), (2.5, "2.5"), ("x", "x")],
)
def test_format_scalar_matches_url_text(value, expected) -> None:
    assert format_scalar(value) == expected


def test_value_key_uses_patch_fingerprint_for_composites() -> None:
    assert value_key("primary", {"variant": "primary"}) == "primary"
    composite = value_key({"a": 1}, {"variant": "danger", "tone": "loud"})
    assert composite == '{"tone":"loud","variant":"danger"}'


def test_format_value_label() -> None:
    assert format_value_label(True) == "True"
    assert format_value_label(12) == "12"
    assert format_value_label("extra-large") == "Extra Large"
    assert format_value_label(["x"]) == "Variant"


def test_case_id_is_independent_of_selection_order() -> None:
    first = case_id({"variant": "variant-primary", "disabled": "disabled-true"})
    second = case_id({"disabled": "disabled-true", "variant": "variant-primary"})
    assert first == second == "disabled-disabled-true-variant-variant-primary"


def test_digest_id_is_stable() -> None:
    assert digest_id(["a", 1], prefix="story-") == digest_id(["a", 1], prefix="story-")
    assert digest_id(["a", 1]) != digest_id(["a", 2])
