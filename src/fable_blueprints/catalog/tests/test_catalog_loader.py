from __future__ import annotations

import json
from pathlib import Path

import pytest

from fable_blueprints.catalog.loader import load_catalog, parse_catalog_mapping
from fable_blueprints.models.registry import PropertyKind
from fable_blueprints.utils.errors import BPError, Err

CATALOG_YAML = """
components:
  demo-button:
    status: beta
    properties:
      label: String
      disabled: {type: Boolean}
      variant: {type: String, enum: [primary, secondary]}
    defaults: {label: Button, disabled: false}
    permutationHints:
      skip: [label]
      include:
        tone:
          - quiet
          - {value: loud, label: Loud, argPatch: {tone: loud, variant: danger}}
stories:
  - meta:
      component: demo-button
      args: {label: Primary}
      argTypes:
        size: {options: [sm, lg]}
        label: {control: text}
      lockedArgs: {disabled: true}
    stories:
      Primary: {}
      Large:
        args: {size: lg}
        lockedArgs: {variant: true}
"""


def write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_load_yaml_catalog(tmp_path: Path) -> None:
    catalog = load_catalog(write(tmp_path, "catalog.yaml", CATALOG_YAML))

    registry = catalog.registry
    kinds = {prop.name: prop.kind for prop in registry.describe("demo-button")}
    assert kinds == {
        "label": PropertyKind.OTHER,
        "disabled": PropertyKind.BOOLEAN,
        "variant": PropertyKind.ENUM,
    }
    assert registry.defaults("demo-button") == {"label": "Button", "disabled": False}
    assert registry.status("demo-button") == "beta"
    hints = registry.hints("demo-button")
    assert hints.skip == frozenset({"label"})
    assert hints.include["tone"][1]["argPatch"] == {"tone": "loud", "variant": "danger"}

    (group,) = catalog.groups
    assert group.meta.arg_types["size"].options == ("sm", "lg")
    assert group.meta.arg_types["label"].options is None
    assert group.meta.locked_args == {"disabled": True}
    assert group.stories["Primary"].args is None
    assert group.stories["Large"].args({"label": "x"}) == {"label": "x", "size": "lg"}
    assert group.stories["Large"].locked_args == {"variant": True}


def test_unknown_component_describes_nothing(tmp_path: Path) -> None:
    catalog = load_catalog(write(tmp_path, "catalog.yaml", CATALOG_YAML))
    assert catalog.registry.describe("missing") == ()
    assert catalog.registry.defaults("missing") == {}
    assert catalog.registry.hints("missing") is None


def test_load_json_catalog(tmp_path: Path) -> None:
    payload = {
        "components": {"demo-card": {"properties": {"elevated": {"type": "boolean"}}}},
        "stories": [{"meta": {"component": "demo-card"}, "stories": {"Default": {}}}],
    }
    catalog = load_catalog(write(tmp_path, "catalog.json", json.dumps(payload)))
    assert "demo-card" in catalog.registry
    assert list(catalog.groups[0].stories) == ["Default"]


@pytest.mark.parametrize(
    "payload,error_key",
    [
        ({"components": []}, "components must be mapping"),
        ({"stories": {}}, "stories must be list"),
        ({"components": {"x": {"properties": {"p": {"enum": "abc"}}}}}, "enum must be list"),
        ({"components": {"x": {"permutationHints": {"skip": "label"}}}}, "permutationHints.skip must be list"),
        (
            {"components": {"x": {"permutationHints": {"include": {"tone": [{"value": "loud", "argPatch": "loud"}]}}}}},
            "hint argPatch must be mapping",
        ),
        ({"stories": [{"meta": {}, "stories": {}}]}, "stories must be non-empty mapping"),
        ({"stories": [{"meta": {}, "stories": {"A": {"args": [1]}}}]}, "story args must be mapping"),
    ],
)
def test_invalid_catalogs_raise(payload, error_key) -> None:
    with pytest.raises(BPError) as exc:
        parse_catalog_mapping(payload)
    assert exc.value.code is Err.INVALID_CATALOG
    assert error_key in exc.value.ctx["error"]


def test_unsupported_suffix_and_missing_file(tmp_path: Path) -> None:
    with pytest.raises(BPError) as exc:
        load_catalog(write(tmp_path, "catalog.txt", "{}"))
    assert exc.value.code is Err.INVALID_CATALOG

    with pytest.raises(BPError) as exc:
        load_catalog(tmp_path / "missing.yaml")
    assert exc.value.code is Err.IO_ERROR


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    with pytest.raises(BPError) as exc:
        load_catalog(write(tmp_path, "catalog.json", "[1, 2]"))
    assert exc.value.ctx["error"] == "top-level must be mapping"
