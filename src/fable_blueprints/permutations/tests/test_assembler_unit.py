import json

import pytest

from fable_blueprints.config.settings import BlueprintSettings
from fable_blueprints.models.registry import PermutationHints, StoryDefinition
from fable_blueprints.permutations.assembler import (
    NO_AXES_WARNING,
    BlueprintEngine,
    assemble_blueprint,
    default_id_factory,
)
from fable_blueprints.permutations.budget import AXIS_COUNT_NOTICE
from tests.helpers.catalogs import bool_prop, button_fixture, enum_prop, make_group, make_registry


def five_enum_fixture():
    names = ["size", "tone", "shape", "density", "motion"]
    registry = make_registry("demo-grid", [enum_prop(name, "a", "b", "c") for name in names])
    return registry, make_group("demo-grid")


def test_boolean_and_enum_make_four_cases() -> None:
    registry, group = button_fixture()

    blueprint = assemble_blueprint(group, registry)

    assert [axis.id for axis in blueprint.axes] == ["disabled", "variant"]
    assert [axis.kind for axis in blueprint.axes] == ["boolean", "enum"]
    assert len(blueprint.cases) == 4
    assert blueprint.warnings == ()
    assert blueprint.budget.dropped == ()
    assert blueprint.budget.estimated_cases == 4
    assert blueprint.cases[0].label == "Disabled: True • Variant: Primary"
    assert blueprint.cases[0].args == {"disabled": True, "variant": "primary"}
    assert blueprint.cases[0].confidence == pytest.approx(0.65)


def test_wide_component_is_trimmed_to_budget() -> None:
    registry, group = five_enum_fixture()

    blueprint = assemble_blueprint(group, registry)

    assert len(blueprint.axes) == 3
    assert blueprint.budget.estimated_cases == 27
    assert len(blueprint.cases) == 27
    assert blueprint.budget.dropped == (
        AXIS_COUNT_NOTICE,
        'Dropped axis "Size" to keep grid performant.',
    )
    assert [axis.id for axis in blueprint.axes] == ["tone", "shape", "density"]


def test_throwing_story_does_not_abort_analysis() -> None:
    def broken(_base):
        raise ValueError("bad story")

    registry = make_registry("demo-button", [enum_prop("variant", "primary", "secondary")])
    group = make_group(
        "demo-button",
        args={"size": "sm"},
        stories={
            "Broken": StoryDefinition(args=broken),
            "Large": StoryDefinition(args=lambda base: {**base, "size": "lg"}),
        },
    )

    blueprint = assemble_blueprint(group, registry)

    size = blueprint.axis("size")
    assert size is not None and size.kind == "derived"
    assert [value.value for value in size.values] == ["lg", "sm"]
    assert len(blueprint.cases) == 4


def test_non_mapping_story_args_do_not_abort_analysis() -> None:
    registry = make_registry("demo-button", [bool_prop("disabled"), enum_prop("variant", "primary", "secondary")])
    group = make_group("demo-button", stories={"Listy": StoryDefinition(args=lambda base: ["variant", "ghost"])})

    blueprint = assemble_blueprint(group, registry)

    assert [axis.id for axis in blueprint.axes] == ["disabled", "variant"]
    assert len(blueprint.cases) == 4


def test_fully_locked_component_yields_empty_blueprint() -> None:
    registry = make_registry(
        "demo-button",
        [bool_prop("disabled"), enum_prop("variant", "primary", "secondary")],
    )
    group = make_group("demo-button", locked_args={"disabled": True, "variant": True})

    blueprint = assemble_blueprint(group, registry)

    assert blueprint.axes == ()
    assert blueprint.cases == ()
    assert blueprint.warnings == (NO_AXES_WARNING,)
    assert blueprint.budget.estimated_cases == 0


def test_skip_listed_component_yields_empty_blueprint() -> None:
    hints = PermutationHints(skip=frozenset({"disabled", "variant"}))
    registry = make_registry(
        "demo-button",
        [bool_prop("disabled"), enum_prop("variant", "primary", "secondary")],
        hints=hints,
    )
    blueprint = assemble_blueprint(make_group("demo-button"), registry)
    assert blueprint.warnings == (NO_AXES_WARNING,)


def test_hint_values_carry_composite_patches() -> None:
    hints = PermutationHints(
        include={
            "tone": [
                {"value": "loud", "label": "Loud!", "argPatch": {"tone": "loud", "variant": "danger"}},
                "quiet",
            ]
        }
    )
    registry = make_registry("demo-button", [enum_prop("variant", "primary", "danger")], hints=hints)

    blueprint = assemble_blueprint(make_group("demo-button"), registry)

    tone = blueprint.axis("Tone")
    assert tone is not None and tone.kind == "hint"
    assert tone.values[0].label == "Loud!"
    # variant comes first, so the tone patch wins on the shared key
    first = blueprint.cases[0]
    assert first.args["variant"] == "danger"


def test_analysis_is_deterministic() -> None:
    first_registry, first_group = five_enum_fixture()
    second_registry, second_group = five_enum_fixture()
    first = assemble_blueprint(first_group, first_registry)
    second = assemble_blueprint(second_group, second_registry)
    assert json.dumps(first.to_dict(), sort_keys=True) == json.dumps(second.to_dict(), sort_keys=True)


@pytest.mark.parametrize("max_axes,max_cases", [(1, 1), (2, 5), (4, 48), (3, 9)])
def test_budget_invariants_hold(max_axes, max_cases) -> None:
    registry, group = five_enum_fixture()
    settings = BlueprintSettings(max_axes=max_axes, max_cases=max_cases)

    blueprint = assemble_blueprint(group, registry, settings=settings)

    assert len(blueprint.axes) <= max_axes
    assert len(blueprint.cases) <= max_cases
    assert all(len(axis.values) >= 2 for axis in blueprint.axes)
    assert blueprint.budget.estimated_cases <= max_cases or len(blueprint.axes) == 1


def test_engine_process_stories_merges_component_defaults() -> None:
    registry = make_registry(
        "demo-button",
        [bool_prop("disabled"), enum_prop("variant", "primary", "secondary")],
        defaults={"variant": "primary", "disabled": False, "label": "Button"},
        status="beta",
    )
    group = make_group("demo-button", args={"label": "Custom"})

    (processed,) = BlueprintEngine(registry).process_stories([group])

    assert processed.meta.args == {"variant": "primary", "disabled": False, "label": "Custom"}
    assert processed.meta.title == "Demo Button"
    assert processed.meta.status == "beta"
    assert processed.has_auto_permutations is True
    assert processed.blueprint.story_id == "demo-button"
    disabled = processed.blueprint.axis("disabled")
    assert [value.confidence for value in disabled.values] == [0.3, 0.5]


def test_engine_refresh_replaces_blueprint() -> None:
    registry, group = button_fixture()
    engine = BlueprintEngine(registry)
    engine.process_stories([group])
    before = group.blueprint

    group.meta.locked_args = {"disabled": True}
    engine.refresh(group)

    assert group.blueprint is not before
    assert [axis.id for axis in before.axes] == ["disabled", "variant"]
    assert [axis.id for axis in group.blueprint.axes] == ["variant"]


def test_engine_uses_injected_id_factory() -> None:
    group = make_group(component=None, arg_types={"size": ["sm", "lg"]})
    engine = BlueprintEngine(None, id_factory=lambda _group, index: f"group-{index}")
    engine.process_stories([group])
    assert group.blueprint.story_id == "group-0"


def test_standalone_assembly_generates_story_id_when_unnamed() -> None:
    group = make_group(component=None, arg_types={"size": ["sm", "lg"]})

    blueprint = assemble_blueprint(group, None)

    assert blueprint.story_id.startswith("story-")
    assert blueprint.story_id == default_id_factory(group, 0)
