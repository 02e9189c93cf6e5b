from fable_blueprints.models.blueprint import Axis, Value
from fable_blueprints.permutations.budget import AXIS_COUNT_NOTICE, estimate_cases, trim_axes


def make_axis(axis_id: str, size: int, confidence: float) -> Axis:
    values = tuple(
        Value(f"{axis_id}-{i}", i, str(i), {axis_id: i}, ("component enum",), confidence)
        for i in range(size)
    )
    return Axis(axis_id, axis_id.title(), "enum", values, confidence)


def test_estimate_cases() -> None:
    assert estimate_cases([]) == 0
    assert estimate_cases([make_axis("a", 2, 1), make_axis("b", 3, 1)]) == 6


def test_within_budget_is_untouched() -> None:
    axes = [make_axis("a", 2, 0.3), make_axis("b", 2, 1.0)]
    result = trim_axes(axes)
    assert result.axes == tuple(axes)
    assert result.estimated_cases == 4
    assert result.dropped == ()


def test_axis_count_trim_keeps_most_confident() -> None:
    axes = [make_axis(name, 2, conf) for name, conf in zip("abcde", (0.2, 0.9, 0.5, 0.9, 0.7))]
    result = trim_axes(axes, max_axes=3, max_cases=100)
    assert [axis.id for axis in result.axes] == ["b", "d", "e"]
    assert result.dropped == (AXIS_COUNT_NOTICE,)


def test_case_trim_drops_weakest_and_prefers_larger_on_tie() -> None:
    x = make_axis("x", 3, 0.5)
    y = make_axis("y", 4, 0.5)
    z = make_axis("z", 4, 1.0)
    result = trim_axes([x, y, z], max_cases=16)
    assert result.axes == (x, z)
    assert result.estimated_cases == 12
    assert result.dropped == ('Dropped axis "Y" to keep grid performant.',)


def test_full_tie_drops_earliest_axis() -> None:
    axes = [make_axis(name, 3, 1.0) for name in "abc"]
    result = trim_axes(axes, max_cases=9)
    assert [axis.id for axis in result.axes] == ["b", "c"]


def test_trim_converges_on_single_axis() -> None:
    big = make_axis("big", 100, 0.9)
    small = make_axis("small", 2, 0.1)
    result = trim_axes([big, small], max_cases=10)
    assert result.axes == (big,)
    assert result.estimated_cases == 100


def test_sub_two_value_axes_are_discarded() -> None:
    result = trim_axes([make_axis("solo", 1, 1.0), make_axis("pair", 2, 1.0)])
    assert [axis.id for axis in result.axes] == ["pair"]
