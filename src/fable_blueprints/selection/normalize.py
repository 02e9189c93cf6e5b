"""Resolve loose selections against a blueprint's axes and values."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from fable_blueprints.models.blueprint import Axis, Blueprint, Value
from fable_blueprints.utils.ids import format_scalar, is_scalar

SelectionInput = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _entries(selection: SelectionInput) -> list[Tuple[str, Any]]:
    if isinstance(selection, Mapping):
        return list(selection.items())
    return [tuple(entry) for entry in selection]  # type: ignore[misc]


def _match_value(axis: Axis, wanted: Any) -> Value | None:
    for candidate in axis.values:
        if candidate.id == wanted:
            return candidate
    for candidate in axis.values:
        if type(candidate.value) is type(wanted) and candidate.value == wanted:
            return candidate
    wanted_text = format_scalar(wanted) if is_scalar(wanted) else str(wanted)
    for candidate in axis.values:
        if is_scalar(candidate.value) and format_scalar(candidate.value) == wanted_text:
            return candidate
    return None


def normalize_selection(
    blueprint: Blueprint | None,
    selection: SelectionInput | None,
) -> Dict[str, str] | None:
    """Map axis ids/labels and value ids/raw values to canonical ids.

    Partial matches are kept; zero matches yields ``None``.
    """

    if blueprint is None or not selection:
        return None
    entries = _entries(selection)
    normalized: Dict[str, str] = {}
    for axis in blueprint.axes:
        found = next((value for key, value in entries if key == axis.id), None)
        if found is None:
            found = next((value for key, value in entries if key == axis.label), None)
        if found is None:
            continue
        match = _match_value(axis, found)
        if match is not None:
            normalized[axis.id] = match.id
    return normalized or None


def selection_args(blueprint: Blueprint | None, selection: Mapping[str, str] | None) -> Dict[str, Any]:
    """Combined arg patch of the selected values; later axes win."""

    args: Dict[str, Any] = {}
    if blueprint is None or not selection:
        return args
    for axis in blueprint.axes:
        value = axis.value_by_id(selection.get(axis.id, ""))
        if value is not None:
            args.update(value.arg_patch)
    return args
