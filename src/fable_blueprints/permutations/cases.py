"""Bounded, deterministic cartesian product of axis values."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from fable_blueprints.models.blueprint import Axis, Case, Value
from fable_blueprints.utils.ids import case_id

LABEL_SEPARATOR = " • "


def generate_cases(
    axes: Sequence[Axis],
    base_args: Mapping[str, Any],
    *,
    max_cases: int = 48,
) -> List[Case]:
    """Enumerate cases depth-first in axis-major order, stopping at ``max_cases``.

    The result is always a prefix of the full product, never a sample.
    """

    if not axes:
        return []
    cases: List[Case] = []

    def traverse(index: int, path: List[Value]) -> None:
        if len(cases) >= max_cases:
            return
        if index >= len(axes):
            cases.append(_build_case(axes, path, base_args))
            return
        for value in axes[index].values:
            if len(cases) >= max_cases:
                return
            path.append(value)
            traverse(index + 1, path)
            path.pop()

    traverse(0, [])
    return cases


def _build_case(axes: Sequence[Axis], path: Sequence[Value], base_args: Mapping[str, Any]) -> Case:
    selection: Dict[str, str] = {}
    args: Dict[str, Any] = dict(base_args)
    for axis, value in zip(axes, path):
        selection[axis.id] = value.id
        args.update(value.arg_patch)

    labels = []
    for axis in axes:
        match = axis.value_by_id(selection.get(axis.id, ""))
        if match is not None:
            labels.append(f"{axis.label}: {match.label}")

    confidence = sum(value.confidence for value in path) / len(path)
    return Case(
        id=case_id(selection),
        selection=selection,
        args=args,
        label=LABEL_SEPARATOR.join(labels),
        confidence=round(confidence, 2),
    )
