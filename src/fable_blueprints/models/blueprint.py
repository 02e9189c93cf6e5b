"""Immutable results of blueprint analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

AXIS_KINDS = ("enum", "boolean", "derived", "hint")


def _freeze(instance: object, *names: str) -> None:
    for name in names:
        object.__setattr__(instance, name, MappingProxyType(dict(getattr(instance, name) or {})))


@dataclass(frozen=True)
class Value:
    id: str
    value: Any
    label: str
    arg_patch: Mapping[str, Any]
    sources: Tuple[str, ...]
    confidence: float

    def __post_init__(self) -> None:
        _freeze(self, "arg_patch")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "value": self.value,
            "label": self.label,
            "argPatch": dict(self.arg_patch),
            "sources": list(self.sources),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class Axis:
    id: str
    label: str
    kind: str
    values: Tuple[Value, ...]
    aggregate_confidence: float

    def value_by_id(self, value_id: str) -> Value | None:
        for candidate in self.values:
            if candidate.id == value_id:
                return candidate
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "kind": self.kind,
            "values": [value.to_dict() for value in self.values],
            "aggregateConfidence": self.aggregate_confidence,
        }


@dataclass(frozen=True)
class Budget:
    max_axes: int
    max_cases: int
    estimated_cases: int
    dropped: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maxAxes": self.max_axes,
            "maxCases": self.max_cases,
            "estimatedCases": self.estimated_cases,
            "dropped": list(self.dropped),
        }


@dataclass(frozen=True)
class Case:
    id: str
    selection: Mapping[str, str]
    args: Mapping[str, Any]
    label: str
    confidence: float

    def __post_init__(self) -> None:
        _freeze(self, "selection", "args")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "selection": dict(self.selection),
            "args": dict(self.args),
            "label": self.label,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class Blueprint:
    """Per-story-group permutation analysis.

    An axis-less blueprint is a valid "nothing to permute" result; the
    reason is carried in ``warnings``.
    """

    story_id: str
    axes: Tuple[Axis, ...]
    base_args: Mapping[str, Any]
    locked_args: Mapping[str, Any]
    budget: Budget
    warnings: Tuple[str, ...] = ()
    cases: Tuple[Case, ...] = field(default=())

    def __post_init__(self) -> None:
        _freeze(self, "base_args", "locked_args")

    def axis(self, key: str) -> Axis | None:
        """Find an axis by id, falling back to its label."""

        for candidate in self.axes:
            if candidate.id == key:
                return candidate
        for candidate in self.axes:
            if candidate.label == key:
                return candidate
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "storyId": self.story_id,
            "axes": [axis.to_dict() for axis in self.axes],
            "baseArgs": dict(self.base_args),
            "lockedArgs": dict(self.locked_args),
            "budget": self.budget.to_dict(),
            "warnings": list(self.warnings),
            "cases": [case.to_dict() for case in self.cases],
        }
