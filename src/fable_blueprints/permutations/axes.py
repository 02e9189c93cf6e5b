"""Fuse raw signals into confidence-scored axes."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from fable_blueprints.models.blueprint import Axis, Value
from fable_blueprints.permutations.signals import (
    SOURCE_ARG_TYPES,
    SOURCE_BOOLEAN,
    SOURCE_DEFAULT,
    SOURCE_ENUM,
    SOURCE_HINT,
    SOURCE_STORY,
    Signal,
)
from fable_blueprints.utils.ids import format_value_label, slugify, title_case, value_key

# Higher wins when two sources supply an explicit label for the same value.
LABEL_PRIORITY: Dict[str, int] = {
    SOURCE_ENUM: 5,
    SOURCE_BOOLEAN: 5,
    SOURCE_ARG_TYPES: 4,
    SOURCE_STORY: 3,
    SOURCE_HINT: 2,
    SOURCE_DEFAULT: 1,
}


@dataclass
class _ValueDraft:
    key: str
    value: Any
    label: str
    arg_patch: Dict[str, Any] = field(default_factory=dict)
    sources: List[str] = field(default_factory=list)
    confidence: float = 0.0
    label_rank: int = 0  # 0 = derived, otherwise LABEL_PRIORITY of the explicit source

    def merge(self, signal: Signal) -> None:
        self.arg_patch.update(signal.arg_patch)
        if signal.source not in self.sources:
            self.sources.append(signal.source)
        self.confidence = min(1.0, self.confidence + signal.weight)
        if signal.label:
            rank = LABEL_PRIORITY.get(signal.source, 0)
            if rank >= self.label_rank:
                self.label = signal.label
                self.label_rank = rank


@dataclass
class _AxisDraft:
    id: str
    kind: str
    values: "OrderedDict[str, _ValueDraft]" = field(default_factory=OrderedDict)

    def add(self, signal: Signal) -> None:
        key = value_key(signal.value, signal.arg_patch)
        draft = self.values.get(key)
        if draft is None:
            draft = _ValueDraft(key=key, value=signal.value, label=format_value_label(signal.value))
            self.values[key] = draft
        draft.merge(signal)


def build_axes(signals: Iterable[Signal]) -> List[Axis]:
    """Fold signals into finalized axes, in first-seen order.

    Axes with fewer than two distinct values are dropped here since a
    single-value axis carries no information.
    """

    drafts: "OrderedDict[str, _AxisDraft]" = OrderedDict()
    for signal in signals:
        axis = drafts.get(signal.axis_id)
        if axis is None:
            if signal.reinforce_only:
                continue
            axis = _AxisDraft(id=signal.axis_id, kind=signal.kind)
            drafts[signal.axis_id] = axis
        elif signal.kind == "boolean" and axis.kind != "enum":
            axis.kind = "boolean"
        axis.add(signal)

    finalized = (finalize_axis(draft) for draft in drafts.values())
    return [axis for axis in finalized if len(axis.values) > 1]


def finalize_axis(draft: _AxisDraft) -> Axis:
    used_ids: set[str] = set()
    values: List[Value] = []
    for entry in draft.values.values():
        value_id = _unique_id(slugify(f"{draft.id}-{entry.key}"), used_ids)
        values.append(
            Value(
                id=value_id,
                value=entry.value,
                label=entry.label,
                arg_patch=dict(entry.arg_patch),
                sources=tuple(entry.sources),
                confidence=round(entry.confidence, 2),
            )
        )
    aggregate = sum(value.confidence for value in values) / (len(values) or 1)
    return Axis(
        id=draft.id,
        label=title_case(draft.id),
        kind=draft.kind,
        values=tuple(values),
        aggregate_confidence=aggregate,
    )


def _unique_id(candidate: str, used: set[str]) -> str:
    unique = candidate
    suffix = 2
    while unique in used:
        unique = f"{candidate}-{suffix}"
        suffix += 1
    used.add(unique)
    return unique
