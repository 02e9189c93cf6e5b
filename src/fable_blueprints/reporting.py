"""Tabular views of a blueprint for export and inspection."""

from __future__ import annotations

import json
from typing import Iterable

import pandas as pd

from fable_blueprints.models.blueprint import Blueprint
from fable_blueprints.selection.codec import encode_selection

AXES_COLUMNS = ["axis_id", "axis_label", "kind", "value_id", "value_label", "confidence", "sources"]


def axes_frame(blueprint: Blueprint) -> pd.DataFrame:
    rows = []
    for axis in blueprint.axes:
        for value in axis.values:
            rows.append(
                {
                    "axis_id": axis.id,
                    "axis_label": axis.label,
                    "kind": axis.kind,
                    "value_id": value.id,
                    "value_label": value.label,
                    "confidence": value.confidence,
                    "sources": ",".join(value.sources),
                }
            )
    return pd.DataFrame(rows, columns=AXES_COLUMNS)


def cases_frame(blueprint: Blueprint) -> pd.DataFrame:
    """One row per case: id, label, confidence, ``perm`` token, one column per axis, and args."""

    axis_ids = [axis.id for axis in blueprint.axes]
    columns = ["case_id", "label", "confidence", "perm", *axis_ids, "args"]
    rows = []
    for case in blueprint.cases:
        row = {
            "case_id": case.id,
            "label": case.label,
            "confidence": case.confidence,
            "perm": encode_selection(case.selection),
            "args": json.dumps(dict(case.args), sort_keys=True, default=str),
        }
        for axis in blueprint.axes:
            value = axis.value_by_id(case.selection.get(axis.id, ""))
            row[axis.id] = value.label if value is not None else None
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def catalog_cases_frame(blueprints: Iterable[Blueprint]) -> pd.DataFrame:
    """Concatenate ``cases_frame`` for several blueprints behind a ``story_id`` column."""

    frames = []
    for blueprint in blueprints:
        frame = cases_frame(blueprint)
        frame.insert(0, "story_id", blueprint.story_id)
        frames.append(frame)
    if not frames:
        return pd.DataFrame(columns=["story_id", "case_id", "label", "confidence", "perm", "args"])
    return pd.concat(frames, ignore_index=True)
