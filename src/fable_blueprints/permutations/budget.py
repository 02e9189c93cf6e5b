"""Keep the permutation grid within its axis and case budget."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import prod
from typing import List, Sequence, Tuple

from fable_blueprints.models.blueprint import Axis

logger = logging.getLogger(__name__)

AXIS_COUNT_NOTICE = "Axis count trimmed to stay within budget."


@dataclass(frozen=True)
class TrimResult:
    axes: Tuple[Axis, ...]
    estimated_cases: int
    dropped: Tuple[str, ...]


def estimate_cases(axes: Sequence[Axis]) -> int:
    if not axes:
        return 0
    return prod(len(axis.values) for axis in axes)


def trim_axes(axes: Sequence[Axis], *, max_axes: int = 4, max_cases: int = 48) -> TrimResult:
    """Greedily drop the weakest axes until the grid fits.

    The loop ends with ``estimated_cases <= max_cases`` or a single axis,
    since every iteration removes one axis.
    """

    retained: List[Axis] = [axis for axis in axes if len(axis.values) >= 2]
    dropped: List[str] = []

    if len(retained) > max_axes:
        retained = sorted(retained, key=lambda axis: axis.aggregate_confidence, reverse=True)[:max_axes]
        dropped.append(AXIS_COUNT_NOTICE)
        logger.info("axis count trimmed to %d", max_axes)

    estimated = estimate_cases(retained)
    while estimated > max_cases and len(retained) > 1:
        weakest = _weakest(retained)
        retained.remove(weakest)
        dropped.append(f'Dropped axis "{weakest.label}" to keep grid performant.')
        estimated = estimate_cases(retained)
        logger.info("dropped axis %s; %d cases remain", weakest.id, estimated)

    return TrimResult(axes=tuple(retained), estimated_cases=estimated, dropped=tuple(dropped))


def _weakest(axes: Sequence[Axis]) -> Axis:
    # Lowest confidence first; on a tie the larger axis shrinks the product
    # fastest; remaining ties go to the earliest axis.
    weakest = axes[0]
    for axis in axes[1:]:
        if axis.aggregate_confidence < weakest.aggregate_confidence:
            weakest = axis
        elif axis.aggregate_confidence == weakest.aggregate_confidence and len(axis.values) > len(weakest.values):
            weakest = axis
    return weakest
