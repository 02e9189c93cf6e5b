"""Automatic permutation blueprints: signals -> axes -> budget -> cases."""

from .assembler import BlueprintEngine, assemble_blueprint
from .axes import build_axes
from .budget import TrimResult, trim_axes
from .cases import generate_cases
from .signals import Signal, collect_signals

__all__ = [
    "BlueprintEngine",
    "Signal",
    "TrimResult",
    "assemble_blueprint",
    "build_axes",
    "collect_signals",
    "generate_cases",
    "trim_axes",
]
