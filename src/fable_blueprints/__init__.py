"""Automatic permutation blueprints for component story catalogs."""

from .catalog import Catalog, StaticComponentRegistry, load_catalog
from .config.settings import BlueprintSettings, SignalWeights
from .models import Axis, Blueprint, Case, Value
from .permutations import BlueprintEngine, assemble_blueprint
from .resources import BlueprintResource
from .selection import (
    SelectionStore,
    decode_selection,
    encode_selection,
    normalize_selection,
)
from .utils.errors import BPError, Err

__all__ = [
    "Axis",
    "BPError",
    "Blueprint",
    "BlueprintEngine",
    "BlueprintResource",
    "BlueprintSettings",
    "Case",
    "Catalog",
    "Err",
    "SelectionStore",
    "SignalWeights",
    "StaticComponentRegistry",
    "Value",
    "assemble_blueprint",
    "decode_selection",
    "encode_selection",
    "load_catalog",
    "normalize_selection",
]
