from .blueprint import Axis, Blueprint, Budget, Case, Value
from .registry import (
    ArgType,
    ComponentRegistry,
    HintEntry,
    PermutationHints,
    PropertyDescriptor,
    PropertyKind,
    StoryDefinition,
    StoryGroup,
    StoryGroupMeta,
)

__all__ = [
    "ArgType",
    "Axis",
    "Blueprint",
    "Budget",
    "Case",
    "ComponentRegistry",
    "HintEntry",
    "PermutationHints",
    "PropertyDescriptor",
    "PropertyKind",
    "StoryDefinition",
    "StoryGroup",
    "StoryGroupMeta",
    "Value",
]
