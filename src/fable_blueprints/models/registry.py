"""Inputs consumed from the component and story registries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence

ArgsOverride = Callable[[Dict[str, Any]], Optional[Mapping[str, Any]]]


class PropertyKind(Enum):
    ENUM = "enum"
    BOOLEAN = "boolean"
    OTHER = "other"


@dataclass(frozen=True)
class PropertyDescriptor:
    """Static description of one component property."""

    name: str
    kind: PropertyKind = PropertyKind.OTHER
    options: Sequence[Any] = ()


@dataclass(frozen=True)
class HintEntry:
    """One explicit hint value; ``arg_patch`` may touch several args."""

    value: Any
    label: str | None = None
    arg_patch: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class PermutationHints:
    skip: frozenset[str] = frozenset()
    include: Mapping[str, Sequence[Any]] = field(default_factory=dict)


class ComponentRegistry(Protocol):
    def describe(self, component: str) -> Sequence[PropertyDescriptor]: ...

    def defaults(self, component: str) -> Mapping[str, Any]: ...

    def hints(self, component: str) -> PermutationHints | None: ...

    def status(self, component: str) -> str | None: ...


@dataclass(frozen=True)
class ArgType:
    options: Sequence[Any] | None = None


@dataclass
class StoryDefinition:
    args: ArgsOverride | None = None
    locked_args: Mapping[str, bool] = field(default_factory=dict)


@dataclass
class StoryGroupMeta:
    component: str | None = None
    id: str | None = None
    title: str | None = None
    status: str | None = None
    args: Dict[str, Any] = field(default_factory=dict)
    arg_types: Mapping[str, ArgType] = field(default_factory=dict)
    locked_args: Mapping[str, bool] = field(default_factory=dict)


@dataclass
class StoryGroup:
    """A story group as held by the story registry.

    ``blueprint`` is filled in by :class:`BlueprintEngine.process_stories` and
    replaced wholesale whenever the group is reprocessed.
    """

    meta: StoryGroupMeta
    stories: Dict[str, StoryDefinition] = field(default_factory=dict)
    blueprint: Any = None
    has_auto_permutations: bool = False


def is_locked(locked_args: Mapping[str, Any], name: str) -> bool:
    return locked_args.get(name) is True
