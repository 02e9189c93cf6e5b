"""Load component and story catalogs from JSON or YAML files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import yaml

from fable_blueprints.models.registry import (
    ArgsOverride,
    ArgType,
    PermutationHints,
    PropertyDescriptor,
    PropertyKind,
    StoryDefinition,
    StoryGroup,
    StoryGroupMeta,
)
from fable_blueprints.utils.errors import BPError, Err

_BOOLEAN_TYPES = {"boolean", "bool"}


@dataclass(frozen=True)
class ComponentEntry:
    properties: Sequence[PropertyDescriptor] = ()
    defaults: Mapping[str, Any] = field(default_factory=dict)
    hints: PermutationHints | None = None
    status: str | None = None


class StaticComponentRegistry:
    """Component registry backed by plain declarations."""

    def __init__(self, components: Mapping[str, ComponentEntry] | None = None) -> None:
        self._components: Dict[str, ComponentEntry] = dict(components or {})

    def register(self, name: str, entry: ComponentEntry) -> None:
        self._components[name] = entry

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def describe(self, component: str) -> Sequence[PropertyDescriptor]:
        entry = self._components.get(component)
        return tuple(entry.properties) if entry else ()

    def defaults(self, component: str) -> Mapping[str, Any]:
        entry = self._components.get(component)
        return dict(entry.defaults) if entry else {}

    def hints(self, component: str) -> PermutationHints | None:
        entry = self._components.get(component)
        return entry.hints if entry else None

    def status(self, component: str) -> str | None:
        entry = self._components.get(component)
        return entry.status if entry else None


@dataclass
class Catalog:
    registry: StaticComponentRegistry
    groups: List[StoryGroup]


def _invalid(path: Path | None, error: str, **ctx: Any) -> BPError:
    payload: Dict[str, Any] = {"error": error, **ctx}
    if path is not None:
        payload["path"] = str(path)
    return BPError(Err.INVALID_CATALOG, ctx=payload)


def _parse_file(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BPError(Err.IO_ERROR, ctx={"path": str(path)}, cause=exc)
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(raw) or {}
        elif suffix == ".json":
            data = json.loads(raw)
        else:
            raise _invalid(path, "unsupported catalog format", suffix=suffix)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise BPError(Err.INVALID_CATALOG, ctx={"path": str(path), "error": "unparseable"}, cause=exc)
    if not isinstance(data, Mapping):
        raise _invalid(path, "top-level must be mapping")
    return data


def load_catalog(path: Path | str) -> Catalog:
    """Load a catalog file into a registry plus story groups."""

    catalog_path = Path(path)
    return parse_catalog_mapping(_parse_file(catalog_path), source=catalog_path)


def parse_catalog_mapping(data: Mapping[str, Any], *, source: Path | None = None) -> Catalog:
    components = data.get("components", {})
    if not isinstance(components, Mapping):
        raise _invalid(source, "components must be mapping")
    registry = StaticComponentRegistry(
        {name: _parse_component(name, payload, source) for name, payload in components.items()}
    )

    stories = data.get("stories", [])
    if not isinstance(stories, list):
        raise _invalid(source, "stories must be list")
    groups = [_parse_group(index, payload, source) for index, payload in enumerate(stories)]
    return Catalog(registry=registry, groups=groups)


def _parse_component(name: str, payload: Any, source: Path | None) -> ComponentEntry:
    if not isinstance(payload, Mapping):
        raise _invalid(source, "component must be mapping", component=name)

    properties_section = payload.get("properties", {})
    if not isinstance(properties_section, Mapping):
        raise _invalid(source, "properties must be mapping", component=name)
    properties = [
        _parse_property(prop_name, prop, source, component=name)
        for prop_name, prop in properties_section.items()
    ]

    defaults = payload.get("defaults", {})
    if not isinstance(defaults, Mapping):
        raise _invalid(source, "defaults must be mapping", component=name)

    return ComponentEntry(
        properties=tuple(properties),
        defaults=dict(defaults),
        hints=_parse_hints(payload.get("permutationHints"), source, component=name),
        status=payload.get("status"),
    )


def _parse_property(name: str, payload: Any, source: Path | None, *, component: str) -> PropertyDescriptor:
    if isinstance(payload, str):
        payload = {"type": payload}
    if not isinstance(payload, Mapping):
        raise _invalid(source, "property must be mapping", component=component, property=name)
    options = payload.get("enum")
    if options is not None:
        if not isinstance(options, list):
            raise _invalid(source, "enum must be list", component=component, property=name)
        if options:
            return PropertyDescriptor(name, PropertyKind.ENUM, tuple(options))
    if str(payload.get("type", "")).lower() in _BOOLEAN_TYPES:
        return PropertyDescriptor(name, PropertyKind.BOOLEAN)
    return PropertyDescriptor(name, PropertyKind.OTHER)


def _parse_hints(payload: Any, source: Path | None, *, component: str) -> PermutationHints | None:
    if payload is None:
        return None
    if not isinstance(payload, Mapping):
        raise _invalid(source, "permutationHints must be mapping", component=component)
    skip = payload.get("skip", [])
    include = payload.get("include", {})
    if not isinstance(skip, list):
        raise _invalid(source, "permutationHints.skip must be list", component=component)
    if not isinstance(include, Mapping):
        raise _invalid(source, "permutationHints.include must be mapping", component=component)
    for axis, entries in include.items():
        for entry in entries if isinstance(entries, list) else ():
            patch = entry.get("argPatch", entry.get("args")) if isinstance(entry, Mapping) else None
            if patch is not None and not isinstance(patch, Mapping):
                raise _invalid(source, "hint argPatch must be mapping", component=component, axis=axis)
    return PermutationHints(
        skip=frozenset(str(name) for name in skip),
        include={str(axis): list(entries) for axis, entries in include.items() if isinstance(entries, list)},
    )


def _parse_group(index: int, payload: Any, source: Path | None) -> StoryGroup:
    if not isinstance(payload, Mapping):
        raise _invalid(source, "story group must be mapping", index=index)
    meta_section = payload.get("meta", {})
    if not isinstance(meta_section, Mapping):
        raise _invalid(source, "meta must be mapping", index=index)

    arg_types_section = meta_section.get("argTypes", {}) or {}
    if not isinstance(arg_types_section, Mapping):
        raise _invalid(source, "argTypes must be mapping", index=index)
    arg_types: Dict[str, ArgType] = {}
    for name, spec in arg_types_section.items():
        options = spec.get("options") if isinstance(spec, Mapping) else None
        arg_types[name] = ArgType(options=tuple(options) if isinstance(options, list) else None)

    meta = StoryGroupMeta(
        component=meta_section.get("component"),
        id=meta_section.get("id"),
        title=meta_section.get("title"),
        status=meta_section.get("status"),
        args=dict(meta_section.get("args", {}) or {}),
        arg_types=arg_types,
        locked_args=dict(meta_section.get("lockedArgs", {}) or {}),
    )

    stories_section = payload.get("stories", {})
    if not isinstance(stories_section, Mapping) or not stories_section:
        raise _invalid(source, "stories must be non-empty mapping", index=index)
    stories: Dict[str, StoryDefinition] = {}
    for name, story in stories_section.items():
        story = story or {}
        if not isinstance(story, Mapping):
            raise _invalid(source, "story must be mapping", index=index, story=name)
        overrides = story.get("args")
        if overrides is not None and not isinstance(overrides, Mapping):
            raise _invalid(source, "story args must be mapping", index=index, story=name)
        stories[str(name)] = StoryDefinition(
            args=_static_override(overrides) if overrides else None,
            locked_args=dict(story.get("lockedArgs", {}) or {}),
        )
    return StoryGroup(meta=meta, stories=stories)


def _static_override(overrides: Mapping[str, Any]) -> ArgsOverride:
    frozen = dict(overrides)

    def apply(base: Dict[str, Any]) -> Dict[str, Any]:
        return {**base, **frozen}

    return apply
