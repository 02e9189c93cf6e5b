"""Signal collection: every independent hint that an argument varies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping

from fable_blueprints.config.settings import SignalWeights
from fable_blueprints.models.registry import (
    ComponentRegistry,
    HintEntry,
    PermutationHints,
    PropertyKind,
    StoryGroup,
    is_locked,
)
from fable_blueprints.utils.ids import is_scalar

logger = logging.getLogger(__name__)

SOURCE_ENUM = "component enum"
SOURCE_BOOLEAN = "boolean"
SOURCE_ARG_TYPES = "argTypes"
SOURCE_STORY = "story args"
SOURCE_HINT = "hint"
SOURCE_DEFAULT = "default"


@dataclass(frozen=True)
class Signal:
    """One proposal that ``axis_id`` can take ``value``."""

    axis_id: str
    value: Any
    arg_patch: Mapping[str, Any]
    source: str
    weight: float
    kind: str = "enum"
    label: str | None = None
    reinforce_only: bool = False


def collect_signals(
    group: StoryGroup,
    registry: ComponentRegistry | None,
    *,
    weights: SignalWeights,
    base_args: Mapping[str, Any] | None = None,
) -> List[Signal]:
    """Gather raw variation candidates for one story group.

    Signals come out in source order (enum/boolean descriptors, argTypes,
    story overrides, hints, defaults). Skip-listed axis ids never appear.
    """

    meta = group.meta
    component = meta.component
    hints = _resolve_hints(registry, component)
    skip = {str(name) for name in hints.skip}
    locked = dict(meta.locked_args or {})
    base = dict(meta.args if base_args is None else base_args)

    def allowed(name: str) -> bool:
        return bool(name) and name not in skip and not is_locked(locked, name)

    signals: List[Signal] = []
    signals.extend(_descriptor_signals(registry, component, allowed, weights))
    signals.extend(_arg_type_signals(group, allowed, weights))
    signals.extend(_story_signals(group, base, allowed, weights))
    signals.extend(_hint_signals(hints, skip, weights))
    signals.extend(_default_signals(base, skip, weights))
    return signals


def _resolve_hints(registry: ComponentRegistry | None, component: str | None) -> PermutationHints:
    if registry is None or not component:
        return PermutationHints()
    return registry.hints(component) or PermutationHints()


def _descriptor_signals(registry, component, allowed, weights: SignalWeights) -> Iterator[Signal]:
    if registry is None or not component:
        return
    for prop in registry.describe(component):
        if not allowed(prop.name):
            continue
        if prop.kind is PropertyKind.ENUM and prop.options:
            for option in prop.options:
                yield Signal(
                    prop.name,
                    option,
                    {prop.name: option},
                    SOURCE_ENUM,
                    weights.enum,
                    kind="enum",
                )
        elif prop.kind is PropertyKind.BOOLEAN:
            for flag in (True, False):
                yield Signal(
                    prop.name,
                    flag,
                    {prop.name: flag},
                    SOURCE_BOOLEAN,
                    weights.boolean,
                    kind="boolean",
                )


def _arg_type_signals(group: StoryGroup, allowed, weights: SignalWeights) -> Iterator[Signal]:
    for name, arg_type in (group.meta.arg_types or {}).items():
        options = getattr(arg_type, "options", None)
        if not isinstance(options, (list, tuple)) or not allowed(name):
            continue
        for option in options:
            yield Signal(name, option, {name: option}, SOURCE_ARG_TYPES, weights.arg_type)


def _story_signals(
    group: StoryGroup,
    base: Mapping[str, Any],
    allowed,
    weights: SignalWeights,
) -> Iterator[Signal]:
    for story_name, story in group.stories.items():
        override = getattr(story, "args", None)
        if not callable(override):
            continue
        try:
            resolved = override(dict(base))
        except Exception:
            logger.warning(
                "args override for story %r of %r failed; skipping its signals",
                story_name,
                group.meta.title or group.meta.component,
                exc_info=True,
            )
            continue
        if resolved is None:
            continue
        if not isinstance(resolved, Mapping):
            logger.warning(
                "args override for story %r of %r returned %s, not a mapping; skipping its signals",
                story_name,
                group.meta.title or group.meta.component,
                type(resolved).__name__,
            )
            continue
        for name, value in resolved.items():
            if value is None or not is_scalar(value) or not allowed(name):
                continue
            yield Signal(
                name,
                value,
                {name: value},
                SOURCE_STORY,
                weights.story,
                kind="derived",
            )


def _hint_signals(hints: PermutationHints, skip: set[str], weights: SignalWeights) -> Iterator[Signal]:
    for axis_id, entries in (hints.include or {}).items():
        if axis_id in skip or not isinstance(entries, (list, tuple)):
            continue
        for entry in entries:
            value, label, patch = _unpack_hint(axis_id, entry)
            yield Signal(
                axis_id,
                value,
                patch,
                SOURCE_HINT,
                weights.hint,
                kind="hint",
                label=label,
            )


def _unpack_hint(axis_id: str, entry: Any) -> tuple[Any, str | None, Dict[str, Any]]:
    if isinstance(entry, HintEntry):
        value, label, patch = entry.value, entry.label, entry.arg_patch
    elif isinstance(entry, Mapping):
        value = entry.get("value")
        if value is None:
            value = entry.get("id", entry.get("label"))
        label = entry.get("label")
        patch = entry.get("argPatch", entry.get("args"))
    else:
        return entry, None, {axis_id: entry}
    if not patch or not isinstance(patch, Mapping):
        patch = {axis_id: value}
    return value, label, dict(patch)


def _default_signals(base: Mapping[str, Any], skip: set[str], weights: SignalWeights) -> Iterator[Signal]:
    for name, value in base.items():
        if value is None or not is_scalar(value) or name in skip:
            continue
        yield Signal(
            name,
            value,
            {name: value},
            SOURCE_DEFAULT,
            weights.default,
            reinforce_only=True,
        )
