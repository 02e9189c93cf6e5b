"""Per-story permutation selections and the argument state they drive."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Sequence

from fable_blueprints.models.blueprint import Blueprint, Case
from fable_blueprints.models.registry import StoryGroup
from fable_blueprints.selection.normalize import SelectionInput, normalize_selection, selection_args
from fable_blueprints.selection.urls import (
    StoryRef,
    build_story_url,
    find_story_by_slugs,
    parse_story_search_params,
    split_story_url,
)

logger = logging.getLogger(__name__)

Navigate = Callable[..., None]
Listener = Callable[[str, Any], None]


def story_key(group_index: int, story_name: str) -> str:
    return f"{group_index}:{story_name}"


@dataclass(frozen=True)
class _State:
    selected: StoryRef | None = None
    current_args: Mapping[str, Any] = field(default_factory=dict)
    locked_args: Mapping[str, Any] = field(default_factory=dict)
    selected_permutation: Mapping[str, str] | None = None
    selections: Mapping[str, Mapping[str, str]] = field(default_factory=dict)


class SelectionStore:
    """Holds at most one permutation selection per story key.

    Every update is computed on a copy of the state, pushed to ``navigate``,
    and only then committed, so a failure leaves the previous state intact.
    ``navigate(url, replace=False)`` receives the resynced story URL.
    """

    def __init__(self, groups: Sequence[StoryGroup], *, navigate: Navigate | None = None) -> None:
        self._groups: List[StoryGroup] = list(groups)
        self._navigate = navigate
        self._state = _State()
        self._listeners: List[Listener] = []

    # -- reads -----------------------------------------------------------

    @property
    def groups(self) -> Sequence[StoryGroup]:
        return self._groups

    @property
    def selected_story(self) -> StoryRef | None:
        return self._state.selected

    @property
    def current_args(self) -> Dict[str, Any]:
        return dict(self._state.current_args)

    @property
    def locked_args(self) -> Dict[str, Any]:
        return dict(self._state.locked_args)

    @property
    def selected_permutation(self) -> Dict[str, str] | None:
        current = self._state.selected_permutation
        return dict(current) if current else None

    def get_selection(self, key: str) -> Dict[str, str] | None:
        found = self._state.selections.get(key)
        return dict(found) if found else None

    def blueprint_for(self, group_index: int) -> Blueprint | None:
        if not 0 <= group_index < len(self._groups):
            return None
        return self._groups[group_index].blueprint

    def current_blueprint(self) -> Blueprint | None:
        selected = self._state.selected
        return self.blueprint_for(selected.group_index) if selected else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- actions ---------------------------------------------------------

    def set_stories(self, groups: Sequence[StoryGroup]) -> None:
        self._groups = list(groups)
        self._commit(_State(), ("stories", "selected_permutation"))

    def select_story(
        self,
        group_index: int,
        name: str,
        *,
        args_override: Mapping[str, Any] | None = None,
        permutation: SelectionInput | None = None,
        sync_url: bool = True,
        replace_url: bool = False,
    ) -> bool:
        if not 0 <= group_index < len(self._groups):
            return False
        group = self._groups[group_index]
        story = group.stories.get(name)
        if story is None:
            logger.debug("story %r not found in group %d", name, group_index)
            return False

        base_args = dict(group.meta.args or {})
        args = self._story_args(group, name, base_args)
        if args_override:
            args.update(args_override)

        key = story_key(group_index, name)
        blueprint = group.blueprint
        normalized = normalize_selection(blueprint, permutation) or self._state.selections.get(key)
        selections = dict(self._state.selections)
        if normalized and blueprint is not None:
            args.update(selection_args(blueprint, normalized))
            selections[key] = dict(normalized)
        else:
            normalized = None

        locked = {**(group.meta.locked_args or {}), **(story.locked_args or {})}
        state = _State(
            selected=StoryRef(group_index, name),
            current_args=args,
            locked_args=locked,
            selected_permutation=normalized,
            selections=selections,
        )
        self._apply(
            state,
            ("selected_story", "current_args", "locked_args", "selected_permutation"),
            sync_url=sync_url,
            replace_url=replace_url,
        )
        return True

    def select_permutation(self, selection: SelectionInput | None, *, sync_url: bool = True) -> bool:
        """Apply a selection to the current story.

        Unresolvable selections are ignored and leave any active one in place.
        """

        selected = self._state.selected
        if selected is None:
            return False
        blueprint = self.blueprint_for(selected.group_index)
        normalized = normalize_selection(blueprint, selection)
        if not normalized:
            logger.debug("selection %r did not resolve against %s", selection, getattr(blueprint, "story_id", None))
            return False

        selections = dict(self._state.selections)
        selections[story_key(selected.group_index, selected.name)] = normalized
        args = {**self._state.current_args, **selection_args(blueprint, normalized)}
        state = replace(
            self._state,
            current_args=args,
            selected_permutation=normalized,
            selections=selections,
        )
        self._apply(state, ("selected_permutation", "current_args"), sync_url=sync_url)
        return True

    def apply_case(self, case: Case, *, sync_url: bool = True) -> bool:
        return self.select_permutation(case.selection, sync_url=sync_url)

    def update_arg(self, key: str, value: Any) -> None:
        """Manual edit: invalidates the current story's selection only."""

        selected = self._state.selected
        selections = dict(self._state.selections)
        if selected is not None:
            selections.pop(story_key(selected.group_index, selected.name), None)
        state = replace(
            self._state,
            current_args={**self._state.current_args, key: value},
            selected_permutation=None,
            selections=selections,
        )
        changed = ["current_args"]
        if self._state.selected_permutation:
            changed.append("selected_permutation")
        self._apply(state, tuple(changed), sync_url=True)

    def load_url(self, url: str) -> bool:
        """Restore story, args and permutation from a story URL."""

        parts = split_story_url(url)
        if parts is None:
            return False
        component_slug, story_slug, query = parts
        ref = find_story_by_slugs(self._groups, component_slug, story_slug)
        if ref is None:
            return False
        args, permutation = parse_story_search_params(query)
        return self.select_story(
            ref.group_index,
            ref.name,
            args_override=args,
            permutation=permutation,
            replace_url=True,
        )

    # -- internals -------------------------------------------------------

    def _story_args(self, group: StoryGroup, name: str, base_args: Dict[str, Any]) -> Dict[str, Any]:
        override = group.stories[name].args
        if not callable(override):
            return base_args
        try:
            return dict(override(dict(base_args)) or {})
        except Exception:
            logger.warning("args override for story %r failed; using base args", name, exc_info=True)
            return base_args

    def _apply(
        self,
        state: _State,
        changed: Sequence[str],
        *,
        sync_url: bool,
        replace_url: bool = False,
    ) -> None:
        if sync_url and self._navigate is not None and state.selected is not None:
            url = build_story_url(
                self._groups,
                state.selected.group_index,
                state.selected.name,
                state.current_args,
                state.selected_permutation,
            )
            self._navigate(url, replace=replace_url)
        self._commit(state, changed)

    def _commit(self, state: _State, changed: Sequence[str]) -> None:
        self._state = state
        for key in changed:
            value = getattr(self, key, None) if key != "stories" else self._groups
            for listener in list(self._listeners):
                listener(key, value)
