"""Blueprint assembly and the story-processing engine."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List

from fable_blueprints.config.settings import DEFAULT_SETTINGS, BlueprintSettings
from fable_blueprints.models.blueprint import Blueprint, Budget
from fable_blueprints.models.registry import ComponentRegistry, StoryGroup
from fable_blueprints.permutations.axes import build_axes
from fable_blueprints.permutations.budget import estimate_cases, trim_axes
from fable_blueprints.permutations.cases import generate_cases
from fable_blueprints.permutations.signals import collect_signals
from fable_blueprints.utils.ids import digest_id, slugify, title_case

logger = logging.getLogger(__name__)

NO_AXES_WARNING = "No suitable args detected for auto permutations."
NO_CASES_WARNING = "No valid permutation cases generated."

IdFactory = Callable[[StoryGroup, int], str]


def default_id_factory(group: StoryGroup, index: int) -> str:
    return digest_id([index, *sorted(group.stories)], prefix="story-")


def resolve_story_id(group: StoryGroup, index: int = 0, id_factory: IdFactory = default_id_factory) -> str:
    """Explicit id, else the slugged title or component, else a generated id."""

    meta = group.meta
    return meta.id or slugify(meta.title or meta.component or "") or id_factory(group, index)


def assemble_blueprint(
    group: StoryGroup,
    registry: ComponentRegistry | None,
    *,
    settings: BlueprintSettings = DEFAULT_SETTINGS,
    story_id: str | None = None,
) -> Blueprint:
    """Run the full analysis for one story group.

    Never raises for degenerate input: an empty ``axes``/``cases`` blueprint
    with a warning is the "nothing to permute" answer.
    """

    meta = group.meta
    base_args = dict(meta.args or {})
    locked_args = dict(meta.locked_args or {})
    story_id = story_id or resolve_story_id(group)

    signals = collect_signals(group, registry, weights=settings.weights, base_args=base_args)
    axes = build_axes(signals)
    warnings: List[str] = []

    if not axes:
        warnings.append(NO_AXES_WARNING)
        return Blueprint(
            story_id=story_id,
            axes=(),
            base_args=base_args,
            locked_args=locked_args,
            budget=Budget(settings.max_axes, settings.max_cases, estimate_cases(())),
            warnings=tuple(warnings),
            cases=(),
        )

    trimmed = trim_axes(axes, max_axes=settings.max_axes, max_cases=settings.max_cases)
    cases = generate_cases(trimmed.axes, base_args, max_cases=settings.max_cases)
    if not cases:
        warnings.append(NO_CASES_WARNING)

    logger.debug(
        "blueprint %s: %d axes, %d cases (%d dropped notices)",
        story_id,
        len(trimmed.axes),
        len(cases),
        len(trimmed.dropped),
    )
    return Blueprint(
        story_id=story_id,
        axes=trimmed.axes,
        base_args=base_args,
        locked_args=locked_args,
        budget=Budget(
            max_axes=settings.max_axes,
            max_cases=settings.max_cases,
            estimated_cases=trimmed.estimated_cases,
            dropped=trimmed.dropped,
        ),
        warnings=tuple(warnings),
        cases=tuple(cases),
    )


class BlueprintEngine:
    """Processes story groups against an injected component registry."""

    def __init__(
        self,
        registry: ComponentRegistry | None,
        settings: BlueprintSettings = DEFAULT_SETTINGS,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.registry = registry
        self.settings = settings
        self.id_factory = id_factory

    def story_id_for(self, group: StoryGroup, index: int = 0) -> str:
        return resolve_story_id(group, index, self.id_factory)

    def analyze(self, group: StoryGroup, index: int = 0) -> Blueprint:
        story_id = self.story_id_for(group, index)
        return assemble_blueprint(group, self.registry, settings=self.settings, story_id=story_id)

    def process_stories(self, groups: Iterable[StoryGroup]) -> List[StoryGroup]:
        """Fill in defaults and attach a fresh blueprint to every group."""

        processed = list(groups)
        for index, group in enumerate(processed):
            self._apply_component_meta(group)
            self.refresh(group, index)
        return processed

    def refresh(self, group: StoryGroup, index: int = 0) -> Blueprint:
        blueprint = self.analyze(group, index)
        group.blueprint = blueprint
        group.has_auto_permutations = bool(blueprint.axes)
        return blueprint

    def _apply_component_meta(self, group: StoryGroup) -> None:
        meta = group.meta
        if not meta.component or self.registry is None:
            return
        defaults = dict(self.registry.defaults(meta.component) or {})
        meta.args = {**defaults, **(meta.args or {})}
        if not meta.title:
            meta.title = title_case(meta.component)
        if not meta.status:
            meta.status = self.registry.status(meta.component)
