from __future__ import annotations

from typing import Iterable, List

from dagster import ConfigurableResource
from pydantic import PrivateAttr

from fable_blueprints.catalog.loader import Catalog, load_catalog
from fable_blueprints.config.settings import BlueprintSettings
from fable_blueprints.models.blueprint import Blueprint
from fable_blueprints.models.registry import ComponentRegistry, StoryGroup
from fable_blueprints.permutations.assembler import BlueprintEngine
from fable_blueprints.utils.errors import BPError, Err


class BlueprintResource(ConfigurableResource):
    """Resource that builds and caches permutation blueprints per story id."""

    max_axes: int = 4
    max_cases: int = 48
    cache_blueprints: bool = True
    catalog_path: str | None = None

    _cache: dict[str, Blueprint] = PrivateAttr(default_factory=dict)

    def settings(self) -> BlueprintSettings:
        return BlueprintSettings(max_axes=self.max_axes, max_cases=self.max_cases)

    def engine(self, registry: ComponentRegistry | None) -> BlueprintEngine:
        return BlueprintEngine(registry, settings=self.settings())

    def get_blueprint(
        self,
        group: StoryGroup,
        registry: ComponentRegistry | None,
        *,
        index: int = 0,
    ) -> Blueprint:
        engine = self.engine(registry)
        key = engine.story_id_for(group, index)
        if self.cache_blueprints and key in self._cache:
            return self._cache[key]
        blueprint = engine.analyze(group, index)
        if self.cache_blueprints:
            self._cache[key] = blueprint
        return blueprint

    def load_catalog(self) -> Catalog:
        if not self.catalog_path:
            raise BPError(Err.INVALID_CONFIG, ctx={"reason": "catalog_path_required"})
        return load_catalog(self.catalog_path)

    def process_catalog(self, catalog: Catalog) -> List[StoryGroup]:
        """Process every group of ``catalog`` and refresh the cache."""

        engine = self.engine(catalog.registry)
        groups = engine.process_stories(catalog.groups)
        if self.cache_blueprints:
            for group in groups:
                self._cache[group.blueprint.story_id] = group.blueprint
        return groups

    def invalidate(self, story_ids: Iterable[str] | None = None) -> None:
        if story_ids is None:
            self._cache.clear()
            return
        for story_id in story_ids:
            self._cache.pop(story_id, None)
