"""Dagster wiring: materialize every story's permutation cases from a catalog file."""

from __future__ import annotations

import os

import pandas as pd
from dagster import Definitions, MetadataValue, asset

from fable_blueprints.reporting import catalog_cases_frame
from fable_blueprints.resources.blueprint_resource import BlueprintResource


@asset(group_name="blueprints", required_resource_keys={"blueprints"})
def blueprint_cases(context) -> pd.DataFrame:
    """All cases of every story group in the configured catalog."""

    resource: BlueprintResource = context.resources.blueprints
    groups = resource.process_catalog(resource.load_catalog())
    blueprints = [group.blueprint for group in groups if group.blueprint is not None]
    frame = catalog_cases_frame(blueprints)
    context.add_output_metadata(
        {
            "stories": MetadataValue.int(len(blueprints)),
            "with_axes": MetadataValue.int(sum(1 for group in groups if group.has_auto_permutations)),
            "cases": MetadataValue.int(len(frame)),
        }
    )
    return frame


def _default_catalog_path() -> str:
    return os.environ.get("FABLE_CATALOG", "catalog.yaml")


def build_definitions(*, catalog_path: str | None = None) -> Definitions:
    return Definitions(
        assets=[blueprint_cases],
        resources={"blueprints": BlueprintResource(catalog_path=catalog_path or _default_catalog_path())},
    )


defs = build_definitions()
