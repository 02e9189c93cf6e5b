"""Catalog files describing components and their story groups."""

from .loader import Catalog, ComponentEntry, StaticComponentRegistry, load_catalog, parse_catalog_mapping

__all__ = [
    "Catalog",
    "ComponentEntry",
    "StaticComponentRegistry",
    "load_catalog",
    "parse_catalog_mapping",
]
