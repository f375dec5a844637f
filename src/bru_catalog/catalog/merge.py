"""Combines curated static presets with presets parsed from the collection."""

from collections import defaultdict

from bru_catalog.parser.base import CatalogNode, EndpointPreset
from .builder import flatten_hierarchy


def merge_catalog(static_presets: list[EndpointPreset], hierarchy: CatalogNode | None) -> list[EndpointPreset]:
    """Static presets first, then parsed presets whose id is not taken.

    A static preset always wins over a parsed one with the same id.
    """
    parsed = flatten_hierarchy(hierarchy) if hierarchy is not None else []
    static_ids = {preset.id for preset in static_presets}

    combined = list(static_presets)
    combined.extend(preset for preset in parsed if preset.id not in static_ids)
    return combined


def find_duplicate_ids(presets: list[EndpointPreset]) -> dict[str, list[str]]:
    """Map each id used by more than one preset to the presets' sources.

    Slug ids can collide (same name in similarly named folders). Lookups by
    id are ambiguous for these, so they are reported rather than resolved.
    """
    sources: dict[str, list[str]] = defaultdict(list)
    for preset in presets:
        sources[preset.id].append(preset.source or preset.name)
    return {preset_id: paths for preset_id, paths in sources.items() if len(paths) > 1}
