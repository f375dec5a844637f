"""Public accessors over the merged catalog.

Parsing a collection is cheap but not free, so a Catalog builds its
hierarchy once and get_catalog() keeps one Catalog per process.
"""

import logging
from functools import cached_property, lru_cache
from pathlib import PurePath

from bru_catalog.config import Settings
from bru_catalog.fs import FileSource, LocalFileSource
from bru_catalog.parser.base import CatalogNode, Category, CategoryInfo, EndpointPreset
from .builder import build_hierarchy, count_presets, flatten_hierarchy
from .merge import find_duplicate_ids, merge_catalog
from .static import load_categories, load_static_presets

logger = logging.getLogger(__name__)


class Catalog:
    """Static presets merged with a Bruno collection found under ``reference_dir``."""

    def __init__(
        self,
        reference_dir: PurePath | str,
        collection: str | None = None,
        source: FileSource | None = None,
        static_presets: list[EndpointPreset] | None = None,
        categories: list[CategoryInfo] | None = None,
    ):
        self.reference_dir = PurePath(reference_dir)
        self.collection = collection
        self.source = source or LocalFileSource()
        self.static_presets = load_static_presets() if static_presets is None else static_presets
        self.categories = load_categories() if categories is None else categories

    @classmethod
    def from_settings(cls, settings: Settings) -> "Catalog":
        static_presets = None
        categories = None
        if settings.static_presets_file is not None:
            static_presets = load_static_presets(settings.static_presets_file)
            categories = load_categories(settings.static_presets_file) or None
        return cls(
            settings.reference_dir,
            collection=settings.collection,
            static_presets=static_presets,
            categories=categories,
        )

    @cached_property
    def collection_root(self) -> PurePath | None:
        """The collection folder: the named one, else the first folder in reference_dir."""
        if not self.source.exists(self.reference_dir):
            logger.warning("Reference directory not found: %s", self.reference_dir)
            return None
        if self.collection:
            return self.reference_dir / self.collection

        try:
            entries = self.source.list_dir(self.reference_dir)
        except OSError as e:
            logger.warning("Could not list reference directory %s: %s", self.reference_dir, e)
            return None

        folders = [entry.name for entry in entries if entry.is_dir]
        if not folders:
            logger.warning("No collection directory found in %s", self.reference_dir)
            return None
        return self.reference_dir / sorted(folders)[0]

    @cached_property
    def hierarchy(self) -> CatalogNode:
        root = self.collection_root
        if root is None:
            return CatalogNode(name=self.reference_dir.name, path=str(self.reference_dir))

        hierarchy = build_hierarchy(root, self.source)
        for preset_id, sources in find_duplicate_ids(flatten_hierarchy(hierarchy)).items():
            logger.warning("Duplicate preset id %r from %s", preset_id, ", ".join(sources))
        logger.info("Loaded %d presets from %s", count_presets(hierarchy), root)
        return hierarchy

    @cached_property
    def presets(self) -> list[EndpointPreset]:
        return merge_catalog(self.static_presets, self.hierarchy)

    def list_all_presets(self) -> list[EndpointPreset]:
        return list(self.presets)

    def get_preset_by_id(self, preset_id: str) -> EndpointPreset | None:
        return next((preset for preset in self.presets if preset.id == preset_id), None)

    def get_presets_by_category(self, category: Category | str) -> list[EndpointPreset]:
        return [preset for preset in self.presets if preset.category == category]

    def get_hierarchy(self) -> CatalogNode:
        return self.hierarchy

    def get_categories_with_presets(self) -> list[dict]:
        return [
            {
                **info.to_dict(),
                "presets": [preset.to_dict() for preset in self.get_presets_by_category(info.id)],
            }
            for info in self.categories
        ]

    def total_endpoints(self) -> int:
        """Number of presets parsed from the collection (static ones excluded)."""
        return count_presets(self.hierarchy)

    def duplicate_ids(self) -> dict[str, list[str]]:
        return find_duplicate_ids(flatten_hierarchy(self.hierarchy))

    def to_dict(self) -> dict:
        """The payload served to the UI."""
        return {
            "success": True,
            "categories": self.get_categories_with_presets(),
            "hierarchy": self.hierarchy.to_dict(),
            "totalEndpoints": self.total_endpoints(),
        }


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Process-wide catalog built from environment settings."""
    return Catalog.from_settings(Settings())
