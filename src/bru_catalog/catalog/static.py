"""Loads the curated static presets and category metadata shipped with the package."""

from pathlib import Path

import yaml

from bru_catalog.parser.base import CategoryInfo, EndpointPreset

DATA_DIR = Path(__file__).parent.parent / "data"
STATIC_PRESETS_FILE = DATA_DIR / "static_presets.yaml"


def _load(file_path: Path | None) -> dict:
    path = file_path or STATIC_PRESETS_FILE
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return data or {}


def load_static_presets(file_path: Path | None = None) -> list[EndpointPreset]:
    """Read static presets from YAML; the packaged list when no path is given."""
    data = _load(file_path)
    return [EndpointPreset(**item) for item in data.get("presets", [])]


def load_categories(file_path: Path | None = None) -> list[CategoryInfo]:
    data = _load(file_path)
    return [CategoryInfo(**item) for item in data.get("categories", [])]
