"""Settings, read from BRU_CATALOG_* environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BRU_CATALOG_")

    reference_dir: Path = Path("reference")
    collection: str | None = None  # defaults to the first folder in reference_dir
    static_presets_file: Path | None = None
