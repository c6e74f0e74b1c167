"""Configuration for game data sources and local persistence."""

from __future__ import annotations

from pydantic_settings import BaseSettings

DATASETS = {
    "characters": "characters.json",
    "weapons": "weapons.json",
    "talents": "talents.json",
}
"""Mapping of dataset name to the file name under the data base URL."""


class Settings(BaseSettings):
    data_base_url: str = "data"  # http(s) URL or local directory
    storage_path: str = "training-guide.json"
    request_timeout: float = 30.0
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "TRAINING_GUIDE_", "extra": "ignore"}


def dataset_urls(base_url: str) -> dict[str, str]:
    """Return the location of every dataset under ``base_url``."""

    base = base_url.rstrip("/")
    return {name: f"{base}/{filename}" for name, filename in DATASETS.items()}
