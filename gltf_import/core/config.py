"""
Importer settings
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImporterSettings(BaseSettings):
    """Runtime options for the resource loader and scheme classifier.

    Values come from ``GLTF_IMPORT_*`` environment variables unless passed
    explicitly (or through :func:`load_settings`).
    """

    model_config = SettingsConfigDict(env_prefix="GLTF_IMPORT_", extra="ignore")

    # Disable for sandboxed targets without filesystem access.
    allow_local_files: bool = True
    http_timeout: float = Field(default=30.0, gt=0)
    user_agent: str = "gltf-import/0.1.0"
    max_workers: int = Field(default=4, ge=1)


def load_settings(path: Optional[str] = None) -> ImporterSettings:
    """
    Load settings, overlaying an optional YAML file on the environment

    Args:
        path: YAML file with keys matching ``ImporterSettings`` fields

    Returns:
        ImporterSettings instance
    """
    if not path:
        return ImporterSettings()

    config_file = Path(path).expanduser()
    with config_file.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {config_file}")
    return ImporterSettings(**data)
