"""Generation settings, optionally loaded from a YAML file."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ValidationError

from restdoc.errors import ConfigError


class Settings(BaseModel):
    title: str = "API"
    version: str = "0.0.0"
    strip_pkg_paths: list[str] = []
    format: Literal["json", "yaml"] = "json"


def load_settings(file_path: Path | None = None) -> Settings:
    """Load settings from a YAML file. No file means defaults."""
    if file_path is None:
        return Settings()

    text = Path(file_path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"{file_path}: invalid YAML: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"{file_path}: expected a mapping at the top level")
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"{file_path}: {e}") from e
