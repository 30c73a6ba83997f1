from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from reviewhelper.config.schema import HelperConfig
from reviewhelper.core.exceptions import ConfigurationError


class ConfigLoader:
    """Loads and validates the JSON helper configuration."""

    @staticmethod
    def load(path: str | Path) -> HelperConfig:
        config_path = Path(path)
        try:
            with config_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Could not read config {config_path}: {exc}") from exc
        try:
            return HelperConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid config {config_path}: {exc}") from exc
