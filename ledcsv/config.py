import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from .errors import ConfigError
from .model import ConverterConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "ledcsv.json"


def load_config(path: Optional[str] = None) -> ConverterConfig:
    """Read settings from JSON. A missing file gives the defaults."""
    config_path = path or DEFAULT_CONFIG_PATH
    if not os.path.exists(config_path):
        if path:
            logger.warning(f"Config file {config_path} not found, using defaults")
        return ConverterConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {config_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")
    try:
        return ConverterConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e


def save_config(path: str, config: ConverterConfig) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(config.model_dump_json(indent=4))
