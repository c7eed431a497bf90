"""YAML configuration loading."""

import logging
from pathlib import Path
from typing import Union

import yaml

from .schemas import BotkitConfig

logger = logging.getLogger(__name__)


def load_config(config_path: Union[str, Path]) -> BotkitConfig:
    """
    Load a BotkitConfig from YAML.

    A missing file yields the defaults. Malformed YAML raises ValueError;
    out-of-range values raise pydantic's ValidationError.
    """
    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
        logger.info(f"Loaded configuration from {config_path}")
    except FileNotFoundError:
        logger.warning(f"Config file not found: {config_path}, using defaults")
        raw = None
    except yaml.YAMLError as e:
        logger.error(f"Error parsing config file: {e}")
        raise ValueError(f"Invalid YAML in {config_path}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping, got {type(raw).__name__}")
    return BotkitConfig.model_validate(raw)
