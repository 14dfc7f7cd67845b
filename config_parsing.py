from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from config_io import load_json_config
from models import AppConfig, EndlessConfig, MovementCapability, ValidationLimits
from utils import deep_get

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.json")


def _parse_path(raw: Any, default: str) -> str:
    """Accept a non-empty string path, otherwise fall back to default."""
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return default


def parse_capability(raw: Any) -> MovementCapability:
    """Player reach used by reachability checks.

    Allows config like:
      "capability": { "max_jump_height": 180, "dash_distance": 0 }
    """
    return MovementCapability.from_dict(raw)


def parse_validation_limits(raw: Any) -> ValidationLimits:
    return ValidationLimits.from_dict(raw)


def parse_endless_config(raw: Any) -> EndlessConfig:
    return EndlessConfig.from_dict(raw)


def parse_app_config(cfg: Dict[str, Any]) -> AppConfig:
    """Parse the whole config file.

    Args:
        cfg: Parsed JSON config. Unknown keys are ignored.

    Returns:
        AppConfig with defaults applied to every missing or malformed value.
    """
    base = AppConfig()
    if not isinstance(cfg, dict):
        return base
    return AppConfig(
        capability=parse_capability(cfg.get("capability")),
        validation=parse_validation_limits(cfg.get("validation")),
        endless=parse_endless_config(cfg.get("endless")),
        store_file=_parse_path(deep_get(cfg, "store_file", None), base.store_file),
        levels_dir=_parse_path(deep_get(cfg, "levels_dir", None), base.levels_dir),
    )


def load_app_config(path: Optional[Path] = None) -> AppConfig:
    """Load config from `path`; the default path may be absent, an explicit one may not."""
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("no %s found, using defaults", DEFAULT_CONFIG_PATH)
            return AppConfig()
        path = DEFAULT_CONFIG_PATH
    return parse_app_config(load_json_config(path))
