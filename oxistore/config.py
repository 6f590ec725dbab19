"""Storage configuration.

A StoreConfig selects the backend and serializer an OxiStorage is opened
with. It can be built in code or read from a YAML file such as:

    backend: single_file
    serializer: yaml
    data_dir: data
    file_name: storage
    log_level: INFO
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional
import logging

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("data/config/oxistore.yml")


@dataclass
class StoreConfig:
    backend: str = "memory"
    serializer: str = "json"
    data_dir: str = "data"
    file_name: str = "storage"
    password: Optional[str] = None
    key: Optional[str] = None
    log_level: str = "WARNING"


def load_config(config_path: Optional[Path] = None, **overrides: Any) -> StoreConfig:
    """Read a StoreConfig from YAML, then apply non-None `overrides`.

    A missing file yields the defaults. Unknown keys are ignored.
    """
    cfg_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    data: Any = {}
    if cfg_path.exists():
        with cfg_path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"invalid config format: parse error in {cfg_path}") from e
        if not isinstance(data, dict):
            raise ValueError(f"invalid config format: expected mapping in {cfg_path}")
        logger.debug("Loaded storage config from %s", cfg_path)

    known = {f.name for f in fields(StoreConfig)}
    for name in sorted(set(data) - known):
        logger.warning("Ignoring unknown config key %r in %s", name, cfg_path)
    values = {k: v for k, v in data.items() if k in known}
    values.update({k: v for k, v in overrides.items() if v is not None})
    return StoreConfig(**values)
