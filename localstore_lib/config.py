"""Configuration for localstore.

Settings are read from a YAML mapping; missing keys fall back to the
`Config` defaults and unknown keys are ignored:

    backend: file
    data_file: data/localstore.json
    quota: 5242880
    log_level: INFO
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional
import logging

import yaml

from localstore_lib.storage import KeyValueSubstrate, create_substrate

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("data/config/localstore.yml")


@dataclass
class Config:
    backend: str = "memory"
    data_file: str = "data/localstore.json"
    quota: Optional[int] = None
    log_level: str = "WARNING"

    def create_substrate(self) -> KeyValueSubstrate:
        return create_substrate(backend=self.backend, file_path=self.data_file, quota=self.quota)


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load a Config from the YAML file at `path`.

    A missing file yields the defaults. Raises ValueError when the file
    does not parse or does not hold a mapping.
    """
    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        logger.debug("No config at %s; using defaults", cfg_path)
        return Config()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = f.read()
    try:
        data: Any = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError("invalid config format: parse error") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("invalid config format: expected mapping")

    known = {f.name for f in fields(Config)}
    cfg = Config(**{k: v for k, v in data.items() if k in known})
    logger.debug("Loaded config from %s: backend=%s", cfg_path, cfg.backend)
    return cfg
