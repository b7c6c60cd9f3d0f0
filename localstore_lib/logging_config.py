from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from localstore_lib.config import DEFAULT_CONFIG_PATH, load_config


def configure_logging(config_path: Optional[Path] = None) -> logging.Logger:
    """Configure root logging for localstore.

    The level comes from `log_level` in the YAML config when the file exists
    and parses; otherwise it stays at WARNING. Returns a module logger for
    the caller.
    """
    level = logging.WARNING
    try:
        cfg = load_config(config_path or DEFAULT_CONFIG_PATH)
        numeric = getattr(logging, str(cfg.log_level).upper(), None)
        if isinstance(numeric, int):
            level = numeric
    except ValueError:
        # If config parse fails, fall back to default level
        level = logging.WARNING

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)
    logger.debug("Log level set to %s", logging.getLevelName(level))
    return logger
