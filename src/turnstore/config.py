from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from platformdirs import user_config_dir

from .paths import HISTORY_DIR_NAME

logger = logging.getLogger(__name__)

APP_NAME = "turnstore"
CONFIG_FILE_NAME = "turnstore.yaml"

# Environment variable overrides (useful for tests and deployments)
ENV_DB_DIR = "TURNSTORE_DB_DIR"
ENV_LOG_LEVEL = "TURNSTORE_LOG_LEVEL"


def default_db_dir() -> Path:
    return Path.cwd() / "db" / "files"


def default_config_path() -> Path:
    return Path(user_config_dir(appname=APP_NAME)) / CONFIG_FILE_NAME


@dataclass
class StoreConfig:
    """
    Where and how games are stored.

    Resolved from, lowest to highest priority: these defaults, a YAML file with
    keys ``db_dir``, ``history_dir_name`` and ``log_level``, then the
    TURNSTORE_DB_DIR and TURNSTORE_LOG_LEVEL environment variables.
    """

    db_dir: Path = field(default_factory=default_db_dir)
    history_dir_name: str = HISTORY_DIR_NAME
    log_level: str = "INFO"

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML mapping")
        return data

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "StoreConfig":
        data: Dict[str, Any] = {}
        path = user_path if user_path is not None else default_config_path()
        if path.exists():
            data = cls._load_yaml(path)
            logger.info("Loaded store config from %s", path)
        elif user_path is not None:
            logger.warning("Config file not found: %s", user_path)

        env_db_dir = os.getenv(ENV_DB_DIR)
        if env_db_dir:
            data["db_dir"] = env_db_dir
        env_level = os.getenv(ENV_LOG_LEVEL)
        if env_level:
            data["log_level"] = env_level

        config = cls()
        if data.get("db_dir"):
            config.db_dir = Path(data["db_dir"]).expanduser()
        if data.get("history_dir_name"):
            config.history_dir_name = str(data["history_dir_name"])
        if data.get("log_level"):
            config.log_level = str(data["log_level"]).upper()
        logger.debug("Store config resolved: %s", config)
        return config

    @property
    def level(self) -> int:
        level = getattr(logging, self.log_level, None)
        return level if isinstance(level, int) else logging.INFO
