#!filepath: crflearn/config/app_config.py
from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .engine_config import EngineConfig
from .log_config import LogConfig

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "base.yml"

# environment variable -> (section, key)
ENV_OVERRIDES = {
    "CRFLEARN_LOG_DIR": ("log", "dir"),
    "CRFLEARN_LOG_LEVEL": ("log", "level"),
    "CRFLEARN_ENGINE": ("engine", "name"),
}


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML config + .env
        - default: the packaged crflearn/config/base.yml
        - .env is looked up in the working directory
        - CRFLEARN_* variables override YAML values
        """
        # 1) .env first, without clobbering the real environment
        load_dotenv(Path.cwd() / ".env", override=False)

        # 2) config file
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        # 3) YAML
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        # 4) env overrides
        for var, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(var)
            if value is not None:
                raw.setdefault(section, {})[key] = value

        return cls(**raw)
