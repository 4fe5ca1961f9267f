# -*- coding: utf-8 -*-
# backend/core/config.py – application settings + settings.yaml
import logging
from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]
CONFIG_DIR = BASE_DIR / "config"
DB_DIR = BASE_DIR / "data"
LOG_DIR = BASE_DIR / "logs"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=CONFIG_DIR / ".env", extra="ignore")

    # CORS
    cors_allow_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # Paths
    db_path: str = str(DB_DIR / "climate.sqlite3")
    settings_yaml: str = str(CONFIG_DIR / "settings.yaml")


def load_yaml_settings(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to read settings.yaml: %s", exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def ensure_dirs():
    DB_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
yaml_cfg = load_yaml_settings(settings.settings_yaml)

# Default target used until one is stored in the settings table
CLIMATE = yaml_cfg.get("climate", {})
if not isinstance(CLIMATE, dict):
    CLIMATE = {}
CLIMATE.setdefault("default_target_temp_c", 22.0)

# Limits for GET /temperature/history
HISTORY = yaml_cfg.get("history", {})
if not isinstance(HISTORY, dict):
    HISTORY = {}
HISTORY.setdefault("default_limit", 50)
HISTORY.setdefault("max_limit", 500)
