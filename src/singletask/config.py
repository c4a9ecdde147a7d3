"""Configuration management for SingleTask."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

SINGLETASK_HOME = Path(os.environ.get("SINGLETASK_HOME", Path.home() / "singletask"))
CONFIG_FILE = SINGLETASK_HOME / "config" / "singletask.conf"
DATA_DIR = SINGLETASK_HOME / "data"

DEFAULT_TODOIST_URL = "https://api.todoist.com"


class Env(Enum):
    PROD = "prod"
    DEV = "dev"
    TEST = "test"


@dataclass
class Config:
    """SingleTask configuration."""

    env: Env = Env.DEV
    unsplash_api_key: str = ""
    todoist_url: str = DEFAULT_TODOIST_URL
    # Empty means an in-memory cache
    cache_path: str = ""
    request_timeout: float | None = None

    @property
    def live_images(self) -> bool:
        return self.env is Env.PROD and bool(self.unsplash_api_key)


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_env(value: str) -> Env:
    try:
        return Env(value.strip().lower())
    except ValueError:
        logger.warning(f"Unknown env {value!r}, using dev")
        return Env.DEV


def load_config(path: Path | None = None) -> Config:
    """Load configuration from singletask.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "env":
                    config.env = _parse_env(value)
                case "unsplash_api_key":
                    config.unsplash_api_key = value
                case "todoist_url":
                    config.todoist_url = value
                case "cache_path":
                    config.cache_path = value
                case "request_timeout":
                    try:
                        config.request_timeout = float(value)
                    except ValueError:
                        logger.warning(f"Invalid REQUEST_TIMEOUT {value!r}, ignoring")
                case _:
                    logger.debug(f"Ignoring unknown config key {key!r}")

    if os.environ.get("SINGLETASK_ENV"):
        config.env = _parse_env(os.environ["SINGLETASK_ENV"])
    if os.environ.get("UNSPLASH_API_KEY"):
        config.unsplash_api_key = os.environ["UNSPLASH_API_KEY"]
    if os.environ.get("TODOIST_URL"):
        config.todoist_url = os.environ["TODOIST_URL"]

    return config
