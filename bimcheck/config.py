"""Global configuration: paths, constants, settings."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from bimcheck.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Key of the single persisted history record
STATE_KEY = "bimcheck_dashboard_data"

# Default location of the persisted history
DEFAULT_HISTORY_PATH = Path(".bimcheck") / "history.json"

# History bounds (newest first, oldest evicted)
RECENT_RUNS_LIMIT = 5
TIMELINE_LIMIT = 10

# Upstream ceiling for element source files (100 MiB)
MAX_SOURCE_BYTES = 100 * 1024 * 1024

# Tokens a norm code must reference to be accepted
ACCEPTED_NORM_TOKENS = ("EN", "ISO", "ASTM")

# Bucket for elements that carry no category
UNCLASSIFIED = "unclassified"

HISTORY_BACKENDS = ("memory", "json", "sqlite")

# All known environment keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "BIMCHECK_ENV": {"default": "development", "description": "Environment profile"},
    "BIMCHECK_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "BIMCHECK_HISTORY_BACKEND": {"default": "json", "description": "memory, json or sqlite"},
    "BIMCHECK_HISTORY_PATH": {"default": str(DEFAULT_HISTORY_PATH), "description": "History file path"},
    "BIMCHECK_MAX_SOURCE_BYTES": {"default": str(MAX_SOURCE_BYTES), "description": "Source file size ceiling"},
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {"BIMCHECK_LOG_LEVEL": "DEBUG"},
    "production": {"BIMCHECK_LOG_LEVEL": "WARNING"},
    "testing": {"BIMCHECK_LOG_LEVEL": "DEBUG", "BIMCHECK_HISTORY_BACKEND": "memory"},
}


class Settings(BaseModel):
    """Resolved engine settings."""

    env: str = "development"
    log_level: str = "INFO"
    history_backend: str = "json"
    history_path: Path = DEFAULT_HISTORY_PATH
    max_source_bytes: int = MAX_SOURCE_BYTES

    def build_store(self):
        """Create the persistent store selected by ``history_backend``."""
        # Imported lazily; the backends import this module for STATE_KEY.
        from bimcheck.history.backends import JsonFileStore, MemoryStore, SqliteStore

        if self.history_backend == "memory":
            return MemoryStore()
        if self.history_backend == "json":
            return JsonFileStore(self.history_path)
        if self.history_backend == "sqlite":
            return SqliteStore(self.history_path)
        raise ConfigurationError(
            f"Unknown history backend '{self.history_backend}'; "
            f"expected one of {', '.join(HISTORY_BACKENDS)}"
        )


def load_settings(project_path: str | Path = ".") -> Settings:
    """Load merged settings: defaults -> profile -> config.json -> env vars.

    Raises :class:`ConfigurationError` when the merged values are invalid.
    """
    root = Path(project_path)
    config: dict[str, str] = {key: str(info["default"]) for key, info in _CONFIG_KEYS.items()}

    env_name = os.environ.get("BIMCHECK_ENV", config["BIMCHECK_ENV"])
    config["BIMCHECK_ENV"] = env_name
    config.update(_PROFILES.get(env_name, {}))

    config_json = root / ".bimcheck" / "config.json"
    if config_json.is_file():
        try:
            data = json.loads(config_json.read_text(encoding="utf-8"))
            for k, v in data.items():
                config[k] = str(v)
        except (json.JSONDecodeError, OSError, AttributeError):
            logger.warning("Could not read %s, using defaults", config_json)

    for key in _CONFIG_KEYS:
        env_val = os.environ.get(key)
        if env_val is not None:
            config[key] = env_val

    history_path = Path(config["BIMCHECK_HISTORY_PATH"])
    if not history_path.is_absolute():
        history_path = root / history_path

    try:
        settings = Settings(
            env=config["BIMCHECK_ENV"],
            log_level=config["BIMCHECK_LOG_LEVEL"].upper(),
            history_backend=config["BIMCHECK_HISTORY_BACKEND"].lower(),
            history_path=history_path,
            max_source_bytes=config["BIMCHECK_MAX_SOURCE_BYTES"],
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    if settings.history_backend not in HISTORY_BACKENDS:
        raise ConfigurationError(f"Unknown history backend '{settings.history_backend}'")
    if settings.max_source_bytes <= 0:
        raise ConfigurationError("BIMCHECK_MAX_SOURCE_BYTES must be positive")
    return settings


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line and service use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
