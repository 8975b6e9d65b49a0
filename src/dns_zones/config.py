"""Settings file loading."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True)
class Settings:
    """Loader settings.

    Attributes:
        zones (str | None): Directory (or single file) holding zone files.
        log_level (str): Logging level name.
        workers (int): Number of threads parsing zone files in parallel.
        extensions (list[str]): File suffixes to load; empty loads every file.
    """

    zones: str | None = None
    log_level: str = "INFO"
    workers: int = 4
    extensions: list[str] = field(default_factory=list)


def load_settings(path: str) -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Settings: Parsed settings, with defaults for missing keys.

    Raises:
        ValueError: On invalid YAML structure or values.
        OSError: If the file cannot be read.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"YAML parsing error: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"settings must be a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - {"zones", "log_level", "workers", "extensions"})
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(map(str, unknown))}")

    settings = Settings()

    zones = data.get("zones")
    if zones is not None:
        settings.zones = str(zones)

    level = str(data.get("log_level", settings.log_level)).upper().strip()
    if level not in LOG_LEVELS:
        raise ValueError(f"invalid log_level '{level}', expected one of {', '.join(LOG_LEVELS)}")
    settings.log_level = level

    try:
        settings.workers = int(data.get("workers", settings.workers))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid workers: {exc}") from exc
    if settings.workers <= 0:
        raise ValueError(f"workers must be positive, got {settings.workers}")

    exts = data.get("extensions", [])
    if not isinstance(exts, list):
        raise ValueError("'extensions' must be a list")
    settings.extensions = [str(e) if str(e).startswith(".") else f".{e}" for e in exts]

    logger.debug("settings loaded from %s: %s", path, settings)
    return settings
