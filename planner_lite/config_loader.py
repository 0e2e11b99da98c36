"""planner_lite.config_loader

Config loader for planner_lite.

- Reads YAML (PyYAML) or JSON (by ``.json`` suffix).
- Exposes a typed dataclass `Config`, a `load_config()` helper that accepts an
  optional path override, and `apply_env_overrides()` for ``PLANNER_*``
  environment variables (optionally seeded from a ``.env`` file).
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from .lite_exceptions import ConfigError
from .lite_models import Granularity

logger = logging.getLogger(__name__)

MIN_SAVE_TIMEOUT = 1
MAX_SAVE_TIMEOUT = 300


@dataclass
class Config:
    """Typed configuration for planner_lite.

    Fields:
        firestore_project_id: project id of the hosted document store; the
            in-memory store is used when empty
        firestore_database: Firestore database id
        firestore_collection: collection holding event documents
        firestore_api_key: optional web API key
        default_view: initial calendar granularity (day, week, month)
        save_timeout_seconds: read timeout for each write (1..300)
        log_level: logging level name
    """

    firestore_project_id: Optional[str] = None
    firestore_database: str = "(default)"
    firestore_collection: str = "events"
    firestore_api_key: Optional[str] = None
    default_view: str = "day"
    save_timeout_seconds: int = 30
    log_level: str = "INFO"

    @property
    def granularity(self) -> Granularity:
        return Granularity(self.default_view)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric values are coerced to int, the save timeout is clamped to
        1..300 and an unknown default view falls back to ``day``; each
        coercion is logged as a warning.
        """
        if data is None:
            data = {}

        def _optional_str(key: str) -> Optional[str]:
            raw = data.get(key)
            if raw is None or str(raw).strip() == "":
                return None
            return str(raw).strip()

        def _coerce_int(key: str, default: int) -> int:
            raw = data.get(key, default)
            try:
                return int(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not an int; using default %d", key, raw, default)
                return default

        timeout = _coerce_int("save_timeout_seconds", 30)
        if timeout < MIN_SAVE_TIMEOUT:
            logger.warning("save_timeout_seconds %d below minimum; coercing to %d", timeout, MIN_SAVE_TIMEOUT)
            timeout = MIN_SAVE_TIMEOUT
        elif timeout > MAX_SAVE_TIMEOUT:
            logger.warning("save_timeout_seconds %d above maximum; coercing to %d", timeout, MAX_SAVE_TIMEOUT)
            timeout = MAX_SAVE_TIMEOUT

        view = str(data.get("default_view", "day") or "day").strip().lower()
        if view not in {g.value for g in Granularity}:
            logger.warning("Config default_view=%r is not day/week/month; using 'day'", view)
            view = "day"

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            firestore_project_id=_optional_str("firestore_project_id"),
            firestore_database=_optional_str("firestore_database") or "(default)",
            firestore_collection=_optional_str("firestore_collection") or "events",
            firestore_api_key=_optional_str("firestore_api_key"),
            default_view=view,
            save_timeout_seconds=timeout,
            log_level=log_level,
        )


# Environment variable -> Config field
ENV_OVERRIDES: dict[str, str] = {
    "PLANNER_FIRESTORE_PROJECT": "firestore_project_id",
    "PLANNER_FIRESTORE_DATABASE": "firestore_database",
    "PLANNER_FIRESTORE_COLLECTION": "firestore_collection",
    "PLANNER_FIRESTORE_API_KEY": "firestore_api_key",
    "PLANNER_DEFAULT_VIEW": "default_view",
    "PLANNER_SAVE_TIMEOUT": "save_timeout_seconds",
    "PLANNER_LOG_LEVEL": "log_level",
}


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file and return key-value pairs.

    Skips blank lines and comments and strips quotes around values. Returns an
    empty dict when the file does not exist.
    """
    if not path.exists():
        return {}

    result: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export ") :].strip()
        if key:
            result[key] = val.strip().strip('"').strip("'")
    return result


def apply_env_overrides(
    cfg: Config,
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> Config:
    """Return a copy of ``cfg`` with ``PLANNER_*`` environment values applied.

    Values from ``env_file`` are used only for keys missing from ``environ``.
    """
    env: dict[str, str] = {}
    if env_file is not None:
        env.update(parse_env_file(env_file))
    env.update(os.environ if environ is None else environ)

    merged: dict[str, Any] = {
        "firestore_project_id": cfg.firestore_project_id,
        "firestore_database": cfg.firestore_database,
        "firestore_collection": cfg.firestore_collection,
        "firestore_api_key": cfg.firestore_api_key,
        "default_view": cfg.default_view,
        "save_timeout_seconds": cfg.save_timeout_seconds,
        "log_level": cfg.log_level,
    }
    applied = []
    for env_key, field_name in ENV_OVERRIDES.items():
        value = env.get(env_key)
        if value:
            merged[field_name] = value
            applied.append(env_key)

    if not applied:
        return replace(cfg)
    logger.debug("Applied environment overrides: %s", ", ".join(applied))
    return Config.from_dict(merged)


def _load_mapping(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to ./planner.yaml.

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns Config() with defaults.
    - If the file is empty: returns Config() with defaults.
    - If the file cannot be parsed or the top level is not a mapping:
      raises ConfigError.
    """
    p = Path(path) if path else Path.cwd() / "planner.yaml"
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config()

    try:
        raw = _load_mapping(p)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Unable to parse config file {p}: {exc}") from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ConfigError("Config file must contain a mapping at top level")
    cfg = Config.from_dict(raw)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
