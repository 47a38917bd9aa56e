"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``REORDER_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI and the decision engine receive an ``AppConfig`` (or one of its
sections) — never raw dicts or individual env var lookups.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class CatalogConfig(BaseModel):
    """Catalog source and augmentation settings."""

    model_config = ConfigDict(frozen=True)

    source_url: str = "https://dummyjson.com/products"
    fetch_limit: int = 100
    min_catalog_size: int = 100
    request_timeout_s: float = 30.0
    augment_seed: Optional[int] = None

    @field_validator("fetch_limit", "min_catalog_size")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Catalog sizes must be >= 0, got {v}.")
        return v


class ClassifierConfig(BaseModel):
    """Reorder classifier architecture and training settings.

    The bootstrap dataset itself is fixed in code; only the training
    procedure is configurable.
    """

    model_config = ConfigDict(frozen=True)

    hidden_units: int = 8
    epochs: int = 200
    learning_rate: float = 0.01
    seed: int = 42
    decision_threshold: float = 0.5
    train_timeout_seconds: Optional[float] = None

    @field_validator("hidden_units")
    @classmethod
    def validate_hidden_units(cls, v: int) -> int:
        if v < 8:
            raise ValueError(f"hidden_units must be >= 8, got {v}.")
        return v

    @field_validator("epochs")
    @classmethod
    def validate_epochs(cls, v: int) -> int:
        if v < 100:
            raise ValueError(f"epochs must be >= 100, got {v}.")
        return v

    @field_validator("learning_rate")
    @classmethod
    def validate_learning_rate(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"learning_rate must be positive, got {v}.")
        return v

    @field_validator("decision_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError(f"decision_threshold must be in (0.0, 1.0), got {v}.")
        return v

    @field_validator("train_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0.0:
            raise ValueError(f"train_timeout_seconds must be positive, got {v}.")
        return v


class PipelineConfig(BaseModel):
    """Default view parameters for the catalog pipeline."""

    model_config = ConfigDict(frozen=True)

    default_sort_key: str = "needs_reorder"
    default_sort_asc: bool = False
    table_rows: int = 25

    @field_validator("table_rows")
    @classmethod
    def validate_table_rows(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"table_rows must be >= 0, got {v}.")
        return v

    @field_validator("default_sort_key")
    @classmethod
    def validate_sort_key(cls, v: str) -> str:
        from reorder_advisor.engine.pipeline import SortKey

        valid = {k.value for k in SortKey}
        if v not in valid:
            raise ValueError(f"default_sort_key must be one of {sorted(valid)}, got '{v}'.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/reorder_advisor.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    catalog: CatalogConfig = CatalogConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    pipeline: PipelineConfig = PipelineConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    dotenv_path = root / ".env"
    load_dotenv(dotenv_path=dotenv_path, override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply REORDER_ADVISOR_* env vars to the raw config dict.

    Supported overrides:
      REORDER_ADVISOR_CATALOG_URL → raw["catalog"]["source_url"]
      REORDER_ADVISOR_LOG_LEVEL   → raw["logging"]["level"]
      REORDER_ADVISOR_DEBUG       → raw["debug"]
    """
    if catalog_url := os.environ.get("REORDER_ADVISOR_CATALOG_URL"):
        raw.setdefault("catalog", {})["source_url"] = catalog_url

    if log_level := os.environ.get("REORDER_ADVISOR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("REORDER_ADVISOR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        catalog=CatalogConfig(**raw.get("catalog", {})),
        classifier=ClassifierConfig(**raw.get("classifier", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
