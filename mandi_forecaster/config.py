"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``MANDI_FORECASTER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Every analytical function also accepts its config section as an optional
argument, falling back to the section defaults below, so library callers do
not need a TOML file at all.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from mandi_forecaster.models.market import MAX_MARKET_SCORE, VALID_DISTANCE_BANDS

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for market records and exported reports."""

    model_config = ConfigDict(frozen=True)

    records_file: str = "data/raw/market_records.csv"
    output_dir: str = "data/outputs"


class ForecastConfig(BaseModel):
    """Forecast synthesis parameters."""

    model_config = ConfigDict(frozen=True)

    horizon_months: int = 12
    noise_amplitude: float = 10.0
    confidence_decay: float = 0.03
    confidence_floor: float = 0.5
    direction_band: float = 0.05
    seed: Optional[int] = None

    @field_validator("horizon_months")
    @classmethod
    def validate_horizon(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"horizon_months must be >= 0, got {v}.")
        return v

    @field_validator("noise_amplitude", "confidence_decay", "direction_band")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Value must be non-negative, got {v}.")
        return v

    @field_validator("confidence_floor")
    @classmethod
    def validate_floor(cls, v: float) -> float:
        if not 0.5 <= v <= 1.0:
            raise ValueError(f"confidence_floor must be in [0.5, 1.0], got {v}.")
        return v


class SeasonalConfig(BaseModel):
    """Seasonal pattern buckets and action classifier sensitivity."""

    model_config = ConfigDict(frozen=True)

    excellent_index: float = 1.15
    good_index: float = 1.05
    average_index: float = 0.95
    action_threshold_ratio: float = 0.02

    @model_validator(mode="after")
    def validate_bucket_order(self) -> "SeasonalConfig":
        if not self.excellent_index >= self.good_index >= self.average_index:
            raise ValueError(
                "Seasonal buckets must satisfy excellent_index >= good_index >= average_index."
            )
        return self


class RankingConfig(BaseModel):
    """Market ranking weights."""

    model_config = ConfigDict(frozen=True)

    top_n: int = 5
    transport_base_pct: float = 0.02
    band_multipliers: dict[str, float] = {"near": 1.0, "mid": 2.0, "far": 4.0}
    unknown_band_multiplier: float = 3.0
    band_scores: dict[str, float] = {"near": 10.0, "mid": 7.0, "far": 4.0}
    unknown_band_score: float = 4.0
    max_arrival_score: float = 5.0
    max_score: float = 5.0

    @field_validator("band_multipliers", "band_scores")
    @classmethod
    def validate_bands(cls, v: dict[str, float]) -> dict[str, float]:
        missing = VALID_DISTANCE_BANDS - set(v)
        if missing:
            raise ValueError(f"Missing distance band keys: {sorted(missing)}.")
        return v

    @field_validator("band_multipliers")
    @classmethod
    def validate_multipliers(cls, v: dict[str, float]) -> dict[str, float]:
        negative = sorted(band for band, m in v.items() if m < 0)
        if negative:
            raise ValueError(f"Band multipliers must be non-negative: {negative}.")
        return v

    @field_validator("transport_base_pct", "unknown_band_multiplier")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Value must be non-negative, got {v}.")
        return v

    @field_validator("max_score")
    @classmethod
    def validate_max_score(cls, v: float) -> float:
        if not 0 < v <= MAX_MARKET_SCORE:
            raise ValueError(
                f"max_score must be in (0, {MAX_MARKET_SCORE:g}], got {v}."
            )
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    forecast: ForecastConfig = ForecastConfig()
    seasonal: SeasonalConfig = SeasonalConfig()
    ranking: RankingConfig = RankingConfig()
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

    load_dotenv(dotenv_path=root / ".env", override=False)

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
    """Apply MANDI_FORECASTER_* env vars to the raw config dict.

    Supported overrides:
      MANDI_FORECASTER_DATA_FILE  → raw["data"]["records_file"]
      MANDI_FORECASTER_LOG_LEVEL  → raw["logging"]["level"]
      MANDI_FORECASTER_DEBUG      → raw["debug"]
    """
    if data_file := os.environ.get("MANDI_FORECASTER_DATA_FILE"):
        raw.setdefault("data", {})["records_file"] = data_file

    if log_level := os.environ.get("MANDI_FORECASTER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("MANDI_FORECASTER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        forecast=ForecastConfig(**raw.get("forecast", {})),
        seasonal=SeasonalConfig(**raw.get("seasonal", {})),
        ranking=RankingConfig(**raw.get("ranking", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
