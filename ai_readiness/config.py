"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local secrets and env overrides (gitignored)
  4. Environment variables       : ``AI_READINESS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Every engine operation accepts the relevant config section as an explicit
argument (defaulting to the built-in constants below); nothing reads
ambient global state.  Defaults reproduce the thresholds and step tables
the assessment has always used, so ``AppConfig()`` is valid without a file.
"""

from __future__ import annotations

import math
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ai_readiness.taxonomy.bands import (
    DEFAULT_BAND_HIGH_MIN,
    DEFAULT_BAND_LOW_MAX,
    PoolSource,
    PriorityHint,
)

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for assessment definitions."""

    model_config = ConfigDict(frozen=True)

    assessment_file: str = "config/assessments/inhouse_marketing.json"


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


class Benchmark(BaseModel):
    """Industry benchmark for percentile comparison."""

    model_config = ConfigDict(frozen=True)

    average: float = 60.0
    top_quartile: float = 80.0

    @model_validator(mode="after")
    def validate_order(self) -> "Benchmark":
        if not 0.0 <= self.average <= self.top_quartile <= 100.0:
            raise ValueError(
                f"Benchmark must satisfy 0 <= average ({self.average}) <= "
                f"top_quartile ({self.top_quartile}) <= 100."
            )
        return self


class ScoringConfig(BaseModel):
    """Band thresholds and readiness label cut-offs.

    ``readiness_thresholds`` and ``activity_readiness_thresholds`` are
    descending lower bounds for the top four labels; anything below the last
    value gets the lowest label.
    """

    model_config = ConfigDict(frozen=True)

    band_low_max: float = DEFAULT_BAND_LOW_MAX
    band_high_min: float = DEFAULT_BAND_HIGH_MIN
    readiness_thresholds: list[float] = [85.0, 70.0, 55.0, 40.0]
    activity_readiness_thresholds: list[float] = [85.0, 70.0, 50.0, 30.0]
    default_benchmark: Benchmark = Benchmark()

    @model_validator(mode="after")
    def validate_bands(self) -> "ScoringConfig":
        if not 0.0 <= self.band_low_max < self.band_high_min <= 100.0:
            raise ValueError(
                f"Band thresholds must satisfy 0 <= band_low_max ({self.band_low_max}) "
                f"< band_high_min ({self.band_high_min}) <= 100."
            )
        for name in ("readiness_thresholds", "activity_readiness_thresholds"):
            values = getattr(self, name)
            if len(values) != 4:
                raise ValueError(f"{name} must have exactly 4 values, got {len(values)}.")
            if any(a <= b for a, b in zip(values, values[1:])):
                raise ValueError(f"{name} must be strictly descending, got {values}.")
        return self


class RecommendationConfig(BaseModel):
    """Ranking weights for the recommendation prioritizer."""

    model_config = ConfigDict(frozen=True)

    priority_weights: dict[str, float] = {"high": 3.0, "medium": 2.0, "low": 1.0}
    pool_precedence: list[str] = [p.value for p in PoolSource]

    @field_validator("priority_weights")
    @classmethod
    def validate_priority_weights(cls, v: dict[str, float]) -> dict[str, float]:
        expected = {p.value for p in PriorityHint}
        if set(v) != expected:
            raise ValueError(
                f"priority_weights must define exactly {sorted(expected)}, got {sorted(v)}."
            )
        return v

    @field_validator("pool_precedence")
    @classmethod
    def validate_pool_precedence(cls, v: list[str]) -> list[str]:
        expected = sorted(p.value for p in PoolSource)
        if sorted(v) != expected:
            raise ValueError(
                f"pool_precedence must be a permutation of {expected}, got {v}."
            )
        return v


def _validate_step_table(name: str, table: list[list[Any]]) -> None:
    thresholds = [float(row[0]) for row in table]
    if not thresholds:
        raise ValueError(f"{name} must not be empty.")
    if any(a <= b for a, b in zip(thresholds, thresholds[1:])):
        raise ValueError(f"{name} thresholds must be strictly descending, got {thresholds}.")
    if thresholds[-1] != 0.0:
        raise ValueError(f"{name} must end with a 0 threshold, got {thresholds[-1]}.")


class ValuationConfig(BaseModel):
    """Step tables and weights for the valuation/impact projector.

    ``multiple_bands`` rows are ``[min_overall, base_multiple, risk_label]``
    and ``ebit_bands`` rows are ``[min_overall, ebit_percent]``, both sorted
    by descending threshold.  ``dimension_map`` names the assessment
    dimension feeding each driver.
    """

    model_config = ConfigDict(frozen=True)

    multiple_bands: list[tuple[float, float, str]] = [
        (80.0, 7.5, "Low Risk"),
        (60.0, 6.0, "Medium Risk"),
        (40.0, 4.5, "Medium-High Risk"),
        (0.0, 3.0, "High Risk"),
    ]
    ebit_bands: list[tuple[float, float]] = [
        (80.0, 25.0),
        (60.0, 15.0),
        (40.0, 10.0),
        (0.0, 5.0),
    ]
    ai_high_threshold: float = 70.0
    ai_low_threshold: float = 30.0
    ai_ebit_delta: float = 5.0
    operational_adjustment: float = 0.10
    ai_adjustment: float = 0.15
    adjustment_pivot: float = 50.0
    strategic_blend: float = 0.6
    impact_weights: dict[str, float] = {
        "financial": 0.35,
        "operational": 0.30,
        "technology": 0.20,
        "strategic": 0.15,
    }
    max_improvement: float = 2.5
    dimension_map: dict[str, str] = {
        "financial": "financial",
        "operational": "operational",
        "technology": "ai",
        "strategic": "strategic",
    }

    @field_validator("multiple_bands", "ebit_bands")
    @classmethod
    def validate_tables(cls, v: list, info) -> list:
        _validate_step_table(info.field_name, [list(row) for row in v])
        return v

    @field_validator("impact_weights")
    @classmethod
    def validate_impact_weights(cls, v: dict[str, float]) -> dict[str, float]:
        if set(v) != {"financial", "operational", "technology", "strategic"}:
            raise ValueError(f"impact_weights must cover the four drivers, got {sorted(v)}.")
        if any(w < 0 for w in v.values()):
            raise ValueError("impact_weights must be non-negative.")
        if not math.isclose(sum(v.values()), 1.0, abs_tol=1e-6):
            raise ValueError(f"impact_weights must sum to 1.0, got {sum(v.values())}.")
        return v

    @field_validator("dimension_map")
    @classmethod
    def validate_dimension_map(cls, v: dict[str, str]) -> dict[str, str]:
        if set(v) != {"financial", "operational", "technology", "strategic"}:
            raise ValueError(f"dimension_map must cover the four drivers, got {sorted(v)}.")
        return v

    @field_validator("max_improvement")
    @classmethod
    def validate_max_improvement(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"max_improvement must be >= 0, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_ai_thresholds(self) -> "ValuationConfig":
        if self.ai_low_threshold >= self.ai_high_threshold:
            raise ValueError(
                f"ai_low_threshold ({self.ai_low_threshold}) must be below "
                f"ai_high_threshold ({self.ai_high_threshold})."
            )
        return self


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    The CLI constructs it with ``load_config()``; library callers may build
    one directly or pass individual sections to the engine functions.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    logging: LoggingConfig = LoggingConfig()
    scoring: ScoringConfig = ScoringConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    valuation: ValuationConfig = ValuationConfig()
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

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
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

    # 3. Apply AI_READINESS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
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
    """Apply AI_READINESS_* env vars to the raw config dict.

    Supported overrides:
      AI_READINESS_LOG_LEVEL        → raw["logging"]["level"]
      AI_READINESS_ASSESSMENT_FILE  → raw["data"]["assessment_file"]
      AI_READINESS_DEBUG            → raw["debug"]
    """
    if log_level := os.environ.get("AI_READINESS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if assessment_file := os.environ.get("AI_READINESS_ASSESSMENT_FILE"):
        raw.setdefault("data", {})["assessment_file"] = assessment_file

    if debug := os.environ.get("AI_READINESS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        scoring=ScoringConfig(**raw.get("scoring", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        valuation=ValuationConfig(**raw.get("valuation", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
