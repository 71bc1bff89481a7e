# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Holds the Louvain run defaults (resolution, restart count, seed) and the
logging setup. Explicit arguments to run_louvain() always win over these.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when a run is configured with unusable parameters or input."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Louvain ===
    louvain_resolution: float = 1.0
    louvain_iterations: int = 20
    louvain_seed: int | None = 1
    louvain_gain_tolerance: float = 1e-12
    louvain_weight_attr: str = "weight"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("louvain_gain_tolerance")
    @classmethod
    def validate_gain_tolerance(cls, v: float) -> float:  # noqa: N805
        if v < 0:
            raise ValueError("louvain_gain_tolerance must be >= 0")
        return v

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Reject run parameters the driver cannot work with."""
        errors: list[str] = []

        if self.louvain_resolution <= 0:
            errors.append("LOUVAIN_RESOLUTION must be > 0")

        if self.louvain_iterations < 1:
            errors.append("LOUVAIN_ITERATIONS must be >= 1")

        if not self.louvain_weight_attr.strip():
            errors.append("LOUVAIN_WEIGHT_ATTR must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
