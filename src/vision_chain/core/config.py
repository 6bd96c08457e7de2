"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseSettings):
    """Process-wide OpenCV backend settings."""

    model_config = SettingsConfigDict(env_prefix="CV_")

    num_threads: int | None = None
    use_optimized: bool = True


class RansacSettings(BaseSettings):
    """RANSAC line fitting parameters."""

    model_config = SettingsConfigDict(env_prefix="RANSAC_")

    iterations: int = Field(default=100, ge=1)
    seed: int | None = None


class HoughSettings(BaseSettings):
    """Hough circle transform parameters."""

    model_config = SettingsConfigDict(env_prefix="HOUGH_")

    dp: float = 1.0
    param1: float = 80.0
    param2: float = 10.0


class ThresholdSettings(BaseSettings):
    """Adaptive threshold parameters."""

    model_config = SettingsConfigDict(env_prefix="THRESHOLD_")

    adaptive_block_size: int = 3
    adaptive_c: float = 5.0


class CalibrationSettings(BaseSettings):
    """Pixel-to-physical scale used when no profile is passed explicitly."""

    model_config = SettingsConfigDict(env_prefix="CALIBRATION_")

    units_per_pixel: float | None = Field(default=None, gt=0)
    units: Literal["mm", "cm", "m", "in"] = "mm"


class OverlaySettings(BaseSettings):
    """Drawing defaults for overlays."""

    model_config = SettingsConfigDict(env_prefix="OVERLAY_")

    circle_color: tuple[int, int, int] = (0, 0, 255)
    thickness: int = 2


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: BackendSettings = Field(default_factory=BackendSettings)
    ransac: RansacSettings = Field(default_factory=RansacSettings)
    hough: HoughSettings = Field(default_factory=HoughSettings)
    threshold: ThresholdSettings = Field(default_factory=ThresholdSettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)
    overlay: OverlaySettings = Field(default_factory=OverlaySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
