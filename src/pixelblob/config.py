"""
Configuration management using Pydantic for the pixel analysis engine.
Provides type-safe configuration with validation and environment variable support.

Every section reads its own ``PIXELBLOB_<SECTION>_`` variables; the top-level
``Settings`` also accepts nested ``PIXELBLOB_<SECTION>__<FIELD>`` variables and
an optional YAML file given by ``config_file`` or ``PIXELBLOB_CONFIG_FILE``.
"""

import logging
import logging.handlers
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pixelblob.common.constants import (
    BlobDetectionConstants,
    ConvolutionConstants,
    FeatureConstants,
    GradientConstants,
    LabelingConstants,
    ScanConstants,
    SystemConstants,
)
from pixelblob.common.enums import TieBreakPolicy

logger = logging.getLogger(__name__)


class LabelingConfig(BaseSettings):
    """Region labeling configuration."""

    tie_break: TieBreakPolicy = Field(
        default=TieBreakPolicy.NEIGHBOR_ORDER,
        description="Which neighbor label a pixel takes when its causal neighbors disagree",
    )
    palette_seed: Optional[int] = Field(
        default=LabelingConstants.DEFAULT_PALETTE_SEED,
        description="Seed for label colors (null for non-reproducible colors)",
    )

    model_config = SettingsConfigDict(env_prefix="PIXELBLOB_LABELING_", extra="ignore")


class GradientConfig(BaseSettings):
    """Gradient pipeline configuration."""

    refinement_iterations: int = Field(
        default=GradientConstants.DEFAULT_REFINEMENT_ITERATIONS,
        ge=0,
        le=100,
        description="Vector-sum passes after the finite-difference estimate",
    )
    threshold: int = Field(
        default=GradientConstants.DEFAULT_THRESHOLD,
        ge=0,
        le=256,
        description="Magnitude at or above which a pixel becomes background",
    )
    border_thickness: int = Field(
        default=GradientConstants.DEFAULT_BORDER_THICKNESS,
        ge=0,
        description="Width of the black frame painted after thresholding",
    )

    model_config = SettingsConfigDict(env_prefix="PIXELBLOB_GRADIENT_", extra="ignore")


class ConvolutionConfig(BaseSettings):
    """Blur configuration."""

    radius: int = Field(
        default=ConvolutionConstants.DEFAULT_RADIUS,
        ge=ConvolutionConstants.MIN_RADIUS,
        le=ConvolutionConstants.MAX_RADIUS,
        description="Default blur kernel radius",
    )

    model_config = SettingsConfigDict(env_prefix="PIXELBLOB_CONVOLUTION_", extra="ignore")


class ScanConfig(BaseSettings):
    """Sliding-window histogram scan configuration."""

    distance_threshold: float = Field(
        default=ScanConstants.DEFAULT_DISTANCE_THRESHOLD,
        ge=0,
        description="Maximum histogram distance for a window to match",
    )
    min_window: int = Field(
        default=ScanConstants.MIN_WINDOW, ge=1, description="Windows must be larger than this"
    )
    window_step: int = Field(
        default=ScanConstants.WINDOW_STEP, ge=1, description="Shrink step between window sizes"
    )
    position_divisions: int = Field(
        default=ScanConstants.POSITION_DIVISIONS,
        ge=1,
        description="Image side divided by this gives the position step",
    )
    overlap_fraction: float = Field(
        default=ScanConstants.SIGNIFICANT_OVERLAP,
        gt=0,
        le=1,
        description="Overlap share above which two matches are merged",
    )

    model_config = SettingsConfigDict(env_prefix="PIXELBLOB_SCAN_", extra="ignore")


class FeatureConfig(BaseSettings):
    """Keypoint matching configuration."""

    max_features: int = Field(
        default=FeatureConstants.DEFAULT_FEATURES, ge=1, description="Keypoints per image"
    )
    uniqueness_threshold: float = Field(
        default=FeatureConstants.UNIQUENESS_THRESHOLD,
        gt=0,
        le=1,
        description="Best/second-best distance ratio for a unique match",
    )
    min_match_count: int = Field(
        default=FeatureConstants.MIN_MATCH_COUNT, ge=1, description="Matches needed to accept"
    )
    min_match_ratio: float = Field(
        default=FeatureConstants.MIN_MATCH_RATIO,
        ge=0,
        le=1,
        description="Matched share of observed keypoints needed to accept",
    )

    model_config = SettingsConfigDict(env_prefix="PIXELBLOB_FEATURE_", extra="ignore")


class BlobDetectionConfig(BaseSettings):
    """Auxiliary blob detection configuration."""

    gray_threshold: int = Field(
        default=BlobDetectionConstants.GRAY_THRESHOLD,
        ge=0,
        le=255,
        description="Gray level below which a pixel belongs to a blob",
    )
    min_area: int = Field(
        default=BlobDetectionConstants.MIN_AREA, ge=0, description="Blobs must be larger than this"
    )
    max_bounding_box_fraction: float = Field(
        default=BlobDetectionConstants.MAX_BOUNDING_BOX_FRACTION,
        gt=0,
        le=1,
        description="Blobs whose box covers this share of the image are ignored",
    )
    crop_margin: int = Field(
        default=BlobDetectionConstants.CROP_MARGIN, ge=0, description="Margin around cropped blobs"
    )
    resize_box: int = Field(
        default=BlobDetectionConstants.RESIZE_BOX, ge=1, description="Images are scaled to fit"
    )

    model_config = SettingsConfigDict(env_prefix="PIXELBLOB_BLOB_", extra="ignore")


class SystemConfig(BaseSettings):
    """System configuration."""

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    worker_threads: int = Field(
        default=SystemConstants.THREAD_POOL_SIZE,
        ge=1,
        le=SystemConstants.MAX_WORKER_THREADS,
        description="Number of worker threads",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    model_config = SettingsConfigDict(env_prefix="PIXELBLOB_SYSTEM_", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-configurations
    labeling: LabelingConfig = Field(default_factory=LabelingConfig)
    gradient: GradientConfig = Field(default_factory=GradientConfig)
    convolution: ConvolutionConfig = Field(default_factory=ConvolutionConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    feature: FeatureConfig = Field(default_factory=FeatureConfig)
    blob_detection: BlobDetectionConfig = Field(default_factory=BlobDetectionConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    # Config file support
    config_file: Optional[str] = Field(default=None, description="Path to YAML config file")

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values):
        """Load configuration from YAML file if specified."""
        if not isinstance(values, dict):
            return values

        config_file = values.get("config_file") or os.getenv("PIXELBLOB_CONFIG_FILE")

        if config_file and Path(config_file).exists():
            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f)
                    if file_config:
                        # Merge file config with values (env vars take precedence)
                        for key, value in file_config.items():
                            if key not in values or values[key] is None:
                                values[key] = value
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")

        return values

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(mode="json", exclude_none=True)

    def save_to_file(self, path: str) -> None:
        """Save current configuration to YAML file."""
        config_dict = self.to_dict()
        config_dict.pop("config_file", None)
        with open(path, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False)

    model_config = SettingsConfigDict(
        env_prefix="PIXELBLOB_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with validated configuration
    """
    return Settings()


# Convenience function to reload settings (clears cache)
def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings object
    """
    get_settings.cache_clear()
    return get_settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging from settings.

    Logs to stderr, and additionally to a rotating file when
    ``system.log_file`` is set.
    """
    settings = settings or get_settings()
    level = "DEBUG" if settings.system.debug else settings.system.log_level

    handlers = [logging.StreamHandler()]
    if settings.system.log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                settings.system.log_file,
                maxBytes=SystemConstants.LOG_FILE_MAX_BYTES,
                backupCount=SystemConstants.LOG_FILE_BACKUP_COUNT,
            )
        )

    logging.basicConfig(
        level=getattr(logging, level),
        format=SystemConstants.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    logger.info(f"Logging configured at {level}")
