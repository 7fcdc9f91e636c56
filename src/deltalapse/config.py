"""
deltalapse Configuration
========================

This module handles configuration loading for the delta pipeline.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    DELTALAPSE_INPUT_DIR        -> paths.input_dir
    DELTALAPSE_COMPRESSED_DIR   -> paths.compressed_dir
    DELTALAPSE_DECOMPRESSED_DIR -> paths.decompressed_dir
    DELTALAPSE_EXTENSION        -> catalog.extension
    DELTALAPSE_MAX_WORKERS      -> encoder.max_workers
    DELTALAPSE_PNG_COMPRESSION  -> image.png_compression
    DELTALAPSE_LOG_LEVEL        -> logging.level
    DELTALAPSE_LOG_FORMAT       -> logging.format

Example:
    from deltalapse.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    print(settings.paths.input_dir)
    print(settings.encoder.max_workers)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class PathsConfig(BaseModel):
    """Working directories for the three pipeline stages."""

    input_dir: str = Field(
        default="screenshots",
        description="Directory of original timelapse frames",
    )
    compressed_dir: str = Field(
        default="compressed",
        description="Directory for the anchor and delta frames",
    )
    decompressed_dir: str = Field(
        default="decompressed",
        description="Directory for reconstructed frames",
    )


class CatalogConfig(BaseModel):
    """Frame discovery configuration."""

    extension: str = Field(
        default=".png",
        min_length=1,
        description="File extension of frame files (case-sensitive)",
    )


class EncoderConfig(BaseModel):
    """Parallel diff encoder configuration."""

    max_workers: int = Field(
        default=0,
        ge=0,
        description="Cap on worker threads below the available CPUs (0 = no cap)",
    )
    chunk_strategy: Literal["contiguous"] = Field(
        default="contiguous",
        description="How pair indices are split between workers",
    )


class ImageConfig(BaseModel):
    """Image codec configuration."""

    png_compression: int = Field(
        default=6,
        ge=0,
        le=9,
        description="zlib compression level for written PNGs",
    )


class VerifierConfig(BaseModel):
    """Verification pass configuration."""

    max_logged_mismatches: int = Field(
        default=100,
        ge=0,
        description="Per-pixel mismatch warnings to log (0 = unlimited)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: Literal["text", "json"] = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for deltalapse.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    paths: PathsConfig = Field(default_factory=PathsConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    image: ImageConfig = Field(default_factory=ImageConfig)
    verifier: VerifierConfig = Field(default_factory=VerifierConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("deltalapse.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    elif config_path:
        logger.warning(f"Config file not found: {config_path}, using defaults")
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Paths
    if env_input := os.environ.get("DELTALAPSE_INPUT_DIR"):
        config_data.setdefault("paths", {})["input_dir"] = env_input
    if env_compressed := os.environ.get("DELTALAPSE_COMPRESSED_DIR"):
        config_data.setdefault("paths", {})["compressed_dir"] = env_compressed
    if env_decompressed := os.environ.get("DELTALAPSE_DECOMPRESSED_DIR"):
        config_data.setdefault("paths", {})["decompressed_dir"] = env_decompressed

    # Catalog
    if env_ext := os.environ.get("DELTALAPSE_EXTENSION"):
        config_data.setdefault("catalog", {})["extension"] = env_ext

    # Encoder
    if env_workers := os.environ.get("DELTALAPSE_MAX_WORKERS"):
        config_data.setdefault("encoder", {})["max_workers"] = int(env_workers)

    # Image codec
    if env_level := os.environ.get("DELTALAPSE_PNG_COMPRESSION"):
        config_data.setdefault("image", {})["png_compression"] = int(env_level)

    # Logging settings
    if env_log := os.environ.get("DELTALAPSE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_format := os.environ.get("DELTALAPSE_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "thread": "%(threadName)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=True,
    )
