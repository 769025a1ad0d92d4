"""
Configuration loader for the quote wizard (storage backend, scanner simulation).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "wizard_config.yml"


class StorageConfig(BaseModel):
    """Durable storage for the applicant record"""

    backend: Literal["file", "memory", "redis"] = "file"
    directory: str = "data/wizard"
    key: str = "insuranceFormData"
    redis_url: Optional[str] = None
    redis_key_prefix: str = "quote_wizard:"


class ScannerConfig(BaseModel):
    """Simulated document scan / VIN lookup"""

    delay_seconds: float = Field(default=2.0, ge=0.0, le=60.0)


class WizardConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)


def _apply_env_overrides(data: dict) -> dict:
    storage = data.setdefault("storage", {})
    scanner = data.setdefault("scanner", {})

    if os.getenv("WIZARD_STORAGE_DIR"):
        storage["directory"] = os.environ["WIZARD_STORAGE_DIR"]
    if os.getenv("REDIS_URL"):
        storage["backend"] = "redis"
        storage["redis_url"] = os.environ["REDIS_URL"]
    if os.getenv("WIZARD_SCAN_DELAY"):
        scanner["delay_seconds"] = os.environ["WIZARD_SCAN_DELAY"]
    return data


def load_wizard_config(config_path: Optional[Path] = None) -> WizardConfig:
    """
    Load and validate wizard configuration from YAML, then apply environment overrides.

    A missing config file is not an error: defaults are used.

    Raises:
        ValidationError: If config doesn't match schema
    """
    load_dotenv()

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    data: dict = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info("Wizard config not found at %s; using defaults", config_path)

    data = _apply_env_overrides(data)

    try:
        cfg = WizardConfig(**data)
        logger.info("Loaded wizard config (storage=%s)", cfg.storage.backend)
        return cfg
    except ValidationError as e:
        logger.error("Wizard config validation failed: %s", e)
        raise
