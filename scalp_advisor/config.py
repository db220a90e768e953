"""Advisor configuration loaded from advisor.yaml.

- Settings (config file path, log level) come from ADVISOR_* environment
  variables. A .env in the working directory or beside advisor.yaml
  is read too (see resolve_settings).
- Thresholds, windows and rule weights come from the YAML file; anything
  it leaves out keeps its default. No file = all defaults.
"""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from scalp_advisor.models.config import AdvisorConfig

logger = logging.getLogger(__name__)


class AdvisorSettings(BaseSettings):
    """Process settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ADVISOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_path: Path = Path("advisor.yaml")
    log_level: str = "INFO"


@lru_cache
def get_settings() -> AdvisorSettings:
    """Get cached settings instance."""
    return AdvisorSettings()


def resolve_settings(config_path: Path | None = None) -> AdvisorSettings:
    """Settings after loading the .env that sits beside the advisor config.

    Variables already in the environment win over the file.
    """
    path = Path(config_path) if config_path is not None else get_settings().config_path

    # Load .env into os.environ so AdvisorSettings picks up ADVISOR_* from it
    env_path = path.parent / ".env"
    if load_dotenv(env_path, override=False):
        logger.debug("Loaded environment from %s", env_path)
        get_settings.cache_clear()
    return get_settings()


def load_advisor_config(path: Path | None = None) -> AdvisorConfig:
    """Load advisor config from a YAML file.

    Falls back to defaults if the file doesn't exist.

    Raises:
        ValueError: If the file content fails validation.
    """
    config_path = Path(path) if path is not None else get_settings().config_path

    if not config_path.exists():
        logger.info("No advisor config found at %s, using defaults", config_path)
        return AdvisorConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{config_path}: expected a mapping at top level")

    config = AdvisorConfig(**raw)
    logger.info(
        "Loaded advisor config from %s: entry>=%g, close<%g, %d signal weights, "
        "%d holdability weights",
        config_path,
        config.recommendation.entry_threshold,
        config.recommendation.close_threshold,
        len(config.signals.weights),
        len(config.holdability.weights),
    )
    return config
