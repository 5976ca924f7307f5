"""
Process-wide configuration, read from the environment (and an optional
.env file at the project root).

Variables:
    GEMINI_API_KEY          — Gemini API key (falls back to API_KEY)
    GEMINI_MODEL            — Model name (default: gemini-2.5-flash)
    PREDICTION_TEMPERATURE  — Sampling temperature (default: 0.3)
    LOG_LEVEL               — Logging level (default: INFO)
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.3
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    log_level: str = "INFO"

    def validate(self) -> "Settings":
        """
        Check the settings once at startup.

        Raises:
            ConfigurationError: If the API key is missing or a value is out of range.
        """
        if not self.api_key:
            raise ConfigurationError("API_KEY environment variable not set.")
        if not 0.0 <= self.temperature <= 2.0:
            raise ConfigurationError(
                f"PREDICTION_TEMPERATURE must be within [0, 2], got {self.temperature}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError(f"Unknown LOG_LEVEL '{self.log_level}'")
        return self


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Build Settings from the environment, loading a .env file if present."""
    env_path = env_file or PROJECT_ROOT / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)

    raw_temperature = os.getenv("PREDICTION_TEMPERATURE", str(DEFAULT_TEMPERATURE))
    try:
        temperature = float(raw_temperature)
    except ValueError:
        raise ConfigurationError(
            f"PREDICTION_TEMPERATURE must be a number, got '{raw_temperature}'"
        )

    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
        model_name=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        temperature=temperature,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO"):
    """Configure root logging once for the process."""
    logging.basicConfig(
        stream=sys.stdout,
        level=level.upper(),
        format=LOG_FORMAT,
    )
    logger.info("Logging configured at %s", level.upper())
