"""Application configuration.

Uses Pydantic BaseSettings for declarative environment variable binding.
A .env file is discovered and pre-loaded with python-dotenv before the
settings object is built.
"""
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

__all__ = ["settings", "Settings", "DEFAULT_WORDS_PATH", "ENV_FILE_PATH", "ENV_FILE_LOADED"]

# Word list shipped with the package
DEFAULT_WORDS_PATH = Path(__file__).resolve().parent.parent / "data" / "words.txt"

# Resolved .env path used at startup
ENV_FILE_PATH: Optional[Path] = None
ENV_FILE_LOADED: bool = False


def _find_env_file() -> Optional[Path]:
    """Find .env file from multiple possible locations."""
    global ENV_FILE_PATH, ENV_FILE_LOADED
    current_file = Path(__file__).resolve()
    possible_paths = [
        current_file.parent.parent.parent / '.env',
        Path.cwd() / '.env',
    ]

    for env_path in possible_paths:
        if env_path.exists():
            ENV_FILE_PATH = env_path
            ENV_FILE_LOADED = True
            logger.info(f"Found .env at: {env_path}")
            return env_path

    logger.debug("No .env file found - using environment variables and defaults")
    return None


_env_path = _find_env_file()
if _env_path:
    load_dotenv(dotenv_path=_env_path, override=False)


def _parse_comma_list(value: str) -> list[str]:
    """Parse a comma-separated string into a list of stripped, non-empty strings."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Application settings ---
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: Any = "*"  # str from env, overwritten to list[str] by validator

    # --- Session store ---
    SESSION_STORE_BACKEND: str = "memory"
    REDIS_URL: str = ""
    SESSION_TTL_SECONDS: int = 60 * 60 * 24

    # --- Game rules ---
    DEFAULT_WORD_LENGTH: int = 5
    DEFAULT_MAX_GUESSES: int = 6
    MAX_GUESSES_LIMIT: int = 64
    MAX_CONFLICT_RETRIES: int = 3

    # --- Secret selection ---
    WORD_SOURCE: str = "wordlist"
    WORDS_PATH: str = str(DEFAULT_WORDS_PATH)
    SECRET_ALPHABET: str = ""  # empty means ASCII letters + digits
    WIN_REWARD_KEY: str = ""  # returned with a winning guess; empty disables

    @model_validator(mode="after")
    def _normalize(self) -> "Settings":
        """Normalize raw env values and clamp game rule defaults."""
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = _parse_comma_list(self.CORS_ORIGINS) or ["*"]

        self.SESSION_STORE_BACKEND = self.SESSION_STORE_BACKEND.lower().strip()
        self.WORD_SOURCE = self.WORD_SOURCE.lower().strip()
        self.REDIS_URL = self.REDIS_URL.strip()
        self.WIN_REWARD_KEY = self.WIN_REWARD_KEY.strip()

        if self.MAX_GUESSES_LIMIT < 1:
            raise ValueError("MAX_GUESSES_LIMIT must be at least 1")
        if not 1 <= self.DEFAULT_MAX_GUESSES <= self.MAX_GUESSES_LIMIT:
            raise ValueError(
                f"DEFAULT_MAX_GUESSES must be between 1 and {self.MAX_GUESSES_LIMIT}"
            )
        if self.DEFAULT_WORD_LENGTH < 1:
            raise ValueError("DEFAULT_WORD_LENGTH must be at least 1")
        if self.SESSION_TTL_SECONDS < 1:
            raise ValueError("SESSION_TTL_SECONDS must be at least 1")
        if self.MAX_CONFLICT_RETRIES < 0:
            raise ValueError("MAX_CONFLICT_RETRIES cannot be negative")
        return self

    def log_summary(self) -> None:
        """Log configuration summary for debugging."""
        logger.info(f"Session store backend: {self.SESSION_STORE_BACKEND}")
        logger.info(f"Session TTL: {self.SESSION_TTL_SECONDS}s")
        logger.info(f"Word source: {self.WORD_SOURCE}")
        logger.info(
            f"Defaults: word_length={self.DEFAULT_WORD_LENGTH}, "
            f"max_guesses={self.DEFAULT_MAX_GUESSES} (limit {self.MAX_GUESSES_LIMIT})"
        )


settings = Settings()
