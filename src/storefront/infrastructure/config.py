"""Storefront client configuration"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    """Settings loaded from the environment (``STOREFRONT_*``) or ``.env``"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend
    api_url: str = "http://localhost:5000"
    request_timeout: float = 30.0

    # Where payment providers send the user back to
    public_url: str = "http://localhost:3000"

    # Durable local state (cart, session, pending wallet payments)
    data_dir: Path = _DEFAULT_DATA_DIR


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
