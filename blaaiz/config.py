"""Client configuration via environment variables."""

import logging
from typing import Optional

from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://api-dev.blaaiz.com"


class Settings(BaseSettings):
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    download_timeout_seconds: float = 30.0  # idle timeout for remote file fetches
    max_redirects: int = 5
    max_file_size_bytes: int = 20 * 1024 * 1024  # 0 disables the ceiling
    user_agent: str = "Blaaiz-Python-SDK/1.0.0"
    log_level: str = "INFO"
    audit_database_url: Optional[str] = None

    model_config = {
        "env_prefix": "BLAAIZ_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a root handler for applications that do not configure logging themselves."""
    level = level or Settings().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
