# app/core/config.py
"""Application configuration using Pydantic."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = 'sqlite:///./studio.db'

    # Upper bound on attempts for every ledger write transaction.
    registration_max_attempts: int = Field(default=25, ge=1)

    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    create_tables: bool = True
    allowed_origins: List[str] = ['*']

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }


@lru_cache()
def get_settings() -> Settings:
    """Loads the settings once per process; callers pass the result along."""
    return Settings()
