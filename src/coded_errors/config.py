from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STACK_DEPTH = 32


class Settings(BaseSettings):
    stack_depth: int = Field(default=DEFAULT_STACK_DEPTH, ge=1)

    model_config = SettingsConfigDict(env_prefix="CODED_ERRORS_")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
