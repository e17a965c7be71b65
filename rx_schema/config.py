"""
Configuration for rx-schema.

All settings come from environment variables prefixed with ``RX_``:
- RX_LOG_LEVEL: logging level used by setup_logging()
- RX_LOG_FORMAT: 'text' or 'json'
- RX_LOAD_CORE: whether the global registry loads the core types
- RX_FREEZE_GLOBAL_REGISTRY: freeze the global registry on creation
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class RxSettings(BaseSettings):
    """rx-schema configuration."""

    log_level: str = Field(default="INFO")
    log_format: Literal["text", "json"] = Field(default="text")

    load_core: bool = Field(default=True, description="Register core types in the global registry")
    freeze_global_registry: bool = Field(
        default=False,
        description="Freeze the global registry as soon as it is created",
    )

    model_config = {"env_prefix": "RX_"}


@lru_cache(maxsize=1)
def get_settings() -> RxSettings:
    """Settings loaded once from the environment."""
    return RxSettings()
