"""Configuration management using Pydantic settings."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from models import InputState

MAX_INPUT_LIMIT_BITS = 64


class Settings(BaseSettings):
    """Environment-based settings (prefix ``MODEXP_``)."""

    model_config = SettingsConfigDict(
        env_prefix="MODEXP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Inputs must be < 2**input_limit_bits; bounds the trace length.
    input_limit_bits: int = Field(default=24, ge=1, le=MAX_INPUT_LIMIT_BITS)

    # Values used when a query string omits a field
    default_a: str = "3"
    default_n: str = "100"
    default_m: str = "23"

    # Logging
    log_level: str = "info"
    log_json: bool = False

    @property
    def input_limit(self) -> int:
        return 2**self.input_limit_bits

    @property
    def defaults(self) -> InputState:
        return InputState(a=self.default_a, n=self.default_n, m=self.default_m)


@lru_cache
def get_settings() -> Settings:
    return Settings()
