############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# settings.py: Hashing defaults and logging configuration
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Settings using Pydantic Settings.

Every field can be overridden with an ``ARGON2_KDF_`` prefixed environment
variable, e.g. ``ARGON2_KDF_MEMORY_COST=65536``.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from argon2_kdf.core.algorithm import DEFAULT_VERSION, Algorithm
from argon2_kdf.core.params import (
    DEFAULT_HASH_LENGTH,
    DEFAULT_MEMORY_COST,
    DEFAULT_PARALLELISM,
    DEFAULT_SALT_LENGTH,
    DEFAULT_TIME_COST,
)


class Settings(BaseSettings):
    """Configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ARGON2_KDF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Hashing defaults
    algorithm: Algorithm = Algorithm.ARGON2ID
    version: int = DEFAULT_VERSION
    memory_cost: int = DEFAULT_MEMORY_COST  # KiB
    time_cost: int = DEFAULT_TIME_COST
    parallelism: int = DEFAULT_PARALLELISM
    hash_length: int = DEFAULT_HASH_LENGTH
    salt_length: int = DEFAULT_SALT_LENGTH

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    @field_validator("algorithm", mode="before")
    @classmethod
    def parse_algorithm(cls, v):
        """Accept algorithm tags in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
