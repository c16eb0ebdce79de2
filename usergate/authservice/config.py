from __future__ import annotations
from typing import Optional

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class AuthSettings(BaseSettings):
    # Both secrets are required; there is no dev default.
    HASH_SECRET: str = Field(..., min_length=1)
    JWT_SECRET: str = Field(..., min_length=1)

    # Hardening: None keeps tokens valid until JWT_SECRET rotates.
    TOKEN_TTL_SECONDS: Optional[int] = Field(default=None, gt=0)

    # Argon2id cost parameters
    ARGON2_TIME_COST: int = Field(default=3, ge=1)
    ARGON2_MEMORY_COST: int = Field(default=65536, ge=8)  # KiB
    ARGON2_PARALLELISM: int = Field(default=4, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def secrets_differ(self) -> "AuthSettings":
        if self.HASH_SECRET == self.JWT_SECRET:
            raise ValueError("HASH_SECRET and JWT_SECRET must be different")
        if self.ARGON2_MEMORY_COST < 8 * self.ARGON2_PARALLELISM:
            raise ValueError("ARGON2_MEMORY_COST must be at least 8 * ARGON2_PARALLELISM")
        return self


def load_auth_settings(**overrides) -> AuthSettings:
    """Read secrets once at startup; any problem is a ConfigError."""
    try:
        return AuthSettings(**overrides)
    except ValidationError as ex:
        fields = sorted({str(err["loc"][0]) if err["loc"] else "settings" for err in ex.errors()})
        raise ConfigError(f"Invalid auth settings: {', '.join(fields)}") from ex
