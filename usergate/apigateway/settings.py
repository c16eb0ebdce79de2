from __future__ import annotations
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from usergate import __version__

APP_NAME = "usergate-api"


class GatewaySettings(BaseSettings):
    APP_VERSION: str = Field(default=__version__)
    LOG_LEVEL: str = Field(default="INFO")
    # SQLite file backing the users table
    DATABASE_PATH: str = Field(default="./usergate.sqlite")
    CORS_ALLOW_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:8080"])
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["GET", "POST", "PATCH", "DELETE"])
    CORS_ALLOW_HEADERS: List[str] = Field(
        default_factory=lambda: ["Content-Type", "Authorization", "Accept"]
    )
    # Regexes of paths that require a bearer token
    PROTECTED_PATHS: List[str] = Field(default_factory=lambda: [r"^/api/protected(/|$)"])

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")
