# billing/config.py
"""
Runtime configuration, read from ``BILLING_*`` environment variables or a
``.env`` file in the working directory.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BILLING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = Field(default="billing-saas-backend")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=10000)

    database_url: str = Field(
        default="sqlite:///db.sqlite",
        description="SQLAlchemy URL of the relational store",
    )
    db_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound for connecting, waiting on locks and running a statement",
    )

    jwt_secret: SecretStr = Field(description="Symmetric key used to sign session tokens")
    jwt_algorithm: str = Field(default="HS256")
    token_ttl_hours: float = Field(default=24)

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)


def get_settings() -> Settings:
    return Settings()
