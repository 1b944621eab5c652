"""
Configuration settings for the CRM Record Engine.

Uses Pydantic Settings to load environment variables for the record store
connection, logging, and display defaults (currency, date form, placeholder).
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATE_FORMAT = "{month}/{day}/{year}"


def render_date_pattern(pattern: str, year: int, month: int, day: int) -> str:
    """Fill a `DATE_FORMAT` pattern; placeholders are year, month, day, mm and dd."""
    return pattern.format(year=year, month=month, day=day, mm=f"{month:02d}", dd=f"{day:02d}")


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("crm", alias="DB_NAME")
    db_statement_timeout_ms: int = Field(0, alias="DB_STATEMENT_TIMEOUT_MS")

    # Record store
    store_backend: str = Field("postgres", alias="STORE_BACKEND")
    store_table: str = Field("crm_records", alias="STORE_TABLE")
    store_pool_min_size: int = Field(1, alias="STORE_POOL_MIN_SIZE")
    store_pool_max_size: int = Field(10, alias="STORE_POOL_MAX_SIZE")
    store_connect_attempts: int = Field(3, alias="STORE_CONNECT_ATTEMPTS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Display
    currency_symbol: str = Field("$", alias="CURRENCY_SYMBOL")
    currency_decimals: int = Field(2, alias="CURRENCY_DECIMALS")
    date_format: str = Field(DEFAULT_DATE_FORMAT, alias="DATE_FORMAT")
    display_placeholder: str = Field("—", alias="DISPLAY_PLACEHOLDER")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("date_format")
    @classmethod
    def _check_date_format(cls, value: str) -> str:
        try:
            render_date_pattern(value, 2024, 1, 15)
        except (AttributeError, IndexError, KeyError, ValueError) as exc:
            raise ValueError(f"DATE_FORMAT has an unknown placeholder: {exc}") from exc
        return value

    @property
    def dsn(self) -> str:
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_DATE_FORMAT", "Settings", "get_settings", "render_date_pattern"]
