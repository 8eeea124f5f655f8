"""Configuration settings for the sheets store."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Store settings."""

    # Spreadsheet settings
    spreadsheet_id: str = Field(
        default=..., validation_alias="SHEETS_SPREADSHEET_ID"
    )
    access_token: Optional[str] = Field(
        default=None, validation_alias="SHEETS_ACCESS_TOKEN"
    )
    api_url: str = Field(
        default="https://sheets.googleapis.com/v4", validation_alias="SHEETS_API_URL"
    )
    timeout: float = Field(
        default=30.0, validation_alias="SHEETS_TIMEOUT"
    )

    # Layout settings
    status_sheet: str = Field(
        default="squid_status", validation_alias="SHEETS_STATUS_SHEET"
    )
    value_input_option: str = Field(
        default="USER_ENTERED", validation_alias="SHEETS_VALUE_INPUT_OPTION"
    )

    # Application settings
    log_level: str = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
