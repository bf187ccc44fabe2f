"""Configuration management for Birocrat."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BIROCRAT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["default", "rich"] = Field(default="default", description="Log output profile")

    # Terminal Configuration
    back_command: str = Field(default=":back", description="Input that rewinds to an earlier question")
    offer_suggestions: bool = Field(default=True, description="Offer previous answers as prompt defaults")
    json_indent: int = Field(default=2, description="Indentation of the JSON form result")


def get_settings() -> Settings:
    """Get application settings.

    Returns:
        Settings instance
    """
    # pydantic-settings loads the environment and any .env file
    return Settings()
