"""
Configuration settings for mongoqb.

Uses pydantic-settings for type-safe configuration from environment variables
(prefixed MONGOQB_) and an optional .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """mongoqb configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MONGOQB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Identifier conversion
    allow_identifier_fallback: bool = Field(
        default=False,
        description="Substitute a generated ObjectId for invalid identifier strings instead of failing",
    )

    # Template delimiters
    variable_start_string: str = Field(
        default="{{",
        min_length=1,
        description="Opening delimiter for template placeholders",
    )
    variable_end_string: str = Field(
        default="}}",
        min_length=1,
        description="Closing delimiter for template placeholders",
    )
    block_start_string: str = Field(
        default="{%%",
        min_length=1,
        description="Opening delimiter for template block tags (loops, conditionals)",
    )
    block_end_string: str = Field(
        default="%%}",
        min_length=1,
        description="Closing delimiter for template block tags",
    )
    comment_start_string: str = Field(
        default="{##",
        min_length=1,
        description="Opening delimiter for template comments",
    )
    comment_end_string: str = Field(
        default="##}",
        min_length=1,
        description="Closing delimiter for template comments",
    )

    # Pretty printing
    json_mode: Literal["relaxed", "canonical"] = Field(
        default="relaxed",
        description="MongoDB Extended JSON mode used when printing documents",
    )
    pretty_indent: int = Field(
        default=4,
        ge=0,
        le=16,
        description="Indentation for pretty-printed documents",
    )

    # Logging (CLI only; the library never configures handlers)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Log level used by the mongoqb CLI",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
