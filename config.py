"""Configuration management for URL shortener."""

from typing import Literal, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    storage_backend: Literal["mongodb", "file"] = Field(
        default="mongodb",
        description="Mapping store backend: 'mongodb' or 'file'"
    )

    mongodb_uri: Optional[str] = Field(
        default=None,
        description="MongoDB connection URI (required for the mongodb backend)"
    )

    mongodb_database: str = Field(
        default="urlshortener",
        description="MongoDB database name"
    )

    mongodb_collection: str = Field(
        default="urls",
        description="MongoDB collection holding URL mappings"
    )

    mongodb_timeout_seconds: int = Field(
        default=5,
        ge=1,
        le=9,
        description="Connect, server selection and operation timeout for MongoDB"
    )

    data_file: str = Field(
        default="data/urls.json",
        description="JSON snapshot path for the file backend"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=8080,
        description="Port to listen on"
    )

    base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL for generating short URLs"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
