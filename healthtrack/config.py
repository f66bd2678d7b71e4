"""
Application configuration.

Settings are read from environment variables and an optional .env file.
Engine thresholds are not configurable here; they live as constants in the
engine modules.
"""

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Health Tracker"
    API_PREFIX: str = "/api"

    # Directory holding the JSON reading and dismissal files
    DATA_DIR: str = "data"

    LOG_LEVEL: str = "INFO"

    # Readings with identical values this close together are duplicates
    DUPLICATE_WINDOW_MINUTES: float = 1.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def load_settings(env_file: str = ".env") -> Settings:
    """Export the .env file into the process environment, then build Settings."""
    load_dotenv(env_file)
    return Settings()


settings = load_settings()
