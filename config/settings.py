from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings - reads from environment variables"""

    # REST API
    api_base_url: str = "http://localhost:5000/api"
    request_timeout: float = 30.0
    login_path: str = "/login"

    # Realtime (Socket.IO server root, not the /api prefix)
    socket_url: str = "http://localhost:5000"

    # Page sizes per domain
    athletes_page_limit: int = 12
    community_page_limit: int = 12
    venues_page_limit: int = 12
    events_page_limit: int = 10
    leaderboard_page_limit: int = 50

    # Optional credentials for the CLI watcher
    session_email: Optional[str] = None
    session_password: Optional[str] = None

    # Environment
    env: str = "development"
    debug: bool = False

    @field_validator('api_base_url', 'socket_url', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v):
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        env_prefix="SPORTSBUDDY_",
        extra="ignore",
        case_sensitive=False,  # SPORTSBUDDY_API_BASE_URL == api_base_url
    )


# Create settings instance
settings = Settings()
