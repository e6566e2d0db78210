# image_fusion/data/settings.py
from typing import Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleConfig(BaseModel):
    api_key: SecretStr | None = None
    model: str = "gemini-2.5-flash-image"


class FusionConfig(BaseModel):
    """Which AI client serves fusion requests."""
    client: Literal["google", "mock"] = "google"


class WebConfig(BaseModel):
    listening_host: str = "127.0.0.1"
    listening_port: int = 8080
    max_upload_bytes: int = 20 * 1024 * 1024
    # How often the page re-polls while a request is in flight
    refresh_seconds: int = 2
    session_cookie: str = "fusion_session"
    # Idle sessions expire; past the cap the least recently used one is evicted
    session_ttl_seconds: int = 3600
    max_sessions: int = 1000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    google: GoogleConfig = Field(default_factory=GoogleConfig)
    fusion: FusionConfig = Field(default_factory=FusionConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    logging_level: int = 20


settings = Settings()
