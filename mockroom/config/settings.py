"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "MockRoom"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # TTS configuration
    tts_backend: str = "edge-tts"  # Options: edge-tts, silent
    tts_voice: str = "en-US-AriaNeural"  # Used when no preferred voice is found
    silent_tts_time_scale: float = 1.0  # Playback-time multiplier for the silent backend
    speech_rate: float = Field(default=0.9, gt=0, le=2.0)
    speech_pitch: float = Field(default=1.0, gt=0, le=2.0)
    speech_volume: float = Field(default=0.8, ge=0, le=1.0)
    voice_name_markers_str: str = Field(
        default="Google,Microsoft",
        validation_alias="voice_name_markers"
    )
    voice_locale_prefix: str = "en"

    # Narration timing (seconds)
    greeting_delay_seconds: float = 1.0
    first_question_delay_seconds: float = 8.0
    transition_delay_seconds: float = 1.0
    next_question_delay_seconds: float = 3.0
    results_navigation_delay_seconds: float = 6.0
    clock_interval_seconds: float = 1.0

    # Devices
    device_timeout_seconds: float = 30.0

    # Placeholder response durations (seconds, inclusive)
    response_duration_min: int = 30
    response_duration_max: int = 89

    # Persistence
    session_store_path: str = ""  # Empty = in-memory only
    job_catalog_path: str = ""  # Optional JSON seed for candidates/job posts

    # CORS - stored as comma-separated string in env
    # Uses validation_alias to read from CORS_ORIGINS env var
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @computed_field
    @property
    def voice_name_markers(self) -> list[str]:
        """Parse preferred voice name markers from comma-separated string."""
        return [m.strip() for m in self.voice_name_markers_str.split(",") if m.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
