"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Weekly Planner Backend"
    log_level: str = "INFO"
    database_url: str = "sqlite:///./weekplanner.db"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "weekplanner"

    # Generation relay + provider
    openai_api_key: str | None = None
    generation_relay_url: str = "http://localhost:8000/api/generate"
    generation_timeout_seconds: float = 60.0
    schedule_model: str = "gpt-4o"
    feedback_model: str = "gpt-4o-mini"

    # Planner grid / week boundaries
    planner_timezone: str = "UTC"
    week_start_day: int = 6
    grid_start_hour: int = 7
    grid_end_hour: int = 24
    strict_day_keys: bool = False
    prompt_task_limit: int = 10
    feedback_max_chars: int = 1000

    # Google Calendar collaborator
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_redirect_uri: str = "http://localhost:8000/oauth2callback"
    frontend_url: str = "http://localhost:3000"
    calendar_sync_days: int = 28
    calendar_max_results: int = 50


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
