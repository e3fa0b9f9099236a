"""Application configuration."""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    anthropic_api_key: str
    anthropic_model: str = "claude-sonnet-4-20250514"
    oracle_temperature: float = 0.7
    oracle_max_tokens: int = 2000
    oracle_timeout_seconds: float = 30.0

    supabase_url: str
    supabase_key: str

    slack_webhook_url: str = ""
    slack_notify_user_ids: str = ""
    slack_notify_channel: str = ""
    notifier_timeout_seconds: float = 30.0

    retune_enabled: bool = True
    retune_interval_minutes: int = 60
    retune_max_concurrency: int = 1

    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173"

    class Config:
        env_file = ".env"

    @property
    def mention_user_ids(self) -> List[str]:
        return [u.strip() for u in self.slack_notify_user_ids.split(",") if u.strip()]


settings = Settings()
