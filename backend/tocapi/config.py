"""Application configuration using Pydantic settings."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = "development"

    # Supabase Postgres (accounts and reset tokens)
    database_url: Optional[str] = None

    # MongoDB (projects)
    mongodb_uri: Optional[str] = None
    mongodb_db: str = "toc"
    mongodb_collection_name: str = "projects"

    # Use in-memory stores instead of Postgres/MongoDB (local development)
    use_in_memory_backends: bool = False

    # Redis (for ARQ worker)
    redis_url: str = "redis://127.0.0.1:6379"

    # Password reset
    reset_token_ttl_minutes: int = 15
    bcrypt_rounds: int = 12

    # SMTP delivery for reset codes
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_sender_name: str = "Quality for Outcomes"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
