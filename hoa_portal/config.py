"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./hoa_portal.db"

    # "memory" keeps notifications in-process, "database" uses SQLAlchemy
    notification_backend: str = "memory"

    # Service
    service_name: str = "hoa-portal"
    log_level: str = "INFO"

    # Notification content
    announcement_preview_chars: int = 100

    # Load demo residents, billing accounts and notifications on startup
    seed_demo_data: bool = True


settings = Settings()
