"""Configuration management using environment variables and pydantic."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Telegram Configuration
    telegram_bot_token: str = ""

    # Bot Configuration
    bot_name: str = "trainbot"
    channel_prefix: str = "-100"  # Supergroups and channels
    welcome_chat_id: str = ""  # Empty - no welcome message on first run

    # Schedule Store Configuration
    db_path: str = "data/trainbot.db"

    # Logging Configuration
    log_level: str = "INFO"
    log_file_path: str = "logs/trainbot.log"  # Empty - console only
    log_max_size_mb: int = 10
    log_backup_count: int = 5

    # Development/Testing
    dry_run: bool = False


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
