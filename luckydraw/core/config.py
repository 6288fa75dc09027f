"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Lucky Draw"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"  # Bind to all interfaces for kiosk access
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./luckydraw.db"
    sqlite_busy_timeout: float = 30.0  # Seconds a writer waits for the lock

    # Check-in draw
    draw_digit_count: int = 10000  # Length of the pi digit sequence
    draw_cutover_position: int = 200
    draw_early_digits: list[int] = [7]  # Winning digits below the cutover
    draw_late_digits: list[int] = [3, 5]  # Winning digits at/after the cutover


settings = Settings()
