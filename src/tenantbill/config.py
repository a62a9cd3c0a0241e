"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Loads and validates application settings from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    BOT_TOKEN: str = "YOUR_TELEGRAM_BOT_TOKEN"

    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-1.5-flash"

    CONTACT_PHONE: str = "9826700587"
    DUE_DAYS: int = 10
    DEFAULT_TENANTS: list[str] = [
        "Dada",
        "Dharmendra",
        "Room 22",
        "Radhe room",
        "ankurbha",
        "dagi room",
        "shop 195",
    ]

    LOG_LEVEL: str = "INFO"


settings = Settings()
