"""Engine configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LISTING_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Platforms
    default_platform: str = "master"
    platform_config_path: str | None = None

    # Variants
    default_variant_quantity: int = 1

    # Category data source
    category_api_url: str | None = None
    category_api_key: str | None = None
    category_api_timeout: float = 10.0


settings = Settings()


def get_settings() -> Settings:
    """Get the settings singleton.

    Returns:
        Settings instance.
    """
    return settings
