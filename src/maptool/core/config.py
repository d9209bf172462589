from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Knobs for the configuration subsystem itself (not application settings)."""

    model_config = SettingsConfigDict(
        env_prefix="MAPTOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "MapTool"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE_NAME: str = "maptool.log"
    LOG_RETENTION: str = "10 days"
    LOG_ROTATION: str = "10 MB"


settings = Settings()
