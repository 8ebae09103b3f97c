from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field("sqlite+aiosqlite:///./fee_ledger.db", alias="DATABASE_URL")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Display label for fee types / collectors that can no longer be resolved
    unknown_label: str = Field("Unknown", alias="UNKNOWN_LABEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
