"""Application configuration settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Usage Benchmark"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    DATABASE_URL: str = "sqlite:///./usage_benchmark.db"

    # Community that receives units auto-created during CSV import
    DEFAULT_COMMUNITY_ID: int = 1

    LOG_LEVEL: str = "INFO"


settings = Settings()
