from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # upstream news provider
    GNEWS_API_KEY: str = ""
    GNEWS_ENDPOINT: str = "https://gnews.io/api/v4/top-headlines"
    GNEWS_LANGUAGE: str = "en"
    GNEWS_MAX_RESULTS: int = 10
    GNEWS_USER_AGENT: str = "The Perspective News Platform - Contact: admin@theperspective.news"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # refresh policy
    REFRESH_BASE_INTERVAL_SECONDS: int = 60 * 60
    MAX_BACKOFF_FACTOR: int = 8
    RATE_LIMIT_DEFAULT_COOLDOWN_SECONDS: int = 60 * 60

    # storage
    DATABASE_URL: str = "sqlite:///./news.db"

    # refresh trigger
    REFRESH_TOKEN: Optional[str] = None
    AUTO_REFRESH_ENABLED: bool = True
    AUTO_REFRESH_INTERVAL_SECONDS: int = 60 * 60

    LOG_LEVEL: str = "INFO"


settings = Settings()
