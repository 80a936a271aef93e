from typing import Any, Dict, List, Optional, Union
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, PostgresDsn, ValidationInfo, field_validator
from pathlib import Path

# Define the root directory of the sentiment_etl package
SERVICE_ROOT_DIR = Path(__file__).parent.parent.resolve()
# Path to the repository root (two levels up from this settings.py)
PROJECT_ROOT_DIR = SERVICE_ROOT_DIR.parent


def _split_csv(value: Union[str, List[str]]) -> List[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return list(value)


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "SentimentETL"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Third-party source API settings (RapidAPI)
    RAPIDAPI_KEY: Optional[str] = None
    YOUTUBE_HOST: str = "yt-api.p.rapidapi.com"
    REALTIME_NEWS_HOST: str = "real-time-news-data.p.rapidapi.com"
    INSTAGRAM_HOST: str = "instagram-premium-api-2023.p.rapidapi.com"
    INDONESIA_NEWS_HOST: str = "indonesia-news.p.rapidapi.com"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Extraction settings
    EXTRACTION_QUERY: str = "COVID-19"
    EXTRACTION_MAX_CONCURRENCY: int = 4
    YOUTUBE_VIDEO_IDS: Union[str, List[str]] = "B_NwHxJkKqE,qAeJ2wQ0c98,1APwq1df6Mw,9A6y8Q8TpmE"
    YOUTUBE_RETRY_DELAY_SECONDS: float = 0.5
    # Video metadata the comments endpoint does not return, keyed by video id.
    # Set as JSON in the environment, e.g. {"abc": {"title": "...", "author": "..."}}
    YOUTUBE_VIDEO_INFO: Dict[str, Dict[str, str]] = Field(default_factory=lambda: {
        "B_NwHxJkKqE": {
            "title": "Dr. Fauci on COVID-19: What You Need to Know",
            "author": "White House",
            "published": "2020-03-20",
        },
        "qAeJ2wQ0c98": {"title": "WHO Director-General's opening remarks at the media briefing on COVID-19"},
        "1APwq1df6Mw": {"title": "Coronavirus: How to protect yourself"},
        "9A6y8Q8TpmE": {"title": "COVID-19: What You Need to Know"},
    })
    REALTIME_NEWS_COUNTRY: str = "ID"
    REALTIME_NEWS_LANG: str = "id"
    REALTIME_NEWS_LIMIT: int = 10
    REALTIME_NEWS_TIME_PUBLISHED: str = "anytime"
    INSTAGRAM_HASHTAG: str = "covid19"
    INDONESIA_NEWS_OUTLETS: Union[str, List[str]] = "kompas,detik,cnn"
    INDONESIA_NEWS_DELAY_SECONDS: float = 5.0
    INDONESIA_NEWS_LIMIT: Optional[int] = None  # None keeps each outlet's own page size

    # Database settings
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "user"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "sentiment_db"
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> Any:
        if isinstance(v, str) and v:
            return v
        return str(PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=info.data.get("DB_USER"),
            password=info.data.get("DB_PASSWORD"),
            host=info.data.get("DB_HOST"),
            port=info.data.get("DB_PORT"),
            path=info.data.get("DB_NAME") or "",
        ))

    # Reprocessing settings
    REPROCESS_PAGE_SIZE: int = 100

    # Lexicon and keyword tables (can be overridden by env var)
    LEXICON_PATH: str = str(SERVICE_ROOT_DIR / "config" / "lexicon.yaml")

    # Logging configuration path (can be overridden by env var)
    LOGGING_CONFIG_PATH: str = str(SERVICE_ROOT_DIR / "config" / "logging_config.yaml")

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT_DIR / ".env"),  # Load variables from project root .env
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def model_post_init(self, __context) -> None:
        """Parse comma-separated strings into lists after model initialization."""
        self.YOUTUBE_VIDEO_IDS = _split_csv(self.YOUTUBE_VIDEO_IDS)
        self.INDONESIA_NEWS_OUTLETS = [outlet.lower() for outlet in _split_csv(self.INDONESIA_NEWS_OUTLETS)]

    def validate_for_extraction(self) -> List[str]:
        """
        Check the settings a pipeline run cannot start without.

        Returns:
            A list of human-readable problems; empty when the settings are usable.
        """
        errors = []
        if not self.RAPIDAPI_KEY:
            errors.append("RAPIDAPI_KEY is not set")
        if self.EXTRACTION_MAX_CONCURRENCY < 1:
            errors.append("EXTRACTION_MAX_CONCURRENCY must be at least 1")
        if self.HTTP_TIMEOUT_SECONDS <= 0:
            errors.append("HTTP_TIMEOUT_SECONDS must be positive")
        if not self.YOUTUBE_VIDEO_IDS:
            errors.append("YOUTUBE_VIDEO_IDS must name at least one video")
        if not self.INDONESIA_NEWS_OUTLETS:
            errors.append("INDONESIA_NEWS_OUTLETS must name at least one outlet")
        if self.REPROCESS_PAGE_SIZE < 1:
            errors.append("REPROCESS_PAGE_SIZE must be at least 1")
        return errors


# Instantiate settings
settings = Settings()
