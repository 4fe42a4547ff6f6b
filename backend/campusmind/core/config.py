from pathlib import Path
from typing import Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    project_name: str = "CampusMind Academic Search"
    log_level: str = "INFO"

    # API contact email used in User-Agent headers for polite API access
    # (OpenAlex and Crossref polite pools, NCBI Entrez)
    api_contact_email: str = Field(
        default="researcher@example.com",
        description="Email for API contact/User-Agent (update with your real email)"
    )

    semantic_scholar_api_key: Optional[SecretStr] = Field(default=None, description="Semantic Scholar API key")
    youtube_api_key: Optional[SecretStr] = Field(default=None, description="YouTube Data API v3 key")
    google_books_api_key: Optional[SecretStr] = Field(default=None, description="Google Books API key (raises quota)")

    provider_timeout_seconds: float = Field(default=15.0, gt=0, description="Upper bound for one provider call")
    scrape_timeout_seconds: float = Field(default=10.0, gt=0, description="Timeout for HTML-scraped sources")
    default_per_page: int = Field(default=25, ge=1)

    redis_host: str = "localhost"
    redis_port: int = 6379

    # slowapi limit strings
    rate_limit_enabled: bool = True
    default_rate_limit: str = "100/minute"
    search_rate_limit: str = "30/minute"
    recommendation_rate_limit: str = "20/minute"
    import_rate_limit: str = "10/minute"

    @property
    def API_CONTACT_EMAIL(self) -> str:
        return self.api_contact_email

    @property
    def PROJECT_NAME(self) -> str:
        return self.project_name

    @property
    def LOG_LEVEL(self) -> str:
        return self.log_level

    @property
    def SEMANTIC_SCHOLAR_API_KEY(self) -> Optional[str]:
        if self.semantic_scholar_api_key:
            return self.semantic_scholar_api_key.get_secret_value()
        return None

    @property
    def YOUTUBE_API_KEY(self) -> Optional[str]:
        if self.youtube_api_key:
            return self.youtube_api_key.get_secret_value()
        return None

    @property
    def GOOGLE_BOOKS_API_KEY(self) -> Optional[str]:
        if self.google_books_api_key:
            return self.google_books_api_key.get_secret_value()
        return None

    @property
    def PROVIDER_TIMEOUT(self) -> float:
        return self.provider_timeout_seconds

    @property
    def SCRAPE_TIMEOUT(self) -> float:
        return self.scrape_timeout_seconds

    @property
    def DEFAULT_PER_PAGE(self) -> int:
        return self.default_per_page

    @property
    def REDIS_HOST(self) -> str:
        return self.redis_host

    @property
    def REDIS_PORT(self) -> int:
        return self.redis_port

    @property
    def RATE_LIMIT_ENABLED(self) -> bool:
        return self.rate_limit_enabled


settings = Settings()
