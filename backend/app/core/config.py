# backend/app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ---- Core ----
    PROJECT_NAME: str = "LeadGenius API"
    ENV: str = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ---- Database / CORS ----
    # Use a SYNC url (e.g. sqlite:///./data/app.sqlite3 or postgresql+psycopg2://...)
    DATABASE_URL: str = "sqlite:///./app.db"
    # Comma-separated allowed origins
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:3000"

    # ---- Outbound HTTP ----
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124 Safari/537.36"
    )
    WEBHOOK_TIMEOUT: float = 15.0        # GET/POST generation calls
    ENRICHMENT_TIMEOUT: float = 30.0     # LinkedIn / company enrichment
    WEBHOOK_BACKOFF_SECONDS: float = 0.0 # 0 keeps the single immediate alternate-verb retry

    # Placeholder data when an enrichment webhook cannot be reached
    ENRICHMENT_DEMO_FALLBACK: bool = True

    # Fire-and-forget enrichment after a contact is saved
    ENRICH_ON_SAVE: bool = True
    ENRICH_AFTER_SAVE_DELAY: int = 2  # seconds

    # ---- Website scan ----
    SCAN_CONNECT_TIMEOUT: int = 6
    SCAN_READ_TIMEOUT: int = 20

    # ---- Apify (Apollo scraper actor) ----
    APIFY_BASE: str = "https://api.apify.com/v2"
    APIFY_ACTOR_ID: str = "jljBwyyQakqrL1wae"
    APIFY_POLL_INTERVAL: float = 10.0
    APIFY_MAX_POLLS: int = 30
    APIFY_DEFAULT_LIMIT: int = 20

    # ---- Seeds for the app_settings row (DB row is authoritative once created) ----
    APOLLO_API_KEY: str | None = None
    APIFY_API_KEY: str | None = None
    EMAIL_FINDER_WEBHOOK: str | None = None
    LINKEDIN_ENRICHMENT_WEBHOOK: str | None = None
    COMPANY_ENRICHMENT_WEBHOOK: str | None = None
    PROFILE_RESEARCH_WEBHOOK: str | None = None
    CRM_EXPORT_WEBHOOK: str | None = None

    # pydantic-settings v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",         # ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# singleton (import this everywhere)
settings = get_settings()
