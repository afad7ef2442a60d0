from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from dotenv import load_dotenv

# Load .env file into os.environ BEFORE pydantic reads it
# This keeps the Streamlit app, the CLI and the tests reading the same values
load_dotenv()


class Settings(BaseSettings):
    # Admin API
    API_URL: str = "http://localhost:3001"
    # Static bearer token (e.g. a long-lived session token for the CLI).
    # The Streamlit app prefers the token entered in the sidebar.
    API_TOKEN: Optional[str] = None
    # None = no client-enforced timeout, the call settles when the network does
    API_TIMEOUT_SECONDS: Optional[float] = None

    # Query cache
    QUERY_STALE_SECONDS: float = 30.0
    STATS_STALE_SECONDS: float = 300.0  # Dashboard stats are cached for 5 minutes
    AUTH_STALE_SECONDS: float = 300.0
    QUERY_CACHE_MAX_ENTRIES: int = 256

    # Access control
    REQUIRE_SUPERADMIN: bool = True
    SUPPORT_EMAIL: str = "support@sentra.com"

    # Logging
    LOG_LEVEL: str = "INFO"
    # Log raw payloads alongside response validation failures
    DEBUG: bool = False

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",  # ignore unknown env vars instead of raising errors
    )


settings = Settings()
