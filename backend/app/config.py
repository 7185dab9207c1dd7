"""Application configuration using Pydantic settings."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    auto_create_tables: bool = True  # In production, use migrations

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"
    log_level: Optional[str] = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:3001"

    # Sessions
    session_ttl_days: int = 30

    # Redis (for ARQ worker)
    redis_url: str = "redis://127.0.0.1:6379"

    # Perplexity (topic/source/competitor suggestions)
    perplexity_api_key: Optional[str] = None
    perplexity_api_url: str = "https://api.perplexity.ai/chat/completions"
    perplexity_model: str = "llama-3.1-sonar-small-128k-online"
    ai_request_timeout: float = 30.0
    suggestion_cache_ttl_seconds: int = 900  # 15 minutes

    # Make.com automation webhook (outbound)
    make_webhook_url: Optional[str] = None
    webhook_timeout: float = 10.0

    # Integration keys; checks are skipped when unset
    inbound_webhook_secret: Optional[str] = None
    admin_api_key: Optional[str] = None

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
