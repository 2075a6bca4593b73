from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/autoapply.db"
    secret_key: str = "dev-secret-key-change-in-production"
    session_expire_days: int = 30
    log_level: str = "INFO"

    # Frontend origin (CORS and checkout return URLs)
    frontend_origin: str = "http://localhost:3000"

    # Bounded timeout for every call across the persistence boundary
    persistence_timeout_seconds: float = 10.0

    # Redis holds generated resume / cover letter text only
    redis_url: str = "redis://localhost:6379"
    document_cache_ttl_seconds: int = 30 * 24 * 60 * 60

    # Stripe billing
    stripe_secret_key: str = ""
    stripe_api_base: str = "https://api.stripe.com/v1"
    premium_price_cents: int = 599  # $5.99 / month
    premium_currency: str = "usd"
    premium_product_name: str = "Premium Subscription"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
