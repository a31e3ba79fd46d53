from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "storefront"
    version: str = "1.0.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/storefront.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Auth
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_TTL_MINUTES: int = 60 * 24 * 7
    REFRESH_TOKEN_TTL_DAYS: int = 30
    BCRYPT_ROUNDS: int = 10

    # Payment processor
    stripe_api_key: str = ""
    DEFAULT_CURRENCY: str = "INR"

    # Pagination
    DEFAULT_PAGE: int = 1
    DEFAULT_LIMIT: int = 10
    MAX_LIMIT: int = 100
    MAX_PAGE: int = 100_000

    # Idempotency records older than this are purged by the worker
    IDEMPOTENCY_TTL_HOURS: int = 24

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8081"


settings = Settings()
