from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    BACKEND_URL: str = "http://localhost:54321"
    BACKEND_API_KEY: str = ""
    BACKEND_TIMEOUT: float = 10.0

    REDIS_URL: str = "redis://localhost:6379/0"

    QUOTE_CACHE_TTL: int = 60   # 60 seconds
    IDEMPOTENCY_TTL: int = 300  # 5 minutes

    QUOTE_IMMEDIATE_FEE: float = 10.0
    QUOTE_PROMO_DISCOUNT: float = 16.0
    QUOTE_TAX_RATE: float = 0.16  # IVA

    SEARCH_SIMILARITY_FLOOR: float = 0.3
    SEARCH_SEMANTIC_MIN_QUERY_LENGTH: int = 10
    SEARCH_SEMANTIC_LIMIT: int = 10
    SEARCH_LEXICAL_LIMIT: int = 10

    WEBHOOK_URL: str = ""
    WEBHOOK_TIMEOUT: int = 10
    WEBHOOK_RETRIES: int = 3

    API_TITLE: str = "Service Quote Engine"
    API_DESCRIPTION: str = "Quote pricing, hybrid search and request validation for a local-services marketplace"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
