import os
from pydantic import BaseModel


class Settings(BaseModel):
    api_key: str = os.getenv("API_KEY", "change-me")

    # Text generation provider: "openai", "http" or "rule"
    text_provider: str = os.getenv("TEXT_PROVIDER", "rule")

    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", "0.3"))
    openai_max_tokens: int = int(os.getenv("OPENAI_MAX_TOKENS", "750"))

    text_api_base: str = os.getenv("TEXT_API_BASE", "http://localhost:8003/v1")
    text_api_key: str | None = os.getenv("TEXT_API_KEY")
    text_api_timeout_seconds: float = float(os.getenv("TEXT_API_TIMEOUT_SECONDS", "60"))

    # Retry policy for text generation
    generation_max_attempts: int = int(os.getenv("GENERATION_MAX_ATTEMPTS", "3"))
    generation_retry_delay_seconds: float = float(os.getenv("GENERATION_RETRY_DELAY_SECONDS", "1.0"))

    # JWT
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    jwt_audience: str | None = os.getenv("JWT_AUDIENCE")
    jwt_issuer: str | None = os.getenv("JWT_ISSUER")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", "3600"))

    # Rate limit (token bucket)
    rate_limit_per_min: int = int(os.getenv("RATE_LIMIT_PER_MIN", "60"))
    rate_limit_burst: int = int(os.getenv("RATE_LIMIT_BURST", "30"))

    # Analysis store TTL seconds
    cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "600"))


settings = Settings()
