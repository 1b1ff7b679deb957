from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Search cache
    search_cache_enabled: bool = True
    search_cache_ttl: int = 300  # 5 minutes, provider prices are volatile

    # Offer providers
    offers_api_base_url: str = ""
    offers_api_key: str = ""
    provider_timeout_seconds: float = 8.0          # whole call, retries included
    provider_request_timeout_seconds: float = 2.0  # one HTTP attempt
    provider_backoff_seconds: float = 0.5          # doubled after each failed attempt
    provider_max_retries: int = 3
    provider_concurrency: int = 10

    # Anthropic
    anthropic_api_key: str = ""

    # OpenAI
    openai_api_key: str = ""

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
