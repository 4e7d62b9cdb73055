from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Travelpayouts
    tp_token: str = ""
    tp_marker: str = "678943"
    tp_api_base: str = "https://api.travelpayouts.com"
    tp_autocomplete_url: str = "https://autocomplete.travelpayouts.com"
    hotellook_api_base: str = "https://engine.hotellook.com"
    aviasales_domain: str = "https://www.aviasales.com"
    locale: str = "en"

    # Hotellook live search needs upgraded partner access
    hotels_enabled: bool = False

    # Outbound HTTP
    http_timeout_seconds: float = 8.0
    http_max_retries: int = 3
    http_retry_base_delay_seconds: float = 1.0
    http_max_retry_after_seconds: float = 30.0

    # Cache
    redis_url: str = "redis://localhost:6379/0"
    durable_cache_enabled: bool = True
    cache_storage_prefix: str = "traveller_cache_"
    location_cache_ttl: int = 24 * 60 * 60  # 24 hours
    flight_cache_ttl: int = 60 * 60         # 1 hour
    hotel_cache_ttl: int = 60 * 60          # 1 hour
    cache_cleanup_interval_minutes: int = 5

    # Scheduler
    scheduler_enabled: bool = True

    # CORS
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
