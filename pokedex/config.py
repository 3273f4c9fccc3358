"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    POKEAPI_BASE_URL: str = "https://pokeapi.co/api/v2/"
    POKEAPI_TIMEOUT: float = 10.0
    SPECIES_CACHE_TTL: int = 6 * 3600
    DETAIL_CACHE_TTL: int = 30 * 60
    SPECIES_LIST_LIMIT: int = 10000
    SPECIES_OPTIONS_LIMIT: int = 20
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    DETAIL_FETCH_CONCURRENCY: int = 1
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8080"
    RATE_LIMIT: str = "100/minute"
    DEBUG: bool = False

    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    SMTP_FROM: str = "pokedex@localhost"
    SMTP_FROM_NAME: str = "Pokemon"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
