"""Configuration settings for Palate Service."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Graph backend
    graph_backend: Literal["neo4j", "memory"] = "neo4j"

    # Neo4j
    neo4j_uri: str = "neo4j://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    neo4j_database: str = "neo4j"
    neo4j_max_pool_size: int = 50
    neo4j_connection_timeout: float = 30.0  # seconds, also used for pool acquisition

    # PostgreSQL (account + onboarding store)
    onboarding_backend: Literal["postgres", "memory"] = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "palate"
    postgres_password: str = "palate123"
    postgres_db: str = "palate_db"

    # Restaurant search (SerpApi)
    serpapi_api_key: str = ""
    serpapi_base_url: str = "https://serpapi.com/search.json"
    search_radius_km: float = 10.0
    results_per_dietary_query: int = 20
    results_per_preference_query: int = 5
    search_timeout_seconds: float = 20.0

    # Generation (Gemini)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 500

    # Knowledge graph behaviour
    behavior_retention_days: int = 90
    profile_window_days: int = 30

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8003
    debug: bool = False
    log_level: str = "INFO"

    # Service
    service_name: str = "palate-service"
    service_version: str = "0.1.0"

    @property
    def postgres_url(self) -> str:
        """Get PostgreSQL connection URL."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
