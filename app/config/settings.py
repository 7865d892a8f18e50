"""Application configuration settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Reservations API"
    api_version: str = "1.0.0"
    debug: bool = False
    api_prefix: str = "/api/v1"
    port: int = 8080
    cors_allow_origins: str = "*"

    # Database. database_url wins when set, otherwise the URL is composed
    # from the individual DATABASE_* variables.
    database_url: str | None = None
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: str = "postgres"
    database_name: str = "reservations"
    database_pool_size: int = 10
    database_max_overflow: int = 10

    # Identity provider (Keycloak gateway) used by the bearer guard
    keycloak_gateway_url: str | None = None
    keycloak_me_endpoint: str | None = None
    identity_provider_timeout: float = 5.0  # seconds
    identity_provider_max_redirects: int = 5

    # Tracing
    tracing_enabled: bool = False
    otel_service_name: str = "reservations-api"
    otel_exporter_otlp_endpoint: str = "http://localhost:4317"
    environment: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def identity_provider_me_url(self) -> str | None:
        """Full URL of the identity provider "me" endpoint, if configured."""
        if not self.keycloak_gateway_url or not self.keycloak_me_endpoint:
            return None
        return f"{self.keycloak_gateway_url}{self.keycloak_me_endpoint}"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
