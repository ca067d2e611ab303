from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional
from payments_service.domain.exceptions import ConfigurationError

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Store address
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "payments_v1"
    POSTGRES_USER: str = "payments"
    POSTGRES_PASSWORD: str = "payments"
    PAYMENTS_COLLECTION: str = "payments"
    # Full SQLAlchemy URL; takes precedence over the POSTGRES_* parts
    DATABASE_URL: Optional[str] = None

    # HTTP listen address
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    LOG_LEVEL: str = "INFO"
    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    RUN_MIGRATIONS: bool = True

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    def validate_store(self) -> None:
        """Raise ConfigurationError when a store parameter is missing."""
        missing = []
        if not self.DATABASE_URL:
            if not self.POSTGRES_HOST:
                missing.append("POSTGRES_HOST")
            if not self.POSTGRES_DB:
                missing.append("POSTGRES_DB")
        if not self.PAYMENTS_COLLECTION:
            missing.append("PAYMENTS_COLLECTION")
        if missing:
            raise ConfigurationError(
                f"You must specify a valid host, database name and collection (missing: {', '.join(missing)})"
            )

@lru_cache
def get_settings() -> Settings:
    return Settings()
