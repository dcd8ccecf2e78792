"""Configuration provider following Black Box Design principles."""
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "default_secret_key"


@dataclass
class DatabaseConfig:
    """Relational database configuration."""
    url: str
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    pool_recycle: int = 3600

    @property
    def is_sqlite(self) -> bool:
        """Check if the URL points at SQLite."""
        return self.url.startswith("sqlite")


@dataclass
class AuthConfig:
    """Token signing configuration."""
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60 * 24  # 24 hours

    @property
    def secret_bytes(self) -> bytes:
        return self.jwt_secret.encode("utf-8")


@dataclass
class APIConfig:
    """API server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    log_format: Optional[str] = None
    sql_log_level: str = "WARNING"
    debug: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_database_config(self) -> DatabaseConfig:
        """Get database configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_database_config(self) -> DatabaseConfig:
        """
        Get database configuration from environment variables.

        DATABASE_URL takes precedence. Otherwise a MySQL URL is built from
        DB_HOST, DB_PORT, DB_USER, DB_PASSWORD and DB_NAME.
        """
        url = os.getenv("DATABASE_URL")
        if not url:
            host = os.getenv("DB_HOST", "localhost")
            port = os.getenv("DB_PORT", "3306")
            user = os.getenv("DB_USER", "root")
            password = os.getenv("DB_PASSWORD", "")
            name = os.getenv("DB_NAME", "e_season")
            url = f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"

        return DatabaseConfig(
            url=url,
            echo=os.getenv("DB_ECHO", "false").lower() == "true",
            pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
            pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600")),
        )

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        secret = os.getenv("JWT_SECRET")
        if not secret:
            logger.warning("JWT_SECRET is not set, falling back to the development default")
            secret = DEFAULT_JWT_SECRET

        return AuthConfig(
            jwt_secret=secret,
            token_expire_minutes=int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24))),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        origins = os.getenv("CORS_ORIGINS", "*").split(",")
        return APIConfig(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT") or None,
            sql_log_level=os.getenv("SQL_LOG_LEVEL", "WARNING").upper(),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            cors_origins=[origin.strip() for origin in origins if origin.strip()],
        )


class StaticConfigProvider:
    """Provider over explicitly constructed config objects."""

    def __init__(
        self,
        database: DatabaseConfig,
        auth: AuthConfig,
        api: Optional[APIConfig] = None,
    ):
        self._database = database
        self._auth = auth
        self._api = api or APIConfig()

    def get_database_config(self) -> DatabaseConfig:
        return self._database

    def get_auth_config(self) -> AuthConfig:
        return self._auth

    def get_api_config(self) -> APIConfig:
        return self._api
