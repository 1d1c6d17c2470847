"""Application settings using pydantic-settings.

Settings are loaded from environment variables (or a ``.env`` file).
Secrets have no defaults: a deployment that forgets one fails at startup
instead of running with an empty key.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        PORTCULLIS_DB_HOST: Database host (default: localhost)
        PORTCULLIS_DB_PORT: Database port (default: 5432)
        PORTCULLIS_DB_DATABASE: Database name (default: portcullis)
        PORTCULLIS_DB_USERNAME: Database user (default: portcullis)
        PORTCULLIS_DB_PASSWORD: Database password (required)
        PORTCULLIS_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        PORTCULLIS_DB_POOL_TIMEOUT_SECONDS: Wait for a free connection (default: 30)
        PORTCULLIS_DB_APPLICATION_NAME: Name reported to the server (default: portcullis)
        PORTCULLIS_DB_ECHO_SQL: Log every statement (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTCULLIS_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="portcullis", description="Database name")
    username: str = Field(default="portcullis", description="Database username")
    password: SecretStr = Field(description="Database password")
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    pool_timeout_seconds: float = Field(default=30.0, gt=0)
    application_name: str = Field(default="portcullis", min_length=1)
    echo_sql: bool = Field(default=False)

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Local credential settings.

    Environment variables:
        PORTCULLIS_AUTH_SESSION_SECRET: HS256 signing secret, at least 32 chars (required)
        PORTCULLIS_AUTH_SESSION_ISSUER: ``iss`` claim of session tokens (default: portcullis)
        PORTCULLIS_AUTH_SESSION_EXPIRY_HOURS: Session token lifetime (default: 12)
        PORTCULLIS_AUTH_BCRYPT_ROUNDS: bcrypt work factor, 10..16 (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTCULLIS_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    session_secret: SecretStr = Field(description="Session token signing secret")
    session_issuer: str = Field(default="portcullis", min_length=1)
    session_expiry_hours: int = Field(default=12, ge=1, le=24 * 30)
    bcrypt_rounds: int = Field(default=10, ge=10, le=16)

    @field_validator("session_secret")
    @classmethod
    def validate_secret_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 32:
            raise ValueError("session_secret must be at least 32 characters")
        return v

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.session_expiry_hours)


class IdentityProviderSettings(BaseSettings):
    """Federated identity provider settings.

    Environment variables:
        PORTCULLIS_IDP_SECRET_KEY: Admin API secret key (required)
        PORTCULLIS_IDP_API_URL: Admin API base URL (default: https://api.clerk.com/v1)
        PORTCULLIS_IDP_ISSUER_URL: Token issuer URL used for OIDC discovery (required)
        PORTCULLIS_IDP_AUDIENCE: Expected ``aud`` claim (default: unchecked)
        PORTCULLIS_IDP_AUTHORIZED_PARTIES: Comma separated accepted ``azp`` values
        PORTCULLIS_IDP_JWKS_CACHE_TTL_SECONDS: JWKS cache lifetime (default: 3600)
        PORTCULLIS_IDP_TIMEOUT_SECONDS: HTTP timeout for provider calls (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTCULLIS_IDP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: SecretStr = Field(description="Identity provider admin secret key")
    api_url: str = Field(default="https://api.clerk.com/v1")
    issuer_url: str = Field(description="Identity provider token issuer URL")
    audience: str | None = Field(default=None)
    authorized_parties: Annotated[list[str], NoDecode] = Field(default_factory=list)
    jwks_cache_ttl_seconds: int = Field(default=3600, ge=0)
    timeout_seconds: float = Field(default=5.0, gt=0)

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("secret_key must not be empty")
        return v

    @field_validator("issuer_url", "api_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Expected an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("authorized_parties", mode="before")
    @classmethod
    def split_authorized_parties(cls, v: object) -> object:
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @property
    def jwks_cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.jwks_cache_ttl_seconds)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="PORTCULLIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Portcullis API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    create_schema: bool = Field(
        default=False,
        description="Create missing tables at startup",
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get local credential settings."""
        return get_auth_settings()

    @property
    def identity_provider(self) -> IdentityProviderSettings:
        """Get identity provider settings."""
        return get_identity_provider_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()  # type: ignore[call-arg]


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached local credential settings."""
    return AuthSettings()  # type: ignore[call-arg]


@lru_cache
def get_identity_provider_settings() -> IdentityProviderSettings:
    """Get cached identity provider settings."""
    return IdentityProviderSettings()  # type: ignore[call-arg]


def load_all_settings() -> Settings:
    """Load every settings group.

    Raises:
        pydantic.ValidationError: If a required value is missing or malformed.
    """
    get_database_settings()
    get_auth_settings()
    get_identity_provider_settings()
    return get_settings()
