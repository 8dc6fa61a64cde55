"""Application settings loaded from environment variables."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ACCESS_TOKEN_TTL_DEFAULT = 3600
REFRESH_TOKEN_TTL_DEFAULT = 2_592_000
AUTH_CODE_TTL_DEFAULT = 300
RATE_LIMIT_MAX_REQUESTS_DEFAULT = 10
RATE_LIMIT_WINDOW_SECONDS_DEFAULT = 60.0
DB_POOL_SIZE_DEFAULT = 5
DB_MAX_OVERFLOW_DEFAULT = 10
DB_PORT_DEFAULT = 5432


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    model_config = SettingsConfigDict(env_prefix="CEREBRO_DB_")

    url: str = ""
    host: str = "localhost"
    port: int = DB_PORT_DEFAULT
    user: str = "cerebro"
    password: str = "cerebro"
    database: str = "cerebro"
    pool_size: int = DB_POOL_SIZE_DEFAULT
    max_overflow: int = DB_MAX_OVERFLOW_DEFAULT

    @property
    def async_url(self) -> str:
        """Return the explicit URL, or build an async PostgreSQL one."""
        if self.url:
            return self.url
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.async_url.startswith("sqlite")


class AuthSettings(BaseSettings):
    """OAuth server settings, built once at startup and passed around."""

    model_config = SettingsConfigDict(env_prefix="CEREBRO_")

    base_url: str = "http://localhost:3000"
    allowed_redirect_domains: str = "claude.ai"
    default_redirect_uri: str = "https://claude.ai/api/mcp/auth_callback"
    cors_origins: str = ""
    admin_api_token: str = ""
    access_token_ttl: int = ACCESS_TOKEN_TTL_DEFAULT
    refresh_token_ttl: int = REFRESH_TOKEN_TTL_DEFAULT
    auth_code_ttl: int = AUTH_CODE_TTL_DEFAULT
    rate_limit_max_requests: int = RATE_LIMIT_MAX_REQUESTS_DEFAULT
    rate_limit_window_seconds: float = RATE_LIMIT_WINDOW_SECONDS_DEFAULT
    trusted_proxies: str = ""
    superadmin_email: str = ""
    superadmin_initial_password: str = ""
    log_level: str = "INFO"

    @field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        # Some hosting platforms strip the scheme from the configured URL.
        if value and not value.startswith(("http://", "https://")):
            value = f"https://{value}"
        return value.rstrip("/")

    def get_cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        if not self.cors_origins:
            return []
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_trusted_proxy_list(self) -> list[str]:
        """Parse comma-separated proxy addresses allowed to set X-Forwarded-For."""
        return [p.strip() for p in self.trusted_proxies.split(",") if p.strip()]

    def get_allowed_redirect_domains(self) -> list[str]:
        """Parse comma-separated redirect domains, lowercased."""
        return [
            d.strip().lower().lstrip(".")
            for d in self.allowed_redirect_domains.split(",")
            if d.strip()
        ]
