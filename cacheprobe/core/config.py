"""Harness configuration (settings and environment).

Thin adapter at the process boundary. Uses pydantic-settings with .env
support and turns the environment into the plain option mapping consumed by
the connection spec builder. Nothing below the CLI reads the environment.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cacheprobe.core.constants import (
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_FLEXIBLE_CALLS,
    DEFAULT_FLEXIBLE_HARD_TTL,
    DEFAULT_FLEXIBLE_LOCK_SECONDS,
    DEFAULT_FLEXIBLE_SOFT_TTL,
    DEFAULT_HOST,
    DEFAULT_KEY_PREFIX,
    DEFAULT_PORT,
    DEFAULT_SCHEME,
)


class Settings(BaseSettings):
    """Harness settings loaded from environment and .env.

    Endpoint fields accept both the VALKEY_* names used by deployment
    scripts and the REDIS_* names used by application configs.
    """

    # App
    app_name: str = "cacheprobe"
    debug: bool = False

    # Endpoint
    redis_host: str = Field(
        default=DEFAULT_HOST,
        validation_alias=AliasChoices("VALKEY_ENDPOINT", "REDIS_HOST"),
    )
    redis_port: int = Field(
        default=DEFAULT_PORT,
        validation_alias=AliasChoices("VALKEY_PORT", "REDIS_PORT"),
    )
    redis_url: str | None = None
    redis_scheme: str = DEFAULT_SCHEME
    redis_username: str | None = None
    redis_password: SecretStr | None = None
    redis_db: int | None = None
    redis_prefix: str = DEFAULT_KEY_PREFIX
    # Comma-separated host[:port] seeds for cluster mode; empty = derive from host/port
    redis_cluster_nodes: str | None = None

    # Timeouts (seconds)
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT

    # Flexible read probe
    flexible_soft_ttl: int = DEFAULT_FLEXIBLE_SOFT_TTL
    flexible_hard_ttl: int = DEFAULT_FLEXIBLE_HARD_TTL
    flexible_lock_seconds: int = DEFAULT_FLEXIBLE_LOCK_SECONDS
    flexible_calls: int = DEFAULT_FLEXIBLE_CALLS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def validate_flexible_window(self) -> "Settings":
        """Validate flexible TTL ordering and probe call count.

        - Soft TTL must be positive and strictly below the hard TTL.
        - At least one flexible call is required.
        """
        if self.flexible_soft_ttl <= 0:
            raise ValueError("FLEXIBLE_SOFT_TTL must be a positive number of seconds.")
        if self.flexible_hard_ttl <= self.flexible_soft_ttl:
            raise ValueError(
                "FLEXIBLE_HARD_TTL must be greater than FLEXIBLE_SOFT_TTL "
                f"(got soft={self.flexible_soft_ttl}, hard={self.flexible_hard_ttl})."
            )
        if self.flexible_calls < 1:
            raise ValueError("FLEXIBLE_CALLS must be at least 1.")
        return self

    def to_options(self) -> dict[str, str]:
        """Return connection options as the flat string mapping the spec builder accepts.

        Unset optional values are omitted so that builder defaults apply.
        """
        options: dict[str, str] = {
            "host": self.redis_host,
            "port": str(self.redis_port),
            "scheme": self.redis_scheme,
            "prefix": self.redis_prefix,
            "connect_timeout": str(self.connect_timeout),
            "command_timeout": str(self.command_timeout),
        }
        if self.redis_url:
            options["url"] = self.redis_url
        if self.redis_username:
            options["username"] = self.redis_username
        if self.redis_password is not None and self.redis_password.get_secret_value():
            options["password"] = self.redis_password.get_secret_value()
        if self.redis_db is not None:
            options["database"] = str(self.redis_db)
        if self.redis_cluster_nodes is not None:
            options["nodes"] = self.redis_cluster_nodes
        return options


@lru_cache
def get_settings() -> Settings:
    """Return cached harness settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars so
    the next get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
