"""Settings: environment names, validation, and option mapping."""

import pytest
from pydantic import ValidationError

from cacheprobe.core.config import Settings, get_settings

ENV_NAMES = (
    "VALKEY_ENDPOINT",
    "VALKEY_PORT",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_URL",
    "REDIS_PASSWORD",
    "REDIS_DB",
    "REDIS_CLUSTER_NODES",
    "FLEXIBLE_SOFT_TTL",
    "FLEXIBLE_HARD_TTL",
    "FLEXIBLE_CALLS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env) -> None:
    settings = Settings(_env_file=None)
    assert settings.redis_host == "127.0.0.1"
    assert settings.redis_port == 6379
    assert settings.flexible_soft_ttl == 30
    assert settings.flexible_hard_ttl == 60


def test_valkey_names(clean_env) -> None:
    clean_env.setenv("VALKEY_ENDPOINT", "redis-node-1")
    clean_env.setenv("VALKEY_PORT", "7000")
    settings = Settings(_env_file=None)
    assert settings.redis_host == "redis-node-1"
    assert settings.redis_port == 7000


def test_redis_names(clean_env) -> None:
    clean_env.setenv("REDIS_HOST", "cache.local")
    clean_env.setenv("REDIS_PORT", "6380")
    settings = Settings(_env_file=None)
    assert settings.redis_host == "cache.local"
    assert settings.redis_port == 6380


def test_hard_ttl_must_exceed_soft(clean_env) -> None:
    clean_env.setenv("FLEXIBLE_SOFT_TTL", "60")
    clean_env.setenv("FLEXIBLE_HARD_TTL", "60")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_flexible_calls_at_least_one(clean_env) -> None:
    clean_env.setenv("FLEXIBLE_CALLS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_to_options_minimal(clean_env) -> None:
    options = Settings(_env_file=None).to_options()
    assert options == {
        "host": "127.0.0.1",
        "port": "6379",
        "scheme": "tcp",
        "prefix": "cacheprobe:",
        "connect_timeout": "3.0",
        "command_timeout": "3.0",
    }


def test_to_options_includes_optional_values(clean_env) -> None:
    clean_env.setenv("REDIS_URL", "redis://cache.local:6379/0")
    clean_env.setenv("REDIS_PASSWORD", "s3cret")
    clean_env.setenv("REDIS_DB", "0")
    clean_env.setenv("REDIS_CLUSTER_NODES", "a:7000,b:7001")
    options = Settings(_env_file=None).to_options()
    assert options["url"] == "redis://cache.local:6379/0"
    assert options["password"] == "s3cret"
    assert options["database"] == "0"
    assert options["nodes"] == "a:7000,b:7001"


def test_password_is_secret(clean_env) -> None:
    clean_env.setenv("REDIS_PASSWORD", "s3cret")
    assert "s3cret" not in repr(Settings(_env_file=None))


def test_get_settings_is_cached(clean_env) -> None:
    assert get_settings() is get_settings()
