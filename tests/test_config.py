from __future__ import annotations

import pytest
from pydantic import ValidationError

from langschool.core.config import Settings


def test_defaults_enable_strict_transitions_without_payment_gate() -> None:
    settings = Settings(_env_file=None)

    assert settings.enrollment_strict_transitions is True
    assert settings.enrollment_require_payment_for_activation is False
    assert settings.api_prefix == "/api"


def test_in_memory_rate_limiter_requires_explicit_ack_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="production")


def test_in_memory_rate_limiter_allowed_in_production_with_explicit_ack() -> None:
    settings = Settings(
        _env_file=None,
        app_env="production",
        intake_rate_limit_allow_in_memory_in_production=True,
    )
    assert settings.intake_rate_limit_backend == "memory"


def test_redis_backend_requires_redis_url() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, intake_rate_limit_backend="redis")


def test_backend_and_trusted_proxies_are_normalized() -> None:
    settings = Settings(
        _env_file=None,
        intake_rate_limit_backend=" REDIS ",
        redis_url="redis://redis:6379/0",
        intake_rate_limit_trusted_proxy_ips=" 10.0.0.1, ,10.0.0.2 ",
    )

    assert settings.intake_rate_limit_backend == "redis"
    assert settings.intake_rate_limit_trusted_proxy_ips == ("10.0.0.1", "10.0.0.2")


def test_legacy_transitions_toggle_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENROLLMENT_STRICT_TRANSITIONS", "false")
    monkeypatch.setenv("ENROLLMENT_REQUIRE_PAYMENT_FOR_ACTIVATION", "true")

    settings = Settings(_env_file=None)

    assert settings.enrollment_strict_transitions is False
    assert settings.enrollment_require_payment_for_activation is True


def test_trusted_proxies_parsed_from_comma_separated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INTAKE_RATE_LIMIT_TRUSTED_PROXY_IPS", "172.16.0.1,172.16.0.2")

    settings = Settings(_env_file=None)

    assert settings.intake_rate_limit_trusted_proxy_ips == ("172.16.0.1", "172.16.0.2")
