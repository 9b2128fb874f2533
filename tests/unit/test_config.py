"""Unit tests for settings and policies."""

from __future__ import annotations

from datetime import timedelta

import pytest

from fortnox.config import (
    API_BASE_URL,
    DEFAULT_MIN_INTERVAL,
    ClientSettings,
    RateLimitPolicy,
    TokenPolicy,
)


def test_from_env_minimal(monkeypatch):
    monkeypatch.setenv("FORTNOX_ACCESS_TOKEN", "abc")
    for name in ("REFRESH_TOKEN", "CLIENT_ID", "CLIENT_SECRET", "EXPIRES_IN", "MIN_INTERVAL", "API_BASE_URL"):
        monkeypatch.delenv(f"FORTNOX_{name}", raising=False)

    settings = ClientSettings.from_env()

    assert settings.access_token == "abc"
    assert settings.api_base_url == API_BASE_URL
    assert settings.rate_limit.min_interval == DEFAULT_MIN_INTERVAL
    assert not settings.can_refresh


def test_from_env_full(monkeypatch):
    monkeypatch.setenv("FX_ACCESS_TOKEN", "abc")
    monkeypatch.setenv("FX_REFRESH_TOKEN", "ref")
    monkeypatch.setenv("FX_CLIENT_ID", "cid")
    monkeypatch.setenv("FX_CLIENT_SECRET", "sec")
    monkeypatch.setenv("FX_EXPIRES_IN", "3600")
    monkeypatch.setenv("FX_MIN_INTERVAL", "0.2")

    settings = ClientSettings.from_env(prefix="FX_")

    assert settings.can_refresh
    assert settings.expires_in == 3600
    assert settings.rate_limit.min_interval == 0.2


def test_from_env_requires_access_token(monkeypatch):
    monkeypatch.delenv("FORTNOX_ACCESS_TOKEN", raising=False)
    with pytest.raises(KeyError):
        ClientSettings.from_env()


def test_policy_validation():
    with pytest.raises(ValueError):
        RateLimitPolicy(min_interval=-1)
    with pytest.raises(ValueError):
        RateLimitPolicy(max_throttle_retries=-1)
    with pytest.raises(ValueError):
        TokenPolicy(safety_margin=timedelta(seconds=-1))
    assert RateLimitPolicy().max_throttle_retries == 1
