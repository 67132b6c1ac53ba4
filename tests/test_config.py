import os
import pytest

from unittest.mock import patch

from cloudflare_dyndns.config import Config, parse_zones
from cloudflare_dyndns.exceptions import ConfigError
from cloudflare_dyndns.models import Zone


BASE_ENV = {
    "CLOUDFLARE_EMAIL": "ops@starbase.com",
    "CLOUDFLARE_API_KEY": "mock_key",
    "CLOUDFLARE_API_TOKEN": "mock_token",
    "CLOUDFLARE_ZONES": "home.starbase.com=aaa111,vpn.starbase.net=bbb222",
}

OPTIONAL_VARS = (
    "CLOUDFLARE_API_BASE_URL", "PUBLIC_IP_URL", "API_TIMEOUT", "API_RETRIES",
    "MAX_WORKERS", "RECORD_TTL", "RECORD_PROXIED", "RECORD_COMMENT",
    "LOG_LEVEL", "LOG_TIMING",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep a developer's .env and shell exports out of these tests."""
    monkeypatch.setattr("cloudflare_dyndns.config.load_dotenv", lambda *a, **k: None)
    for name in OPTIONAL_VARS + tuple(BASE_ENV):
        monkeypatch.delenv(name, raising=False)


@patch.dict(os.environ, BASE_ENV)
def test_from_env_defaults():
    """Required values are read and every optional value falls back to its default"""
    config = Config.from_env()

    assert config.account_email == "ops@starbase.com"
    assert config.bearer_token == "mock_token"
    assert config.zones == (
        Zone("home.starbase.com", "aaa111"),
        Zone("vpn.starbase.net", "bbb222"),
    )
    assert config.api_base_url == "https://api.cloudflare.com/client/v4"
    assert config.ip_service_url == "https://api.ipify.org"
    assert config.api_timeout == 8
    assert config.api_retries == 0
    assert config.record_ttl == 1
    assert config.record_proxied is True
    assert config.record_comment == "Auto-updated"
    assert config.log_timing is False


@patch.dict(os.environ, {
    **BASE_ENV,
    "CLOUDFLARE_API_BASE_URL": "https://mock.api.com/v4/",
    "API_TIMEOUT": "3",
    "API_RETRIES": "2",
    "RECORD_TTL": "300",
    "RECORD_PROXIED": "false",
    "LOG_LEVEL": "debug",
    "LOG_TIMING": "true",
})
def test_from_env_overrides():
    config = Config.from_env()

    assert config.api_base_url == "https://mock.api.com/v4"
    assert config.api_timeout == 3
    assert config.api_retries == 2
    assert config.record_ttl == 300
    assert config.record_proxied is False
    assert config.log_level == "DEBUG"
    assert config.log_timing is True


@pytest.mark.parametrize(
    "overrides, message",
    [
        # ❌ Missing credentials
        ({"CLOUDFLARE_API_TOKEN": ""}, "CLOUDFLARE_API_TOKEN"),

        # ❌ No zones
        ({"CLOUDFLARE_ZONES": ""}, "at least one zone"),

        # ❌ Duplicate domains would share a cache slot
        ({"CLOUDFLARE_ZONES": "a.com=1,a.com=2"}, "Duplicate"),

        # ❌ TTL outside Cloudflare's range
        ({"RECORD_TTL": "30"}, "RECORD_TTL"),

        # ❌ Malformed integer
        ({"API_TIMEOUT": "soon"}, "API_TIMEOUT"),

        # ❌ Negative retries
        ({"API_RETRIES": "-1"}, "API_RETRIES"),

        # ❌ Unknown log level
        ({"LOG_LEVEL": "CHATTY"}, "LOG_LEVEL"),

        # ❌ Misspelled booleans are not silently false
        ({"RECORD_PROXIED": "ture"}, "RECORD_PROXIED"),
        ({"LOG_TIMING": "yes please"}, "LOG_TIMING"),
    ],
)
def test_from_env_rejects_invalid(monkeypatch, overrides, message):
    for name, value in {**BASE_ENV, **overrides}.items():
        monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError, match=message):
        Config.from_env()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ()),
        ("a.com=1", (Zone("a.com", "1"),)),
        (" a.com = 1 , b.org=2 ,", (Zone("a.com", "1"), Zone("b.org", "2"))),
        ('[{"domain": "a.com", "zoneId": "1"}, {"domain": "b.org", "zoneId": "2"}]',
         (Zone("a.com", "1"), Zone("b.org", "2"))),
    ],
)
def test_parse_zones(raw, expected):
    assert parse_zones(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "a.com",
        "a.com=",
        "=1",
        "[not json",
        '[{"domain": "a.com"}]',
        '["a.com"]',
        '[{"domain": null, "zoneId": "1"}]',
        '[{"domain": "a.com", "zoneId": null}]',
        '[{"domain": "a.com", "zoneId": 1}]',
    ],
)
def test_parse_zones_malformed(raw):
    with pytest.raises(ConfigError):
        parse_zones(raw)


@pytest.mark.parametrize("value, expected", [
    ("1", True), ("TRUE", True), ("yes", True), ("on", True),
    ("0", False), ("False", False), ("no", False), ("off", False),
    ("", True),
])
def test_record_proxied_values(monkeypatch, value, expected):
    for name, env_value in {**BASE_ENV, "RECORD_PROXIED": value}.items():
        monkeypatch.setenv(name, env_value)

    assert Config.from_env().record_proxied is expected
