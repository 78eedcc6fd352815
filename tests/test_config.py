import pytest

import config
from config import DEFAULT_SHIPPING_COST, load_settings, parse_sizes
from domain.models import ALL_SIZES
from utils.formatting import format_baht, format_order_date

ENV_VARS = (
    "APP_ENV",
    "SCHEMA",
    "SHIPPING_COST",
    "SHIRT_SIZES",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "TEST_TELEGRAM_BOT_TOKEN",
    "TEST_TELEGRAM_CHAT_ID",
)


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_parse_sizes_keeps_canonical_order():
    assert parse_sizes("xl, s ,M,bogus") == ("S", "M", "XL")


@pytest.mark.parametrize("raw", [None, "", "bogus"])
def test_parse_sizes_defaults_to_all(raw):
    assert parse_sizes(raw) == tuple(ALL_SIZES)


def test_defaults(env):
    settings = load_settings()

    assert settings.schema == "public"
    assert settings.shipping_cost == DEFAULT_SHIPPING_COST
    assert settings.sizes == tuple(ALL_SIZES)
    assert settings.is_test_environment is False


def test_development_uses_test_telegram_chat(env):
    env.setenv("APP_ENV", "development")
    env.setenv("TELEGRAM_CHAT_ID", "prod-chat")
    env.setenv("TEST_TELEGRAM_CHAT_ID", "test-chat")

    settings = load_settings()

    assert settings.is_test_environment is True
    assert settings.telegram_chat_id == "test-chat"


def test_invalid_shipping_cost_falls_back(env):
    env.setenv("SHIPPING_COST", "free")

    assert load_settings().shipping_cost == DEFAULT_SHIPPING_COST


def test_format_baht():
    assert format_baht(1234567) == "1,234,567 บาท"
    assert format_baht(0) == "0 บาท"


def test_format_order_date():
    assert format_order_date("2025-01-31T09:15:00.123+00:00") == "31/01/2025 09:15"
    assert format_order_date(None) == "-"
    assert format_order_date("yesterday") == "yesterday"
