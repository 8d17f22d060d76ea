"""Configuration loading, log redaction and tool instrumentation."""

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path

import pytest
from pydantic import BaseModel, ValidationError

from closet_app.config import AnalyticsConfig
from closet_app.logging_config import JsonFormatter, correlation_context, redact_for_log
from models.wardrobe_item import WardrobeItem
from tools.observability import instrument_tool

CONFIG_KEYS = [
    "APP_ENV",
    "APP_CONFIG_PATH",
    "CLOSET_CONFIG_DIR",
    "NEGLECT_THRESHOLD_DAYS",
    "GAP_CACHE_TTL_SECONDS",
    "CACHE_BACKEND",
    "CURRENCY_SYMBOL",
]


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults_without_environment(clean_env: pytest.MonkeyPatch) -> None:
    config = AnalyticsConfig.from_env()
    assert config.neglect_threshold_days == 180
    assert config.gap_cache_ttl_seconds == 86400
    assert config.cache_backend == "memory"
    assert config.currency_symbol == "£"
    assert config.environment is None


def test_environment_yaml_with_env_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "staging.yaml").write_text(
        "# staging\nneglect_threshold_days: 90\ncache_backend: \"json\"\ncurrency_symbol: '$'\n"
    )
    clean_env.setenv("APP_ENV", "staging")
    clean_env.setenv("CLOSET_CONFIG_DIR", str(tmp_path))
    clean_env.setenv("CURRENCY_SYMBOL", "€")

    config = AnalyticsConfig.from_env()
    assert config.environment == "staging"
    assert config.neglect_threshold_days == 90
    assert config.cache_backend == "json"
    assert config.currency_symbol == "€"


def test_explicit_config_path(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "custom.yaml"
    path.write_text("gap_cache_ttl_seconds: 60\nneglect_threshold_days: 9999\n")
    clean_env.setenv("APP_CONFIG_PATH", str(path))

    config = AnalyticsConfig.from_env()
    assert config.gap_cache_ttl_seconds == 60
    assert config.neglect_threshold_days == 180


def test_invalid_values_raise(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("CACHE_BACKEND", "redis")
    with pytest.raises(ValueError, match="cache_backend"):
        AnalyticsConfig.from_env()

    clean_env.setenv("CACHE_BACKEND", "memory")
    clean_env.setenv("GAP_CACHE_TTL_SECONDS", "soon")
    with pytest.raises(ValueError, match="gap_cache_ttl_seconds"):
        AnalyticsConfig.from_env()


def test_redaction_masks_identifiers_and_urls() -> None:
    payload = {
        "user_id": "u1",
        "count": 3,
        "items": [{"name": "Red Coat", "image_url": "https://img/1.png", "category": "outerwear"}],
        "contact": "owner@example.com",
        "link": "https://closet.example/item",
    }
    assert redact_for_log(payload) == {
        "user_id": "[redacted]",
        "count": 3,
        "items": [{"name": "[redacted]", "image_url": "[redacted]", "category": "outerwear"}],
        "contact": "[redacted-email]",
        "link": "[redacted-url]",
    }


def test_json_formatter_includes_correlation_and_extras() -> None:
    record = logging.LogRecord("closet", logging.INFO, __file__, 1, "gap_dismissed", None, None)
    record.event = "gap_dismissed"
    record.gap_id = "cat-tops"

    with correlation_context("corr-123"):
        payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["event"] == "gap_dismissed"
    assert payload["correlation_id"] == "corr-123"
    assert payload["gap_id"] == "cat-tops"


class _Lookup(BaseModel):
    user_id: str
    limit: int = 3


def test_instrument_tool_validates_keyword_arguments() -> None:
    @instrument_tool("lookup", input_model=_Lookup)
    def lookup(*, user_id: str, limit: int) -> tuple:
        return user_id, limit

    assert lookup(user_id="u1", limit="5") == ("u1", 5)
    with pytest.raises(ValidationError):
        lookup(user_id="u1", limit="many")


def test_instrument_tool_can_translate_validation_errors() -> None:
    @instrument_tool("lookup", input_model=_Lookup, on_validation_error=lambda exc: {"errors": exc.error_count()})
    def lookup(*, user_id: str, limit: int) -> tuple:
        return user_id, limit

    assert lookup(limit="x") == {"errors": 2}


def test_instrument_tool_reraises_failures() -> None:
    @instrument_tool("explode")
    def explode() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        explode()


def test_redaction_scrubs_wardrobe_records() -> None:
    item = WardrobeItem(
        "coat",
        "u1",
        "outerwear",
        name="Red Coat",
        image_url="https://img/coat.png",
        created_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
    )
    scrubbed = redact_for_log({"item": item, "worn": date(2026, 5, 1)})

    assert scrubbed["item"]["item_id"] == "coat"
    assert scrubbed["item"]["name"] == "[redacted]"
    assert scrubbed["item"]["image_url"] == "[redacted]"
    assert scrubbed["item"]["user_id"] == "[redacted]"
    assert scrubbed["item"]["created_at"] == "2026-01-02T00:00:00+00:00"
    assert scrubbed["worn"] == "2026-05-01"
