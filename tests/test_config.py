from decimal import Decimal
from pathlib import Path

import pytest

from premium_engine.pricing.config import (
    RECOMMEND_LOWEST_TOTAL,
    PricingConfig,
    merge_overrides,
    pricing_config_from_env,
)
from premium_engine.utils.config import env_flag, get_aws_config, get_log_level, get_paths

QUOTE_ENV = (
    "QUOTE_CURRENCY",
    "QUOTE_MIN_COVERAGE",
    "QUOTE_MAX_COVERAGE",
    "QUOTE_MIN_TERM",
    "QUOTE_MAX_TERM",
    "QUOTE_RECOMMENDATION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in QUOTE_ENV + ("RATE_TABLE_DIR", "RATE_TABLE_S3_URI", "AWS_REGION", "AWS_DEFAULT_REGION", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    cfg = pricing_config_from_env()
    assert cfg == PricingConfig()
    assert cfg.min_coverage == Decimal("50000")
    assert cfg.max_term_years == 100


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("QUOTE_CURRENCY", "EUR")
    monkeypatch.setenv("QUOTE_MIN_COVERAGE", "10000")
    monkeypatch.setenv("QUOTE_MAX_TERM", "40")
    monkeypatch.setenv("QUOTE_RECOMMENDATION", "lowest_total")
    monkeypatch.setenv("QUOTE_MAX_COVERAGE", "  ")

    cfg = pricing_config_from_env()

    assert cfg.currency == "EUR"
    assert cfg.min_coverage == Decimal("10000")
    assert cfg.max_coverage == Decimal("10000000")
    assert cfg.max_term_years == 40
    assert cfg.recommendation == RECOMMEND_LOWEST_TOTAL


@pytest.mark.parametrize(
    "key,value",
    [("QUOTE_MIN_TERM", "ten"), ("QUOTE_MIN_COVERAGE", "lots")],
)
def test_unparseable_env_value(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError, match=f"Invalid value for {key}"):
        pricing_config_from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_coverage": Decimal("0")},
        {"min_coverage": Decimal("2"), "max_coverage": Decimal("1")},
        {"min_term_years": 0},
        {"min_term_years": 30, "max_term_years": 20},
        {"recommendation": "cheapest"},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        PricingConfig(**kwargs)


def test_merge_overrides():
    cfg = merge_overrides({"max_term_years": 50, "currency": None})
    assert cfg.max_term_years == 50
    assert cfg.currency == "USD"
    with pytest.raises(KeyError):
        merge_overrides({"discount": 1})


def test_paths(monkeypatch, tmp_path):
    assert get_paths().rate_table_dir == get_paths().root / "data" / "rate_table"
    monkeypatch.setenv("RATE_TABLE_DIR", str(tmp_path))
    assert get_paths().rate_table_dir == Path(tmp_path)


def test_aws_config(monkeypatch):
    assert get_aws_config().enabled is False
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("RATE_TABLE_S3_URI", "s3://rates/prod")
    aws = get_aws_config()
    assert aws.enabled
    assert aws.region == "eu-west-1"


def test_flags_and_log_level(monkeypatch):
    monkeypatch.delenv("PRELOAD_X", raising=False)
    assert env_flag("PRELOAD_X", default=True) is True
    monkeypatch.setenv("PRELOAD_X", "no")
    assert env_flag("PRELOAD_X", default=True) is False
    assert get_log_level() == "INFO"
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"
