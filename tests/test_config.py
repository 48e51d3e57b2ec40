import pytest

from config import analytics_from_env, get_settings_module
from src.attendance_risk.attendance_risk.core.config import AnalyticsConfig
from src.attendance_risk.attendance_risk.core.exceptions import ValidationError


def test_defaults():
    cfg = AnalyticsConfig()

    assert cfg.recency_half_life_days == 30.0
    assert cfg.recent_window_days == 21
    assert cfg.min_effective_days == 3
    assert cfg.min_days_pattern == 8
    assert cfg.min_days_sequence == 10


@pytest.mark.parametrize(
    "overrides",
    [
        {"recency_half_life_days": 0},
        {"recent_window_days": 0},
        {"min_days_momentum": 1},
        {"suppress_min_engagement": 120},
        {"trend_r_squared_floor": 1.5},
        {"trend_sensitive_slope_threshold": 3.0},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        AnalyticsConfig(**overrides)


def test_from_mapping_casts_strings():
    cfg = AnalyticsConfig.from_mapping({"recent_window_days": "14", "recency_half_life_days": "45.5"})

    assert cfg.recent_window_days == 14
    assert cfg.recency_half_life_days == 45.5


def test_from_mapping_skips_missing_values():
    assert AnalyticsConfig.from_mapping({"recent_window_days": None}) == AnalyticsConfig()
    assert AnalyticsConfig.from_mapping(None) == AnalyticsConfig()


def test_from_mapping_rejects_unknown_and_garbage():
    with pytest.raises(ValidationError):
        AnalyticsConfig.from_mapping({"half_life": 10})
    with pytest.raises(ValidationError):
        AnalyticsConfig.from_mapping({"recent_window_days": "three weeks"})


@pytest.mark.parametrize(
    "env, module",
    [
        ("production", "config.production"),
        ("prod", "config.production"),
        ("testing", "config.testing"),
        ("development", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_settings_module(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == module


def test_analytics_from_env(monkeypatch):
    monkeypatch.setenv("RISK_RECENT_WINDOW_DAYS", "28")
    monkeypatch.setenv("RISK_MIN_EFFECTIVE_DAYS", "")

    overrides = analytics_from_env()

    assert overrides == {"recent_window_days": "28"}
    assert AnalyticsConfig.from_mapping(overrides).recent_window_days == 28
