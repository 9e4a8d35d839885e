"""
CreditPath - Configuration

Analytics thresholds. Defaults match the dispute program's published rules;
each value can be overridden from the environment for a deployment.
"""
import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class AnalyticsSettings:
    """Thresholds used by the trend, anomaly and history calculators."""
    # Anomaly detection
    anomaly_window_days: int = 90
    sudden_drop_points: int = 30
    sudden_drop_critical_points: int = 60
    inconsistency_points: int = 40
    inconsistency_critical_points: int = 80
    stagnation_range_points: int = 10

    # FCRA § 605(a) obsolescence - alert in the last months of the 7-year window
    expiration_min_age_years: int = 6
    expiration_alert_months: int = 78
    expiration_critical_months: int = 82
    reporting_limit_months: int = 84

    # Trend / history
    trend_window_months: int = 6
    history_limit: int = 12


def load_settings() -> AnalyticsSettings:
    """Build settings from CREDITPATH_* environment variables."""
    defaults = AnalyticsSettings()
    return AnalyticsSettings(
        anomaly_window_days=_env_int("CREDITPATH_ANOMALY_WINDOW_DAYS", defaults.anomaly_window_days),
        sudden_drop_points=_env_int("CREDITPATH_SUDDEN_DROP_POINTS", defaults.sudden_drop_points),
        sudden_drop_critical_points=_env_int(
            "CREDITPATH_SUDDEN_DROP_CRITICAL_POINTS", defaults.sudden_drop_critical_points
        ),
        inconsistency_points=_env_int("CREDITPATH_INCONSISTENCY_POINTS", defaults.inconsistency_points),
        inconsistency_critical_points=_env_int(
            "CREDITPATH_INCONSISTENCY_CRITICAL_POINTS", defaults.inconsistency_critical_points
        ),
        stagnation_range_points=_env_int("CREDITPATH_STAGNATION_RANGE_POINTS", defaults.stagnation_range_points),
        expiration_alert_months=_env_int("CREDITPATH_EXPIRATION_ALERT_MONTHS", defaults.expiration_alert_months),
        expiration_critical_months=_env_int(
            "CREDITPATH_EXPIRATION_CRITICAL_MONTHS", defaults.expiration_critical_months
        ),
        trend_window_months=_env_int("CREDITPATH_TREND_WINDOW_MONTHS", defaults.trend_window_months),
        history_limit=_env_int("CREDITPATH_HISTORY_LIMIT", defaults.history_limit),
    )


_settings: Optional[AnalyticsSettings] = None


def get_settings() -> AnalyticsSettings:
    """Process-wide settings, read from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
