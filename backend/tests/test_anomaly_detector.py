"""
Score Anomaly Detector Tests

Tests verify:
1. Sudden drop detection and severity thresholds
2. Bureau inconsistency on latest windowed scores
3. Stagnation while disputes are active
4. Approaching 7-year expiration for active items
5. Checks are independent and never mutate input
"""

import pytest
from datetime import date, datetime

from creditpath.config import AnalyticsSettings
from creditpath.models.records import (
    Bureau,
    DisputeAttempt,
    ItemStatus,
    ItemType,
    NegativeItem,
    ScoreObservation,
)
from creditpath.models.reports import AlertSeverity, AnomalyType
from creditpath.services.analytics import AnomalyDetector, count_disputes_in_window, detect_anomalies
from creditpath.services.analytics.anomaly_detector import months_between


# =============================================================================
# TEST FIXTURES
# =============================================================================

@pytest.fixture
def now():
    """Fixed analysis date; the 90-day window starts 2025-12-31."""
    return date(2026, 3, 31)


@pytest.fixture
def day_0():
    return date(2026, 2, 1)


@pytest.fixture
def day_30():
    return date(2026, 3, 3)


def obs(score, observed, bureau=Bureau.EQUIFAX):
    return ScoreObservation(client_id="client_001", bureau=bureau, score=score, observed_date=observed)


def item(item_id, opened, item_type=ItemType.COLLECTION, status=ItemStatus.IDENTIFIED):
    return NegativeItem(
        id=item_id,
        client_id="client_001",
        item_type=item_type,
        creditor_name="Midland Credit",
        bureau=Bureau.EXPERIAN,
        status=status,
        date_opened=opened,
    )


# =============================================================================
# TEST: Sudden drop
# =============================================================================

class TestSuddenDrop:

    def test_forty_point_drop_is_warning(self, now, day_0, day_30):
        report = detect_anomalies([obs(700, day_0), obs(660, day_30)], [], 0, now)

        assert len(report.alerts) == 1
        alert = report.alerts[0]
        assert alert.type == AnomalyType.SUDDEN_DROP
        assert alert.severity == AlertSeverity.WARNING
        assert alert.bureau == "equifax"
        assert alert.details["drop"] == 40

    def test_seventy_point_drop_is_critical(self, now, day_0, day_30):
        report = detect_anomalies([obs(700, day_0), obs(630, day_30)], [], 0, now)
        assert report.alerts[0].severity == AlertSeverity.CRITICAL

    @pytest.mark.parametrize("drop,expected", [
        (30, None),
        (31, AlertSeverity.WARNING),
        (60, AlertSeverity.WARNING),
        (61, AlertSeverity.CRITICAL),
    ])
    def test_thresholds(self, now, day_0, day_30, drop, expected):
        report = detect_anomalies([obs(700, day_0), obs(700 - drop, day_30)], [], 0, now)
        drops = report.by_type(AnomalyType.SUDDEN_DROP)
        if expected is None:
            assert drops == []
        else:
            assert len(drops) == 1
            assert drops[0].severity == expected

    def test_increase_not_flagged(self, now, day_0, day_30):
        report = detect_anomalies([obs(650, day_0), obs(720, day_30)], [], 0, now)
        assert report.by_type(AnomalyType.SUDDEN_DROP) == []

    def test_previous_reading_outside_window_ignored(self, now):
        series = [obs(700, date(2025, 11, 1)), obs(600, date(2026, 3, 1))]
        report = detect_anomalies(series, [], 0, now)
        assert report.by_type(AnomalyType.SUDDEN_DROP) == []

    def test_each_consecutive_pair_checked(self, now):
        series = [
            obs(720, date(2026, 1, 10)),
            obs(680, date(2026, 2, 10)),
            obs(640, date(2026, 3, 10)),
        ]
        report = detect_anomalies(series, [], 0, now)
        assert len(report.by_type(AnomalyType.SUDDEN_DROP)) == 2

    def test_bureaus_checked_separately(self, now, day_0, day_30):
        """A low score on one bureau followed by another bureau is not a drop."""
        series = [obs(700, day_0, Bureau.EXPERIAN), obs(690, day_30, Bureau.EQUIFAX)]
        report = detect_anomalies(series, [], 0, now)
        assert report.by_type(AnomalyType.SUDDEN_DROP) == []


# =============================================================================
# TEST: Bureau inconsistency
# =============================================================================

class TestBureauInconsistency:

    def test_fifty_point_spread_is_warning(self, now, day_30):
        latest = [obs(720, day_30, Bureau.EXPERIAN), obs(670, day_30, Bureau.EQUIFAX)]
        report = detect_anomalies(latest, [], 0, now)

        alerts = report.by_type(AnomalyType.BUREAU_INCONSISTENCY)
        assert len(alerts) == 1
        assert alerts[0].severity == AlertSeverity.WARNING
        assert alerts[0].details["spread"] == 50
        assert alerts[0].bureau == "equifax"

    def test_ninety_point_spread_is_critical(self, now, day_30):
        latest = [obs(780, day_30, Bureau.EXPERIAN), obs(690, day_30, Bureau.EQUIFAX)]
        alerts = detect_anomalies(latest, [], 0, now).by_type(AnomalyType.BUREAU_INCONSISTENCY)
        assert len(alerts) == 1
        assert alerts[0].severity == AlertSeverity.CRITICAL

    def test_forty_point_spread_not_flagged(self, now, day_30):
        latest = [obs(710, day_30, Bureau.EXPERIAN), obs(670, day_30, Bureau.EQUIFAX)]
        report = detect_anomalies(latest, [], 0, now)
        assert report.by_type(AnomalyType.BUREAU_INCONSISTENCY) == []

    def test_single_bureau_not_flagged(self, now, day_0, day_30):
        report = detect_anomalies([obs(720, day_0), obs(725, day_30)], [], 0, now)
        assert report.by_type(AnomalyType.BUREAU_INCONSISTENCY) == []

    def test_uses_latest_score_per_bureau(self, now, day_0, day_30):
        series = [
            obs(700, day_0, Bureau.EXPERIAN),
            obs(720, day_30, Bureau.EXPERIAN),
            obs(670, day_30, Bureau.EQUIFAX),
        ]
        alerts = detect_anomalies(series, [], 0, now).by_type(AnomalyType.BUREAU_INCONSISTENCY)
        assert alerts[0].details["scores"] == {"experian": 720, "equifax": 670}


# =============================================================================
# TEST: Stagnation
# =============================================================================

class TestStagnation:

    def test_flat_scores_with_active_dispute(self, now, day_0, day_30):
        series = [obs(650, day_0, Bureau.TRANSUNION), obs(655, day_30, Bureau.TRANSUNION)]
        alerts = detect_anomalies(series, [], 1, now).by_type(AnomalyType.STAGNATION)

        assert len(alerts) == 1
        assert alerts[0].severity == AlertSeverity.INFO
        assert alerts[0].bureau == "transunion"
        assert "round" in alerts[0].recommendation.lower()

    def test_no_disputes_no_alert(self, now, day_0, day_30):
        series = [obs(650, day_0), obs(655, day_30)]
        assert detect_anomalies(series, [], 0, now).by_type(AnomalyType.STAGNATION) == []

    def test_ten_point_range_not_stagnant(self, now, day_0, day_30):
        series = [obs(650, day_0), obs(660, day_30)]
        assert detect_anomalies(series, [], 2, now).by_type(AnomalyType.STAGNATION) == []

    def test_single_reading_not_stagnant(self, now, day_30):
        assert detect_anomalies([obs(650, day_30)], [], 2, now).by_type(AnomalyType.STAGNATION) == []

    def test_one_alert_per_stagnant_bureau(self, now, day_0, day_30):
        series = [
            obs(650, day_0, Bureau.EXPERIAN),
            obs(655, day_30, Bureau.EXPERIAN),
            obs(652, day_0, Bureau.EQUIFAX),
            obs(651, day_30, Bureau.EQUIFAX),
        ]
        report = detect_anomalies(series, [], 1, now)
        assert len(report.by_type(AnomalyType.STAGNATION)) == 2
        assert len(report.alerts) == 2


# =============================================================================
# TEST: Approaching expiration
# =============================================================================

class TestApproachingExpiration:

    def test_seventy_eight_months_is_info(self, now):
        report = detect_anomalies([], [item("i1", date(2019, 9, 15))], 0, now)

        alerts = report.by_type(AnomalyType.APPROACHING_EXPIRATION)
        assert len(alerts) == 1
        assert alerts[0].severity == AlertSeverity.INFO
        assert alerts[0].item_id == "i1"
        assert alerts[0].details["age_months"] == 78
        assert alerts[0].details["months_remaining"] == 6
        assert "7-year" in alerts[0].message

    def test_eighty_two_months_is_critical(self, now):
        report = detect_anomalies([], [item("i1", date(2019, 5, 1))], 0, now)
        alerts = report.by_type(AnomalyType.APPROACHING_EXPIRATION)
        assert alerts[0].severity == AlertSeverity.CRITICAL
        assert alerts[0].details["age_months"] == 82

    def test_past_limit_has_no_months_remaining(self, now):
        report = detect_anomalies([], [item("i1", date(2018, 1, 1))], 0, now)
        alert = report.alerts[0]
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.details["months_remaining"] == 0

    def test_seventy_seven_months_not_flagged(self, now):
        assert detect_anomalies([], [item("i1", date(2019, 10, 15))], 0, now).alerts == []

    @pytest.mark.parametrize("negative_item", [
        item("bk", date(2018, 1, 1), item_type=ItemType.BANKRUPTCY),
        item("del", date(2018, 1, 1), status=ItemStatus.DELETED),
        item("legacy", date(2018, 1, 1), status="resolved"),
        item("nodate", None),
    ])
    def test_excluded_items(self, now, negative_item):
        assert detect_anomalies([], [negative_item], 0, now).alerts == []

    def test_timestamp_open_date_is_normalized(self, now):
        legacy = item("ts", datetime(2019, 1, 1, 12))
        assert legacy.date_opened == date(2019, 1, 1)
        assert type(legacy.date_opened) is date

        report = detect_anomalies([], [legacy], 0, now)
        alerts = report.by_type(AnomalyType.APPROACHING_EXPIRATION)
        assert len(alerts) == 1
        assert alerts[0].severity == AlertSeverity.CRITICAL
        assert alerts[0].details["age_months"] == 86

    def test_months_between(self):
        assert months_between(date(2019, 9, 15), date(2026, 3, 31)) == 78
        assert months_between(date(2019, 10, 15), date(2026, 3, 31)) == 77


# =============================================================================
# TEST: Report
# =============================================================================

class TestAnomalyReport:

    def test_empty_history(self, now):
        report = detect_anomalies([], [], 0, now)
        assert report.alerts == []
        assert report.has_anomalies is False
        assert report.counts == {"info": 0, "warning": 0, "critical": 0}

    def test_checks_run_independently(self, now, day_0, day_30):
        observations = [
            obs(700, day_0, Bureau.EQUIFAX),
            obs(660, day_30, Bureau.EQUIFAX),
            obs(720, day_0, Bureau.EXPERIAN),
            obs(724, day_30, Bureau.EXPERIAN),
        ]
        items = [item("i1", date(2019, 9, 15))]
        report = detect_anomalies(observations, items, 1, now)

        assert [a.type for a in report.alerts] == [
            AnomalyType.SUDDEN_DROP,
            AnomalyType.BUREAU_INCONSISTENCY,
            AnomalyType.STAGNATION,
            AnomalyType.APPROACHING_EXPIRATION,
        ]
        assert report.counts == {"info": 2, "warning": 2, "critical": 0}
        assert report.has_anomalies is True

    def test_to_dict(self, now, day_0, day_30):
        data = detect_anomalies([obs(700, day_0), obs(660, day_30)], [], 0, now).to_dict()
        assert data["has_anomalies"] is True
        assert data["window_days"] == 90
        assert data["analyzed_at"] == "2026-03-31"
        assert data["alerts"][0]["type"] == "sudden_drop"
        assert data["alerts"][0]["severity"] == "warning"

    def test_input_not_mutated(self, now, day_0, day_30):
        observations = [obs(630, day_30), obs(700, day_0)]
        snapshot = list(observations)
        detect_anomalies(observations, [], 0, now)
        assert observations == snapshot

    def test_custom_settings(self, now, day_0, day_30):
        detector = AnomalyDetector(AnalyticsSettings(sudden_drop_points=50))
        report = detector.detect([obs(700, day_0), obs(660, day_30)], [], 0, now)
        assert report.alerts == []

    def test_custom_window(self, now):
        detector = AnomalyDetector(AnalyticsSettings(anomaly_window_days=200))
        report = detector.detect([obs(700, date(2025, 11, 1)), obs(650, date(2026, 3, 1))], [], 0, now)
        assert len(report.by_type(AnomalyType.SUDDEN_DROP)) == 1
        assert report.window_days == 200


# =============================================================================
# TEST: count_disputes_in_window
# =============================================================================

class TestCountDisputesInWindow:

    def test_counts_only_window(self, now):
        attempts = [
            DisputeAttempt("d1", "i1", Bureau.EQUIFAX, "pending", datetime(2026, 1, 15, 9, 0)),
            DisputeAttempt("d2", "i1", Bureau.EQUIFAX, "verified", datetime(2025, 11, 1, 9, 0)),
            DisputeAttempt("d3", "i2", Bureau.EXPERIAN, "pending", datetime(2026, 3, 30, 9, 0)),
        ]
        assert count_disputes_in_window(attempts, now) == 2
        assert count_disputes_in_window(attempts, now, window_days=30) == 1
