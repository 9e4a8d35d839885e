"""
Score Factors, Report & Record Validation Tests

Tests verify:
1. Score observations reject out-of-range scores
2. Factor summaries, recommendations and score change direction
3. Composed client report
4. Request schemas and environment settings
"""

import pytest
from datetime import date, datetime

from pydantic import ValidationError

from creditpath.config import AnalyticsSettings, load_settings
from creditpath.models.records import (
    Bureau,
    DisputeAttempt,
    ItemStatus,
    ItemType,
    NegativeItem,
    ScoreObservation,
    ScoreValidationError,
)
from creditpath.models.reports import TrendStatus
from creditpath.models.schemas import (
    NegativeItemRequest,
    ScoreObservationRequest,
    StrategyRequest,
)
from creditpath.services.analytics import (
    describe_score_change,
    generate_recommendations,
    generate_report,
    summarize_score_factors,
)
from creditpath.services.strategy import select_strategy


def obs(score, observed, bureau=Bureau.EXPERIAN, client_id="client_001"):
    return ScoreObservation(client_id=client_id, bureau=bureau, score=score, observed_date=observed)


def item(item_id, item_type, status=ItemStatus.IDENTIFIED, client_id="client_001"):
    return NegativeItem(id=item_id, client_id=client_id, item_type=item_type, status=status)


# =============================================================================
# TEST: ScoreObservation validation
# =============================================================================

class TestScoreObservation:

    @pytest.mark.parametrize("score", [299, 851, 0, -5, 1000])
    def test_out_of_range_rejected(self, score):
        with pytest.raises(ScoreValidationError):
            obs(score, date(2026, 1, 1))

    @pytest.mark.parametrize("score", [300, 850, 712])
    def test_bounds_accepted(self, score):
        assert obs(score, date(2026, 1, 1)).score == score

    def test_non_integer_rejected(self):
        with pytest.raises(ScoreValidationError):
            obs(700.5, date(2026, 1, 1))

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            obs(900, date(2026, 1, 1))

    def test_string_bureau_coerced(self):
        assert obs(700, date(2026, 1, 1), bureau="Equifax").bureau == Bureau.EQUIFAX

    def test_unknown_bureau_rejected(self):
        with pytest.raises(ValueError):
            obs(700, date(2026, 1, 1), bureau="innovis")

    def test_datetime_normalized_to_date(self):
        assert obs(700, datetime(2026, 1, 1, 15, 30)).observed_date == date(2026, 1, 1)

    def test_immutable(self):
        observation = obs(700, date(2026, 1, 1))
        with pytest.raises(AttributeError):
            observation.score = 710


# =============================================================================
# TEST: Factors & recommendations
# =============================================================================

class TestScoreFactors:

    @pytest.fixture
    def items(self):
        return [
            item("c1", ItemType.COLLECTION),
            item("c2", ItemType.COLLECTION, ItemStatus.DELETED),
            item("l1", ItemType.LATE_PAYMENT, ItemStatus.DISPUTING),
        ]

    @pytest.fixture
    def attempts(self):
        return [
            DisputeAttempt("d1", "c1", Bureau.EQUIFAX, "verified", datetime(2026, 1, 1)),
            DisputeAttempt("d2", "c2", Bureau.EQUIFAX, "Resolved", datetime(2026, 1, 2)),
            DisputeAttempt("d3", "l1", Bureau.EXPERIAN, "verified", datetime(2026, 1, 3)),
        ]

    def test_summary(self, items, attempts):
        factors = summarize_score_factors(items, attempts)

        assert factors.item_counts == {
            "collection": {"identified": 1, "deleted": 1},
            "late_payment": {"disputing": 1},
        }
        assert factors.dispute_counts == {"verified": 2, "resolved": 1}
        assert factors.total_negative_items == 3
        assert factors.resolved_items == 1
        assert factors.total_disputes == 3
        assert factors.success_rate == 33.3

    def test_empty(self):
        factors = summarize_score_factors([])
        assert factors.total_negative_items == 0
        assert factors.success_rate == 0.0

    def test_recommendations_for_low_score(self, items):
        recs = generate_recommendations(600, summarize_score_factors(items))
        assert [r.action for r in recs] == [
            "Dispute negative items",
            "Address late payments",
            "Resolve collections",
            "Monitor progress",
        ]
        assert [r.priority for r in recs] == ["high", "high", "high", "medium"]

    def test_recommendations_for_clean_file(self):
        recs = generate_recommendations(720, summarize_score_factors([]))
        assert [r.action for r in recs] == ["Monitor progress"]


# =============================================================================
# TEST: Score change
# =============================================================================

class TestDescribeScoreChange:

    def test_first_score_is_new(self):
        change = describe_score_change([], obs(650, date(2026, 3, 1)))
        assert change.direction == "new"
        assert change.previous_score is None
        assert change.change == 0

    def test_up_and_down(self):
        history = [obs(640, date(2026, 1, 1)), obs(660, date(2026, 2, 1))]
        assert describe_score_change(history, obs(690, date(2026, 3, 1))).direction == "up"

        down = describe_score_change(history, obs(620, date(2026, 3, 1)))
        assert down.direction == "down"
        assert down.previous_score == 660
        assert down.change == -40

    def test_unchanged_counts_as_up(self):
        history = [obs(660, date(2026, 2, 1))]
        assert describe_score_change(history, obs(660, date(2026, 3, 1))).direction == "up"

    def test_other_bureau_and_client_ignored(self):
        history = [
            obs(500, date(2026, 2, 1), bureau=Bureau.EQUIFAX),
            obs(500, date(2026, 2, 1), client_id="client_002"),
        ]
        assert describe_score_change(history, obs(660, date(2026, 3, 1))).direction == "new"

    def test_new_observation_in_history_skipped(self):
        new = obs(700, date(2026, 3, 1))
        change = describe_score_change([obs(650, date(2026, 1, 1)), new], new)
        assert change.previous_score == 650
        assert change.to_dict()["trend"] == "up"


# =============================================================================
# TEST: Client report
# =============================================================================

class TestGenerateReport:

    def test_report(self):
        now = date(2026, 7, 1)
        observations = [
            obs(600, date(2025, 12, 1), Bureau.EXPERIAN),
            obs(640, date(2026, 6, 1), Bureau.EXPERIAN),
            obs(620, date(2026, 6, 1), Bureau.EQUIFAX),
            obs(800, date(2026, 6, 1), Bureau.EQUIFAX, client_id="client_002"),
        ]
        items = [item("c1", ItemType.COLLECTION), item("x9", ItemType.BANKRUPTCY, client_id="client_002")]
        attempts = [DisputeAttempt("d1", "c1", Bureau.EXPERIAN, "verified", datetime(2026, 5, 1))]

        report = generate_report("client_001", observations, items, attempts, now)

        assert report.average_score == 630
        assert report.trends["experian"].trend == TrendStatus.IMPROVING
        assert report.trends["equifax"].trend == TrendStatus.INSUFFICIENT_DATA
        assert report.factors.total_negative_items == 1
        assert report.factors.total_disputes == 1
        assert report.recommendations[0].action == "Dispute negative items"

        data = report.to_dict()
        assert data["report_date"] == "2026-07-01"
        assert data["summary"]["average_score"] == 630
        assert len(data["summary"]["bureaus"]) == 2

    def test_empty_client(self):
        report = generate_report("nobody", [], [], [], date(2026, 7, 1))
        assert report.average_score == 0
        assert report.trends == {}


# =============================================================================
# TEST: Request schemas
# =============================================================================

class TestSchemas:

    def test_score_request_normalizes_bureau(self):
        request = ScoreObservationRequest(client_id="c", bureau="EXPERIAN", score=700)
        observation = request.to_observation(today=date(2026, 3, 1))
        assert observation.bureau == Bureau.EXPERIAN
        assert observation.observed_date == date(2026, 3, 1)

    @pytest.mark.parametrize("score", [299, 851])
    def test_score_request_range(self, score):
        with pytest.raises(ValidationError):
            ScoreObservationRequest(client_id="c", bureau="experian", score=score)

    def test_score_request_bad_bureau(self):
        with pytest.raises(ValidationError):
            ScoreObservationRequest(client_id="c", bureau="innovis", score=700)

    def test_item_request(self):
        request = NegativeItemRequest(
            id="i1", client_id="c", item_type="Charge_Off", bureau="equifax", date_opened="2020-01-15",
        )
        negative_item = request.to_item()
        assert negative_item.item_type == ItemType.CHARGE_OFF
        assert negative_item.date_opened == date(2020, 1, 15)
        assert negative_item.is_active

    def test_item_request_bad_type(self):
        with pytest.raises(ValidationError):
            NegativeItemRequest(id="i1", client_id="c", item_type="student_loan")

    def test_strategy_request_round_range(self):
        with pytest.raises(ValidationError):
            StrategyRequest(item_type="collection", current_round=5)
        assert StrategyRequest(item_type="collection", previous_result="Verified").previous_result == "verified"

    def test_strategy_request_feeds_selector(self):
        request = StrategyRequest(
            item_type="collection",
            bureau="equifax",
            current_round=2,
            previous_result="verified",
            current_score=640,
            total_negative_items=3,
        )
        result = select_strategy(**request.to_kwargs())

        assert result.recommended_dispute_type == "paid"
        assert result.round.id == 2
        assert result.bureau_strategy.key == "equifax"
        assert result.score_estimate is not None
        assert result.to_dict() == select_strategy("collection", "equifax", 2, "verified", 640, 3).to_dict()


# =============================================================================
# TEST: Settings
# =============================================================================

class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CREDITPATH_ANOMALY_WINDOW_DAYS", raising=False)
        assert load_settings() == AnalyticsSettings()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CREDITPATH_ANOMALY_WINDOW_DAYS", "120")
        monkeypatch.setenv("CREDITPATH_SUDDEN_DROP_POINTS", "25")
        settings = load_settings()
        assert settings.anomaly_window_days == 120
        assert settings.sudden_drop_points == 25

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("CREDITPATH_HISTORY_LIMIT", "twelve")
        with pytest.raises(ValueError):
            load_settings()
