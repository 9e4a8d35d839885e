"""
Score Anomaly Detector

Scans recent score history and negative items for:
- Sudden drops between consecutive readings of one bureau
- Inconsistency between the latest scores of different bureaus
- Stagnation while disputes are in flight
- Negative items approaching the FCRA 7-year reporting limit

Consumes: ScoreObservation, NegativeItem, DisputeAttempt snapshots
Outputs: AnomalyReport (read-only intelligence)

Every check is independent; the report is the concatenation of their alerts.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from ...config import AnalyticsSettings, get_settings
from ...models.records import DisputeAttempt, ItemType, NegativeItem, ScoreObservation, enum_value
from ...models.reports import AlertSeverity, AnomalyAlert, AnomalyReport, AnomalyType
from .trend import latest_scores, sort_chronologically

logger = logging.getLogger(__name__)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end."""
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def count_disputes_in_window(
    attempts: Iterable[DisputeAttempt],
    now: date,
    window_days: Optional[int] = None,
) -> int:
    """Number of disputes sent within [now - window_days, now]."""
    if window_days is None:
        window_days = get_settings().anomaly_window_days
    start = now - timedelta(days=window_days)
    return sum(1 for a in attempts if start <= a.sent_on <= now)


class AnomalyDetector:
    """
    Detects score anomalies over a trailing window.

    Usage:
        detector = AnomalyDetector()
        report = detector.detect(observations, items, disputes_in_window=2, now=date(2026, 3, 1))
    """

    def __init__(self, settings: Optional[AnalyticsSettings] = None):
        self.settings = settings or get_settings()

    def detect(
        self,
        observations: Iterable[ScoreObservation],
        items: Iterable[NegativeItem],
        disputes_in_window: int,
        now: date,
    ) -> AnomalyReport:
        """
        Run all checks against the trailing window ending at `now`.

        Args:
            observations: Score observations for one client, all bureaus
            items: The client's negative items
            disputes_in_window: Disputes sent within the same window
            now: Reference date (window end, age calculations)
        """
        windowed = self._window(observations, now)
        by_bureau = self._group_by_bureau(windowed)

        alerts: List[AnomalyAlert] = []
        alerts.extend(self.check_sudden_drops(by_bureau))
        alerts.extend(self.check_bureau_inconsistency(windowed))
        alerts.extend(self.check_stagnation(by_bureau, disputes_in_window))
        alerts.extend(self.check_approaching_expiration(items, now))

        report = AnomalyReport(
            alerts=alerts,
            analyzed_at=now,
            window_days=self.settings.anomaly_window_days,
        )
        logger.info(
            f"Anomaly scan over {len(windowed)} observations: {len(alerts)} alerts "
            f"({report.counts['critical']} critical, {report.counts['warning']} warning, "
            f"{report.counts['info']} info)"
        )
        return report

    # -------------------------------------------------------------------------
    # Window helpers
    # -------------------------------------------------------------------------

    def _window(self, observations: Iterable[ScoreObservation], now: date) -> List[ScoreObservation]:
        start = now - timedelta(days=self.settings.anomaly_window_days)
        return [o for o in sort_chronologically(observations) if start <= o.observed_date <= now]

    @staticmethod
    def _group_by_bureau(observations: List[ScoreObservation]) -> Dict[str, List[ScoreObservation]]:
        grouped: Dict[str, List[ScoreObservation]] = defaultdict(list)
        for obs in observations:
            grouped[obs.bureau.value].append(obs)
        return {b: grouped[b] for b in sorted(grouped)}

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def check_sudden_drops(self, by_bureau: Dict[str, List[ScoreObservation]]) -> List[AnomalyAlert]:
        alerts = []
        for bureau, series in by_bureau.items():
            for previous, current in zip(series, series[1:]):
                drop = previous.score - current.score
                if drop <= self.settings.sudden_drop_points:
                    continue
                severity = (
                    AlertSeverity.CRITICAL
                    if drop > self.settings.sudden_drop_critical_points
                    else AlertSeverity.WARNING
                )
                alerts.append(AnomalyAlert(
                    type=AnomalyType.SUDDEN_DROP,
                    severity=severity,
                    message=(
                        f"{bureau.title()} score dropped {drop} points "
                        f"({previous.score} -> {current.score}) between "
                        f"{previous.observed_date.isoformat()} and {current.observed_date.isoformat()}"
                    ),
                    recommendation=(
                        "Pull a fresh report from this bureau and look for new collections, "
                        "late payments, inquiries or re-aged accounts; dispute anything inaccurate"
                    ),
                    bureau=bureau,
                    details={
                        "previous_score": previous.score,
                        "current_score": current.score,
                        "drop": drop,
                        "previous_date": previous.observed_date.isoformat(),
                        "current_date": current.observed_date.isoformat(),
                    },
                ))
        return alerts

    def check_bureau_inconsistency(self, windowed: List[ScoreObservation]) -> List[AnomalyAlert]:
        latest = latest_scores(windowed)
        if len(latest) < 2:
            return []

        scores = {o.bureau.value: o.score for o in latest}
        highest = max(latest, key=lambda o: o.score)
        lowest = min(latest, key=lambda o: o.score)
        spread = highest.score - lowest.score
        if spread <= self.settings.inconsistency_points:
            return []

        severity = (
            AlertSeverity.CRITICAL
            if spread > self.settings.inconsistency_critical_points
            else AlertSeverity.WARNING
        )
        return [AnomalyAlert(
            type=AnomalyType.BUREAU_INCONSISTENCY,
            severity=severity,
            message=(
                f"{spread}-point spread between bureaus: "
                f"{highest.bureau.value.title()} {highest.score} vs "
                f"{lowest.bureau.value.title()} {lowest.score}"
            ),
            recommendation=(
                f"Compare the {lowest.bureau.value.title()} report against the others; items "
                "reported to only one bureau or reported differently are strong dispute candidates"
            ),
            bureau=lowest.bureau.value,
            details={"scores": scores, "spread": spread},
        )]

    def check_stagnation(
        self,
        by_bureau: Dict[str, List[ScoreObservation]],
        disputes_in_window: int,
    ) -> List[AnomalyAlert]:
        if disputes_in_window < 1:
            return []

        alerts = []
        for bureau, series in by_bureau.items():
            if len(series) < 2:
                continue
            scores = [o.score for o in series]
            score_range = max(scores) - min(scores)
            if score_range >= self.settings.stagnation_range_points:
                continue
            alerts.append(AnomalyAlert(
                type=AnomalyType.STAGNATION,
                severity=AlertSeverity.INFO,
                message=(
                    f"{bureau.title()} score moved only {score_range} points across "
                    f"{len(series)} readings despite {disputes_in_window} active dispute(s)"
                ),
                recommendation=(
                    "Escalate to the next dispute round: challenge the verification method "
                    "and demand the Method of Verification"
                ),
                bureau=bureau,
                details={
                    "score_range": score_range,
                    "readings": len(series),
                    "disputes_in_window": disputes_in_window,
                },
            ))
        return alerts

    def check_approaching_expiration(self, items: Iterable[NegativeItem], now: date) -> List[AnomalyAlert]:
        min_age_cutoff = now - relativedelta(years=self.settings.expiration_min_age_years)
        alerts = []
        for item in items:
            if not item.is_active or item.item_type_value == ItemType.BANKRUPTCY.value:
                continue
            if item.date_opened is None or item.date_opened >= min_age_cutoff:
                continue

            age_months = months_between(item.date_opened, now)
            if age_months < self.settings.expiration_alert_months:
                continue

            months_remaining = max(0, self.settings.reporting_limit_months - age_months)
            severity = (
                AlertSeverity.CRITICAL
                if age_months >= self.settings.expiration_critical_months
                else AlertSeverity.INFO
            )
            alerts.append(AnomalyAlert(
                type=AnomalyType.APPROACHING_EXPIRATION,
                severity=severity,
                message=(
                    f"{item.creditor_name or 'Item'} ({item.item_type_value}) is {age_months} months old; "
                    f"about {months_remaining} month(s) left under the FCRA 7-year reporting limit"
                ),
                recommendation=(
                    "Verify the date of first delinquency; once the 7-year limit passes, dispute "
                    "the item as obsolete under FCRA §605(a)"
                ),
                bureau=enum_value(item.bureau),
                item_id=item.id,
                details={
                    "age_months": age_months,
                    "months_remaining": months_remaining,
                    "date_opened": item.date_opened.isoformat(),
                },
            ))
        return alerts


def detect_anomalies(
    observations: Iterable[ScoreObservation],
    items: Iterable[NegativeItem],
    disputes_in_window: int,
    now: date,
    settings: Optional[AnalyticsSettings] = None,
) -> AnomalyReport:
    """Factory function: run every anomaly check for one client."""
    return AnomalyDetector(settings).detect(observations, items, disputes_in_window, now)
