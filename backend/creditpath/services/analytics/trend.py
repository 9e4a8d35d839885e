"""
Score Trend & Bureau Comparison

Pure read-side calculations over score observations:
- compute_trend: direction of one bureau's score over a lookback window
- compare_bureaus: latest score per bureau with average and spread
- score_history / latest_scores: ordered views used by the other calculators
"""
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from ...config import get_settings
from ...models.records import ScoreObservation, enum_value
from ...models.reports import ComparisonResult, ScoreInterpretation, TrendResult, TrendStatus
from ..numeric import round_half_up

logger = logging.getLogger(__name__)


# (minimum score, range label, description), highest band first
SCORE_BANDS = [
    (800, "Excellent", "Superior credit profile"),
    (740, "Very Good", "Strong credit profile"),
    (670, "Good", "Acceptable credit profile"),
    (580, "Fair", "Below average credit profile"),
]
LOWEST_BAND = ("Poor", "Significant credit challenges")


def interpret_score_range(score: int) -> ScoreInterpretation:
    for minimum, label, description in SCORE_BANDS:
        if score >= minimum:
            return ScoreInterpretation(range=label, description=description)
    return ScoreInterpretation(range=LOWEST_BAND[0], description=LOWEST_BAND[1])


def sort_chronologically(observations: Iterable[ScoreObservation]) -> List[ScoreObservation]:
    """Oldest first; observations on the same date keep their input order."""
    return sorted(observations, key=lambda o: o.observed_date)


def score_history(
    observations: Iterable[ScoreObservation],
    bureau,
    limit: Optional[int] = None,
) -> List[ScoreObservation]:
    """Most recent observations for one bureau, newest first."""
    if limit is None:
        limit = get_settings().history_limit
    bureau_key = enum_value(bureau)
    matching = [o for o in observations if o.bureau.value == bureau_key]
    newest_first = list(reversed(sort_chronologically(matching)))
    return newest_first[:limit]


def latest_scores(observations: Iterable[ScoreObservation]) -> List[ScoreObservation]:
    """
    One observation per bureau: the latest by date.

    Ties on the same date go to the observation supplied last.
    Output is ordered by bureau name.
    """
    latest: Dict[str, ScoreObservation] = {}
    for obs in sort_chronologically(observations):
        latest[obs.bureau.value] = obs
    return [latest[b] for b in sorted(latest)]


# =============================================================================
# TREND
# =============================================================================

def compute_trend(
    observations: Iterable[ScoreObservation],
    window_months: Optional[int] = None,
    now: Optional[date] = None,
) -> TrendResult:
    """
    Compute the score trend for one (client, bureau) series.

    Args:
        observations: Score observations for a single bureau, any order
        window_months: Lookback window (default from settings, 6)
        now: Reference date for the window boundary (default today)

    Returns:
        TrendResult; INSUFFICIENT_DATA when there is no current score, no
        score at or before the window boundary, or both are the same reading
    """
    if window_months is None:
        window_months = get_settings().trend_window_months
    if now is None:
        now = date.today()

    boundary = now - relativedelta(months=window_months)
    period = f"{window_months} months"

    in_range = [o for o in sort_chronologically(observations) if o.observed_date <= now]
    bureau = in_range[-1].bureau.value if in_range else None

    current = in_range[-1] if in_range else None
    past = None
    for obs in in_range:
        if obs.observed_date <= boundary:
            past = obs

    if current is None or past is None or past is current:
        return TrendResult(
            trend=TrendStatus.INSUFFICIENT_DATA,
            current_score=current.score if current else None,
            data_points=len(in_range),
            period=period,
            bureau=bureau,
        )

    change = current.score - past.score
    if change > 0:
        trend = TrendStatus.IMPROVING
    elif change < 0:
        trend = TrendStatus.DECLINING
    else:
        trend = TrendStatus.STABLE

    return TrendResult(
        trend=trend,
        current_score=current.score,
        past_score=past.score,
        change=change,
        percent_change=round(change / past.score * 100, 2),
        data_points=len(in_range),
        period=period,
        bureau=bureau,
    )


# =============================================================================
# BUREAU COMPARISON
# =============================================================================

def compare_bureaus(observations: Iterable[ScoreObservation]) -> ComparisonResult:
    """
    Compare the latest score of each bureau.

    Accepts either one row per bureau or a full history; the history is
    reduced to the latest row per bureau first. Empty input gives a zeroed
    result, not an error.
    """
    latest = latest_scores(observations)
    if not latest:
        return ComparisonResult()

    scores = [o.score for o in latest]
    average = round_half_up(sum(scores) / len(scores))
    highest = max(scores)
    lowest = min(scores)

    return ComparisonResult(
        scores=latest,
        average=average,
        highest=highest,
        lowest=lowest,
        spread=highest - lowest,
        interpretation=interpret_score_range(average),
    )
