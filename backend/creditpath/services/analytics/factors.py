"""
Score Factors, Recommendations & Client Report

Summaries built on top of the trend and comparison calculators.
"""
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from ...models.records import (
    DisputeAttempt,
    ItemStatus,
    ItemType,
    NegativeItem,
    ScoreObservation,
)
from ...models.reports import CreditReportSummary, Recommendation, ScoreChange, ScoreFactors
from .trend import compare_bureaus, compute_trend, sort_chronologically

logger = logging.getLogger(__name__)


def summarize_score_factors(
    items: Iterable[NegativeItem],
    attempts: Iterable[DisputeAttempt] = (),
) -> ScoreFactors:
    """Item counts per (type, status) and dispute counts per status."""
    item_counts: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    total = 0
    resolved = 0
    for item in items:
        item_counts[item.item_type_value][item.status_value] += 1
        total += 1
        if item.status_value == ItemStatus.DELETED.value:
            resolved += 1

    dispute_counts: Dict[str, int] = defaultdict(int)
    for attempt in attempts:
        dispute_counts[(attempt.status or "unknown").lower()] += 1

    success_rate = round(resolved / total * 100, 1) if total else 0.0

    return ScoreFactors(
        item_counts={t: dict(statuses) for t, statuses in item_counts.items()},
        dispute_counts=dict(dispute_counts),
        total_negative_items=total,
        resolved_items=resolved,
        total_disputes=sum(dispute_counts.values()),
        success_rate=success_rate,
    )


def generate_recommendations(average_score: int, factors: ScoreFactors) -> List[Recommendation]:
    recommendations = []

    if average_score < 650:
        recommendations.append(Recommendation(
            priority="high",
            action="Dispute negative items",
            description="Focus on removing inaccurate or outdated items from the credit report",
        ))

    if factors.has_item_type(ItemType.LATE_PAYMENT.value):
        recommendations.append(Recommendation(
            priority="high",
            action="Address late payments",
            description="Recent late payments significantly impact the score",
        ))

    if factors.has_item_type(ItemType.COLLECTION.value):
        recommendations.append(Recommendation(
            priority="high",
            action="Resolve collections",
            description="Collection accounts require immediate attention",
        ))

    recommendations.append(Recommendation(
        priority="medium",
        action="Monitor progress",
        description="Check the score regularly to track improvement",
    ))
    return recommendations


def describe_score_change(
    history: Iterable[ScoreObservation],
    new_observation: ScoreObservation,
) -> ScoreChange:
    """
    Relate a newly recorded score to the previous reading for the same
    client and bureau.

    Direction is "new" without a previous reading, "up" when the score is
    equal or higher, otherwise "down".
    """
    previous: Optional[ScoreObservation] = None
    for obs in sort_chronologically(history):
        if obs is new_observation:
            continue
        if obs.client_id == new_observation.client_id and obs.bureau == new_observation.bureau:
            if obs.observed_date <= new_observation.observed_date:
                previous = obs

    if previous is None:
        return ScoreChange(observation=new_observation, previous_score=None, change=0, direction="new")

    change = new_observation.score - previous.score
    return ScoreChange(
        observation=new_observation,
        previous_score=previous.score,
        change=change,
        direction="up" if change >= 0 else "down",
    )


def generate_report(
    client_id: str,
    observations: Iterable[ScoreObservation],
    items: Iterable[NegativeItem],
    attempts: Iterable[DisputeAttempt],
    now: date,
) -> CreditReportSummary:
    """
    Client credit summary: latest bureau scores, per-bureau trends,
    score factors and recommendations.
    """
    client_observations = [o for o in observations if o.client_id == client_id]
    client_items = [i for i in items if i.client_id == client_id]
    item_ids = {i.id for i in client_items}
    client_attempts = [a for a in attempts if a.credit_item_id in item_ids]

    comparison = compare_bureaus(o for o in client_observations if o.observed_date <= now)

    trends = {}
    for latest in comparison.scores:
        bureau = latest.bureau.value
        series = [o for o in client_observations if o.bureau.value == bureau]
        trends[bureau] = compute_trend(series, now=now)

    factors = summarize_score_factors(client_items, client_attempts)
    recommendations = generate_recommendations(comparison.average, factors)

    logger.info(
        f"Report for client {client_id}: average={comparison.average}, "
        f"{factors.total_negative_items} items, {len(recommendations)} recommendations"
    )
    return CreditReportSummary(
        client_id=client_id,
        generated_at=now,
        comparison=comparison,
        trends=trends,
        factors=factors,
        recommendations=recommendations,
    )
