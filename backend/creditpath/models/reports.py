"""
CreditPath - Analytics Results

Derived objects produced by the analytics layer and handed to the
presentation layer. Every result is computed fresh from record snapshots;
nothing here is persisted by the engine.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from .records import ScoreObservation


# =============================================================================
# ENUMS
# =============================================================================

class TrendStatus(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AnomalyType(str, Enum):
    SUDDEN_DROP = "sudden_drop"
    BUREAU_INCONSISTENCY = "bureau_inconsistency"
    STAGNATION = "stagnation"
    APPROACHING_EXPIRATION = "approaching_expiration"


class ImpactPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


# =============================================================================
# TREND & COMPARISON
# =============================================================================

@dataclass
class ScoreInterpretation:
    range: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"range": self.range, "description": self.description}


@dataclass
class TrendResult:
    """Direction of one bureau's score over a lookback window."""
    trend: TrendStatus
    current_score: Optional[int] = None
    past_score: Optional[int] = None
    change: Optional[int] = None
    percent_change: Optional[float] = None
    data_points: int = 0
    period: str = ""
    bureau: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bureau": self.bureau,
            "trend": self.trend.value,
            "current_score": self.current_score,
            "past_score": self.past_score,
            "change": self.change,
            "percent_change": self.percent_change,
            "data_points": self.data_points,
            "period": self.period,
        }


@dataclass
class ComparisonResult:
    """Latest score per bureau with spread statistics."""
    scores: List[ScoreObservation] = field(default_factory=list)
    average: int = 0
    highest: int = 0
    lowest: int = 0
    spread: int = 0
    interpretation: Optional[ScoreInterpretation] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": [s.to_dict() for s in self.scores],
            "average": self.average,
            "highest": self.highest,
            "lowest": self.lowest,
            "spread": self.spread,
            "interpretation": self.interpretation.to_dict() if self.interpretation else None,
        }


# =============================================================================
# ANOMALIES
# =============================================================================

@dataclass
class AnomalyAlert:
    type: AnomalyType
    severity: AlertSeverity
    message: str
    recommendation: str
    bureau: Optional[str] = None
    item_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
            "bureau": self.bureau,
            "item_id": self.item_id,
            "details": self.details,
        }


@dataclass
class AnomalyReport:
    """
    Flat list of alerts from all anomaly checks.

    counts always carries all three severities so callers can render
    badges without key checks.
    """
    alerts: List[AnomalyAlert]
    analyzed_at: date
    window_days: int
    counts: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if not self.counts:
            self.counts = {s.value: 0 for s in AlertSeverity}
            for alert in self.alerts:
                self.counts[alert.severity.value] += 1

    @property
    def has_anomalies(self) -> bool:
        return len(self.alerts) > 0

    def by_type(self, anomaly_type: AnomalyType) -> List[AnomalyAlert]:
        return [a for a in self.alerts if a.type == anomaly_type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alerts": [a.to_dict() for a in self.alerts],
            "counts": dict(self.counts),
            "has_anomalies": self.has_anomalies,
            "window_days": self.window_days,
            "analyzed_at": self.analyzed_at.isoformat(),
        }


# =============================================================================
# PROJECTION
# =============================================================================

@dataclass
class ItemImpact:
    """Estimated score gain if one negative item is removed."""
    item_id: str
    item_type: str
    item_type_name: str
    creditor_name: str
    bureau: Optional[str]
    estimated_min: int
    estimated_max: int
    priority: ImpactPriority

    @property
    def average_gain(self) -> float:
        return (self.estimated_min + self.estimated_max) / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "item_type": self.item_type,
            "item_type_name": self.item_type_name,
            "creditor_name": self.creditor_name,
            "bureau": self.bureau,
            "estimated_min": self.estimated_min,
            "estimated_max": self.estimated_max,
            "priority": self.priority.value,
        }


@dataclass
class TimelineStep:
    step: int
    item_id: str
    creditor_name: str
    item_type: str
    score_gain: int
    projected_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "item_id": self.item_id,
            "creditor_name": self.creditor_name,
            "item_type": self.item_type,
            "score_gain": self.score_gain,
            "projected_score": self.projected_score,
        }


@dataclass
class ProjectionReport:
    current_score: int
    current_category: ScoreInterpretation
    item_count: int
    impacts: List[ItemImpact]
    timeline: List[TimelineStep]
    best_case_score: int
    conservative_score: int
    top_priorities: List[ItemImpact]
    confidence: str

    @property
    def projected_score(self) -> int:
        """Score at the end of the timeline (current score if nothing to remove)."""
        if not self.timeline:
            return self.current_score
        return self.timeline[-1].projected_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_score": self.current_score,
            "current_category": self.current_category.to_dict(),
            "item_count": self.item_count,
            "impacts": [i.to_dict() for i in self.impacts],
            "timeline": [t.to_dict() for t in self.timeline],
            "projected_score": self.projected_score,
            "best_case_score": self.best_case_score,
            "conservative_score": self.conservative_score,
            "top_priorities": [i.to_dict() for i in self.top_priorities],
            "confidence": self.confidence,
        }


# =============================================================================
# FACTORS, RECOMMENDATIONS, REPORT
# =============================================================================

@dataclass
class ScoreFactors:
    item_counts: Dict[str, Dict[str, int]]
    dispute_counts: Dict[str, int]
    total_negative_items: int
    resolved_items: int
    total_disputes: int
    success_rate: float

    def has_item_type(self, item_type: str) -> bool:
        return sum(self.item_counts.get(item_type, {}).values()) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_counts": {k: dict(v) for k, v in self.item_counts.items()},
            "dispute_counts": dict(self.dispute_counts),
            "analysis": {
                "total_negative_items": self.total_negative_items,
                "resolved_items": self.resolved_items,
                "total_disputes": self.total_disputes,
                "success_rate": self.success_rate,
            },
        }


@dataclass
class Recommendation:
    priority: str
    action: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"priority": self.priority, "action": self.action, "description": self.description}


@dataclass
class ScoreChange:
    """How a newly recorded score relates to the previous one."""
    observation: ScoreObservation
    previous_score: Optional[int]
    change: int
    direction: str  # up, down, new

    def to_dict(self) -> Dict[str, Any]:
        data = self.observation.to_dict()
        data.update({
            "previous_score": self.previous_score,
            "change": self.change,
            "trend": self.direction,
        })
        return data


@dataclass
class CreditReportSummary:
    client_id: str
    generated_at: date
    comparison: ComparisonResult
    trends: Dict[str, TrendResult]
    factors: ScoreFactors
    recommendations: List[Recommendation]

    @property
    def average_score(self) -> int:
        return self.comparison.average

    def to_dict(self) -> Dict[str, Any]:
        return {
            "client_id": self.client_id,
            "report_date": self.generated_at.isoformat(),
            "summary": {
                "average_score": self.average_score,
                "bureaus": [s.to_dict() for s in self.comparison.scores],
                "trends": {b: t.to_dict() for b, t in self.trends.items()},
                "factors": self.factors.to_dict(),
            },
            "recommendations": [r.to_dict() for r in self.recommendations],
            "generated_at": self.generated_at.isoformat(),
        }
