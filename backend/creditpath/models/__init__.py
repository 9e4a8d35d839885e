"""CreditPath - Data Models"""
from .records import (
    # Enums
    Bureau, ItemType, ItemStatus,
    # Records
    ScoreObservation, NegativeItem, DisputeAttempt,
    # Errors / constants
    ScoreValidationError, SCORE_MIN, SCORE_MAX,
)
from .reports import (
    TrendStatus, AlertSeverity, AnomalyType, ImpactPriority,
    ScoreInterpretation, TrendResult, ComparisonResult,
    AnomalyAlert, AnomalyReport,
    ItemImpact, TimelineStep, ProjectionReport,
    ScoreFactors, Recommendation, ScoreChange, CreditReportSummary,
)

__all__ = [
    "Bureau", "ItemType", "ItemStatus",
    "ScoreObservation", "NegativeItem", "DisputeAttempt",
    "ScoreValidationError", "SCORE_MIN", "SCORE_MAX",
    "TrendStatus", "AlertSeverity", "AnomalyType", "ImpactPriority",
    "ScoreInterpretation", "TrendResult", "ComparisonResult",
    "AnomalyAlert", "AnomalyReport",
    "ItemImpact", "TimelineStep", "ProjectionReport",
    "ScoreFactors", "Recommendation", "ScoreChange", "CreditReportSummary",
]
