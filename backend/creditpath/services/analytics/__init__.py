"""
CreditPath - Score Analytics

Trend, bureau comparison, anomaly detection, improvement projection and
client report summaries. All functions are pure over record snapshots.
"""

from .trend import (
    compare_bureaus,
    compute_trend,
    interpret_score_range,
    latest_scores,
    score_history,
)
from .anomaly_detector import AnomalyDetector, count_disputes_in_window, detect_anomalies
from .projector import ScoreProjector, project_improvement
from .factors import (
    describe_score_change,
    generate_recommendations,
    generate_report,
    summarize_score_factors,
)

__all__ = [
    "compare_bureaus",
    "compute_trend",
    "interpret_score_range",
    "latest_scores",
    "score_history",
    "AnomalyDetector",
    "count_disputes_in_window",
    "detect_anomalies",
    "ScoreProjector",
    "project_improvement",
    "describe_score_change",
    "generate_recommendations",
    "generate_report",
    "summarize_score_factors",
]
