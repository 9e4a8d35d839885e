"""
Score Improvement Estimate

Single formula for "how many points does removing this item buy?".
Both the score projector and the strategy selector call
estimate_score_improvement; neither keeps its own copy of the multipliers.
"""
from dataclasses import dataclass
from typing import Any, Dict

from ..numeric import clamp_score, round_half_up
from .catalog import get_item_type_strategy


@dataclass(frozen=True)
class ScoreImprovementEstimate:
    estimated_min: int
    estimated_max: int
    projected_score_min: int
    projected_score_max: int
    confidence: str
    multiplier: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated_min": self.estimated_min,
            "estimated_max": self.estimated_max,
            "projected_score_min": self.projected_score_min,
            "projected_score_max": self.projected_score_max,
            "confidence": self.confidence,
            "multiplier": self.multiplier,
        }


def score_band_multiplier(current_score: int) -> float:
    """Lower scores see more improvement per item removed."""
    if current_score < 580:
        return 1.3
    if current_score < 650:
        return 1.1
    if current_score >= 740:
        return 0.7
    return 1.0


def dilution_multiplier(total_negative_items: int) -> float:
    """More concurrent negative items means less impact per individual removal."""
    if total_negative_items > 10:
        return 0.7
    if total_negative_items > 5:
        return 0.85
    return 1.0


def estimate_confidence(total_negative_items: int) -> str:
    if total_negative_items <= 3:
        return "high"
    if total_negative_items <= 7:
        return "medium"
    return "low"


def estimate_score_improvement(
    item_type,
    current_score: int,
    total_negative_items: int,
) -> ScoreImprovementEstimate:
    """
    Estimate the score gain range if one item of this type is removed.

    Args:
        item_type: ItemType or raw string; unknown types use the "other" range
        current_score: Current (average) score of the client
        total_negative_items: Number of active negative items on file

    Returns:
        ScoreImprovementEstimate with the adjusted range and projected scores
    """
    impact = get_item_type_strategy(item_type).estimated_score_impact
    multiplier = score_band_multiplier(current_score) * dilution_multiplier(total_negative_items)

    estimated_min = round_half_up(impact.min * multiplier)
    estimated_max = round_half_up(impact.max * multiplier)

    return ScoreImprovementEstimate(
        estimated_min=estimated_min,
        estimated_max=estimated_max,
        projected_score_min=clamp_score(current_score + estimated_min),
        projected_score_max=clamp_score(current_score + estimated_max),
        confidence=estimate_confidence(total_negative_items),
        multiplier=multiplier,
    )
