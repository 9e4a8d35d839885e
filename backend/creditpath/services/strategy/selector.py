"""
CreditPath - Dispute Strategy Selector

Composes the round escalation state machine with the item-type and bureau
catalogs into one recommendation per (item type, bureau, round) request.
Determines:
- Which dispute argument to lead with (primary, alternative, or accuracy)
- Which round definition applies
- Which bureau tactics to attach
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ...models.records import enum_value
from .catalog import (
    BureauProfile,
    ScoreImpactRange,
    StrategyRound,
    get_bureau_profile,
    get_item_type_strategy,
    get_round,
)
from .impact import ScoreImprovementEstimate, estimate_score_improvement
from .rounds import PreviousResult, RoundEscalationStateMachine, parse_previous_result

logger = logging.getLogger(__name__)


@dataclass
class StrategyRecommendation:
    """Recommended dispute approach for one item at one bureau."""
    item_type: str
    item_type_name: str
    recommended_dispute_type: str
    alternative_strategies: Tuple[str, ...]
    round: StrategyRound
    estimated_score_impact: ScoreImpactRange
    tips: Tuple[str, ...]
    legal_arguments: Tuple[str, ...]
    previous_result: Optional[PreviousResult] = None
    bureau_strategy: Optional[BureauProfile] = None
    score_estimate: Optional[ScoreImprovementEstimate] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_type": self.item_type,
            "item_type_name": self.item_type_name,
            "recommended_dispute_type": self.recommended_dispute_type,
            "alternative_strategies": list(self.alternative_strategies),
            "round": self.round.to_dict(),
            "previous_result": self.previous_result.value if self.previous_result else None,
            "estimated_score_impact": self.estimated_score_impact.to_dict(),
            "tips": list(self.tips),
            "legal_arguments": list(self.legal_arguments),
            "bureau_strategy": self.bureau_strategy.to_dict() if self.bureau_strategy else None,
            "score_estimate": self.score_estimate.to_dict() if self.score_estimate else None,
            "warnings": list(self.warnings),
        }


class StrategySelector:
    """
    Select the dispute strategy for an item.

    Strategy decisions are made here and ONLY here. Letter generation and
    the presentation layer consume the recommendation as-is.
    """

    def __init__(self, state_machine: Optional[RoundEscalationStateMachine] = None):
        self.state_machine = state_machine or RoundEscalationStateMachine()

    def recommend(
        self,
        item_type,
        current_round: int = 1,
        previous_result=None,
    ) -> StrategyRecommendation:
        """Item-type recommendation without bureau tactics."""
        strategy = get_item_type_strategy(item_type)
        round_info = get_round(current_round)
        previous = parse_previous_result(previous_result)

        dispute_type = self.state_machine.resolve_dispute_type(strategy, current_round, previous)

        recommendation = StrategyRecommendation(
            item_type=strategy.key,
            item_type_name=strategy.name,
            recommended_dispute_type=dispute_type,
            alternative_strategies=strategy.alternative_strategies,
            round=round_info,
            estimated_score_impact=strategy.estimated_score_impact,
            tips=strategy.tips,
            legal_arguments=strategy.legal_arguments,
            previous_result=previous,
        )

        requested = enum_value(item_type)
        if requested != strategy.key:
            recommendation.warnings.append(
                f"Unknown item type {requested!r}; using {strategy.name} strategy"
            )
        if round_info.is_terminal:
            recommendation.warnings.append(
                "Final escalation round reached; no further dispute round is defined"
            )
        return recommendation

    def select(
        self,
        item_type,
        bureau,
        current_round: int = 1,
        previous_result=None,
        current_score: Optional[int] = None,
        total_negative_items: Optional[int] = None,
    ) -> StrategyRecommendation:
        """
        Complete strategy: item-type recommendation plus bureau tactics.

        Args:
            item_type: ItemType or raw string (unknown -> "other")
            bureau: Bureau or raw string (unknown/None -> no tactics profile)
            current_round: Escalation round 1-4
            previous_result: "verified", "resolved" or None
            current_score: Optional current score; adds a score estimate
            total_negative_items: Active item count for the estimate (default 1)
        """
        recommendation = self.recommend(item_type, current_round, previous_result)
        recommendation.bureau_strategy = get_bureau_profile(bureau)

        if current_score is not None:
            recommendation.score_estimate = estimate_score_improvement(
                recommendation.item_type,
                current_score,
                total_negative_items if total_negative_items is not None else 1,
            )

        logger.info(
            f"Strategy for {recommendation.item_type} @ {bureau or 'no bureau'}: "
            f"round {recommendation.round.id} -> {recommendation.recommended_dispute_type}"
        )
        return recommendation


_selector = StrategySelector()


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def get_recommended_strategy(
    item_type,
    current_round: int = 1,
    previous_result=None,
) -> StrategyRecommendation:
    return _selector.recommend(item_type, current_round, previous_result)


def get_bureau_strategy(bureau) -> Optional[BureauProfile]:
    return get_bureau_profile(bureau)


def select_strategy(
    item_type,
    bureau,
    current_round: int = 1,
    previous_result=None,
    current_score: Optional[int] = None,
    total_negative_items: Optional[int] = None,
) -> StrategyRecommendation:
    """
    Factory function for a complete dispute strategy.

    Returns:
        StrategyRecommendation with catalog entry, resolved dispute type,
        round definition and bureau profile
    """
    return _selector.select(
        item_type,
        bureau,
        current_round=current_round,
        previous_result=previous_result,
        current_score=current_score,
        total_negative_items=total_negative_items,
    )
