"""CreditPath - Dispute Strategy

Round escalation, item-type and bureau catalogs, and the strategy selector.
"""
from .catalog import (
    BUREAU_STRATEGIES,
    ITEM_TYPE_STRATEGIES,
    STRATEGY_ROUNDS,
    BureauProfile,
    CatalogError,
    ItemTypeStrategy,
    ScoreImpactRange,
    StrategyRound,
    validate_catalogs,
)
from .impact import (
    ScoreImprovementEstimate,
    dilution_multiplier,
    estimate_score_improvement,
    score_band_multiplier,
)
from .rounds import (
    DISPUTE_TYPE_POLICY,
    DisputeTypeChoice,
    PreviousResult,
    RoundDecision,
    RoundEscalationStateMachine,
    determine_round,
    determine_round_from_attempts,
)
from .selector import (
    StrategyRecommendation,
    StrategySelector,
    get_bureau_strategy,
    get_recommended_strategy,
    select_strategy,
)

__all__ = [
    "BUREAU_STRATEGIES", "ITEM_TYPE_STRATEGIES", "STRATEGY_ROUNDS",
    "BureauProfile", "CatalogError", "ItemTypeStrategy", "ScoreImpactRange", "StrategyRound",
    "validate_catalogs",
    "ScoreImprovementEstimate", "dilution_multiplier", "estimate_score_improvement",
    "score_band_multiplier",
    "DISPUTE_TYPE_POLICY", "DisputeTypeChoice", "PreviousResult", "RoundDecision",
    "RoundEscalationStateMachine", "determine_round", "determine_round_from_attempts",
    "StrategyRecommendation", "StrategySelector", "get_bureau_strategy",
    "get_recommended_strategy", "select_strategy",
]
