"""
Round Escalation State Machine

States:
    ROUND 1 (Initial Dispute) → ROUND 2 (Verification Challenge)
    → ROUND 3 (Escalation & Warning) → ROUND 4 (Regulatory Complaint, terminal)

The current round is a pure function of how many disputes were already sent
for an (item, bureau) pair and the status of the most recent one. The text
of earlier disputes is never read.

The dispute argument for a round is looked up in DISPUTE_TYPE_POLICY,
keyed by (round, previous_result).
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from ...models.records import DisputeAttempt, enum_value
from .catalog import FINAL_ROUND, FIRST_ROUND, ItemTypeStrategy, clamp_round

logger = logging.getLogger(__name__)


class PreviousResult(str, Enum):
    VERIFIED = "verified"
    RESOLVED = "resolved"


class DisputeTypeChoice(str, Enum):
    """Which argument from the item-type catalog entry to lead with."""
    PRIMARY = "primary"
    ALTERNATIVE = "alternative"
    ACCURACY = "accuracy"


# Escalation always challenges accuracy
ACCURACY_DISPUTE_TYPE = "inaccurate_info"


@dataclass(frozen=True)
class RoundDecision:
    round: int
    previous_result: Optional[PreviousResult] = None

    def as_tuple(self) -> Tuple[int, Optional[str]]:
        return self.round, self.previous_result.value if self.previous_result else None

    def to_dict(self) -> Dict[str, object]:
        return {
            "round": self.round,
            "previous_result": self.previous_result.value if self.previous_result else None,
        }


# =============================================================================
# TRANSITION TABLE
# =============================================================================
#
# (round, previous_result) -> which catalog argument to recommend.
# previous_result None means no prior outcome is known.
#
# =============================================================================

DISPUTE_TYPE_POLICY: Dict[Tuple[int, Optional[PreviousResult]], DisputeTypeChoice] = {
    (1, None): DisputeTypeChoice.PRIMARY,
    (1, PreviousResult.VERIFIED): DisputeTypeChoice.PRIMARY,
    (1, PreviousResult.RESOLVED): DisputeTypeChoice.PRIMARY,

    (2, None): DisputeTypeChoice.PRIMARY,
    (2, PreviousResult.VERIFIED): DisputeTypeChoice.ALTERNATIVE,
    (2, PreviousResult.RESOLVED): DisputeTypeChoice.PRIMARY,

    (3, None): DisputeTypeChoice.ACCURACY,
    (3, PreviousResult.VERIFIED): DisputeTypeChoice.ACCURACY,
    (3, PreviousResult.RESOLVED): DisputeTypeChoice.ACCURACY,

    (4, None): DisputeTypeChoice.ACCURACY,
    (4, PreviousResult.VERIFIED): DisputeTypeChoice.ACCURACY,
    (4, PreviousResult.RESOLVED): DisputeTypeChoice.ACCURACY,
}


def parse_previous_result(value) -> Optional[PreviousResult]:
    """Map a raw previous-result value to the enum; anything unrecognized is None."""
    raw = enum_value(value)
    if not raw:
        return None
    try:
        return PreviousResult(raw)
    except ValueError:
        return None


class RoundEscalationStateMachine:
    """
    Deterministic round escalation.

    Usage:
        machine = RoundEscalationStateMachine()
        decision = machine.determine_round(prior_attempt_count=1, last_attempt_status="verified")
        choice = machine.dispute_type_choice(decision.round, decision.previous_result)
    """

    POLICY = DISPUTE_TYPE_POLICY

    def determine_round(
        self,
        prior_attempt_count: int,
        last_attempt_status: Optional[str] = None,
    ) -> RoundDecision:
        """
        Derive the current round from prior attempts.

        Only the most recent attempt's status matters, and only after
        exactly one attempt; from the third round on the previous result is
        always treated as verified.
        """
        count = max(0, int(prior_attempt_count or 0))

        if count == 0:
            return RoundDecision(round=1, previous_result=None)
        if count == 1:
            resolved = enum_value(last_attempt_status) == PreviousResult.RESOLVED.value
            return RoundDecision(
                round=2,
                previous_result=PreviousResult.RESOLVED if resolved else PreviousResult.VERIFIED,
            )
        if count == 2:
            return RoundDecision(round=3, previous_result=PreviousResult.VERIFIED)
        return RoundDecision(round=FINAL_ROUND, previous_result=PreviousResult.VERIFIED)

    def next_round(self, current_round: int) -> int:
        """Round that follows current_round; the final round maps to itself."""
        return min(clamp_round(current_round) + 1, FINAL_ROUND)

    def is_terminal(self, current_round: int) -> bool:
        return clamp_round(current_round) == FINAL_ROUND

    def dispute_type_choice(self, current_round: int, previous_result=None) -> DisputeTypeChoice:
        key = (clamp_round(current_round), parse_previous_result(previous_result))
        return self.POLICY[key]

    def resolve_dispute_type(
        self,
        strategy: ItemTypeStrategy,
        current_round: int,
        previous_result=None,
    ) -> str:
        """Dispute type to recommend for an item type at a given round."""
        choice = self.dispute_type_choice(current_round, previous_result)

        if choice == DisputeTypeChoice.ACCURACY:
            return ACCURACY_DISPUTE_TYPE
        if choice == DisputeTypeChoice.ALTERNATIVE and strategy.alternative_strategies:
            return strategy.alternative_strategies[0]
        return strategy.primary_strategy


_machine = RoundEscalationStateMachine()


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def determine_round(prior_attempt_count: int, last_attempt_status: Optional[str] = None) -> RoundDecision:
    return _machine.determine_round(prior_attempt_count, last_attempt_status)


def determine_round_from_attempts(
    attempts: Iterable[DisputeAttempt],
    credit_item_id: str,
    bureau,
) -> RoundDecision:
    """
    Derive the round for one (item, bureau) pair from its dispute attempts.

    The status of the most recent attempt (by created_at) is used; earlier
    attempts only contribute to the count.
    """
    bureau_key = enum_value(bureau)
    matching = [
        a for a in attempts
        if a.credit_item_id == credit_item_id and a.bureau_value == bureau_key
    ]
    if not matching:
        return _machine.determine_round(0)

    last = max(matching, key=lambda a: a.created_at)
    decision = _machine.determine_round(len(matching), last.status)
    logger.debug(
        f"Item {credit_item_id} @ {bureau_key}: {len(matching)} prior attempts, "
        f"last={last.status} -> round {decision.round}"
    )
    return decision


__all__ = [
    "FIRST_ROUND",
    "FINAL_ROUND",
    "PreviousResult",
    "DisputeTypeChoice",
    "RoundDecision",
    "RoundEscalationStateMachine",
    "DISPUTE_TYPE_POLICY",
    "ACCURACY_DISPUTE_TYPE",
    "determine_round",
    "determine_round_from_attempts",
    "parse_previous_result",
]
