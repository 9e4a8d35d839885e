"""
Dispute Strategy Catalogs

Static reference data for the dispute strategy selector:
- STRATEGY_ROUNDS: the four-stage escalation path
- ITEM_TYPE_STRATEGIES: primary/alternative dispute arguments per item type
- BUREAU_STRATEGIES: known procedural weaknesses and tactics per bureau

All tables are read-only and checked for full enum coverage at import time.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ...models.records import Bureau, ItemType


class CatalogError(RuntimeError):
    """Raised at import when a catalog does not cover its enumeration."""
    pass


# =============================================================================
# ENTRY TYPES
# =============================================================================

@dataclass(frozen=True)
class StrategyRound:
    id: int
    name: str
    description: str
    approach: str
    wait_days: int
    next_action: str

    @property
    def is_terminal(self) -> bool:
        return self.id == FINAL_ROUND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "approach": self.approach,
            "wait_days": self.wait_days,
            "next_action": self.next_action,
        }


@dataclass(frozen=True)
class ScoreImpactRange:
    min: int
    max: int

    def to_dict(self) -> Dict[str, int]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class ItemTypeStrategy:
    key: str
    name: str
    primary_strategy: str
    alternative_strategies: Tuple[str, ...]
    estimated_score_impact: ScoreImpactRange
    tips: Tuple[str, ...]
    legal_arguments: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "primary_strategy": self.primary_strategy,
            "alternative_strategies": list(self.alternative_strategies),
            "estimated_score_impact": self.estimated_score_impact.to_dict(),
            "tips": list(self.tips),
            "legal_arguments": list(self.legal_arguments),
        }


@dataclass(frozen=True)
class BureauProfile:
    key: str
    name: str
    address: str
    online_dispute: str
    weaknesses: Tuple[str, ...]
    best_tactics: Tuple[str, ...]
    mailing_tips: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "address": self.address,
            "online_dispute": self.online_dispute,
            "weaknesses": list(self.weaknesses),
            "best_tactics": list(self.best_tactics),
            "mailing_tips": self.mailing_tips,
        }


# =============================================================================
# ESCALATION ROUNDS
# =============================================================================

FIRST_ROUND = 1
FINAL_ROUND = 4

STRATEGY_ROUNDS: Mapping[int, StrategyRound] = MappingProxyType({
    1: StrategyRound(
        id=1,
        name="Initial Dispute",
        description="Formal dispute requesting investigation and Method of Verification",
        approach="Assert rights under FCRA §611, request investigation, and demand MOV",
        wait_days=35,
        next_action="If verified, proceed to Round 2 challenging the verification method",
    ),
    2: StrategyRound(
        id=2,
        name="Verification Challenge",
        description="Challenge the adequacy of the bureau investigation and demand procedural proof",
        approach=(
            "Cite §611(a)(5)(A): the bureau must forward ALL relevant evidence. "
            "Challenge e-OSCAR automated verification as inadequate."
        ),
        wait_days=35,
        next_action="If still verified, escalate to Round 3 with regulatory notice",
    ),
    3: StrategyRound(
        id=3,
        name="Escalation & Warning",
        description="Final warning before regulatory complaints, citing civil liability",
        approach=(
            "Reference §616/§617 civil liability ($100-$1,000 per violation plus punitive damages). "
            "Announce intent to file a CFPB complaint and contact the state AG."
        ),
        wait_days=30,
        next_action="File CFPB complaint and state AG complaint in Round 4",
    ),
    4: StrategyRound(
        id=4,
        name="Regulatory Complaint",
        description="File formal complaints with the CFPB and state Attorney General",
        approach=(
            "Document the full dispute history. File a CFPB complaint at consumerfinance.gov. "
            "File a state AG complaint. Prepare for potential litigation."
        ),
        wait_days=60,
        next_action="Consult an attorney about a potential FCRA lawsuit",
    ),
})


# =============================================================================
# BUREAU PROFILES
# =============================================================================

BUREAU_STRATEGIES: Mapping[str, BureauProfile] = MappingProxyType({
    Bureau.EQUIFAX.value: BureauProfile(
        key=Bureau.EQUIFAX.value,
        name="Equifax",
        address="""Equifax Information Services LLC
P.O. Box 740256
Atlanta, GA 30374-0256""",
        online_dispute="https://www.equifax.com/personal/disputes/",
        weaknesses=(
            "Heavy reliance on the ACDV automated system; challenge it as an inadequate investigation",
            "2017 data breach history; leverage security concerns for identity-related disputes",
            "Often fails to conduct a meaningful re-investigation after initial verification",
            "Known for not forwarding complete consumer documentation to furnishers",
        ),
        best_tactics=(
            "Demand human review, not automated ACDV processing",
            "Request the name of the individual who conducted the investigation",
            "Reference Equifax's consent decree requirements for thorough investigations",
            "Send disputes via certified mail to build a paper trail for potential litigation",
        ),
        mailing_tips="Send to P.O. Box 740256 for disputes. Include a copy of ID and proof of address.",
    ),
    Bureau.EXPERIAN.value: BureauProfile(
        key=Bureau.EXPERIAN.value,
        name="Experian",
        address="""Experian
P.O. Box 4500
Allen, TX 75013""",
        online_dispute="https://www.experian.com/disputes/main.html",
        weaknesses=(
            "Frequently fails to forward complete consumer documentation to furnishers via e-OSCAR",
            "Often reduces disputes to 2-digit codes instead of forwarding the full narrative",
            "Known for verifying accounts based on a limited furnisher response",
            "Sometimes stalls disputes by requesting additional documentation unnecessarily",
        ),
        best_tactics=(
            'State explicitly in the letter: "Forward this COMPLETE letter to the furnisher"',
            "Demand the dispute not be reduced to a code; cite §611(a)(5)(A)",
            "If more information is requested, send it via certified mail with tracking",
            "Reference Experian's duty under §611(a)(1)(A) to forward all relevant information",
        ),
        mailing_tips='Send to P.O. Box 4500 for disputes. Include "ATTENTION: Consumer Disputes Department".',
    ),
    Bureau.TRANSUNION.value: BureauProfile(
        key=Bureau.TRANSUNION.value,
        name="TransUnion",
        address="""TransUnion Consumer Solutions
P.O. Box 2000
Chester, PA 19016-2000""",
        online_dispute="https://www.transunion.com/credit-disputes/dispute-your-credit",
        weaknesses=(
            "Frequently verifies without meaningful investigation; challenge the process",
            "Uses automated matching that can result in mixed files",
            "Known for delays in updating resolved disputes on consumer reports",
            "Sometimes fails to provide a complete MOV upon request",
        ),
        best_tactics=(
            "Always request the Method of Verification with specific details",
            "Demand the name, address, and phone number of the person who verified",
            "For mixed file issues, demand manual file separation",
            "Reference TransUnion's obligation under §611(a)(6)(B)(iii) for unverifiable items",
        ),
        mailing_tips="Send to P.O. Box 2000 for disputes. Use certified mail with return receipt.",
    ),
})


# =============================================================================
# ITEM TYPE STRATEGIES
# =============================================================================

ITEM_TYPE_STRATEGIES: Mapping[str, ItemTypeStrategy] = MappingProxyType({
    ItemType.LATE_PAYMENT.value: ItemTypeStrategy(
        key=ItemType.LATE_PAYMENT.value,
        name="Late Payment",
        primary_strategy="inaccurate_info",
        alternative_strategies=("other",),
        estimated_score_impact=ScoreImpactRange(15, 110),
        tips=(
            "Challenge the exact date reported as late; even a 1-day discrepancy invalidates the record",
            "Request proof of the exact payment posting date from the original creditor",
            "If payment was made on time but processed late, dispute as inaccurate",
            "Goodwill letters to the original creditor can also result in removal",
            "A single 30-day late payment can drop scores 60-110 points for excellent credit profiles",
        ),
        legal_arguments=(
            "FCRA §623(a)(1)(A): Furnisher duty to report only accurate information",
            "FCRA §623(a)(2): Furnisher must update/correct incomplete or inaccurate info",
            "Metro 2 Format: Payment date must reflect the date payment was received and applied",
        ),
    ),
    ItemType.COLLECTION.value: ItemTypeStrategy(
        key=ItemType.COLLECTION.value,
        name="Collection Account",
        primary_strategy="not_mine",
        alternative_strategies=("paid", "inaccurate_info", "outdated"),
        estimated_score_impact=ScoreImpactRange(50, 150),
        tips=(
            "Demand debt validation under FDCPA §1692g before acknowledging the debt",
            "Challenge the chain of title; can the collector prove they own the debt?",
            "If the original creditor AND the collector both report, dispute as duplicate",
            "Collections under $100 are excluded from newer FICO models (FICO 9)",
            "Medical collections have special rules and are removed once paid under new FICO models",
            'Paid collections still hurt the score in FICO 8; negotiate "pay for delete"',
        ),
        legal_arguments=(
            "FDCPA §1692g: Right to debt validation within 30 days of first contact",
            "FDCPA §1692e: False/misleading representation if the amount is wrong",
            "FCRA §623(a)(1)(A): Collector must verify debt accuracy before reporting",
            "FCRA §605(a): 7-year limit from date of first delinquency with the original creditor",
        ),
    ),
    ItemType.CHARGE_OFF.value: ItemTypeStrategy(
        key=ItemType.CHARGE_OFF.value,
        name="Charge-Off",
        primary_strategy="inaccurate_info",
        alternative_strategies=("paid", "outdated"),
        estimated_score_impact=ScoreImpactRange(75, 150),
        tips=(
            "Challenge the charge-off date; it must match 180 days after the first missed payment",
            "If the balance grows after charge-off, dispute the balance as inaccurate",
            "Charge-offs must show a $0 balance once sold to collections",
            "If both a charge-off and a collection appear for the same debt, dispute as duplicate",
            "The date of first delinquency CANNOT be changed; watch for re-aging",
        ),
        legal_arguments=(
            "FCRA §623(a)(1)(A): Balance must be accurate at time of reporting",
            "FCRA §605(c): Reporting period starts from date of first delinquency and cannot be re-aged",
            "Metro 2 Guidelines: Charge-offs sold to collectors must report a $0 balance",
        ),
    ),
    ItemType.BANKRUPTCY.value: ItemTypeStrategy(
        key=ItemType.BANKRUPTCY.value,
        name="Bankruptcy",
        primary_strategy="inaccurate_info",
        alternative_strategies=("outdated",),
        estimated_score_impact=ScoreImpactRange(130, 240),
        tips=(
            "Verify the exact filing date and discharge date; both must be accurate",
            "Chapter 7 can be reported for 10 years; Chapter 13 for 7 years from filing",
            'Accounts included in bankruptcy should show "Included in Bankruptcy", not separate delinquencies',
            "Challenge any account included in bankruptcy that still shows a balance",
            "After discharge, all included debts must show a $0 balance",
        ),
        legal_arguments=(
            "FCRA §605(a)(1): Chapter 7 is 10 years from filing; Chapter 13 is 7 years from filing",
            "FCRA §623(a)(1)(A): Accounts in bankruptcy must reflect a $0 balance post-discharge",
            "11 U.S.C. §524: Discharge injunction bars reporting discharged debts as owed",
        ),
    ),
    ItemType.FORECLOSURE.value: ItemTypeStrategy(
        key=ItemType.FORECLOSURE.value,
        name="Foreclosure",
        primary_strategy="inaccurate_info",
        alternative_strategies=("outdated",),
        estimated_score_impact=ScoreImpactRange(85, 160),
        tips=(
            "Verify the exact date of the foreclosure sale",
            "Challenge any deficiency balance reported after foreclosure (varies by state)",
            "If the property sold for more than was owed, no deficiency should be reported",
            "Date of first delinquency must be accurate for the 7-year calculation",
        ),
        legal_arguments=(
            "FCRA §605(a): 7-year reporting limit from date of first delinquency",
            "State law deficiency regulations (varies by jurisdiction)",
            "FCRA §623(a)(1)(A): Balance and status must be accurately reported post-sale",
        ),
    ),
    ItemType.REPOSSESSION.value: ItemTypeStrategy(
        key=ItemType.REPOSSESSION.value,
        name="Repossession",
        primary_strategy="inaccurate_info",
        alternative_strategies=("paid", "outdated"),
        estimated_score_impact=ScoreImpactRange(75, 150),
        tips=(
            "Challenge the deficiency balance; was the vehicle sold at fair market value?",
            "Request proof of a commercially reasonable sale under UCC §9-610",
            "Verify that proper notice was given before and after the sale",
            "If the deficiency balance is inaccurate, dispute the specific amount",
        ),
        legal_arguments=(
            "UCC §9-610: Vehicle must be sold in a commercially reasonable manner",
            "UCC §9-611: Notice requirements before disposition",
            "FCRA §623(a)(1)(A): Deficiency balance must accurately reflect sale proceeds",
        ),
    ),
    ItemType.INQUIRY.value: ItemTypeStrategy(
        key=ItemType.INQUIRY.value,
        name="Hard Inquiry",
        primary_strategy="not_mine",
        alternative_strategies=("other",),
        estimated_score_impact=ScoreImpactRange(5, 15),
        tips=(
            "Hard inquiries require written authorization; did the consumer apply?",
            "Unauthorized inquiries may indicate identity theft or a permissible purpose violation",
            "Inquiries fall off after 2 years but only affect scores for 12 months",
            "Multiple inquiries of the same type within 14-45 days count as one (rate shopping)",
            "Challenge any inquiry where the consumer did NOT apply for credit",
        ),
        legal_arguments=(
            "FCRA §604: Permissible purposes for accessing a credit report",
            "FCRA §615(a): Notice requirements when credit is denied based on a report",
            "FCRA §616: Civil liability for unauthorized access ($100-$1,000 per inquiry)",
        ),
    ),
    ItemType.OTHER.value: ItemTypeStrategy(
        key=ItemType.OTHER.value,
        name="Other Negative Item",
        primary_strategy="inaccurate_info",
        alternative_strategies=("not_mine", "outdated"),
        estimated_score_impact=ScoreImpactRange(10, 100),
        tips=(
            "Challenge every data point: creditor name, account number, balance, dates, status",
            "Minor inaccuracies (wrong address, incorrect account type) make the item disputable",
            "Request the original agreement or documentation supporting the account",
        ),
        legal_arguments=(
            "FCRA §611(a): Right to dispute any information believed to be inaccurate",
            "FCRA §611(a)(6)(B)(iii): Unverifiable information must be deleted",
            "FCRA §623(a)(1)(A): Accuracy requirement for all furnished information",
        ),
    ),
})

FALLBACK_ITEM_TYPE = ItemType.OTHER.value


# =============================================================================
# LOOKUPS
# =============================================================================

def get_item_type_strategy(item_type) -> ItemTypeStrategy:
    """Catalog entry for an item type; unknown or missing types map to "other"."""
    key = getattr(item_type, "value", item_type)
    if isinstance(key, str):
        key = key.strip().lower()
    return ITEM_TYPE_STRATEGIES.get(key, ITEM_TYPE_STRATEGIES[FALLBACK_ITEM_TYPE])


def get_bureau_profile(bureau) -> Optional[BureauProfile]:
    """Bureau tactics profile, or None when the bureau is unknown or unset."""
    key = getattr(bureau, "value", bureau)
    if not isinstance(key, str):
        return None
    return BUREAU_STRATEGIES.get(key.strip().lower())


def get_round(round_number: int) -> StrategyRound:
    """Round definition, clamped into the 1-4 escalation path."""
    return STRATEGY_ROUNDS[clamp_round(round_number)]


def clamp_round(round_number: Optional[int]) -> int:
    if round_number is None:
        return FIRST_ROUND
    return max(FIRST_ROUND, min(FINAL_ROUND, int(round_number)))


# =============================================================================
# LOAD-TIME VALIDATION
# =============================================================================

def validate_catalogs() -> None:
    """
    Check that every enum value has a catalog entry.

    Raises:
        CatalogError: on the first missing or malformed entry
    """
    missing_types = [t.value for t in ItemType if t.value not in ITEM_TYPE_STRATEGIES]
    if missing_types:
        raise CatalogError(f"Item type catalog missing entries: {', '.join(missing_types)}")

    missing_bureaus = [b.value for b in Bureau if b.value not in BUREAU_STRATEGIES]
    if missing_bureaus:
        raise CatalogError(f"Bureau catalog missing entries: {', '.join(missing_bureaus)}")

    expected_rounds = list(range(FIRST_ROUND, FINAL_ROUND + 1))
    if sorted(STRATEGY_ROUNDS) != expected_rounds:
        raise CatalogError(f"Strategy rounds must be exactly {expected_rounds}")

    for key, entry in ITEM_TYPE_STRATEGIES.items():
        impact = entry.estimated_score_impact
        if impact.min < 0 or impact.min > impact.max:
            raise CatalogError(f"Invalid score impact range for {key}: {impact.min}-{impact.max}")
        if not entry.primary_strategy:
            raise CatalogError(f"Item type {key} has no primary strategy")


validate_catalogs()
