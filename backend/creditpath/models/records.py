"""
CreditPath - Input Records

Snapshots handed to the engine by the record store. The engine reads these
and never writes them back: observations are append-only, item status and
dispute attempts are owned by the dispute workflow.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


SCORE_MIN = 300
SCORE_MAX = 850


# =============================================================================
# ENUMS
# =============================================================================

class Bureau(str, Enum):
    EXPERIAN = "experian"
    EQUIFAX = "equifax"
    TRANSUNION = "transunion"


class ItemType(str, Enum):
    LATE_PAYMENT = "late_payment"
    COLLECTION = "collection"
    CHARGE_OFF = "charge_off"
    BANKRUPTCY = "bankruptcy"
    FORECLOSURE = "foreclosure"
    REPOSSESSION = "repossession"
    INQUIRY = "inquiry"
    OTHER = "other"


class ItemStatus(str, Enum):
    IDENTIFIED = "identified"
    DISPUTING = "disputing"
    VERIFIED = "verified"
    UPDATED = "updated"
    DELETED = "deleted"


# "resolved" is not a current status but still shows up in legacy rows
INACTIVE_STATUSES = {ItemStatus.DELETED.value, "resolved"}


class ScoreValidationError(ValueError):
    """Raised when a score observation falls outside the reportable range."""
    pass


def enum_value(value) -> Optional[str]:
    """Normalize an enum member or raw string to its lowercase string value."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    return str(value).strip().lower()


# =============================================================================
# SCORE OBSERVATION
# =============================================================================

@dataclass(frozen=True)
class ScoreObservation:
    """One recorded score for a (client, bureau) pair on a given date."""
    client_id: str
    bureau: Bureau
    score: int
    observed_date: date
    note: Optional[str] = None
    source: str = "manual_entry"

    def __post_init__(self):
        if isinstance(self.score, bool) or not isinstance(self.score, int):
            raise ScoreValidationError(
                f"Credit score must be an integer, got {self.score!r}"
            )
        if self.score < SCORE_MIN or self.score > SCORE_MAX:
            raise ScoreValidationError(
                f"Credit score must be between {SCORE_MIN} and {SCORE_MAX}, got {self.score}"
            )
        if not isinstance(self.bureau, Bureau):
            # Raises ValueError for anything that is not a bureau
            object.__setattr__(self, "bureau", Bureau(enum_value(self.bureau)))
        if isinstance(self.observed_date, datetime):
            object.__setattr__(self, "observed_date", self.observed_date.date())

    def to_dict(self):
        return {
            "client_id": self.client_id,
            "bureau": self.bureau.value,
            "score": self.score,
            "observed_date": self.observed_date.isoformat(),
            "note": self.note,
            "source": self.source,
        }


# =============================================================================
# NEGATIVE ITEM
# =============================================================================

@dataclass(frozen=True)
class NegativeItem:
    """
    A negative tradeline or record on a client's report.

    item_type, bureau and status accept enum members or raw strings so that
    partially migrated rows can still be analyzed.
    """
    id: str
    client_id: str
    item_type: Union[ItemType, str]
    creditor_name: str = ""
    bureau: Optional[Union[Bureau, str]] = None
    status: Union[ItemStatus, str] = ItemStatus.IDENTIFIED
    balance: Optional[float] = None
    date_opened: Optional[date] = None
    date_reported: Optional[date] = None

    def __post_init__(self):
        # Legacy rows carry timestamps; age math compares plain dates
        for name in ("date_opened", "date_reported"):
            value = getattr(self, name)
            if isinstance(value, datetime):
                object.__setattr__(self, name, value.date())

    @property
    def item_type_value(self) -> str:
        return enum_value(self.item_type) or ItemType.OTHER.value

    @property
    def status_value(self) -> str:
        return enum_value(self.status) or ItemStatus.IDENTIFIED.value

    @property
    def is_active(self) -> bool:
        return self.status_value not in INACTIVE_STATUSES


# =============================================================================
# DISPUTE ATTEMPT
# =============================================================================

@dataclass(frozen=True)
class DisputeAttempt:
    """A dispute previously sent for one item to one bureau."""
    id: str
    credit_item_id: str
    bureau: Union[Bureau, str]
    status: str
    created_at: datetime

    @property
    def bureau_value(self) -> Optional[str]:
        return enum_value(self.bureau)

    @property
    def sent_on(self) -> date:
        if isinstance(self.created_at, datetime):
            return self.created_at.date()
        return self.created_at
