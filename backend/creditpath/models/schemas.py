"""
CreditPath - Request Schemas

Pydantic models a web layer can bind request bodies to. Each converts to
the immutable domain record consumed by the analytics and strategy services.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .records import (
    SCORE_MAX,
    SCORE_MIN,
    Bureau,
    DisputeAttempt,
    ItemStatus,
    ItemType,
    NegativeItem,
    ScoreObservation,
)

VALID_BUREAUS = [b.value for b in Bureau]
VALID_ITEM_TYPES = [t.value for t in ItemType]
VALID_STATUSES = [s.value for s in ItemStatus]


def _check_choice(value: Optional[str], valid: list, label: str) -> Optional[str]:
    if value is None:
        return value
    normalized = value.strip().lower()
    if normalized not in valid:
        raise ValueError(f'Invalid {label}. Must be one of: {", ".join(valid)}')
    return normalized


class ScoreObservationRequest(BaseModel):
    """Request model for recording a credit score."""
    client_id: str
    bureau: str
    score: int = Field(..., description=f"FICO-range score, {SCORE_MIN}-{SCORE_MAX}")
    observed_date: Optional[date] = None
    source: str = "manual_entry"
    notes: Optional[str] = None

    @field_validator('bureau')
    @classmethod
    def validate_bureau(cls, v):
        return _check_choice(v, VALID_BUREAUS, "bureau")

    @field_validator('score')
    @classmethod
    def validate_score(cls, v):
        if v < SCORE_MIN or v > SCORE_MAX:
            raise ValueError(f'Credit score must be between {SCORE_MIN} and {SCORE_MAX}')
        return v

    def to_observation(self, today: Optional[date] = None) -> ScoreObservation:
        return ScoreObservation(
            client_id=self.client_id,
            bureau=Bureau(self.bureau),
            score=self.score,
            observed_date=self.observed_date or today or date.today(),
            note=self.notes,
            source=self.source,
        )


class NegativeItemRequest(BaseModel):
    """Request model for a negative credit item."""
    id: str
    client_id: str
    item_type: str = ItemType.OTHER.value
    creditor_name: str = ""
    balance: Optional[float] = None
    bureau: Optional[str] = None
    status: str = ItemStatus.IDENTIFIED.value
    date_opened: Optional[date] = None
    date_reported: Optional[date] = None

    @field_validator('item_type')
    @classmethod
    def validate_item_type(cls, v):
        return _check_choice(v, VALID_ITEM_TYPES, "item type")

    @field_validator('bureau')
    @classmethod
    def validate_bureau(cls, v):
        return _check_choice(v, VALID_BUREAUS, "bureau")

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_choice(v, VALID_STATUSES, "status")

    def to_item(self) -> NegativeItem:
        return NegativeItem(
            id=self.id,
            client_id=self.client_id,
            item_type=ItemType(self.item_type),
            creditor_name=self.creditor_name,
            balance=self.balance,
            bureau=Bureau(self.bureau) if self.bureau else None,
            status=ItemStatus(self.status),
            date_opened=self.date_opened,
            date_reported=self.date_reported,
        )


class DisputeAttemptRequest(BaseModel):
    """Request model for a prior dispute attempt."""
    id: str
    credit_item_id: str
    bureau: str
    status: str
    created_at: datetime

    @field_validator('bureau')
    @classmethod
    def validate_bureau(cls, v):
        return _check_choice(v, VALID_BUREAUS, "bureau")

    def to_attempt(self) -> DisputeAttempt:
        return DisputeAttempt(
            id=self.id,
            credit_item_id=self.credit_item_id,
            bureau=Bureau(self.bureau),
            status=self.status,
            created_at=self.created_at,
        )


class StrategyRequest(BaseModel):
    """
    Request model for a dispute strategy recommendation.

    current_round is rejected outside 1-4 here; the selector itself clamps
    out-of-range rounds for internal callers.
    """
    item_type: str
    bureau: Optional[str] = None
    current_round: int = Field(1, ge=1, le=4)
    previous_result: Optional[str] = None
    current_score: Optional[int] = None
    total_negative_items: Optional[int] = Field(None, ge=0)

    @field_validator('previous_result')
    @classmethod
    def validate_previous_result(cls, v):
        return _check_choice(v, ["verified", "resolved"], "previous result")

    @field_validator('current_score')
    @classmethod
    def validate_current_score(cls, v):
        if v is not None and (v < SCORE_MIN or v > SCORE_MAX):
            raise ValueError(f'Credit score must be between {SCORE_MIN} and {SCORE_MAX}')
        return v

    def to_kwargs(self) -> dict:
        """Keyword arguments for services.strategy.select_strategy."""
        return {
            "item_type": self.item_type,
            "bureau": self.bureau,
            "current_round": self.current_round,
            "previous_result": self.previous_result,
            "current_score": self.current_score,
            "total_negative_items": self.total_negative_items,
        }
