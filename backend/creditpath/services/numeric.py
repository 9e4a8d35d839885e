"""Rounding and clamping shared by the analytics and strategy layers."""
import math

from ..models.records import SCORE_MAX, SCORE_MIN


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(score: float) -> int:
    """Keep a derived score inside the reportable 300-850 range."""
    return int(max(SCORE_MIN, min(SCORE_MAX, score)))
