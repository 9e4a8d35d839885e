"""
Score Projector

Estimates how far a client's score can climb if their negative items are
removed, item by item, using the shared estimate_score_improvement formula.
"""
import logging
from typing import Iterable, List

from ...models.records import SCORE_MIN, NegativeItem, enum_value
from ...models.reports import ImpactPriority, ItemImpact, ProjectionReport, TimelineStep
from ..numeric import clamp_score, round_half_up
from ..strategy.catalog import get_item_type_strategy
from ..strategy.impact import estimate_confidence, estimate_score_improvement
from .trend import interpret_score_range

logger = logging.getLogger(__name__)

TOP_PRIORITY_COUNT = 3


def impact_priority(estimated_max: int) -> ImpactPriority:
    if estimated_max > 80:
        return ImpactPriority.CRITICAL
    if estimated_max > 40:
        return ImpactPriority.HIGH
    return ImpactPriority.MEDIUM


class ScoreProjector:
    """Builds per-item impacts and a cumulative improvement timeline."""

    def project(self, current_average: int, active_items: Iterable[NegativeItem]) -> ProjectionReport:
        """
        Project score improvement for a set of negative items.

        Items that are already deleted are ignored, so the dilution factor
        counts only items still on the report.

        Args:
            current_average: Current average score across bureaus
            active_items: The client's active negative items

        Returns:
            ProjectionReport with impacts sorted by adjusted maximum gain
        """
        items = [i for i in active_items if i.is_active]
        item_count = len(items)

        if current_average < SCORE_MIN:
            return self._unscored(current_average, item_count)

        impacts = self._sorted_impacts(items, current_average, item_count)
        timeline = self._build_timeline(impacts, current_average)

        best_case = clamp_score(current_average + sum(i.estimated_max for i in impacts))
        conservative = clamp_score(current_average + sum(i.estimated_min for i in impacts))

        report = ProjectionReport(
            current_score=current_average,
            current_category=interpret_score_range(current_average),
            item_count=item_count,
            impacts=impacts,
            timeline=timeline,
            best_case_score=best_case,
            conservative_score=conservative,
            top_priorities=impacts[:TOP_PRIORITY_COUNT],
            confidence=estimate_confidence(item_count),
        )
        logger.info(
            f"Projected {item_count} items from {current_average}: "
            f"conservative={conservative}, projected={report.projected_score}, best={best_case}"
        )
        return report

    def _unscored(self, current_average: int, item_count: int) -> ProjectionReport:
        """No scores recorded yet (the empty comparison averages 0): nothing to project from."""
        logger.info(f"No score on record ({current_average}); skipping projection of {item_count} items")
        return ProjectionReport(
            current_score=current_average,
            current_category=interpret_score_range(current_average),
            item_count=item_count,
            impacts=[],
            timeline=[],
            best_case_score=current_average,
            conservative_score=current_average,
            top_priorities=[],
            confidence=estimate_confidence(item_count),
        )

    def _sorted_impacts(
        self,
        items: List[NegativeItem],
        current_average: int,
        item_count: int,
    ) -> List[ItemImpact]:
        impacts = []
        for item in items:
            estimate = estimate_score_improvement(item.item_type_value, current_average, item_count)
            strategy = get_item_type_strategy(item.item_type_value)
            impacts.append(ItemImpact(
                item_id=item.id,
                item_type=strategy.key,
                item_type_name=strategy.name,
                creditor_name=item.creditor_name,
                bureau=enum_value(item.bureau),
                estimated_min=estimate.estimated_min,
                estimated_max=estimate.estimated_max,
                priority=impact_priority(estimate.estimated_max),
            ))
            logger.debug(
                f"Item {item.id} ({strategy.key}): +{estimate.estimated_min}-{estimate.estimated_max}"
            )

        # sorted() is stable, so equal gains keep input order
        return sorted(impacts, key=lambda i: i.estimated_max, reverse=True)

    def _build_timeline(self, impacts: List[ItemImpact], current_average: int) -> List[TimelineStep]:
        timeline = []
        running = current_average
        for step, impact in enumerate(impacts, start=1):
            gain = round_half_up(impact.average_gain)
            running = clamp_score(running + gain)
            timeline.append(TimelineStep(
                step=step,
                item_id=impact.item_id,
                creditor_name=impact.creditor_name,
                item_type=impact.item_type,
                score_gain=gain,
                projected_score=running,
            ))
        return timeline


def project_improvement(current_average: int, active_items: Iterable[NegativeItem]) -> ProjectionReport:
    """Factory function for ScoreProjector.project."""
    return ScoreProjector().project(current_average, active_items)
