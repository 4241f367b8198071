# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Confidence Scorer

Scores each available approach from 0 to 100 by data completeness,
adjustment magnitude and (for sales comparison) recency. The overall
confidence is the reconciliation-weighted average of the scores of the
approaches actually used, so a skipped approach never affects it.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Tuple

from pydantic import Field

from ..core.primitives import (
    CapRateSourceEnum,
    ConfidenceSettings,
    MarketTrendEnum,
    Model,
    RentSourceEnum,
    ValuationMethodEnum,
)
from .base import ApproachOutcome, Available
from .cost import CostApproachResult
from .income import IncomeApproachResult
from .sales_comp import SalesComparisonResult

if TYPE_CHECKING:
    from .context import ValuationContext

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 100.0

Deduction = Tuple[str, float]


def clamp_confidence(score: float, floor: float = MIN_CONFIDENCE) -> float:
    return min(max(score, floor, MIN_CONFIDENCE), MAX_CONFIDENCE)


class ConfidenceScorer(Model):
    """
    Per-approach confidence scoring.

    Each ``*_deductions`` method returns the named point deductions it
    applied, which keeps the score auditable.

    Example:
        ```python
        scorer = ConfidenceScorer()
        scored = scorer.score(outcome, context)
        scored.confidence  # 0-100
        ```
    """

    settings: ConfidenceSettings = Field(default_factory=ConfidenceSettings)

    # --- Cost approach ---

    def cost_deductions(self, result: CostApproachResult, context: "ValuationContext") -> List[Deduction]:
        s = self.settings
        subject = context.subject
        snapshot = context.snapshot
        deductions: List[Deduction] = []

        if snapshot.used_fallback_district:
            deductions.append(("fallback_district", s.fallback_district_penalty))
        if not result.land_area_supplied:
            deductions.append(("missing_land_area", s.missing_land_area_penalty))
        if subject.neighborhood_rating is None:
            deductions.append(("missing_neighborhood", s.missing_neighborhood_penalty))
        if snapshot.location_formula is None:
            deductions.append(("missing_location_formula", s.missing_location_formula_penalty))
        if subject.age > s.old_building_age_years:
            deductions.append(("old_building", s.old_building_penalty))
        if subject.condition < s.poor_condition_rating:
            deductions.append(("poor_condition", s.poor_condition_penalty))
        if snapshot.district is not None and snapshot.district.market_trend == MarketTrendEnum.DECLINING:
            deductions.append(("declining_market", s.declining_market_penalty))

        depreciated = result.depreciated_building_value
        if depreciated > 0:
            magnitude = (abs(result.location_adjustment) + abs(result.market_adjustment)) / depreciated
            if magnitude > 0:
                deductions.append(
                    ("adjustment_magnitude", min(s.cost_adjustment_cap, s.cost_adjustment_scale * magnitude))
                )
        return deductions

    def score_cost(self, result: CostApproachResult, context: "ValuationContext") -> float:
        deductions = self.cost_deductions(result, context)
        return clamp_confidence(
            self.settings.cost_base - math.fsum(points for _, points in deductions),
            floor=self.settings.cost_floor,
        )

    # --- Sales comparison ---

    def sales_base(self, count: int) -> float:
        """Base score for the number of comparables used (largest key not above ``count``)."""
        table = self.settings.sales_base_by_count
        eligible = [key for key in table if key <= count]
        return table[max(eligible)] if eligible else table[min(table)]

    def sales_deductions(self, result: SalesComparisonResult) -> List[Deduction]:
        s = self.settings
        deductions: List[Deduction] = []

        if not result.market_formula_found:
            deductions.append(("missing_market_formula", s.missing_market_formula_penalty))
        if result.excluded:
            deductions.append(("excluded_comparables", s.excluded_comparable_penalty * len(result.excluded)))
        if result.unknown_recency_count:
            deductions.append(("unknown_recency", s.unknown_recency_penalty * result.unknown_recency_count))

        gross = result.mean_gross_adjustment_ratio
        if gross > 0:
            deductions.append(("adjustment_magnitude", min(s.sales_adjustment_cap, s.sales_adjustment_scale * gross)))

        known = [c for c in result.comparables if c.months_since_sale is not None]
        if known:
            weight = math.fsum(c.weight for c in known)
            months = math.fsum(c.weight * c.months_since_sale for c in known) / weight if weight else 0.0
            excess_years = max(months - s.stale_sale_months, 0.0) / 12.0
            if excess_years > 0:
                deductions.append(
                    ("stale_sales", min(s.stale_sale_cap, s.stale_sale_penalty_per_year * excess_years))
                )
        return deductions

    def score_sales(self, result: SalesComparisonResult) -> float:
        deductions = self.sales_deductions(result)
        return clamp_confidence(self.sales_base(result.used_count) - math.fsum(p for _, p in deductions))

    # --- Income approach ---

    def score_income(self, result: IncomeApproachResult) -> float:
        s = self.settings
        base = s.income_supplied_rent_base if result.rent_source == RentSourceEnum.SUPPLIED else s.income_rate_table_base
        if result.cap_rate_source == CapRateSourceEnum.DEFAULT:
            base -= s.default_cap_rate_penalty
        return clamp_confidence(base)

    # --- Dispatch ---

    def score(self, outcome: ApproachOutcome, context: "ValuationContext") -> ApproachOutcome:
        """Attach a confidence score to an available outcome; unavailable outcomes pass through."""
        if not outcome.is_available:
            return outcome

        if isinstance(outcome, CostApproachResult):
            confidence = self.score_cost(outcome, context)
        elif isinstance(outcome, SalesComparisonResult):
            confidence = self.score_sales(outcome)
        elif isinstance(outcome, IncomeApproachResult):
            confidence = self.score_income(outcome)
        else:
            raise TypeError(f"Cannot score outcome of type {type(outcome).__name__}")

        logger.debug(f"{outcome.method.value} confidence: {confidence:.1f}")
        return outcome.with_confidence(confidence)

    @staticmethod
    def overall(outcomes: Iterable[Available], weights: Mapping[ValuationMethodEnum, float]) -> float:
        """
        Reconciliation-weighted confidence of the used approaches.

        Raises:
            ValueError: If a used approach has not been scored
        """
        total = []
        for outcome in outcomes:
            weight = weights.get(outcome.method, 0.0)
            if weight == 0:
                continue
            if outcome.confidence is None:
                raise ValueError(f"{outcome.method.value} outcome has not been scored")
            total.append(weight * outcome.confidence)
        return clamp_confidence(math.fsum(total))

    def explain(self, outcome: Available, context: "ValuationContext") -> Dict[str, float]:
        """Named deductions behind an outcome's score."""
        if isinstance(outcome, CostApproachResult):
            return dict(self.cost_deductions(outcome, context))
        if isinstance(outcome, SalesComparisonResult):
            return dict(self.sales_deductions(outcome))
        return {}
