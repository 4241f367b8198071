# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valuation result models.

``ValuationResult`` is built fresh for every request and is immutable.
Besides the response figures it keeps the audit trail: which approaches
were used and with what weight, why the others were skipped, and every
degraded-data warning raised along the way.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from ..core.primitives import (
    MAX_DEPRECIATION_PERCENTAGE,
    MethodStatusEnum,
    Model,
    Percentage,
    PositiveFloat,
    ValuationMethodEnum,
)
from ..valuation import (
    ApproachOutcome,
    CostApproachResult,
    IncomeApproachResult,
    LookupSnapshot,
    SalesComparisonResult,
)


class CalculationBreakdown(Model):
    """
    Signed building-value components from the cost approach.

    ``base_building_cost`` plus the four deltas equals ``building_value``.
    All zero when the cost approach did not participate.
    """

    base_building_cost: float = 0.0
    age_depreciation: float = 0.0
    condition_adjustment: float = 0.0
    location_adjustment: float = 0.0
    market_adjustment: float = 0.0

    @property
    def building_value(self) -> float:
        return (
            self.base_building_cost
            + self.age_depreciation
            + self.condition_adjustment
            + self.location_adjustment
            + self.market_adjustment
        )

    @classmethod
    def from_cost(cls, cost: Optional[CostApproachResult]) -> "CalculationBreakdown":
        if cost is None:
            return cls()
        return cls(**cost.breakdown())


class MethodSummary(Model):
    """Audit line for one approach."""

    method: ValuationMethodEnum
    status: MethodStatusEnum
    value: Optional[float] = None
    confidence: Optional[float] = None
    weight: float = Field(default=0.0, ge=0, le=1)
    reason: Optional[str] = None
    error_kind: Optional[str] = None
    confidence_deductions: Dict[str, float] = Field(default_factory=dict)

    @property
    def used(self) -> bool:
        return self.weight > 0


class ValuationResult(Model):
    """
    Reconciled valuation of one property.

    Attributes:
        market_value_estimate: Final reconciled value
        land_value: Land value from the cost approach (0 if not used)
        building_value: Building value from the cost approach (0 if not used)
        depreciation_percentage: Building depreciation from the depreciation model
        price_per_sqm: market_value_estimate / built area
        confidence_level: Reconciliation-weighted confidence (0-100)
        calculation_breakdown: Signed cost-approach components
        methods: One summary per approach, used or skipped
        warnings: Degraded-data notices (excluded comparables, fallback district)
        as_of: Date formulas were resolved against
    """

    market_value_estimate: float
    land_value: PositiveFloat = 0.0
    building_value: float = 0.0
    depreciation_percentage: float = Field(..., ge=0, le=MAX_DEPRECIATION_PERCENTAGE)
    price_per_sqm: float
    confidence_level: Percentage
    calculation_breakdown: CalculationBreakdown = Field(default_factory=CalculationBreakdown)

    area: PositiveFloat
    methods: Tuple[MethodSummary, ...] = ()
    warnings: Tuple[str, ...] = ()
    as_of: date
    repository_version: Optional[int] = None

    # Detail kept for reporting; not part of the response payload
    outcomes: Tuple[ApproachOutcome, ...] = Field(default=(), exclude=True, repr=False)
    snapshot: Optional[LookupSnapshot] = Field(default=None, exclude=True, repr=False)

    @property
    def weights(self) -> Dict[ValuationMethodEnum, float]:
        return {m.method: m.weight for m in self.methods if m.used}

    @property
    def used_methods(self) -> List[ValuationMethodEnum]:
        return [m.method for m in self.methods if m.used]

    @property
    def skipped_methods(self) -> Dict[ValuationMethodEnum, str]:
        return {m.method: m.reason for m in self.methods if m.status == MethodStatusEnum.UNAVAILABLE}

    def method(self, method: ValuationMethodEnum) -> Optional[MethodSummary]:
        for summary in self.methods:
            if summary.method == method:
                return summary
        return None

    @property
    def cost_result(self) -> Optional[CostApproachResult]:
        return next((o for o in self.outcomes if isinstance(o, CostApproachResult)), None)

    @property
    def sales_comparison_result(self) -> Optional[SalesComparisonResult]:
        return next((o for o in self.outcomes if isinstance(o, SalesComparisonResult)), None)

    @property
    def income_result(self) -> Optional[IncomeApproachResult]:
        return next((o for o in self.outcomes if isinstance(o, IncomeApproachResult)), None)

    def to_response(self, precision: Optional[int] = None) -> Dict[str, Any]:
        """
        Success payload for the request boundary.

        Args:
            precision: Decimal places for currency figures; unrounded when None
        """

        def fmt(value: float) -> float:
            return round(value, precision) if precision is not None else value

        breakdown = self.calculation_breakdown
        return {
            "market_value_estimate": fmt(self.market_value_estimate),
            "land_value": fmt(self.land_value),
            "building_value": fmt(self.building_value),
            "depreciation_percentage": fmt(self.depreciation_percentage),
            "price_per_sqm": fmt(self.price_per_sqm),
            "confidence_level": fmt(self.confidence_level),
            "calculation_breakdown": {
                "base_building_cost": fmt(breakdown.base_building_cost),
                "age_depreciation": fmt(breakdown.age_depreciation),
                "condition_adjustment": fmt(breakdown.condition_adjustment),
                "location_adjustment": fmt(breakdown.location_adjustment),
                "market_adjustment": fmt(breakdown.market_adjustment),
            },
            "methods": [
                summary.model_dump(mode="json", exclude_none=True) for summary in self.methods
            ],
            "warnings": list(self.warnings),
        }
