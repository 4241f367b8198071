# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Dict

from pydantic import Field, model_validator

from .enums import (
    ConstructionTypeEnum,
    MarketTrendEnum,
    PropertyTypeEnum,
    ValuationMethodEnum,
)
from .model import Model
from .types import FloatBetween0And1, PositiveFloat, PositiveInt, StrictlyPositiveFloat
from .validation import ValidationMixin

MAX_DEPRECIATION_PERCENTAGE = 95.0


class DepreciationSettings(Model, ValidationMixin):
    """
    Policy for converting age and condition into building depreciation.

    The condition curve is piecewise linear: neutral across
    ``neutral_rating_low``..``neutral_rating_high``, falling to
    ``1 - max_condition_reduction`` at rating 10 and rising to
    ``1 + max_condition_increase`` at rating 1.
    """

    default_economic_life_years: StrictlyPositiveFloat = Field(
        default=60.0,
        description="Economic life used when the request does not supply one.",
    )
    economic_life_by_construction: Dict[ConstructionTypeEnum, StrictlyPositiveFloat] = Field(
        default_factory=dict,
        description="Optional economic-life overrides per construction type.",
    )
    max_depreciation_percentage: PositiveFloat = Field(
        default=MAX_DEPRECIATION_PERCENTAGE,
        le=MAX_DEPRECIATION_PERCENTAGE,
        description="Ceiling on total building depreciation, in percent.",
    )
    max_condition_reduction: FloatBetween0And1 = Field(
        default=0.15, description="Largest relative reduction for excellent condition."
    )
    max_condition_increase: PositiveFloat = Field(
        default=0.25, description="Largest relative increase for poor condition."
    )
    neutral_rating_low: float = Field(default=6.0, ge=1, le=10)
    neutral_rating_high: float = Field(default=7.0, ge=1, le=10)

    @model_validator(mode="after")
    def validate_neutral_band(self) -> "DepreciationSettings":
        """Neutral band must be ordered and strictly inside the 1-10 scale."""
        if self.neutral_rating_low > self.neutral_rating_high:
            raise ValueError("neutral_rating_low must not exceed neutral_rating_high")
        if self.neutral_rating_low <= 1 or self.neutral_rating_high >= 10:
            raise ValueError("Neutral condition band must lie strictly between 1 and 10")
        return self

    def economic_life_for(self, construction_type: ConstructionTypeEnum) -> float:
        """Default economic life for a construction type."""
        return self.economic_life_by_construction.get(
            construction_type, self.default_economic_life_years
        )


class CostApproachSettings(Model):
    """Settings for land valuation and building-level adjustments."""

    default_land_area_ratio: StrictlyPositiveFloat = Field(
        default=1.2,
        description="Land area assumed as a multiple of built area when not supplied.",
    )
    neighborhood_neutral_rating: float = Field(default=5.0, ge=1, le=10)
    neighborhood_step: PositiveFloat = Field(
        default=0.05, description="Building adjustment per neighborhood rating point."
    )
    market_trend_adjustments: Dict[MarketTrendEnum, float] = Field(
        default_factory=lambda: {
            MarketTrendEnum.RISING: 0.10,
            MarketTrendEnum.STABLE: 0.0,
            MarketTrendEnum.DECLINING: -0.05,
        },
        description="Building value adjustment for the district's market trend.",
    )
    demand_supply_sensitivity: PositiveFloat = Field(
        default=0.1,
        description="Adjustment per unit of demand/supply ratio above or below 1.0.",
    )
    construction_cost_multipliers: Dict[ConstructionTypeEnum, StrictlyPositiveFloat] = Field(
        default_factory=lambda: {
            ConstructionTypeEnum.CONCRETE: 1.0,
            ConstructionTypeEnum.BRICK: 0.85,
            ConstructionTypeEnum.STEEL: 1.15,
            ConstructionTypeEnum.MIXED: 0.95,
        },
        description="Multiplier on the formula base rate per construction type.",
    )
    replacement_cost_markup: StrictlyPositiveFloat = Field(
        default=1.15,
        description="Current new-build cost as a multiple of the base building cost.",
    )

    def construction_multiplier(self, construction_type: ConstructionTypeEnum) -> float:
        """Base-rate multiplier for a construction type; unknown types are neutral."""
        return self.construction_cost_multipliers.get(construction_type, 1.0)


class ComparisonSettings(Model):
    """Settings for the sales comparison approach."""

    max_comparables: PositiveInt = Field(
        default=3, ge=1, description="Most recent comparables retained per valuation."
    )
    price_per_sqm_tolerance: FloatBetween0And1 = Field(
        default=0.01,
        description="Relative tolerance between a supplied and a derived price per sqm.",
    )
    adjustment_threshold: FloatBetween0And1 = Field(
        default=0.25,
        description="Gross adjustment ratio above which a comparable is down-weighted.",
    )
    outlier_weight_factor: float = Field(
        default=0.5, gt=0, le=1, description="Weight multiplier for comparables above the threshold."
    )
    max_age_adjustment_ratio: FloatBetween0And1 = Field(
        default=0.95,
        description="Cap on the age adjustment as a share of the comparable's price per sqm.",
    )
    finishing_step_rate: PositiveFloat = Field(
        default=0.10,
        description="Fallback adjustment per finishing-level step when no formula is found.",
    )
    age_adjustment_rate: PositiveFloat = Field(
        default=0.01,
        description="Fallback adjustment per year of age difference when no formula is found.",
    )
    market_trend_annual_rates: Dict[MarketTrendEnum, float] = Field(
        default_factory=lambda: {
            MarketTrendEnum.RISING: 0.05,
            MarketTrendEnum.STABLE: 0.0,
            MarketTrendEnum.DECLINING: -0.03,
        },
        description="Annual price drift used to bring older sales to the valuation date.",
    )
    recency_scale_months: StrictlyPositiveFloat = Field(
        default=12.0,
        description="Months after which a sale's recency weight halves.",
    )


class IncomeSettings(Model):
    """Settings for the income approach."""

    default_capitalization_rate: StrictlyPositiveFloat = Field(
        default=0.08, le=1.0, description="Fallback capitalization rate."
    )
    capitalization_rates: Dict[PropertyTypeEnum, StrictlyPositiveFloat] = Field(
        default_factory=dict,
        description="Property-type specific capitalization rates.",
    )


class ReconciliationSettings(Model, ValidationMixin):
    """Default weights of the three approaches when all are available."""

    method_weights: Dict[ValuationMethodEnum, float] = Field(
        default_factory=lambda: {
            ValuationMethodEnum.SALES_COMPARISON: 0.5,
            ValuationMethodEnum.COST: 0.35,
            ValuationMethodEnum.INCOME: 0.15,
        }
    )

    @model_validator(mode="after")
    def validate_method_weights(self) -> "ReconciliationSettings":
        """Weights must cover every approach and sum to 1.0."""
        missing = [m.value for m in ValuationMethodEnum if m not in self.method_weights]
        if missing:
            raise ValueError(f"method_weights missing approaches: {missing}")
        self.validate_weights(self.method_weights, field_name="method_weights", tolerance=1e-6)
        return self


class ConfidenceSettings(Model):
    """
    Point deductions applied by the confidence scorer.

    Every score starts from a per-method base and is clamped to [0, 100].
    """

    # Cost approach
    cost_base: float = Field(default=100.0, ge=0, le=100)
    cost_floor: float = Field(default=60.0, ge=0, le=100)
    fallback_district_penalty: PositiveFloat = 15.0
    missing_land_area_penalty: PositiveFloat = 10.0
    missing_neighborhood_penalty: PositiveFloat = 5.0
    missing_location_formula_penalty: PositiveFloat = 5.0
    old_building_age_years: PositiveFloat = 30.0
    old_building_penalty: PositiveFloat = 10.0
    poor_condition_rating: float = Field(default=4.0, ge=1, le=10)
    poor_condition_penalty: PositiveFloat = 15.0
    declining_market_penalty: PositiveFloat = 5.0
    cost_adjustment_scale: PositiveFloat = Field(
        default=50.0,
        description="Points lost per 100% of location+market adjustment relative to depreciated cost.",
    )
    cost_adjustment_cap: PositiveFloat = 20.0

    # Sales comparison
    sales_base_by_count: Dict[int, float] = Field(
        default_factory=lambda: {1: 60.0, 2: 75.0, 3: 90.0},
        description="Base score by number of comparables used; larger counts use the highest key.",
    )
    missing_market_formula_penalty: PositiveFloat = 10.0
    excluded_comparable_penalty: PositiveFloat = 5.0
    unknown_recency_penalty: PositiveFloat = 5.0
    sales_adjustment_scale: PositiveFloat = Field(
        default=60.0,
        description="Points lost per 100% of mean gross adjustment ratio.",
    )
    sales_adjustment_cap: PositiveFloat = 30.0
    stale_sale_months: PositiveFloat = 12.0
    stale_sale_penalty_per_year: PositiveFloat = 5.0
    stale_sale_cap: PositiveFloat = 20.0

    # Income approach
    income_supplied_rent_base: float = Field(default=70.0, ge=0, le=100)
    income_rate_table_base: float = Field(default=55.0, ge=0, le=100)
    default_cap_rate_penalty: PositiveFloat = 10.0

    @model_validator(mode="after")
    def validate_sales_base(self) -> "ConfidenceSettings":
        """Comparable-count table needs at least one positive count."""
        if not self.sales_base_by_count or min(self.sales_base_by_count) < 1:
            raise ValueError("sales_base_by_count must map counts >= 1 to scores")
        return self


class ReportingSettings(Model):
    """Settings related to result rounding and display."""

    decimal_precision: PositiveInt = Field(
        default=2, description="Number of decimal places for currency values."
    )
    currency_code: str = Field(default="EGP", description="ISO code of the valuation currency.")


class ValuationSettings(Model):
    """
    Top-level configuration for the valuation engine.

    Settings are passed explicitly into every computation; there is no
    module-level mutable configuration.

    Usage Examples:
        # Defaults (60-year economic life, 0.5/0.35/0.15 weights)
        settings = ValuationSettings()

        # Heavier reliance on the cost approach
        settings = ValuationSettings(
            reconciliation=ReconciliationSettings(method_weights={
                ValuationMethodEnum.SALES_COMPARISON: 0.4,
                ValuationMethodEnum.COST: 0.5,
                ValuationMethodEnum.INCOME: 0.1,
            })
        )
    """

    depreciation: DepreciationSettings = Field(default_factory=DepreciationSettings)
    cost: CostApproachSettings = Field(default_factory=CostApproachSettings)
    comparison: ComparisonSettings = Field(default_factory=ComparisonSettings)
    income: IncomeSettings = Field(default_factory=IncomeSettings)
    reconciliation: ReconciliationSettings = Field(default_factory=ReconciliationSettings)
    confidence: ConfidenceSettings = Field(default_factory=ConfidenceSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    use_fallback_districts: bool = Field(
        default=True,
        description="Use the built-in district price table when a location is not in the repository.",
    )
