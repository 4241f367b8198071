# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Formula and district records read by the valuation engine.

Both records are immutable snapshots of rows in the external formula and
market-data stores. The engine never writes them.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from pydantic import Field, field_validator, model_validator

from ..core.primitives import (
    AreaTypeEnum,
    ConditionBandEnum,
    FormulaTypeEnum,
    MarketTrendEnum,
    Model,
    PositiveFloat,
    PropertyTypeEnum,
    StrictlyPositiveFloat,
    ValidationMixin,
    normalize_label,
)


class Formula(Model, ValidationMixin):
    """
    Versioned coefficient formula.

    A formula is immutable per version; a new version is a new record with
    a later ``effective_from``. Soft deletion sets ``is_active`` to False.

    Attributes:
        formula_type: depreciation, market_adjustment or location_factor
        property_type: Property type the formula applies to
        area_type: Urban, suburban or rural
        base_rate: Cost per sqm (depreciation) or adjustment per finishing
            step (market_adjustment)
        age_factor: Annual depreciation fraction (depreciation) or per-year
            age adjustment for comparables (market_adjustment). Always
            supplied independently of ``base_rate``.
        condition_multipliers: Multiplier per condition band label
        location_adjustments: Adjustment per location label
        rental_rates: Monthly rent per sqm keyed by finishing level or
            ``default`` (market_adjustment formulas only)
        effective_from: First day the formula applies
        effective_until: Last day the formula applies (open-ended if None)
        is_active: False once soft-deleted

    Example:
        ```python
        formula = Formula(
            formula_type="depreciation",
            property_type="residential",
            area_type="urban",
            base_rate=4_000,
            age_factor=0.02,
            effective_from=date(2024, 1, 1),
        )
        ```
    """

    formula_type: FormulaTypeEnum = Field(..., description="Kind of formula")
    property_type: PropertyTypeEnum = Field(..., description="Property type key")
    area_type: AreaTypeEnum = Field(..., description="Area type key")
    base_rate: PositiveFloat = Field(..., description="Unit cost or adjustment base")
    age_factor: PositiveFloat = Field(..., description="Per-year age factor")
    formula_name: Optional[str] = Field(default=None, description="Display name")
    condition_multipliers: Dict[str, StrictlyPositiveFloat] = Field(default_factory=dict)
    location_adjustments: Dict[str, float] = Field(default_factory=dict)
    rental_rates: Dict[str, PositiveFloat] = Field(default_factory=dict)
    effective_from: date = Field(..., description="Start of the effective window")
    effective_until: Optional[date] = Field(default=None, description="End of the window")
    is_active: bool = Field(default=True)

    @field_validator("condition_multipliers", "location_adjustments", "rental_rates", mode="before")
    @classmethod
    def normalize_keys(cls, value):
        """Label maps are matched case- and spacing-insensitively."""
        if value is None:
            return {}
        return {normalize_label(str(key)): item for key, item in dict(value).items()}

    @model_validator(mode="after")
    def validate_window(self) -> "Formula":
        """Effective window must be ordered."""
        self.validate_date_ordering(
            self.effective_from,
            self.effective_until,
            start_field="effective_from",
            end_field="effective_until",
        )
        return self

    def is_effective(self, as_of: date) -> bool:
        """Whether the formula is active and its window contains ``as_of``."""
        if not self.is_active or as_of < self.effective_from:
            return False
        return self.effective_until is None or as_of <= self.effective_until

    def condition_multiplier(self, rating: float) -> Optional[float]:
        """Multiplier for the rating's condition band, if the formula defines one."""
        band = ConditionBandEnum.from_rating(rating)
        return self.condition_multipliers.get(band.value)

    def location_adjustment(self, label: Optional[str]) -> Optional[float]:
        """Exact (normalised) lookup in ``location_adjustments``."""
        if not label:
            return None
        return self.location_adjustments.get(normalize_label(label))

    def rental_rate(self, finishing_level: Optional[str]) -> Optional[float]:
        """Monthly rent per sqm for a finishing level, else the ``default`` rate."""
        if finishing_level:
            rate = self.rental_rates.get(normalize_label(finishing_level))
            if rate is not None:
                return rate
        return self.rental_rates.get("default")


class District(Model):
    """
    Market data for one district.

    ``average_price_per_sqm`` anchors land valuation and comparable
    normalisation; ``market_trend`` drives the market adjustment.
    """

    key: str = Field(..., min_length=1, description="Lookup key, e.g. 'new_cairo'")
    name: str = Field(..., min_length=1, description="Display name")
    average_price_per_sqm: StrictlyPositiveFloat = Field(...)
    market_trend: MarketTrendEnum = Field(default=MarketTrendEnum.STABLE)
    demand_supply_ratio: StrictlyPositiveFloat = Field(
        default=1.0, description="Demand over supply; 1.0 is balanced"
    )
    area_type: AreaTypeEnum = Field(default=AreaTypeEnum.URBAN)
    capitalization_rate: Optional[float] = Field(
        default=None, gt=0, le=1, description="District-specific cap rate"
    )

    @field_validator("key", mode="before")
    @classmethod
    def normalize_key(cls, value):
        return normalize_label(value) if isinstance(value, str) else value
