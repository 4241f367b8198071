# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Cost Approach - Land plus Depreciated Replacement Cost

Values the subject as the land it sits on plus what it would cost to
rebuild the structure today, less accrued depreciation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar, Dict, Optional, Tuple

from pydantic import Field

from ..core.primitives import (
    DistrictSourceEnum,
    PositiveFloat,
    ValuationMethodEnum,
)
from .base import Available, BaseApproach

if TYPE_CHECKING:
    from .context import ValuationContext

logger = logging.getLogger(__name__)


class CostApproachResult(Available):
    """
    Cost approach indication with its full breakdown.

    ``replacement_cost`` is the base cost with the new-build markup and
    ``depreciation_amount`` the unsigned depreciation on the base cost;
    neither enters ``building_value``.

    All adjustment components are signed currency deltas:
    ``base_building_cost + age_depreciation + condition_adjustment +
    location_adjustment + market_adjustment == building_value``.
    """

    method: ValuationMethodEnum = ValuationMethodEnum.COST

    land_value: PositiveFloat
    building_value: float
    base_building_cost: PositiveFloat
    age_depreciation: float
    condition_adjustment: float
    location_adjustment: float
    market_adjustment: float
    replacement_cost: PositiveFloat
    depreciation_amount: float = Field(..., ge=0)
    construction_multiplier: PositiveFloat = 1.0

    depreciation_percentage: float = Field(..., ge=0, le=100)
    land_area: PositiveFloat
    land_area_supplied: bool
    land_price_per_sqm: PositiveFloat
    district_source: DistrictSourceEnum
    location_factor: Optional[float] = Field(
        default=None, description="District factor from the location formula, if one applied"
    )
    market_adjustment_rate: float = 0.0

    @property
    def depreciated_building_value(self) -> float:
        return self.base_building_cost + self.age_depreciation + self.condition_adjustment

    def breakdown(self) -> Dict[str, float]:
        """Signed components in response order."""
        return {
            "base_building_cost": self.base_building_cost,
            "age_depreciation": self.age_depreciation,
            "condition_adjustment": self.condition_adjustment,
            "location_adjustment": self.location_adjustment,
            "market_adjustment": self.market_adjustment,
        }


class CostApproach(BaseApproach):
    """
    Cost approach calculator.

    Algorithm:
        1. base_building_cost = formula base_rate * construction multiplier * built area
        2. depreciated = base * (1 - depreciation% / 100)
        3. location and market adjustments as signed deltas on ``depreciated``
        4. land_value = district price per sqm (sub-location factor applied) * land area
        5. value = land_value + building_value

    Unavailable when no depreciation formula is in force or the district
    cannot be resolved even from the fallback table.
    """

    method: ClassVar[ValuationMethodEnum] = ValuationMethodEnum.COST

    name: str = "Cost Approach"

    def location_rate(self, context: "ValuationContext") -> Tuple[float, Optional[float]]:
        """
        Fractional building adjustment from location.

        Returns:
            (rate, district_factor); ``district_factor`` is None when the
            location formula has no entry for the district.
        """
        snapshot = context.snapshot
        subject = context.subject
        settings = context.settings.cost

        rate = 0.0
        district_factor = None
        if snapshot.location_formula is not None and snapshot.district is not None:
            district_factor = snapshot.location_formula.location_adjustment(snapshot.district.key)
            if district_factor is not None:
                rate += district_factor - 1.0

        if subject.neighborhood_rating is not None:
            rate += (
                subject.neighborhood_rating - settings.neighborhood_neutral_rating
            ) * settings.neighborhood_step
        return rate, district_factor

    def market_rate(self, context: "ValuationContext") -> float:
        """Fractional building adjustment from the district trend and demand/supply."""
        district = context.snapshot.require_district()
        settings = context.settings.cost
        trend = settings.market_trend_adjustments.get(district.market_trend, 0.0)
        pressure = (district.demand_supply_ratio - 1.0) * settings.demand_supply_sensitivity
        return trend + pressure

    def land_price_per_sqm(self, context: "ValuationContext") -> float:
        """District average, refined by a sub-location factor when the location formula has one."""
        snapshot = context.snapshot
        price = snapshot.require_district().average_price_per_sqm
        sub_location = context.subject.sub_location
        if sub_location and snapshot.location_formula is not None:
            factor = snapshot.location_formula.location_adjustment(sub_location)
            if factor is not None:
                price *= factor
        return price

    def calculate(self, context: "ValuationContext") -> CostApproachResult:
        snapshot = context.snapshot
        subject = context.subject
        depreciation = context.depreciation
        settings = context.settings.cost

        formula = snapshot.require_depreciation_formula()
        district = snapshot.require_district()

        construction_multiplier = settings.construction_multiplier(subject.construction_type)
        base_building_cost = formula.base_rate * construction_multiplier * subject.area
        replacement_cost = base_building_cost * settings.replacement_cost_markup
        depreciation_amount = base_building_cost * depreciation.depreciation_percentage / 100.0
        age_depreciation, condition_adjustment = depreciation.amounts(base_building_cost)
        depreciated = base_building_cost * depreciation.remaining_value_ratio

        location_rate, district_factor = self.location_rate(context)
        market_rate = self.market_rate(context)
        location_adjustment = depreciated * location_rate
        market_adjustment = depreciated * market_rate
        building_value = depreciated + location_adjustment + market_adjustment

        land_area = subject.resolved_land_area(settings.default_land_area_ratio)
        land_price = self.land_price_per_sqm(context)
        land_value = land_price * land_area

        value = land_value + building_value

        logger.debug(
            f"Cost approach: base={base_building_cost:,.2f} ({subject.construction_type.value} x{construction_multiplier}), "
            f"depreciation={depreciation.depreciation_percentage:.2f}%, "
            f"building={building_value:,.2f}, land={land_value:,.2f} ({district.key}, {snapshot.district_source.value})"
        )

        return CostApproachResult(
            value=value,
            land_value=land_value,
            building_value=building_value,
            base_building_cost=base_building_cost,
            age_depreciation=age_depreciation,
            condition_adjustment=condition_adjustment,
            location_adjustment=location_adjustment,
            market_adjustment=market_adjustment,
            replacement_cost=replacement_cost,
            depreciation_amount=depreciation_amount,
            construction_multiplier=construction_multiplier,
            depreciation_percentage=depreciation.depreciation_percentage,
            land_area=land_area,
            land_area_supplied=subject.land_area_supplied,
            land_price_per_sqm=land_price,
            district_source=snapshot.district_source,
            location_factor=district_factor,
            market_adjustment_rate=market_rate,
        )
