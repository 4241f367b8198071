# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Validated valuation request types.

``ValuationInput`` replaces the loosely typed request object: required
fields are required, optional fields carry documented defaults, and the
model is validated once at the request boundary before any calculation.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.primitives import (
    AreaTypeEnum,
    ConstructionTypeEnum,
    FinishingLevelEnum,
    PositiveFloat,
    PropertyTypeEnum,
    Rating,
    RequestModel,
    StrictlyPositiveFloat,
)

DAYS_PER_MONTH = 365.25 / 12


class ComparableSale(RequestModel):
    """
    A completed comparable sale.

    Price and area are deliberately unconstrained here: a comparable with a
    non-positive price or area is excluded by the sales comparison
    calculator with a warning instead of failing the whole request.

    Sale recency is given either directly as ``months_since_sale`` or as a
    ``sale_date`` resolved against the valuation date.
    """

    address: str = Field(default="", description="Comparable address or identifier")
    sale_price: float = Field(..., description="Sale price")
    area: float = Field(..., description="Built area in sqm")
    price_per_sqm: Optional[float] = Field(
        default=None, description="Price per sqm as reported; checked against price / area"
    )
    age: Optional[PositiveFloat] = Field(default=None, description="Building age in years")
    finishing_level: Optional[FinishingLevelEnum] = None
    floor: Optional[int] = None
    orientation: Optional[str] = None
    view: Optional[str] = None
    sale_date: Optional[date] = None
    months_since_sale: Optional[PositiveFloat] = None

    @property
    def derived_price_per_sqm(self) -> Optional[float]:
        """``sale_price / area``, or None when area is not positive."""
        if self.area <= 0:
            return None
        return self.sale_price / self.area

    def elapsed_months(self, as_of: date) -> Optional[float]:
        """Months between the sale and ``as_of`` (never negative), if known."""
        if self.months_since_sale is not None:
            return self.months_since_sale
        if self.sale_date is not None:
            return max((as_of - self.sale_date).days, 0) / DAYS_PER_MONTH
        return None


class ValuationInput(RequestModel):
    """
    Subject property to be valued.

    Required: ``area``, ``age``, ``condition``, ``location``, ``property_type``.

    Documented defaults:
        - land_area: built area x ``CostApproachSettings.default_land_area_ratio`` (1.2)
        - finishing_level: fully_finished
        - construction_type: concrete
        - neighborhood_rating: none (no neighborhood adjustment)
        - economic_life_years: ``DepreciationSettings.default_economic_life_years`` (60)
        - area_type: taken from the resolved district
        - comparable_sales: none (sales comparison unavailable)
        - rental_estimate: none (rent inferred from the rate table if one exists)

    Example:
        ```python
        subject = ValuationInput.model_validate({
            "area": 150,
            "age": 10,
            "condition": 7,
            "location": "new_cairo",
            "propertyType": "residential",
        })
        ```
    """

    area: StrictlyPositiveFloat = Field(..., description="Built area in sqm")
    age: PositiveFloat = Field(..., description="Building age in years")
    condition: Rating = Field(..., description="Overall condition rating (1-10)")
    location: str = Field(..., min_length=1, description="District / location key")
    property_type: PropertyTypeEnum = Field(...)

    land_area: Optional[StrictlyPositiveFloat] = Field(default=None, description="Land area in sqm")
    finishing_level: FinishingLevelEnum = Field(default=FinishingLevelEnum.FULLY_FINISHED)
    construction_type: ConstructionTypeEnum = Field(default=ConstructionTypeEnum.CONCRETE)
    neighborhood_rating: Optional[Rating] = None
    economic_life_years: Optional[StrictlyPositiveFloat] = None
    rental_estimate: Optional[StrictlyPositiveFloat] = Field(
        default=None, description="Monthly rental estimate"
    )
    comparable_sales: List[ComparableSale] = Field(default_factory=list)

    area_type: Optional[AreaTypeEnum] = None
    sub_location: Optional[str] = Field(
        default=None, description="Sub-location label for granular land pricing"
    )
    floor: Optional[int] = None
    orientation: Optional[str] = None
    view: Optional[str] = None

    @field_validator("location")
    @classmethod
    def validate_location(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("District name is required")
        return value

    @property
    def land_area_supplied(self) -> bool:
        return self.land_area is not None

    def resolved_land_area(self, default_ratio: float) -> float:
        """Supplied land area, else built area scaled by ``default_ratio``."""
        if self.land_area is not None:
            return self.land_area
        return self.area * default_ratio
