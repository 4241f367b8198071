# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Depreciation Model - Age and Condition

Straight-line age depreciation over the building's economic life, scaled
by a condition factor and capped so a building never loses more than
95% of its value through depreciation alone. Land is valued separately
and is not depreciated.
"""

from __future__ import annotations

import logging
from typing import Dict, Literal, Optional, Tuple

from pydantic import Field

from ..core.primitives import (
    ConstructionTypeEnum,
    DepreciationSettings,
    Model,
    Percentage,
    PositiveFloat,
    ValidationMixin,
)
from ..repository.models import Formula

logger = logging.getLogger(__name__)

MAX_RATING = 10.0
MIN_RATING = 1.0


class DepreciationResult(Model):
    """
    Depreciation of one building.

    Attributes:
        current_age_ratio: Age as a percentage of economic life, capped at 100
        straight_line_annual_rate: Percent of value lost per year of age
        age_depreciation_percentage: Depreciation from age alone
        condition_factor: Relative multiplier from the condition rating
        depreciation_percentage: Final depreciation, in [0, max]
    """

    age: PositiveFloat
    economic_life_years: float = Field(..., gt=0)
    condition_rating: float
    construction_type: ConstructionTypeEnum
    current_age_ratio: Percentage
    straight_line_annual_rate: PositiveFloat
    age_depreciation_percentage: Percentage
    condition_factor: float = Field(..., gt=0)
    condition_factor_source: Literal["curve", "formula"]
    depreciation_percentage: Percentage

    @property
    def condition_depreciation_percentage(self) -> float:
        """Signed share of depreciation attributable to condition (and the cap)."""
        return self.depreciation_percentage - self.age_depreciation_percentage

    @property
    def remaining_value_ratio(self) -> float:
        return 1.0 - self.depreciation_percentage / 100.0

    def amounts(self, base_building_cost: float) -> Tuple[float, float]:
        """
        Split total depreciation into signed currency deltas.

        Returns:
            (age_depreciation, condition_adjustment); both are negative when
            they reduce value and they sum to ``-base * depreciation%``.
        """
        age_depreciation = -base_building_cost * self.age_depreciation_percentage / 100.0
        condition_adjustment = -base_building_cost * self.condition_depreciation_percentage / 100.0
        return age_depreciation, condition_adjustment

    def summary(self) -> Dict[str, float]:
        return {
            "economic_life_years": self.economic_life_years,
            "current_age_ratio": self.current_age_ratio,
            "straight_line_annual_rate": self.straight_line_annual_rate,
            "age_depreciation_percentage": self.age_depreciation_percentage,
            "condition_factor": self.condition_factor,
            "depreciation_percentage": self.depreciation_percentage,
        }


class DepreciationModel(Model):
    """
    Converts building age, economic life and condition into depreciation.

    Algorithm:
        1. current_age_ratio = min(age / economic_life, 1.0) * 100
        2. straight_line_annual_rate = 100 / economic_life
        3. age_depreciation_pct = min(current_age_ratio, 100)
        4. condition_factor from the rating (or the formula's band multiplier)
        5. depreciation_percentage = clamp(age_pct * condition_factor, 0, 95)

    Example:
        ```python
        model = DepreciationModel()
        result = model.calculate(age=10, condition=7)
        result.age_depreciation_percentage  # 16.67
        ```
    """

    settings: DepreciationSettings = Field(default_factory=DepreciationSettings)

    def condition_factor(self, rating: float) -> float:
        """
        Relative depreciation multiplier for a 1-10 condition rating.

        Neutral (1.0) across the neutral band, falling linearly to
        ``1 - max_condition_reduction`` at 10 and rising linearly to
        ``1 + max_condition_increase`` at 1.
        """
        s = self.settings
        rating = min(max(rating, MIN_RATING), MAX_RATING)
        if rating > s.neutral_rating_high:
            span = MAX_RATING - s.neutral_rating_high
            return 1.0 - s.max_condition_reduction * (rating - s.neutral_rating_high) / span
        if rating < s.neutral_rating_low:
            span = s.neutral_rating_low - MIN_RATING
            return 1.0 + s.max_condition_increase * (s.neutral_rating_low - rating) / span
        return 1.0

    def clamp_condition_factor(self, factor: float) -> float:
        """Keep a formula-supplied multiplier inside the policy band."""
        s = self.settings
        return min(max(factor, 1.0 - s.max_condition_reduction), 1.0 + s.max_condition_increase)

    def calculate(
        self,
        age: float,
        condition: float,
        construction_type: ConstructionTypeEnum = ConstructionTypeEnum.CONCRETE,
        economic_life_years: Optional[float] = None,
        formula: Optional[Formula] = None,
    ) -> DepreciationResult:
        """
        Depreciate a building.

        Args:
            age: Building age in years (>= 0)
            condition: Overall condition rating (1-10)
            construction_type: Selects a per-construction economic life override
            economic_life_years: Economic life; settings default when None
            formula: Depreciation formula whose condition multipliers, when
                present for the rating's band, replace the built-in curve

        Returns:
            DepreciationResult
        """
        if age < 0:
            raise ValueError(f"Building age must be non-negative, got {age}")
        ValidationMixin.validate_band(condition, MIN_RATING, MAX_RATING, "condition")

        life = economic_life_years or self.settings.economic_life_for(construction_type)
        if life <= 0:
            raise ValueError(f"Economic life must be positive, got {life}")

        current_age_ratio = min(age / life, 1.0) * 100.0
        straight_line_annual_rate = 100.0 / life
        age_pct = min(current_age_ratio, 100.0)

        source = "curve"
        factor = self.condition_factor(condition)
        if formula is not None:
            multiplier = formula.condition_multiplier(condition)
            if multiplier is not None:
                factor = self.clamp_condition_factor(multiplier)
                source = "formula"

        cap = self.settings.max_depreciation_percentage
        depreciation_pct = min(max(age_pct * factor, 0.0), cap)

        logger.debug(
            f"Depreciation: age={age}, life={life}, age_pct={age_pct:.2f}, "
            f"condition={condition} factor={factor:.3f} ({source}), total={depreciation_pct:.2f}%"
        )

        return DepreciationResult(
            age=age,
            economic_life_years=life,
            condition_rating=condition,
            construction_type=construction_type,
            current_age_ratio=current_age_ratio,
            straight_line_annual_rate=straight_line_annual_rate,
            age_depreciation_percentage=age_pct,
            condition_factor=factor,
            condition_factor_source=source,
            depreciation_percentage=depreciation_pct,
        )
