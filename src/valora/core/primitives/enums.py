# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import Optional


class FormulaTypeEnum(str, Enum):
    """
    Kinds of coefficient formulas kept in the formula store.

    Attributes:
        DEPRECIATION: Replacement cost per sqm (base_rate) and annual
            depreciation fraction (age_factor) for the cost approach.
        MARKET_ADJUSTMENT: Comparable-sale adjustment rates (finishing step,
            age, floor/orientation/view premiums) and the rental rate table.
        LOCATION_FACTOR: Multiplicative factors per district or sub-location.
    """

    DEPRECIATION = "depreciation"
    MARKET_ADJUSTMENT = "market_adjustment"
    LOCATION_FACTOR = "location_factor"


class PropertyTypeEnum(str, Enum):
    """Property types accepted by the engine."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    VILLA = "villa"
    APARTMENT = "apartment"


class AreaTypeEnum(str, Enum):
    """Urbanisation class used to key formulas."""

    URBAN = "urban"
    SUBURBAN = "suburban"
    RURAL = "rural"


class FinishingLevelEnum(str, Enum):
    """
    Ordinal finishing scale.

    Declaration order is the ordinal order used by the sales comparison
    approach: core_shell < semi_finished < fully_finished < luxury.
    """

    CORE_SHELL = "core_shell"
    SEMI_FINISHED = "semi_finished"
    FULLY_FINISHED = "fully_finished"
    LUXURY = "luxury"

    @property
    def rank(self) -> int:
        """Zero-based position on the finishing scale."""
        return list(FinishingLevelEnum).index(self)


class ConstructionTypeEnum(str, Enum):
    """Structural construction type of the building."""

    CONCRETE = "concrete"
    BRICK = "brick"
    STEEL = "steel"
    MIXED = "mixed"


class MarketTrendEnum(str, Enum):
    """Direction of a district's market."""

    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"


class ConditionBandEnum(str, Enum):
    """
    Named bands of the 1-10 condition rating.

    Formula ``condition_multipliers`` are keyed by these labels.
    """

    EXCELLENT = "excellent"  # 8 and above
    GOOD = "good"  # 6 to 8
    FAIR = "fair"  # 4 to 6
    POOR = "poor"  # below 4

    @classmethod
    def from_rating(cls, rating: float) -> "ConditionBandEnum":
        """Map a numeric condition rating to its band."""
        if rating >= 8:
            return cls.EXCELLENT
        if rating >= 6:
            return cls.GOOD
        if rating >= 4:
            return cls.FAIR
        return cls.POOR


class ValuationMethodEnum(str, Enum):
    """The three appraisal approaches reconciled by the engine."""

    COST = "cost"
    SALES_COMPARISON = "sales_comparison"
    INCOME = "income"


class MethodStatusEnum(str, Enum):
    """Whether an approach produced a usable value."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class DistrictSourceEnum(str, Enum):
    """Where the district record used by a calculation came from."""

    REPOSITORY = "repository"
    FALLBACK = "fallback"


class RentSourceEnum(str, Enum):
    """Origin of the monthly rent used by the income approach."""

    SUPPLIED = "supplied"
    RATE_TABLE = "rate_table"


class CapRateSourceEnum(str, Enum):
    """Origin of the capitalization rate used by the income approach."""

    DISTRICT = "district"
    PROPERTY_TYPE = "property_type"
    DEFAULT = "default"


def normalize_label(value: Optional[str]) -> str:
    """Normalise a free-text label for case/spacing-insensitive matching."""
    if value is None:
        return ""
    return value.strip().lower().replace("-", "_").replace(" ", "_")
