# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valora Core Primitives

Essential building blocks shared by every calculator: the immutable model
base, domain enums, constrained types, settings and validation helpers.
"""

from .enums import (
    AreaTypeEnum,
    CapRateSourceEnum,
    ConditionBandEnum,
    ConstructionTypeEnum,
    DistrictSourceEnum,
    FinishingLevelEnum,
    FormulaTypeEnum,
    MarketTrendEnum,
    MethodStatusEnum,
    PropertyTypeEnum,
    RentSourceEnum,
    ValuationMethodEnum,
    normalize_label,
)
from .model import Model, RequestModel
from .settings import (
    MAX_DEPRECIATION_PERCENTAGE,
    ComparisonSettings,
    ConfidenceSettings,
    CostApproachSettings,
    DepreciationSettings,
    IncomeSettings,
    ReconciliationSettings,
    ReportingSettings,
    ValuationSettings,
)
from .types import (
    FloatBetween0And1,
    Percentage,
    PositiveFloat,
    PositiveInt,
    Rating,
    StrictlyPositiveFloat,
)
from .validation import ValidationMixin

__all__ = [
    # Core models
    "Model",
    "RequestModel",
    # Settings
    "ValuationSettings",
    "MAX_DEPRECIATION_PERCENTAGE",
    "DepreciationSettings",
    "CostApproachSettings",
    "ComparisonSettings",
    "IncomeSettings",
    "ReconciliationSettings",
    "ConfidenceSettings",
    "ReportingSettings",
    # Enums
    "AreaTypeEnum",
    "CapRateSourceEnum",
    "ConditionBandEnum",
    "ConstructionTypeEnum",
    "DistrictSourceEnum",
    "FinishingLevelEnum",
    "FormulaTypeEnum",
    "MarketTrendEnum",
    "MethodStatusEnum",
    "PropertyTypeEnum",
    "RentSourceEnum",
    "ValuationMethodEnum",
    "normalize_label",
    # Types
    "FloatBetween0And1",
    "Percentage",
    "PositiveFloat",
    "PositiveInt",
    "Rating",
    "StrictlyPositiveFloat",
    # Validation
    "ValidationMixin",
]
