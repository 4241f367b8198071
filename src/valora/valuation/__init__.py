# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valora Valuation Approaches

The three appraisal approaches, the depreciation model they share, and
the confidence scoring and reconciliation that combine them.

Approaches:
- CostApproach: land plus depreciated replacement cost
- SalesComparisonApproach: adjusted comparable sales
- IncomeApproach: capitalized rent

Every approach returns an ``Available`` or ``Unavailable`` outcome;
``Reconciler`` only ever averages available ones.
"""

from .base import ApproachOutcome, Available, BaseApproach, MissingDataError, Unavailable
from .confidence import ConfidenceScorer
from .context import LookupSnapshot, ValuationContext
from .cost import CostApproach, CostApproachResult
from .depreciation import DepreciationModel, DepreciationResult
from .income import IncomeApproach, IncomeApproachResult
from .inputs import ComparableSale, ValuationInput
from .reconciliation import ReconciledValue, Reconciler
from .sales_comp import AdjustedComparable, SalesComparisonApproach, SalesComparisonResult

__all__ = [
    # Inputs
    "ValuationInput",
    "ComparableSale",
    # Outcomes
    "ApproachOutcome",
    "Available",
    "Unavailable",
    "MissingDataError",
    # Context
    "LookupSnapshot",
    "ValuationContext",
    # Depreciation
    "DepreciationModel",
    "DepreciationResult",
    # Approaches
    "BaseApproach",
    "CostApproach",
    "CostApproachResult",
    "SalesComparisonApproach",
    "SalesComparisonResult",
    "AdjustedComparable",
    "IncomeApproach",
    "IncomeApproachResult",
    # Combination
    "ConfidenceScorer",
    "Reconciler",
    "ReconciledValue",
]
