# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valora Core Framework

Foundational building blocks for the valuation engine: primitives and the
typed error hierarchy surfaced at the request boundary.
"""

from . import errors, primitives
from .errors import (
    DistrictNotFoundError,
    FormulaNotFoundError,
    InconsistentComparableError,
    InvalidInputError,
    NoMethodAvailableError,
    ValuationError,
)
from .primitives import Model, RequestModel, ValuationSettings

__all__ = [
    "errors",
    "primitives",
    # Errors
    "ValuationError",
    "InvalidInputError",
    "FormulaNotFoundError",
    "DistrictNotFoundError",
    "NoMethodAvailableError",
    "InconsistentComparableError",
    # Models
    "Model",
    "RequestModel",
    "ValuationSettings",
]
