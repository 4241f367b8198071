# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valora Coefficient Repository

Read-only access to versioned coefficient formulas and district market
data, plus the built-in fallback district table.
"""

from .base import CoefficientRepository, select_formula
from .fallback import FALLBACK_DISTRICTS, fallback_district
from .memory import InMemoryCoefficientRepository
from .models import District, Formula

__all__ = [
    "CoefficientRepository",
    "InMemoryCoefficientRepository",
    "select_formula",
    # Records
    "District",
    "Formula",
    # Fallback table
    "FALLBACK_DISTRICTS",
    "fallback_district",
]
