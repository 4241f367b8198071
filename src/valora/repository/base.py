# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Coefficient Repository interface.

The engine reads formulas and districts only through this interface, so a
database-backed store and the in-memory fixtures used in tests are
interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from ..core.errors import FormulaNotFoundError
from ..core.primitives import AreaTypeEnum, FormulaTypeEnum, PropertyTypeEnum
from .models import District, Formula


class CoefficientRepository(ABC):
    """
    Read-only access to active formulas and district market data.

    Implementations must be side-effect free from the engine's perspective
    and must raise, never default, when a record is missing.
    """

    @abstractmethod
    def find_formula(
        self,
        formula_type: FormulaTypeEnum,
        property_type: PropertyTypeEnum,
        area_type: AreaTypeEnum,
        as_of: date,
    ) -> Formula:
        """
        Resolve the single formula in force for a key on ``as_of``.

        Raises:
            FormulaNotFoundError: If no active formula's window contains ``as_of``
        """

    @abstractmethod
    def find_district(self, key: str) -> District:
        """
        Resolve a district by location key.

        Raises:
            DistrictNotFoundError: If the key is unknown
        """


def select_formula(
    candidates: Iterable[Formula],
    formula_type: FormulaTypeEnum,
    property_type: PropertyTypeEnum,
    area_type: AreaTypeEnum,
    as_of: date,
) -> Formula:
    """
    Pick the formula in force for a key from a candidate set.

    Only active formulas whose effective window contains ``as_of`` are
    eligible, so an expired formula is never returned even when it is the
    most recent one. Among eligible formulas the latest ``effective_from``
    wins; equal dates keep the first candidate in store order.

    Raises:
        FormulaNotFoundError: If no candidate is eligible
    """
    best: Optional[Formula] = None
    for formula in candidates:
        if (
            formula.formula_type != formula_type
            or formula.property_type != property_type
            or formula.area_type != area_type
            or not formula.is_effective(as_of)
        ):
            continue
        if best is None or formula.effective_from > best.effective_from:
            best = formula

    if best is None:
        raise FormulaNotFoundError(
            FormulaTypeEnum(formula_type).value,
            PropertyTypeEnum(property_type).value,
            AreaTypeEnum(area_type).value,
            as_of,
        )
    return best
