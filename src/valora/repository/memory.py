# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
In-memory Coefficient Repository.

Holds an immutable, versioned copy of the active formula set and district
table. Refreshing produces a new repository with a higher version rather
than mutating the existing one, so a computation that already holds a
repository keeps a consistent view while the store changes underneath.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from ..core.errors import DistrictNotFoundError
from ..core.primitives import (
    AreaTypeEnum,
    FormulaTypeEnum,
    PropertyTypeEnum,
    normalize_label,
)
from .base import CoefficientRepository, select_formula
from .models import District, Formula

logger = logging.getLogger(__name__)

FormulaLike = Union[Formula, Mapping[str, Any]]
DistrictLike = Union[District, Mapping[str, Any]]


class InMemoryCoefficientRepository(CoefficientRepository):
    """
    Coefficient repository over in-memory tuples.

    Attributes:
        version: Monotonic snapshot version, incremented by ``refreshed``

    Example:
        ```python
        repository = InMemoryCoefficientRepository(
            formulas=[depreciation_formula],
            districts=[District(key="new_cairo", name="New Cairo",
                                average_price_per_sqm=15_000)],
        )
        formula = repository.find_formula(
            "depreciation", "residential", "urban", date(2025, 1, 1)
        )
        ```
    """

    def __init__(
        self,
        formulas: Iterable[FormulaLike] = (),
        districts: Iterable[DistrictLike] = (),
        version: int = 1,
    ):
        self._formulas: Tuple[Formula, ...] = tuple(
            f if isinstance(f, Formula) else Formula.model_validate(f) for f in formulas
        )
        district_records = [
            d if isinstance(d, District) else District.model_validate(d) for d in districts
        ]
        self._districts: Dict[str, District] = {}
        for district in district_records:
            if district.key in self._districts:
                raise ValueError(f"Duplicate district key '{district.key}'")
            self._districts[district.key] = district
        self.version = version

    @classmethod
    def from_records(
        cls,
        formula_rows: Iterable[Mapping[str, Any]],
        district_rows: Iterable[Mapping[str, Any]] = (),
        version: int = 1,
    ) -> "InMemoryCoefficientRepository":
        """
        Build a repository from raw store rows.

        Store-only columns (ids, timestamps) are dropped. Inactive rows are
        kept so the effective-window rules decide eligibility.
        """
        formula_fields = set(Formula.model_fields)
        district_fields = set(District.model_fields)
        formulas = [
            {key: value for key, value in row.items() if key in formula_fields}
            for row in formula_rows
        ]
        districts = [
            {key: value for key, value in row.items() if key in district_fields}
            for row in district_rows
        ]
        return cls(formulas=formulas, districts=districts, version=version)

    @property
    def formulas(self) -> Tuple[Formula, ...]:
        """All formulas in store order."""
        return self._formulas

    @property
    def districts(self) -> Tuple[District, ...]:
        """All districts."""
        return tuple(self._districts.values())

    def find_formula(
        self,
        formula_type: FormulaTypeEnum,
        property_type: PropertyTypeEnum,
        area_type: AreaTypeEnum,
        as_of: date,
    ) -> Formula:
        return select_formula(self._formulas, formula_type, property_type, area_type, as_of)

    def find_district(self, key: str) -> District:
        district = self._districts.get(normalize_label(key))
        if district is None:
            raise DistrictNotFoundError(key)
        return district

    def refreshed(
        self,
        formulas: Optional[Iterable[FormulaLike]] = None,
        districts: Optional[Iterable[DistrictLike]] = None,
    ) -> "InMemoryCoefficientRepository":
        """
        Return a new repository version with replaced formulas and/or districts.

        Omitted collections are carried over unchanged.
        """
        refreshed = InMemoryCoefficientRepository(
            formulas=self._formulas if formulas is None else formulas,
            districts=self.districts if districts is None else districts,
            version=self.version + 1,
        )
        logger.debug(
            f"Coefficient repository refreshed to version {refreshed.version}: "
            f"{len(refreshed.formulas)} formulas, {len(refreshed.districts)} districts"
        )
        return refreshed

    def __repr__(self) -> str:
        return (
            f"InMemoryCoefficientRepository(version={self.version}, "
            f"formulas={len(self._formulas)}, districts={len(self._districts)})"
        )
