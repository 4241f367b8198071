# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Per-request lookup snapshot and valuation context.

Every repository lookup a valuation needs is issued exactly once, up
front, and frozen into a ``LookupSnapshot``. The approach calculators read
only from the snapshot, so a formula set that changes while a request is
running cannot give two approaches inconsistent views, and replaying the
same input against the same snapshot is bit-identical.

Failed lookups are recorded rather than raised: whether a missing formula
or district matters depends on the approach, so the approach decides.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from pydantic import Field

from ..core.errors import DistrictNotFoundError, FormulaNotFoundError
from ..core.primitives import (
    AreaTypeEnum,
    DistrictSourceEnum,
    FormulaTypeEnum,
    Model,
    PropertyTypeEnum,
    ValuationSettings,
)
from ..repository import CoefficientRepository, District, Formula, fallback_district
from .depreciation import DepreciationModel, DepreciationResult
from .inputs import ValuationInput

logger = logging.getLogger(__name__)


class LookupSnapshot(Model):
    """
    Immutable record of all coefficient lookups for one request.

    Attributes:
        as_of: Date the formulas were resolved against
        repository_version: Version of the repository the lookups came from
        location: Location key that was looked up
        district: Resolved district, or None
        district_source: Whether the district came from the repository or
            the fallback table
        property_type: Property type used for formula keys
        area_type: Area type used for formula keys
        depreciation_formula: Active depreciation formula, or None
        market_formula: Active market_adjustment formula, or None
        location_formula: Active location_factor formula, or None
    """

    as_of: date
    repository_version: Optional[int] = None

    location: str
    district: Optional[District] = None
    district_source: Optional[DistrictSourceEnum] = None

    property_type: PropertyTypeEnum
    area_type: AreaTypeEnum

    depreciation_formula: Optional[Formula] = None
    market_formula: Optional[Formula] = None
    location_formula: Optional[Formula] = None

    @classmethod
    def capture(
        cls,
        subject: ValuationInput,
        repository: CoefficientRepository,
        as_of: date,
        settings: Optional[ValuationSettings] = None,
    ) -> "LookupSnapshot":
        """
        Issue every lookup for ``subject`` once and freeze the results.

        The district is resolved first because its area type keys the
        formula lookups when the request does not name one.
        """
        settings = settings or ValuationSettings()

        district: Optional[District] = None
        district_source: Optional[DistrictSourceEnum] = None
        try:
            district = repository.find_district(subject.location)
            district_source = DistrictSourceEnum.REPOSITORY
        except DistrictNotFoundError:
            if settings.use_fallback_districts:
                try:
                    district = fallback_district(subject.location)
                    district_source = DistrictSourceEnum.FALLBACK
                    logger.warning(
                        f"District '{subject.location}' not in repository; using fallback price table"
                    )
                except DistrictNotFoundError:
                    logger.warning(f"District '{subject.location}' not found in repository or fallback table")
            else:
                logger.warning(f"District '{subject.location}' not found")

        if subject.area_type is not None:
            area_type = subject.area_type
        elif district is not None:
            area_type = district.area_type
        else:
            area_type = AreaTypeEnum.URBAN

        formulas = {}
        for formula_type in FormulaTypeEnum:
            try:
                formulas[formula_type] = repository.find_formula(
                    formula_type, subject.property_type, area_type, as_of
                )
            except FormulaNotFoundError as e:
                logger.debug(e.message)

        return cls(
            as_of=as_of,
            repository_version=getattr(repository, "version", None),
            location=subject.location,
            district=district,
            district_source=district_source,
            property_type=subject.property_type,
            area_type=area_type,
            depreciation_formula=formulas.get(FormulaTypeEnum.DEPRECIATION),
            market_formula=formulas.get(FormulaTypeEnum.MARKET_ADJUSTMENT),
            location_formula=formulas.get(FormulaTypeEnum.LOCATION_FACTOR),
        )

    @property
    def used_fallback_district(self) -> bool:
        return self.district_source == DistrictSourceEnum.FALLBACK

    def require_district(self) -> District:
        """
        Resolved district.

        Raises:
            DistrictNotFoundError: If the lookup failed
        """
        if self.district is None:
            raise DistrictNotFoundError(self.location)
        return self.district

    def require_depreciation_formula(self) -> Formula:
        """
        Depreciation formula in force.

        Raises:
            FormulaNotFoundError: If the lookup failed
        """
        if self.depreciation_formula is None:
            raise FormulaNotFoundError(
                FormulaTypeEnum.DEPRECIATION.value,
                self.property_type.value,
                self.area_type.value,
                self.as_of,
            )
        return self.depreciation_formula


class ValuationContext(Model):
    """
    Everything an approach needs to value one subject.

    Built once per request by the engine; approaches never touch the
    repository directly.
    """

    subject: ValuationInput
    snapshot: LookupSnapshot
    depreciation: DepreciationResult
    settings: ValuationSettings = Field(default_factory=ValuationSettings)

    @classmethod
    def build(
        cls,
        subject: ValuationInput,
        repository: CoefficientRepository,
        as_of: date,
        settings: Optional[ValuationSettings] = None,
    ) -> "ValuationContext":
        """Capture lookups and run the depreciation model for ``subject``."""
        settings = settings or ValuationSettings()
        snapshot = LookupSnapshot.capture(subject, repository, as_of, settings)
        return cls.from_snapshot(subject, snapshot, settings)

    @classmethod
    def from_snapshot(
        cls,
        subject: ValuationInput,
        snapshot: LookupSnapshot,
        settings: Optional[ValuationSettings] = None,
    ) -> "ValuationContext":
        """Build a context from an already captured snapshot."""
        settings = settings or ValuationSettings()
        depreciation = DepreciationModel(settings=settings.depreciation).calculate(
            age=subject.age,
            condition=subject.condition,
            construction_type=subject.construction_type,
            economic_life_years=subject.economic_life_years,
            formula=snapshot.depreciation_formula,
        )
        return cls(subject=subject, snapshot=snapshot, depreciation=depreciation, settings=settings)

    @property
    def as_of(self) -> date:
        return self.snapshot.as_of
