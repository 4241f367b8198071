# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Income Approach - Direct Capitalization of Rent

Capitalizes the subject's annual rent at a market capitalization rate:
``value = monthly_rent * 12 / cap_rate``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar, Tuple

from ..core.primitives import (
    CapRateSourceEnum,
    RentSourceEnum,
    StrictlyPositiveFloat,
    ValuationMethodEnum,
)
from .base import Available, BaseApproach, MissingDataError

if TYPE_CHECKING:
    from .context import ValuationContext

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


class IncomeApproachResult(Available):
    """Income approach indication with the rent and cap rate it used."""

    method: ValuationMethodEnum = ValuationMethodEnum.INCOME

    monthly_rent: StrictlyPositiveFloat
    annual_rent: StrictlyPositiveFloat
    rent_source: RentSourceEnum
    capitalization_rate: StrictlyPositiveFloat
    cap_rate_source: CapRateSourceEnum


class IncomeApproach(BaseApproach):
    """
    Income approach calculator.

    Rent: the supplied monthly estimate, else the market_adjustment
    formula's rate for the finishing level (or its ``default`` rate) times
    built area. Cap rate: district, else property type, else default.

    Unavailable when neither a rent estimate nor a usable rate table exists.
    """

    method: ClassVar[ValuationMethodEnum] = ValuationMethodEnum.INCOME

    name: str = "Income Approach"

    def monthly_rent(self, context: "ValuationContext") -> Tuple[float, RentSourceEnum]:
        """
        Monthly rent and where it came from.

        Raises:
            MissingDataError: If no rent is supplied and no rate table applies
        """
        subject = context.subject
        if subject.rental_estimate is not None:
            return subject.rental_estimate, RentSourceEnum.SUPPLIED

        market = context.snapshot.market_formula
        if market is None:
            raise MissingDataError("No rental estimate supplied and no market rate table in force")
        rate = market.rental_rate(subject.finishing_level.value)
        if not rate:
            raise MissingDataError(
                f"No rental estimate supplied and no rental rate for {subject.finishing_level.value}"
            )
        return rate * subject.area, RentSourceEnum.RATE_TABLE

    def capitalization_rate(self, context: "ValuationContext") -> Tuple[float, CapRateSourceEnum]:
        """Capitalization rate and where it came from."""
        district = context.snapshot.district
        if district is not None and district.capitalization_rate is not None:
            return district.capitalization_rate, CapRateSourceEnum.DISTRICT

        settings = context.settings.income
        rate = settings.capitalization_rates.get(context.subject.property_type)
        if rate is not None:
            return rate, CapRateSourceEnum.PROPERTY_TYPE
        return settings.default_capitalization_rate, CapRateSourceEnum.DEFAULT

    def calculate(self, context: "ValuationContext") -> IncomeApproachResult:
        monthly_rent, rent_source = self.monthly_rent(context)
        cap_rate, cap_rate_source = self.capitalization_rate(context)

        annual_rent = monthly_rent * MONTHS_PER_YEAR
        value = annual_rent / cap_rate

        logger.debug(
            f"Income approach: rent={monthly_rent:,.2f}/month ({rent_source.value}), "
            f"cap rate={cap_rate:.2%} ({cap_rate_source.value})"
        )

        return IncomeApproachResult(
            value=value,
            monthly_rent=monthly_rent,
            annual_rent=annual_rent,
            rent_source=rent_source,
            capitalization_rate=cap_rate,
            cap_rate_source=cap_rate_source,
        )
