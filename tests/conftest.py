# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for Valora testing.

This module provides convenient builders for formulas, districts,
repositories and requests so tests only spell out what they exercise.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from valora.core.primitives import (
    AreaTypeEnum,
    FormulaTypeEnum,
    MarketTrendEnum,
    PropertyTypeEnum,
    ValuationSettings,
)
from valora.repository import District, Formula, InMemoryCoefficientRepository
from valora.valuation import ValuationContext, ValuationInput

AS_OF = date(2025, 1, 1)


# Formula Utilities
def make_formula(
    formula_type: FormulaTypeEnum = FormulaTypeEnum.DEPRECIATION,
    base_rate: float = 4_000.0,
    age_factor: float = 0.01,
    effective_from: date = date(2024, 1, 1),
    effective_until: Optional[date] = None,
    property_type: PropertyTypeEnum = PropertyTypeEnum.RESIDENTIAL,
    area_type: AreaTypeEnum = AreaTypeEnum.URBAN,
    **overrides: Any,
) -> Formula:
    """
    Create a formula for testing.

    Example:
        >>> formula = make_formula(base_rate=5_000)
        >>> formula.formula_type.value
        'depreciation'
    """
    return Formula(
        formula_type=formula_type,
        property_type=property_type,
        area_type=area_type,
        base_rate=base_rate,
        age_factor=age_factor,
        effective_from=effective_from,
        effective_until=effective_until,
        **overrides,
    )


def make_market_formula(**overrides: Any) -> Formula:
    """Market adjustment formula with floor, orientation, view premiums and a rent table."""
    params: Dict[str, Any] = dict(
        formula_type=FormulaTypeEnum.MARKET_ADJUSTMENT,
        base_rate=0.10,
        age_factor=0.01,
        location_adjustments={
            "floor:1": 0.0,
            "floor:5": 0.03,
            "floor:10": 0.05,
            "orientation:north": 0.02,
            "orientation:south": 0.0,
            "view:sea": 0.08,
            "view:street": 0.0,
        },
        rental_rates={"fully_finished": 60.0, "default": 50.0},
    )
    params.update(overrides)
    return make_formula(**params)


def make_location_formula(**overrides: Any) -> Formula:
    """Location factor formula keyed by district and sub-location."""
    params: Dict[str, Any] = dict(
        formula_type=FormulaTypeEnum.LOCATION_FACTOR,
        base_rate=0.0,
        age_factor=0.0,
        location_adjustments={"zamalek": 1.10, "fifth_settlement": 1.20},
    )
    params.update(overrides)
    return make_formula(**params)


# District Utilities
def make_district(
    key: str = "new_cairo",
    average_price_per_sqm: float = 15_000.0,
    market_trend: MarketTrendEnum = MarketTrendEnum.STABLE,
    **overrides: Any,
) -> District:
    return District(
        key=key,
        name=overrides.pop("name", key.replace("_", " ").title()),
        average_price_per_sqm=average_price_per_sqm,
        market_trend=market_trend,
        **overrides,
    )


# Request Utilities
def make_request(**overrides: Any) -> Dict[str, Any]:
    """
    Raw camelCase request for a 150 sqm, 10 year old residential unit.

    Example:
        >>> make_request(age=20)["age"]
        20
    """
    request: Dict[str, Any] = {
        "area": 150,
        "age": 10,
        "condition": 7,
        "location": "new_cairo",
        "propertyType": "residential",
    }
    request.update(overrides)
    return request


def make_subject(**overrides: Any) -> ValuationInput:
    return ValuationInput.model_validate(make_request(**overrides))


def make_comparables(count: int = 3) -> List[Dict[str, Any]]:
    """Comparables identical to the default subject, sold 0, 3, 6... months ago at 20,000/sqm."""
    return [
        {
            "address": f"{i + 1} Test Street",
            "salePrice": 20_000 * 150,
            "area": 150,
            "age": 10,
            "finishingLevel": "fully_finished",
            "monthsSinceSale": 3 * i,
        }
        for i in range(count)
    ]


# Fixtures
@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def settings() -> ValuationSettings:
    return ValuationSettings()


@pytest.fixture
def depreciation_formula() -> Formula:
    return make_formula()


@pytest.fixture
def market_formula() -> Formula:
    return make_market_formula()


@pytest.fixture
def location_formula() -> Formula:
    return make_location_formula()


@pytest.fixture
def districts() -> List[District]:
    return [
        make_district("new_cairo", 15_000),
        make_district(
            "zamalek",
            25_000,
            MarketTrendEnum.DECLINING,
            capitalization_rate=0.06,
        ),
        make_district(
            "6th_october",
            12_000,
            MarketTrendEnum.RISING,
            demand_supply_ratio=1.3,
            area_type=AreaTypeEnum.SUBURBAN,
        ),
    ]


@pytest.fixture
def repository(depreciation_formula, market_formula, location_formula, districts) -> InMemoryCoefficientRepository:
    """Repository with all three formula types and three districts."""
    return InMemoryCoefficientRepository(
        formulas=[depreciation_formula, market_formula, location_formula],
        districts=districts,
    )


@pytest.fixture
def cost_only_repository(depreciation_formula, districts) -> InMemoryCoefficientRepository:
    """Repository with only a depreciation formula (no market rate table)."""
    return InMemoryCoefficientRepository(formulas=[depreciation_formula], districts=districts)


@pytest.fixture
def empty_repository(districts) -> InMemoryCoefficientRepository:
    """Repository with districts but no formulas."""
    return InMemoryCoefficientRepository(formulas=[], districts=districts)


@pytest.fixture
def make_context(repository, settings):
    """Factory building a ValuationContext for a request against a repository."""

    def _make(
        repo: Optional[InMemoryCoefficientRepository] = None,
        valuation_settings: Optional[ValuationSettings] = None,
        **overrides: Any,
    ) -> ValuationContext:
        return ValuationContext.build(
            make_subject(**overrides),
            repo or repository,
            AS_OF,
            valuation_settings or settings,
        )

    return _make
