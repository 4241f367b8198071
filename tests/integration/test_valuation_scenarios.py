# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end valuation scenarios against an in-memory coefficient repository.
"""

from datetime import date

import pytest

from valora.analysis import run
from valora.core.errors import NoMethodAvailableError
from valora.core.primitives import ValuationMethodEnum
from valora.repository import InMemoryCoefficientRepository

from tests.conftest import AS_OF, make_comparables, make_formula, make_request

COST = ValuationMethodEnum.COST
SALES = ValuationMethodEnum.SALES_COMPARISON


class TestValuationScenarios:
    def test_standard_cost_approach(self, cost_only_repository):
        """150 sqm, 10 of 60 years, condition 7, 4,000/sqm replacement cost."""
        result = run(make_request(constructionType="concrete"), cost_only_repository, AS_OF)
        cost = result.cost_result

        assert abs(result.depreciation_percentage - 16.6667) < 1e-3
        assert cost.base_building_cost == 600_000
        expected_building = 600_000 * (1 - result.depreciation_percentage / 100)
        assert abs(cost.building_value - expected_building) < 1e-6
        assert abs(result.building_value - expected_building) < 1e-6

    def test_cost_approach_alone(self, cost_only_repository):
        """No comparables and no rent: cost carries the full weight and its own confidence."""
        result = run(make_request(), cost_only_repository, AS_OF)

        assert result.weights == {COST: 1.0}
        assert set(result.skipped_methods) == {SALES, ValuationMethodEnum.INCOME}
        assert result.confidence_level == result.method(COST).confidence
        assert result.confidence_level == 85
        assert abs(result.market_value_estimate - result.cost_result.value) < 1e-6

    def test_outlier_shifts_value_less_than_plain_average(self, repository):
        comps = make_comparables(2) + [dict(make_comparables(1)[0], address="Old Tower", age=40)]
        result = run(make_request(comparableSales=comps), repository, AS_OF)
        sales = result.sales_comparison_result

        assert sales.used_count == 3
        assert [c.address for c in sales.comparables if c.is_outlier] == ["Old Tower"]
        typical = 20_000
        assert abs(sales.weighted_price_per_sqm - typical) < abs(sales.unweighted_price_per_sqm - typical)

    def test_no_method_available(self, empty_repository):
        with pytest.raises(NoMethodAvailableError) as exc_info:
            run(make_request(), empty_repository, AS_OF)
        assert set(exc_info.value.skipped) == {"cost", "sales_comparison", "income"}
        assert "formula" in exc_info.value.skipped["cost"]

    def test_expired_formula_never_used(self, districts):
        repository = InMemoryCoefficientRepository(
            formulas=[
                make_formula(base_rate=4_000, effective_from=date(2023, 1, 1)),
                make_formula(
                    base_rate=5_000,
                    effective_from=date(2024, 6, 1),
                    effective_until=date(2024, 12, 1),
                ),
            ],
            districts=districts,
        )
        result = run(make_request(), repository, AS_OF)
        assert result.cost_result.base_building_cost == 600_000

    def test_newer_formula_used_while_effective(self, districts):
        repository = InMemoryCoefficientRepository(
            formulas=[
                make_formula(base_rate=4_000, effective_from=date(2023, 1, 1)),
                make_formula(base_rate=5_000, effective_from=date(2024, 6, 1)),
            ],
            districts=districts,
        )
        result = run(make_request(), repository, AS_OF)
        assert result.cost_result.base_building_cost == 750_000


REQUESTS = [
    make_request(),
    make_request(comparableSales=make_comparables(5), rentalEstimate=12_000),
    make_request(location="zamalek", age=45, condition=2, neighborhoodRating=9),
    make_request(location="maadi", age=80, condition=10, constructionType="steel"),
    make_request(area=40, comparableSales=make_comparables(1), floor=5, view="sea"),
]


class TestResultProperties:
    """Properties that hold for every successful valuation."""

    @pytest.mark.parametrize("request_data", REQUESTS)
    def test_price_per_sqm_consistent(self, repository, request_data):
        result = run(request_data, repository, AS_OF)
        assert abs(result.price_per_sqm * result.area - result.market_value_estimate) < 1e-6

    @pytest.mark.parametrize("request_data", REQUESTS)
    def test_bounds(self, repository, request_data):
        result = run(request_data, repository, AS_OF)
        assert 0 <= result.depreciation_percentage <= 95
        assert 0 <= result.confidence_level <= 100
        assert abs(sum(result.weights.values()) - 1.0) < 1e-12

    @pytest.mark.parametrize("request_data", REQUESTS)
    def test_idempotent(self, repository, request_data):
        first = run(request_data, repository, AS_OF)
        second = run(request_data, repository, AS_OF)
        assert first == second
        assert first.to_response() == second.to_response()
