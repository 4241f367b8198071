# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the cost approach calculator.
"""

from valora.core.primitives import (
    ConstructionTypeEnum,
    CostApproachSettings,
    DistrictSourceEnum,
    ValuationMethodEnum,
    ValuationSettings,
)
from valora.valuation import CostApproach, CostApproachResult, Unavailable


class TestCostApproach:
    """Tests for land plus depreciated replacement cost."""

    def test_neutral_location_and_market(self, make_context):
        """With no adjustments, building value is base * (1 - dep%)."""
        outcome = CostApproach().evaluate(make_context())

        assert isinstance(outcome, CostApproachResult)
        assert outcome.method == ValuationMethodEnum.COST
        assert outcome.base_building_cost == 600_000
        assert abs(outcome.building_value - 500_000) < 1e-6
        assert outcome.location_adjustment == 0
        assert outcome.market_adjustment == 0
        assert abs(outcome.land_area - 180) < 1e-9
        assert abs(outcome.land_value - 2_700_000) < 1e-6
        assert abs(outcome.value - 3_200_000) < 1e-6
        assert outcome.district_source == DistrictSourceEnum.REPOSITORY

    def test_breakdown_sums_to_building_value(self, make_context):
        outcome = CostApproach().evaluate(make_context(location="zamalek", neighborhoodRating=8, condition=9))
        total = sum(outcome.breakdown().values())
        assert abs(total - outcome.building_value) < 1e-6
        assert outcome.age_depreciation < 0

    def test_location_factor_and_neighborhood(self, make_context):
        """Zamalek +10% from the location formula, neighborhood 8 adds 15%."""
        outcome = CostApproach().evaluate(make_context(location="zamalek", neighborhoodRating=8))
        assert outcome.location_factor == 1.10
        assert abs(outcome.location_adjustment - 500_000 * 0.25) < 1e-6

    def test_declining_market_reduces_building_value(self, make_context):
        outcome = CostApproach().evaluate(make_context(location="zamalek"))
        assert abs(outcome.market_adjustment_rate - (-0.05)) < 1e-12
        assert abs(outcome.market_adjustment - (-25_000)) < 1e-6
        assert abs(outcome.land_value - 180 * 25_000) < 1e-6

    def test_rising_market_with_demand_pressure(self, make_context):
        outcome = CostApproach().evaluate(make_context(location="6th_october", areaType="urban"))
        assert abs(outcome.market_adjustment_rate - 0.13) < 1e-12
        assert abs(outcome.market_adjustment - 65_000) < 1e-6

    def test_district_area_type_keys_formula_lookup(self, make_context):
        """6th October is suburban; only an urban formula exists."""
        outcome = CostApproach().evaluate(make_context(location="6th_october"))
        assert isinstance(outcome, Unavailable)
        assert outcome.error_kind == "FormulaNotFound"
        assert "suburban" in outcome.reason

    def test_supplied_land_area(self, make_context):
        outcome = CostApproach().evaluate(make_context(landArea=100))
        assert outcome.land_area_supplied
        assert abs(outcome.land_value - 1_500_000) < 1e-6

    def test_sub_location_refines_land_price(self, make_context):
        outcome = CostApproach().evaluate(make_context(subLocation="Fifth Settlement"))
        assert abs(outcome.land_price_per_sqm - 18_000) < 1e-6
        assert abs(outcome.land_value - 180 * 18_000) < 1e-6

    def test_fallback_district(self, make_context):
        """A district missing from the repository uses the fallback table."""
        outcome = CostApproach().evaluate(make_context(location="maadi"))
        assert isinstance(outcome, CostApproachResult)
        assert outcome.district_source == DistrictSourceEnum.FALLBACK
        assert abs(outcome.land_value - 180 * 20_000) < 1e-6

    def test_fallback_disabled(self, make_context):
        settings = ValuationSettings(use_fallback_districts=False)
        outcome = CostApproach().evaluate(make_context(valuation_settings=settings, location="maadi"))
        assert isinstance(outcome, Unavailable)
        assert outcome.error_kind == "DistrictNotFound"

    def test_unknown_district_unavailable(self, make_context):
        outcome = CostApproach().evaluate(make_context(location="atlantis"))
        assert isinstance(outcome, Unavailable)
        assert outcome.method == ValuationMethodEnum.COST
        assert outcome.error_kind == "DistrictNotFound"
        assert "atlantis" in outcome.reason

    def test_missing_depreciation_formula_unavailable(self, make_context, empty_repository):
        """A missing formula makes the method unavailable, never a zero value."""
        outcome = CostApproach().evaluate(make_context(repo=empty_repository))
        assert isinstance(outcome, Unavailable)
        assert outcome.error_kind == "FormulaNotFound"
        assert not outcome.is_available

    def test_replacement_cost_and_depreciation_amount(self, make_context):
        """Replacement cost carries the new-build markup; depreciation is unsigned."""
        outcome = CostApproach().evaluate(make_context())
        assert abs(outcome.replacement_cost - 690_000) < 1e-6
        assert abs(outcome.depreciation_amount - 100_000) < 1e-6
        assert abs(outcome.depreciation_amount - (outcome.base_building_cost - outcome.depreciated_building_value)) < 1e-6

    def test_construction_type_scales_base_cost(self, make_context):
        """Brick builds at 0.85 and steel at 1.15 of the formula base rate."""
        brick = CostApproach().evaluate(make_context(constructionType="brick"))
        steel = CostApproach().evaluate(make_context(constructionType="steel"))
        concrete = CostApproach().evaluate(make_context(constructionType="concrete"))

        assert abs(brick.base_building_cost - 510_000) < 1e-6
        assert abs(steel.base_building_cost - 690_000) < 1e-6
        assert concrete.base_building_cost == 600_000
        assert brick.construction_multiplier == 0.85
        assert brick.value < concrete.value < steel.value
        assert abs(brick.land_value - steel.land_value) < 1e-6

    def test_construction_multipliers_configurable(self, make_context):
        settings = ValuationSettings(
            cost=CostApproachSettings(construction_cost_multipliers={ConstructionTypeEnum.BRICK: 1.0})
        )
        outcome = CostApproach().evaluate(make_context(valuation_settings=settings, constructionType="brick"))
        assert outcome.base_building_cost == 600_000
        steel = CostApproach().evaluate(make_context(valuation_settings=settings, constructionType="steel"))
        assert steel.construction_multiplier == 1.0
