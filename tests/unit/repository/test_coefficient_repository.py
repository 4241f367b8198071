# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for formula/district records and the in-memory coefficient repository.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from valora.core.errors import DistrictNotFoundError, FormulaNotFoundError
from valora.core.primitives import (
    AreaTypeEnum,
    FormulaTypeEnum,
    MarketTrendEnum,
    PropertyTypeEnum,
)
from valora.repository import (
    FALLBACK_DISTRICTS,
    District,
    Formula,
    InMemoryCoefficientRepository,
    fallback_district,
    select_formula,
)

from tests.conftest import AS_OF, make_district, make_formula

DEP = FormulaTypeEnum.DEPRECIATION
RES = PropertyTypeEnum.RESIDENTIAL
URBAN = AreaTypeEnum.URBAN


class TestFormula:
    """Tests for the Formula record."""

    def test_age_factor_is_required(self):
        """age_factor is never inferred from base_rate."""
        with pytest.raises(ValidationError, match="age_factor"):
            Formula(
                formula_type="depreciation",
                property_type="residential",
                area_type="urban",
                base_rate=4_000,
                effective_from=date(2024, 1, 1),
            )

    def test_effective_window_must_be_ordered(self):
        with pytest.raises(ValidationError, match="effective_until"):
            make_formula(effective_from=date(2024, 6, 1), effective_until=date(2024, 1, 1))

    def test_is_effective(self):
        formula = make_formula(effective_from=date(2024, 1, 1), effective_until=date(2024, 12, 31))
        assert formula.is_effective(date(2024, 1, 1))
        assert formula.is_effective(date(2024, 12, 31))
        assert not formula.is_effective(date(2023, 12, 31))
        assert not formula.is_effective(date(2025, 1, 1))

    def test_inactive_formula_is_never_effective(self):
        formula = make_formula(is_active=False)
        assert not formula.is_effective(AS_OF)

    def test_label_maps_are_normalised(self):
        formula = make_formula(
            condition_multipliers={"Excellent": 0.9},
            location_adjustments={"New Cairo": 1.05},
            rental_rates={"Fully-Finished": 55.0},
        )
        assert formula.condition_multiplier(9) == 0.9
        assert formula.condition_multiplier(5) is None
        assert formula.location_adjustment("new cairo") == 1.05
        assert formula.location_adjustment(None) is None
        assert formula.rental_rate("fully_finished") == 55.0

    def test_rental_rate_falls_back_to_default(self):
        formula = make_formula(rental_rates={"luxury": 90.0, "default": 40.0})
        assert formula.rental_rate("luxury") == 90.0
        assert formula.rental_rate("core_shell") == 40.0
        assert make_formula().rental_rate("luxury") is None

    def test_formula_is_immutable(self):
        formula = make_formula()
        with pytest.raises(ValidationError):
            formula.base_rate = 1.0


class TestSelectFormula:
    """Tests for choosing the single formula in force."""

    def test_latest_effective_from_wins(self):
        older = make_formula(base_rate=3_000, effective_from=date(2023, 1, 1))
        newer = make_formula(base_rate=4_500, effective_from=date(2024, 6, 1))
        assert select_formula([older, newer], DEP, RES, URBAN, AS_OF) is newer
        assert select_formula([newer, older], DEP, RES, URBAN, AS_OF) is newer

    def test_expired_formula_is_never_selected(self):
        """An older open formula beats a newer expired one."""
        older = make_formula(base_rate=3_000, effective_from=date(2022, 1, 1))
        expired = make_formula(
            base_rate=5_000, effective_from=date(2024, 1, 1), effective_until=date(2024, 12, 31)
        )
        assert select_formula([older, expired], DEP, RES, URBAN, AS_OF) is older

    def test_future_formula_is_not_selected(self):
        current = make_formula(effective_from=date(2024, 1, 1))
        future = make_formula(effective_from=date(2025, 6, 1))
        assert select_formula([current, future], DEP, RES, URBAN, AS_OF) is current

    def test_ties_keep_store_order(self):
        first = make_formula(base_rate=1_000)
        second = make_formula(base_rate=2_000)
        assert select_formula([first, second], DEP, RES, URBAN, AS_OF) is first

    def test_key_must_match(self):
        formulas = [
            make_formula(property_type=PropertyTypeEnum.VILLA),
            make_formula(area_type=AreaTypeEnum.RURAL),
            make_formula(formula_type=FormulaTypeEnum.MARKET_ADJUSTMENT),
        ]
        with pytest.raises(FormulaNotFoundError, match="No active depreciation formula"):
            select_formula(formulas, DEP, RES, URBAN, AS_OF)

    def test_missing_match_raises_not_default(self):
        with pytest.raises(FormulaNotFoundError):
            select_formula([], DEP, RES, URBAN, AS_OF)


class TestInMemoryCoefficientRepository:
    """Tests for the in-memory repository."""

    def test_find_formula(self, repository, depreciation_formula):
        assert repository.find_formula(DEP, RES, URBAN, AS_OF) == depreciation_formula

    def test_find_district_normalises_key(self, repository):
        district = repository.find_district("New Cairo")
        assert district.key == "new_cairo"
        assert district.average_price_per_sqm == 15_000

    def test_unknown_district_raises(self, repository):
        with pytest.raises(DistrictNotFoundError, match="atlantis"):
            repository.find_district("atlantis")

    def test_duplicate_district_keys_rejected(self):
        with pytest.raises(ValueError, match="Duplicate district"):
            InMemoryCoefficientRepository(districts=[make_district("maadi"), make_district("Maadi")])

    def test_accepts_dict_records(self):
        repository = InMemoryCoefficientRepository(
            formulas=[
                {
                    "formula_type": "depreciation",
                    "property_type": "residential",
                    "area_type": "urban",
                    "base_rate": 4_000,
                    "age_factor": 0.02,
                    "effective_from": "2024-01-01",
                }
            ],
            districts=[{"key": "maadi", "name": "Maadi", "average_price_per_sqm": 20_000}],
        )
        assert repository.find_formula(DEP, RES, URBAN, AS_OF).age_factor == 0.02
        assert repository.find_district("maadi").market_trend == MarketTrendEnum.STABLE

    def test_from_records_drops_store_columns(self):
        repository = InMemoryCoefficientRepository.from_records(
            [
                {
                    "id": 17,
                    "created_at": "2024-01-01T00:00:00",
                    "formula_type": "depreciation",
                    "property_type": "residential",
                    "area_type": "urban",
                    "base_rate": 4_000,
                    "age_factor": 0.015,
                    "effective_from": date(2024, 1, 1),
                    "is_active": True,
                }
            ],
            [{"id": 3, "key": "maadi", "name": "Maadi", "average_price_per_sqm": 20_000}],
            version=4,
        )
        assert repository.version == 4
        assert len(repository.formulas) == 1
        assert repository.districts[0].key == "maadi"

    def test_refreshed_returns_new_version(self, repository):
        """Refreshing never mutates the snapshot callers already hold."""
        replacement = make_formula(base_rate=9_999, effective_from=date(2024, 12, 1))
        refreshed = repository.refreshed(formulas=[replacement])

        assert refreshed is not repository
        assert refreshed.version == repository.version + 1
        assert refreshed.find_formula(DEP, RES, URBAN, AS_OF).base_rate == 9_999
        assert repository.find_formula(DEP, RES, URBAN, AS_OF).base_rate == 4_000
        assert len(refreshed.districts) == len(repository.districts)

    def test_repr(self, repository):
        assert "version=1" in repr(repository)


class TestFallbackDistricts:
    def test_table_contents(self):
        assert set(FALLBACK_DISTRICTS) == {
            "new_cairo",
            "zamalek",
            "heliopolis",
            "6th_october",
            "sheikh_zayed",
            "maadi",
        }
        assert FALLBACK_DISTRICTS["zamalek"].average_price_per_sqm == 25_000

    def test_lookup(self):
        district = fallback_district("Sheikh Zayed")
        assert isinstance(district, District)
        assert district.market_trend == MarketTrendEnum.RISING

    def test_unknown_key_raises(self):
        with pytest.raises(DistrictNotFoundError):
            fallback_district("atlantis")
