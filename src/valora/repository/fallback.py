# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Fallback average-price table for districts missing from the repository.

Used only for land-value estimation when ``use_fallback_districts`` is on;
the cost approach lowers its confidence whenever this table is consulted.
"""

from __future__ import annotations

from typing import Dict

from ..core.errors import DistrictNotFoundError
from ..core.primitives import MarketTrendEnum, normalize_label
from .models import District

FALLBACK_DISTRICTS: Dict[str, District] = {
    district.key: district
    for district in (
        District(
            key="new_cairo",
            name="New Cairo",
            average_price_per_sqm=15_000,
            market_trend=MarketTrendEnum.RISING,
            demand_supply_ratio=1.2,
        ),
        District(
            key="zamalek",
            name="Zamalek",
            average_price_per_sqm=25_000,
            market_trend=MarketTrendEnum.STABLE,
            demand_supply_ratio=0.8,
        ),
        District(
            key="heliopolis",
            name="Heliopolis",
            average_price_per_sqm=18_000,
            market_trend=MarketTrendEnum.STABLE,
        ),
        District(
            key="6th_october",
            name="6th of October",
            average_price_per_sqm=12_000,
            market_trend=MarketTrendEnum.RISING,
            demand_supply_ratio=1.3,
        ),
        District(
            key="sheikh_zayed",
            name="Sheikh Zayed",
            average_price_per_sqm=16_000,
            market_trend=MarketTrendEnum.RISING,
        ),
        District(
            key="maadi",
            name="Maadi",
            average_price_per_sqm=20_000,
            market_trend=MarketTrendEnum.STABLE,
        ),
    )
}


def fallback_district(key: str) -> District:
    """
    Look up a district in the fallback table.

    Raises:
        DistrictNotFoundError: If the key is not in the table either
    """
    district = FALLBACK_DISTRICTS.get(normalize_label(key))
    if district is None:
        raise DistrictNotFoundError(key)
    return district
