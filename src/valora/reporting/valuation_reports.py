# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valuation Reports

Audit tables for a finished valuation: the comparable adjustment grid,
the per-method summary, and the cost approach breakdown.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd

from ..analysis.results import ValuationResult
from ..core.primitives import ReportingSettings
from .base import BaseReport

GRID_COLUMNS = [
    "Address",
    "Sale Price",
    "Area",
    "Price/sqm",
    "Months Since Sale",
    "Age Adj.",
    "Finishing Adj.",
    "Floor Adj.",
    "Orientation Adj.",
    "View Adj.",
    "Market Time Adj.",
    "Adjusted Price/sqm",
    "Gross Adj. %",
    "Down-weighted",
    "Weight",
]


class ComparableGridReport(BaseReport):
    """
    Sales comparison adjustment grid, one row per comparable used.

    Empty (with the grid columns) when the sales comparison approach was
    unavailable.
    """

    def generate(self) -> pd.DataFrame:
        sales = self._result.sales_comparison_result
        if sales is None:
            return pd.DataFrame(columns=GRID_COLUMNS)

        rows = [
            [
                c.address,
                c.sale_price,
                c.area,
                c.price_per_sqm,
                c.months_since_sale,
                c.age_adjustment,
                c.finishing_adjustment,
                c.floor_adjustment,
                c.orientation_adjustment,
                c.view_adjustment,
                c.market_time_adjustment,
                c.adjusted_price_per_sqm,
                c.gross_adjustment_ratio * 100.0,
                c.is_outlier,
                c.weight,
            ]
            for c in sales.comparables
        ]
        return pd.DataFrame(rows, columns=GRID_COLUMNS)


class MethodSummaryReport(BaseReport):
    """One row per approach: status, value, confidence, weight and skip reason."""

    def generate(self) -> pd.DataFrame:
        records = [
            {
                "Method": m.method.value,
                "Status": m.status.value,
                "Value": m.value,
                "Confidence": m.confidence,
                "Weight": m.weight,
                "Weighted Value": (m.value or 0.0) * m.weight,
                "Reason": m.reason,
            }
            for m in self._result.methods
        ]
        df = pd.DataFrame.from_records(records).set_index("Method")
        return df


class CostBreakdownReport(BaseReport):
    """Cost approach waterfall from replacement cost to cost approach value."""

    def generate(self) -> pd.Series:
        result = self._result
        breakdown = result.calculation_breakdown
        lines: Dict[str, float] = {
            "Base Building Cost": breakdown.base_building_cost,
            "Age Depreciation": breakdown.age_depreciation,
            "Condition Adjustment": breakdown.condition_adjustment,
            "Location Adjustment": breakdown.location_adjustment,
            "Market Adjustment": breakdown.market_adjustment,
            "Building Value": result.building_value,
            "Land Value": result.land_value,
            "Cost Approach Value": result.land_value + result.building_value,
        }
        return pd.Series(lines, name="Amount")


def comparable_adjustment_grid(result: ValuationResult) -> pd.DataFrame:
    """Adjustment grid for the comparables used by the sales comparison approach."""
    return ComparableGridReport(result).generate()


def method_summary(result: ValuationResult) -> pd.DataFrame:
    """Per-approach summary indexed by method."""
    return MethodSummaryReport(result).generate()


def cost_breakdown(result: ValuationResult) -> pd.Series:
    """Cost approach waterfall."""
    return CostBreakdownReport(result).generate()


def valuation_summary(result: ValuationResult, settings: Optional[ReportingSettings] = None) -> str:
    """
    Plain-text valuation summary.

    Example:
        ```python
        print(valuation_summary(result, ReportingSettings(currency_code="EGP")))
        ```
    """
    settings = settings or ReportingSettings()
    precision = settings.decimal_precision
    currency = settings.currency_code
    output: List[str] = [
        f"# Valuation as of {result.as_of}",
        "",
        f"Market Value Estimate: {result.market_value_estimate:,.{precision}f} {currency}",
        f"Price per sqm: {result.price_per_sqm:,.{precision}f} {currency}",
        f"Depreciation: {result.depreciation_percentage:.1f}%",
        f"Confidence: {result.confidence_level:.0f}/100",
        "",
        "## Methods",
        method_summary(result).to_string(float_format=lambda v: f"{v:,.{precision}f}"),
        "",
    ]

    grid = comparable_adjustment_grid(result)
    if not grid.empty:
        output.extend(["## Comparable Adjustment Grid", grid.to_string(index=False), ""])

    if result.warnings:
        output.append("## Warnings")
        output.extend(f"- {warning}" for warning in result.warnings)
        output.append("")

    return "\n".join(output)
