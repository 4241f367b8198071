# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the valuation audit reports.
"""

import pandas as pd
import pytest

from valora.analysis import run
from valora.core.primitives import ReportingSettings
from valora.reporting import (
    BaseReport,
    ComparableGridReport,
    comparable_adjustment_grid,
    cost_breakdown,
    method_summary,
    valuation_summary,
)
from valora.reporting.valuation_reports import GRID_COLUMNS

from tests.conftest import AS_OF, make_comparables, make_request


@pytest.fixture
def full_result(repository):
    """All three approaches available, one comparable down-weighted."""
    comps = make_comparables(2) + [dict(make_comparables(1)[0], address="Old Tower", age=40)]
    return run(
        make_request(comparableSales=comps, rentalEstimate=10_000, landArea=180),
        repository,
        AS_OF,
    )


@pytest.fixture
def cost_only_result(cost_only_repository):
    return run(make_request(), cost_only_repository, AS_OF)


class TestComparableGrid:
    def test_columns_and_rows(self, full_result):
        grid = comparable_adjustment_grid(full_result)
        assert isinstance(grid, pd.DataFrame)
        assert list(grid.columns) == GRID_COLUMNS
        assert len(grid) == 3

    def test_outlier_row(self, full_result):
        grid = comparable_adjustment_grid(full_result).set_index("Address")
        assert bool(grid.loc["Old Tower", "Down-weighted"])
        assert abs(grid.loc["Old Tower", "Gross Adj. %"] - 30.0) < 1e-9
        assert abs(grid["Weight"].sum() - 1.0) < 1e-12

    def test_empty_when_sales_unavailable(self, cost_only_result):
        grid = comparable_adjustment_grid(cost_only_result)
        assert grid.empty
        assert list(grid.columns) == GRID_COLUMNS


class TestMethodSummary:
    def test_indexed_by_method(self, full_result):
        summary = method_summary(full_result)
        assert list(summary.index) == ["cost", "sales_comparison", "income"]
        assert abs(summary["Weight"].sum() - 1.0) < 1e-12
        assert abs(summary["Weighted Value"].sum() - full_result.market_value_estimate) < 1e-6

    def test_skipped_reason(self, cost_only_result):
        summary = method_summary(cost_only_result)
        assert summary.loc["sales_comparison", "Status"] == "unavailable"
        assert summary.loc["sales_comparison", "Weight"] == 0
        assert summary.loc["cost", "Weight"] == 1.0


class TestCostBreakdown:
    def test_waterfall(self, full_result):
        series = cost_breakdown(full_result)
        assert series.name == "Amount"
        components = series[
            [
                "Base Building Cost",
                "Age Depreciation",
                "Condition Adjustment",
                "Location Adjustment",
                "Market Adjustment",
            ]
        ]
        assert abs(components.sum() - series["Building Value"]) < 1e-6
        assert abs(series["Cost Approach Value"] - (series["Building Value"] + series["Land Value"])) < 1e-6


class TestValuationSummary:
    def test_text_sections(self, full_result):
        text = valuation_summary(full_result, ReportingSettings(decimal_precision=0, currency_code="USD"))
        assert text.startswith("# Valuation as of 2025-01-01")
        assert "USD" in text
        assert "## Methods" in text
        assert "## Comparable Adjustment Grid" in text
        assert "Old Tower" in text
        assert "## Warnings" in text

    def test_without_grid(self, cost_only_result):
        text = valuation_summary(cost_only_result)
        assert "## Comparable Adjustment Grid" not in text
        assert "EGP" in text


class TestBaseReport:
    def test_requires_valuation_result(self):
        with pytest.raises(TypeError, match="ValuationResult"):
            ComparableGridReport({"market_value_estimate": 1.0})

    def test_is_abstract(self, full_result):
        with pytest.raises(TypeError):
            BaseReport(full_result)
