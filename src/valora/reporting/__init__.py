# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valora Reporting Module

Tabular audit output for finished valuations:
    result = run(request, repository, as_of=date(2025, 1, 1))
    grid = comparable_adjustment_grid(result)
    summary = method_summary(result)
"""

from .base import BaseReport
from .valuation_reports import (
    ComparableGridReport,
    CostBreakdownReport,
    MethodSummaryReport,
    comparable_adjustment_grid,
    cost_breakdown,
    method_summary,
    valuation_summary,
)

__all__ = [
    "BaseReport",
    "ComparableGridReport",
    "CostBreakdownReport",
    "MethodSummaryReport",
    "comparable_adjustment_grid",
    "cost_breakdown",
    "method_summary",
    "valuation_summary",
]
