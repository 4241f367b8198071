# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valora Analysis Engine

Request boundary and orchestration: validates requests, runs the
approaches against a per-request lookup snapshot and reconciles them into
a ``ValuationResult``.
"""

from .api import catalogue, parse_request, run
from .orchestrator import ValuationEngine, default_approaches
from .results import CalculationBreakdown, MethodSummary, ValuationResult

__all__ = [
    # Main API functions
    "run",
    "parse_request",
    "catalogue",
    # Orchestration
    "ValuationEngine",
    "default_approaches",
    # Results
    "ValuationResult",
    "MethodSummary",
    "CalculationBreakdown",
]
