# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Base reporting classes.

Reports operate on finished ``ValuationResult`` objects and only format
what the engine already computed; they never recalculate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..analysis.results import ValuationResult


class BaseReport(ABC):
    """Abstract base class for all valuation report formatters."""

    def __init__(self, result: ValuationResult):
        """
        Initialize report with a valuation result.

        Args:
            result: ValuationResult from ``valora.analysis.run()``
        """
        if not isinstance(result, ValuationResult):
            raise TypeError("BaseReport requires a ValuationResult object")
        self._result = result

    @abstractmethod
    def generate(self, **kwargs) -> Any:
        """Transform the result into its presentation format."""
