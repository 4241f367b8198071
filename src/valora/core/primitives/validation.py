# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reusable validation utilities for common patterns across the codebase.

This module provides standardized validators for:
- Date window ordering (effective_from / effective_until)
- Weight maps that must form a probability distribution
- Multiplier maps that must stay inside a policy band
"""

from __future__ import annotations

import math
from datetime import date
from typing import Mapping, Optional


class ValidationMixin:
    """
    Mixin class providing reusable validation methods for Pydantic models.

    Inherit alongside ``Model`` and call from a ``model_validator``.
    """

    @classmethod
    def validate_date_ordering(
        cls,
        start: Optional[date],
        end: Optional[date],
        start_field: str = "start_date",
        end_field: str = "end_date",
    ) -> None:
        """
        Validate that an optional end date is not before its start date.

        Raises:
            ValueError: If ``end`` precedes ``start``
        """
        if start is not None and end is not None and end < start:
            raise ValueError(f"{end_field} ({end}) must not be before {start_field} ({start})")

    @classmethod
    def validate_weights(
        cls,
        weights: Mapping[object, float],
        field_name: str = "weights",
        tolerance: float = 1e-9,
    ) -> None:
        """
        Validate that a weight map is non-negative and sums to 1.0.

        Raises:
            ValueError: If any weight is negative or the total is not 1.0
        """
        if not weights:
            raise ValueError(f"{field_name} must not be empty")
        negative = [key for key, value in weights.items() if value < 0]
        if negative:
            raise ValueError(f"{field_name} must be non-negative, got negative for {negative}")
        total = math.fsum(weights.values())
        if abs(total - 1.0) > tolerance:
            raise ValueError(f"{field_name} must sum to 1.0, got {total:.6f}")

    @classmethod
    def validate_band(
        cls,
        value: float,
        lower: float,
        upper: float,
        field_name: str,
    ) -> None:
        """
        Validate that ``lower <= value <= upper``.

        Raises:
            ValueError: If the value is outside the band
        """
        if not (lower <= value <= upper):
            raise ValueError(f"{field_name} ({value}) should be between {lower} and {upper}")
