# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .valuation import (
    ApproachOutcome,
    Available,
    BaseApproach,
    MissingDataError,
    Unavailable,
)

__all__ = [
    "ApproachOutcome",
    "Available",
    "BaseApproach",
    "MissingDataError",
    "Unavailable",
]
