# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
Valora - Property Valuation Calculation Engine

Turns raw property attributes (area, age, condition, location, finishing,
comparable sales, rent) into a reconciled market-value estimate using the
three standard appraisal approaches, each with its own depreciation,
adjustment and confidence logic.

Key Entry Points:
- valora.analysis.run() - Value one property against a coefficient repository
- valora.repository.* - Formula and district lookups (read-only)
- valora.valuation.* - Cost, sales comparison and income approaches
- valora.reporting.* - Tabular audit output (pandas)

Example Usage:
    ```python
    from datetime import date

    from valora.analysis import run
    from valora.repository import InMemoryCoefficientRepository

    repository = InMemoryCoefficientRepository(formulas=formulas, districts=districts)
    result = run(
        {"area": 150, "age": 10, "condition": 7, "location": "new_cairo",
         "propertyType": "residential"},
        repository,
        as_of=date(2025, 1, 1),
    )
    print(f"Market value: {result.market_value_estimate:,.0f} EGP")
    ```
"""

# Libraries leave handler configuration to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "core",
    "reporting",
    "repository",
    "valuation",
]


_LAZY_MODULES = {
    "analysis": "valora.analysis",
    "core": "valora.core",
    "reporting": "valora.reporting",
    "repository": "valora.repository",
    "valuation": "valora.valuation",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'valora' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
