# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valuation API

Public entry points for valuing a property. ``run`` is the request
boundary: raw request mappings are validated here, before any
calculation starts, and validation failures surface as
``InvalidInputError``.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..core.errors import InvalidInputError
from ..core.primitives import (
    ConstructionTypeEnum,
    FinishingLevelEnum,
    PropertyTypeEnum,
    ValuationSettings,
)
from ..repository import FALLBACK_DISTRICTS, CoefficientRepository, InMemoryCoefficientRepository
from ..valuation import ValuationInput
from .orchestrator import ValuationEngine
from .results import ValuationResult


def parse_request(request: Union[ValuationInput, Mapping[str, Any]]) -> ValuationInput:
    """
    Validate a raw request into a ``ValuationInput``.

    Accepts camelCase (``propertyType``) or snake_case keys.

    Raises:
        InvalidInputError: If any field is missing or out of range
    """
    if isinstance(request, ValuationInput):
        return request
    try:
        return ValuationInput.model_validate(request)
    except ValidationError as e:
        raise InvalidInputError.from_validation_error(e) from e


def run(
    request: Union[ValuationInput, Mapping[str, Any]],
    repository: CoefficientRepository,
    as_of: date,
    settings: Optional[ValuationSettings] = None,
) -> ValuationResult:
    """
    Value one property.

    Workflow:
      1) Validate the request (InvalidInput before any calculation)
      2) Capture all repository lookups as of ``as_of``
      3) Evaluate the cost, sales comparison and income approaches
      4) Score, reconcile and return the result

    Args:
        request: Validated input or raw request mapping.
        repository: Coefficient repository to read formulas and districts from.
        as_of: Computation date; formulas are resolved against it.
        settings: Engine settings; defaults when omitted.

    Returns:
        ValuationResult with the reconciled value and audit trail.

    Raises:
        InvalidInputError: If the request fails validation
        NoMethodAvailableError: If no approach could produce a value
    """
    subject = parse_request(request)
    return ValuationEngine(settings=settings).value(subject, repository, as_of)


def catalogue(repository: Optional[CoefficientRepository] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Reference values for building a valuation request.

    Districts come from ``repository`` when it can list them, otherwise
    from the fallback price table.
    """
    if isinstance(repository, InMemoryCoefficientRepository):
        districts = repository.districts
    else:
        districts = tuple(FALLBACK_DISTRICTS.values())

    return {
        "property_types": [{"key": p.value} for p in PropertyTypeEnum],
        "finishing_levels": [{"key": f.value, "rank": f.rank} for f in FinishingLevelEnum],
        "construction_types": [{"key": c.value} for c in ConstructionTypeEnum],
        "districts": [
            {
                "key": d.key,
                "name": d.name,
                "average_price_per_sqm": d.average_price_per_sqm,
                "market_trend": d.market_trend.value,
            }
            for d in districts
        ],
    }
