# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Typed errors surfaced by the valuation engine.

Every error carries a machine-readable ``kind`` and a human-readable
message. Input-level and total failures abort a request; lookup and
comparable errors are normally caught at the method boundary and turned
into an unavailable approach or an excluded data point.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Mapping, Optional

if TYPE_CHECKING:
    from pydantic import ValidationError


class ValuationError(Exception):
    """Base class for all valuation errors."""

    kind: ClassVar[str] = "ValuationError"

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def to_response(self) -> Dict[str, Any]:
        """Failure payload for the request boundary."""
        payload: Dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInputError(ValuationError):
    """Request failed validation before any calculation started."""

    kind = "InvalidInput"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message, {"errors": list(errors)} if errors else None)
        self.errors: List[str] = list(errors or [])

    @classmethod
    def from_validation_error(cls, exc: "ValidationError") -> "InvalidInputError":
        """Flatten a pydantic ValidationError into one message per field."""
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ())) or "request"
            errors.append(f"{location}: {error.get('msg', 'invalid value')}")
        return cls("Validation failed: " + "; ".join(errors), errors)


class FormulaNotFoundError(ValuationError):
    """No active formula matches the requested key as of the computation date."""

    kind = "FormulaNotFound"

    def __init__(self, formula_type: str, property_type: str, area_type: str, as_of: Any):
        super().__init__(
            f"No active {formula_type} formula for property_type={property_type}, "
            f"area_type={area_type} as of {as_of}",
            {
                "formula_type": formula_type,
                "property_type": property_type,
                "area_type": area_type,
                "as_of": str(as_of),
            },
        )
        self.formula_type = formula_type
        self.property_type = property_type
        self.area_type = area_type
        self.as_of = as_of


class DistrictNotFoundError(ValuationError):
    """Location key could not be resolved to a district."""

    kind = "DistrictNotFound"

    def __init__(self, key: str):
        super().__init__(f"District '{key}' not found", {"key": key})
        self.key = key


class InconsistentComparableError(ValuationError):
    """Comparable sale with a non-positive or non-finite price/area, a mismatched price per sqm, or a non-positive adjusted price."""

    kind = "InconsistentComparable"

    def __init__(self, address: str, reason: str):
        super().__init__(f"Comparable '{address}' excluded: {reason}", {"address": address})
        self.address = address
        self.reason = reason


class NoMethodAvailableError(ValuationError):
    """All three approaches are unavailable; there is no acceptable default value."""

    kind = "NoMethodAvailable"

    def __init__(self, skipped: Mapping[str, str]):
        reasons = "; ".join(f"{method}: {reason}" for method, reason in skipped.items())
        super().__init__(
            f"No valuation method available ({reasons})" if reasons else "No valuation method available",
            {"skipped": dict(skipped)},
        )
        self.skipped: Dict[str, str] = dict(skipped)
