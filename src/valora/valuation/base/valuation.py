# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Base Approach Classes - Industry Standard Approaches

Provides the foundation for the three appraisal approaches and the tagged
outcome every approach returns: ``Available`` with a value, or
``Unavailable`` with the reason it was skipped. Reconciliation only ever
averages ``Available`` outcomes, so a missing method can never be averaged
in as zero.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Optional, Union

from pydantic import Field

from ...core.errors import ValuationError
from ...core.primitives import MethodStatusEnum, Model, ValuationMethodEnum

if TYPE_CHECKING:
    from ..context import ValuationContext

logger = logging.getLogger(__name__)


class MissingDataError(ValuationError):
    """Data an approach needs (comparables, rent) was not supplied."""

    kind = "MissingData"


class Available(Model):
    """
    Successful approach outcome.

    ``confidence`` is None until the confidence scorer has scored it.
    """

    method: ValuationMethodEnum
    status: MethodStatusEnum = MethodStatusEnum.AVAILABLE
    value: float = Field(..., description="Indicated market value")
    confidence: Optional[float] = Field(default=None, ge=0, le=100)

    @property
    def is_available(self) -> bool:
        return True

    def with_confidence(self, confidence: float) -> "Available":
        """Copy of this outcome carrying a confidence score."""
        return self.model_copy(update={"confidence": confidence})


class Unavailable(Model):
    """Approach that could not produce a value, and why."""

    method: ValuationMethodEnum
    status: MethodStatusEnum = MethodStatusEnum.UNAVAILABLE
    reason: str = Field(..., description="Human-readable reason the approach was skipped")
    error_kind: str = Field(..., description="Machine-readable error kind")

    @property
    def is_available(self) -> bool:
        return False


ApproachOutcome = Union[Available, Unavailable]


class BaseApproach(Model, ABC):
    """
    Abstract base class for all valuation approaches.

    Follows the three standard real estate appraisal approaches:
    1. Cost Approach (land + depreciated replacement cost)
    2. Sales Comparison Approach (adjusted comparables)
    3. Income Approach (capitalized rent)

    Subclasses implement ``calculate`` and raise a ``ValuationError`` when
    data is missing; ``evaluate`` converts that into ``Unavailable``.
    """

    method: ClassVar[ValuationMethodEnum]

    name: str = Field(default="", description="Human-readable name for the approach")

    @abstractmethod
    def calculate(self, context: "ValuationContext") -> Available:
        """
        Calculate the indicated value for the subject in ``context``.

        Raises:
            FormulaNotFoundError: If a required formula is missing
            DistrictNotFoundError: If the district could not be resolved
            InconsistentComparableError: If no usable comparable remains
            MissingDataError: If the approach's inputs were not supplied
        """

    def evaluate(self, context: "ValuationContext") -> ApproachOutcome:
        """
        Run the approach, degrading data errors into an ``Unavailable`` outcome.

        Input validation happens before this point, so any ValuationError
        here describes missing or unusable data for this approach only.
        """
        try:
            outcome = self.calculate(context)
        except ValuationError as e:
            logger.warning(f"{self.method.value} approach unavailable: {e.message}")
            return Unavailable(method=self.method, reason=e.message, error_kind=e.kind)

        logger.debug(f"{self.method.value} approach indicated {outcome.value:,.2f}")
        return outcome
