# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reconciliation Engine

Combines the available approach indications into one value using the
configured method weights. The weight of an unavailable approach is
redistributed proportionally among the remaining ones; with no approach
available the valuation fails outright.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, Optional, Tuple

from pydantic import Field

from ..core.errors import NoMethodAvailableError
from ..core.primitives import Model, ReconciliationSettings, ValuationMethodEnum
from .base import ApproachOutcome, Available, Unavailable
from .confidence import ConfidenceScorer

logger = logging.getLogger(__name__)


class ReconciledValue(Model):
    """
    Outcome of reconciliation.

    Attributes:
        value: Final reconciled value, sum of weight * value
        weights: Effective weight per used approach (sums to 1.0)
        confidence_level: Weighted confidence of the used approaches
        outcomes: Every approach outcome, available or not, in evaluation order
    """

    value: float
    weights: Dict[ValuationMethodEnum, float]
    confidence_level: float = Field(..., ge=0, le=100)
    outcomes: Tuple[ApproachOutcome, ...]

    @property
    def used(self) -> Tuple[Available, ...]:
        return tuple(o for o in self.outcomes if o.is_available and self.weights.get(o.method, 0) > 0)

    @property
    def skipped(self) -> Dict[ValuationMethodEnum, str]:
        return {o.method: o.reason for o in self.outcomes if not o.is_available}

    def outcome(self, method: ValuationMethodEnum) -> Optional[ApproachOutcome]:
        for outcome in self.outcomes:
            if outcome.method == method:
                return outcome
        return None


class Reconciler(Model):
    """
    Weighted reconciliation of approach outcomes.

    Example:
        ```python
        reconciler = Reconciler()
        reconciled = reconciler.reconcile(scored_outcomes)
        reconciled.weights  # {SALES_COMPARISON: 0.5, COST: 0.35, INCOME: 0.15}
        ```
    """

    settings: ReconciliationSettings = Field(default_factory=ReconciliationSettings)

    def effective_weights(self, methods: Iterable[ValuationMethodEnum]) -> Dict[ValuationMethodEnum, float]:
        """
        Default weights restricted to ``methods`` and rescaled to sum to 1.0.

        When every remaining default weight is zero the methods share equally.
        """
        methods = list(dict.fromkeys(methods))
        if not methods:
            return {}
        raw = {m: self.settings.method_weights.get(m, 0.0) for m in methods}
        total = math.fsum(raw.values())
        if total <= 0:
            return {m: 1.0 / len(methods) for m in methods}
        return {m: w / total for m, w in raw.items()}

    def reconcile(self, outcomes: Iterable[ApproachOutcome]) -> ReconciledValue:
        """
        Reconcile scored approach outcomes.

        Raises:
            NoMethodAvailableError: If no outcome is available; lists every
                skip reason
        """
        outcomes = tuple(outcomes)
        available = [o for o in outcomes if o.is_available]
        if not available:
            skipped = {o.method.value: o.reason for o in outcomes if isinstance(o, Unavailable)}
            raise NoMethodAvailableError(skipped)

        weights = self.effective_weights(o.method for o in available)
        value = math.fsum(weights[o.method] * o.value for o in available)
        confidence = ConfidenceScorer.overall(available, weights)

        logger.debug(
            "Reconciled weights: "
            + ", ".join(f"{method.value}={weight:.3f}" for method, weight in weights.items())
        )

        return ReconciledValue(
            value=value,
            weights=weights,
            confidence_level=confidence,
            outcomes=outcomes,
        )
