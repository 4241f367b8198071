# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valuation Orchestration Engine.

Runs one valuation in a fixed sequence:

1. Capture every coefficient lookup into a ``LookupSnapshot``
2. Run the depreciation model once for the subject
3. Evaluate each approach against the same ``ValuationContext``
4. Score the available approaches
5. Reconcile into one value and assemble the ``ValuationResult``

Steps 2-5 read only the snapshot, so replaying a request against the same
snapshot yields an identical result.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from ..core.primitives import ValuationMethodEnum, ValuationSettings
from ..repository import CoefficientRepository
from ..valuation import (
    BaseApproach,
    ConfidenceScorer,
    CostApproach,
    CostApproachResult,
    IncomeApproach,
    LookupSnapshot,
    ReconciledValue,
    Reconciler,
    SalesComparisonApproach,
    SalesComparisonResult,
    ValuationContext,
    ValuationInput,
)
from .results import CalculationBreakdown, MethodSummary, ValuationResult

logger = logging.getLogger(__name__)


def default_approaches() -> List[BaseApproach]:
    """The three standard approaches in evaluation order."""
    return [CostApproach(), SalesComparisonApproach(), IncomeApproach()]


class ValuationEngine:
    """
    Stateless valuation engine.

    Holds only configuration; every call builds its own context, so one
    engine can serve concurrent requests.

    Example:
        ```python
        engine = ValuationEngine(settings=ValuationSettings())
        result = engine.value(subject, repository, as_of=date(2025, 1, 1))
        ```
    """

    def __init__(
        self,
        settings: Optional[ValuationSettings] = None,
        approaches: Optional[Sequence[BaseApproach]] = None,
    ):
        self.settings = settings or ValuationSettings()
        self.approaches: List[BaseApproach] = list(approaches or default_approaches())
        self.scorer = ConfidenceScorer(settings=self.settings.confidence)
        self.reconciler = Reconciler(settings=self.settings.reconciliation)

    def value(
        self,
        subject: ValuationInput,
        repository: CoefficientRepository,
        as_of: date,
    ) -> ValuationResult:
        """
        Value ``subject`` against ``repository`` as of ``as_of``.

        Raises:
            NoMethodAvailableError: If every approach is unavailable
        """
        snapshot = LookupSnapshot.capture(subject, repository, as_of, self.settings)
        return self.value_snapshot(subject, snapshot)

    def value_snapshot(self, subject: ValuationInput, snapshot: LookupSnapshot) -> ValuationResult:
        """Value ``subject`` against an already captured lookup snapshot."""
        context = ValuationContext.from_snapshot(subject, snapshot, self.settings)

        outcomes = [self.scorer.score(approach.evaluate(context), context) for approach in self.approaches]
        reconciled = self.reconciler.reconcile(outcomes)

        cost: Optional[CostApproachResult] = None
        if reconciled.weights.get(ValuationMethodEnum.COST, 0) > 0:
            cost = next(o for o in reconciled.used if isinstance(o, CostApproachResult))

        market_value = reconciled.value
        result = ValuationResult(
            market_value_estimate=market_value,
            land_value=cost.land_value if cost else 0.0,
            building_value=cost.building_value if cost else 0.0,
            depreciation_percentage=context.depreciation.depreciation_percentage,
            price_per_sqm=market_value / subject.area,
            confidence_level=reconciled.confidence_level,
            calculation_breakdown=CalculationBreakdown.from_cost(cost),
            area=subject.area,
            methods=tuple(self.summarize(reconciled, context)),
            warnings=tuple(self.warnings(reconciled, context)),
            as_of=snapshot.as_of,
            repository_version=snapshot.repository_version,
            outcomes=reconciled.outcomes,
            snapshot=snapshot,
        )

        logger.info(
            f"Valued {subject.property_type.value} in {subject.location} at "
            f"{market_value:,.0f} (confidence {result.confidence_level:.1f}, "
            f"methods: {', '.join(m.value for m in result.used_methods)})"
        )
        return result

    def summarize(self, reconciled: ReconciledValue, context: ValuationContext) -> List[MethodSummary]:
        summaries = []
        for outcome in reconciled.outcomes:
            if outcome.is_available:
                summaries.append(
                    MethodSummary(
                        method=outcome.method,
                        status=outcome.status,
                        value=outcome.value,
                        confidence=outcome.confidence,
                        weight=reconciled.weights.get(outcome.method, 0.0),
                        confidence_deductions=self.scorer.explain(outcome, context),
                    )
                )
            else:
                summaries.append(
                    MethodSummary(
                        method=outcome.method,
                        status=outcome.status,
                        reason=outcome.reason,
                        error_kind=outcome.error_kind,
                    )
                )
        return summaries

    def warnings(self, reconciled: ReconciledValue, context: ValuationContext) -> List[str]:
        warnings = []
        snapshot = context.snapshot
        if snapshot.used_fallback_district:
            warnings.append(
                f"District '{context.subject.location}' not in repository; land value uses the fallback price table"
            )
        for outcome in reconciled.outcomes:
            if not outcome.is_available:
                warnings.append(f"{outcome.method.value} approach skipped: {outcome.reason}")
            elif isinstance(outcome, SalesComparisonResult):
                warnings.extend(outcome.excluded)
                for comparable in outcome.comparables:
                    if comparable.is_outlier:
                        warnings.append(
                            f"Comparable '{comparable.address}' down-weighted: gross adjustment "
                            f"{comparable.gross_adjustment_ratio:.1%}"
                        )
        return warnings
