# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Sales Comparison Approach - Adjusted Comparable Sales

Brings each comparable sale's price per sqm to the subject's
characteristics and to the valuation date, then takes a weighted average.
Comparables with large adjustments are down-weighted rather than discarded;
inconsistent comparables are excluded with a warning.
"""

from __future__ import annotations

import difflib
import logging
import math
from typing import TYPE_CHECKING, ClassVar, Dict, List, Optional, Tuple

from pydantic import Field

from ..core.errors import InconsistentComparableError
from ..core.primitives import (
    Model,
    PositiveFloat,
    ValuationMethodEnum,
    normalize_label,
)
from ..repository.models import Formula
from .base import Available, BaseApproach, MissingDataError
from .inputs import ComparableSale

if TYPE_CHECKING:
    from .context import ValuationContext

logger = logging.getLogger(__name__)

LABEL_MATCH_CUTOFF = 0.8


class AdjustedComparable(Model):
    """
    One comparable after adjustment to the subject.

    All adjustments are signed amounts per sqm added to ``price_per_sqm``.
    ``weight`` is normalised across the comparables used.
    """

    address: str
    sale_price: float
    area: PositiveFloat
    price_per_sqm: PositiveFloat
    months_since_sale: Optional[float] = None

    age_adjustment: float = 0.0
    finishing_adjustment: float = 0.0
    floor_adjustment: float = 0.0
    orientation_adjustment: float = 0.0
    view_adjustment: float = 0.0
    market_time_adjustment: float = 0.0

    adjusted_price_per_sqm: float
    gross_adjustment_ratio: PositiveFloat
    is_outlier: bool = Field(
        default=False, description="Gross adjustment above threshold; weight was reduced"
    )
    raw_weight: PositiveFloat
    weight: float = Field(default=0.0, ge=0, le=1)

    @property
    def net_adjustment(self) -> float:
        return self.adjusted_price_per_sqm - self.price_per_sqm

    def adjustments(self) -> Dict[str, float]:
        return {
            "age": self.age_adjustment,
            "finishing": self.finishing_adjustment,
            "floor": self.floor_adjustment,
            "orientation": self.orientation_adjustment,
            "view": self.view_adjustment,
            "market_time": self.market_time_adjustment,
        }


class SalesComparisonResult(Available):
    """Sales comparison indication with the adjustment grid."""

    method: ValuationMethodEnum = ValuationMethodEnum.SALES_COMPARISON

    comparables: Tuple[AdjustedComparable, ...]
    excluded: Tuple[str, ...] = Field(default=(), description="Warnings for excluded comparables")
    supplied_count: int = Field(..., ge=1)
    weighted_price_per_sqm: float
    unweighted_price_per_sqm: float
    market_formula_found: bool
    age_adjustment_rate: float
    finishing_step_rate: float

    @property
    def used_count(self) -> int:
        return len(self.comparables)

    @property
    def mean_gross_adjustment_ratio(self) -> float:
        return math.fsum(c.gross_adjustment_ratio for c in self.comparables) / len(self.comparables)

    @property
    def unknown_recency_count(self) -> int:
        return sum(1 for c in self.comparables if c.months_since_sale is None)


def nearest_floor_adjustment(formula: Formula, floor: int) -> float:
    """
    Premium for ``floor`` from ``floor:<n>`` entries, using the nearest
    numeric floor when there is no exact entry. Ties go to the lower floor.
    """
    floors = {}
    for label, adjustment in formula.location_adjustments.items():
        prefix, _, suffix = label.partition(":")
        if prefix != "floor":
            continue
        try:
            floors[int(suffix)] = adjustment
        except ValueError:
            logger.debug(f"Ignoring non-numeric floor label '{label}'")
    if not floors:
        return 0.0
    nearest = min(floors, key=lambda n: (abs(n - floor), n))
    return floors[nearest]


def labelled_adjustment(formula: Formula, category: str, label: str) -> float:
    """
    Premium for ``<category>:<label>`` using an exact or close label match.

    Unmatched labels contribute zero.
    """
    prefix = f"{category}:"
    options = {
        key[len(prefix):]: adjustment
        for key, adjustment in formula.location_adjustments.items()
        if key.startswith(prefix)
    }
    wanted = normalize_label(label)
    if wanted in options:
        return options[wanted]
    close = difflib.get_close_matches(wanted, list(options), n=1, cutoff=LABEL_MATCH_CUTOFF)
    return options[close[0]] if close else 0.0


class SalesComparisonApproach(BaseApproach):
    """
    Sales comparison calculator.

    Per comparable:
        1. Confirm price per sqm (exclude when inconsistent)
        2. Age: ppsm * age_rate * (comp_age - subject_age), capped at
           ``max_age_adjustment_ratio`` of ppsm either way
        3. Finishing: ppsm * step * (subject_rank - comp_rank)
        4. Floor / orientation / view: ppsm * (premium[subject] - premium[comp])
        5. Market time: ppsm * annual_trend_rate * months / 12
        6. Exclude when the adjusted ppsm is not positive
        7. weight = 1/(1 + gross) * 1/(1 + months/scale), halved above the threshold

    Value = weighted mean adjusted ppsm * subject area.
    """

    method: ClassVar[ValuationMethodEnum] = ValuationMethodEnum.SALES_COMPARISON

    name: str = "Sales Comparison Approach"

    def validate_comparable(self, comparable: ComparableSale, tolerance: float) -> float:
        """
        Confirmed price per sqm of a comparable.

        Raises:
            InconsistentComparableError: If price or area is not a positive
                finite number, or a supplied price per sqm disagrees with
                price / area
        """
        label = comparable.address or "unnamed"
        if not (math.isfinite(comparable.sale_price) and math.isfinite(comparable.area)):
            raise InconsistentComparableError(label, "sale price and area must be finite numbers")
        if comparable.sale_price <= 0:
            raise InconsistentComparableError(label, f"sale price must be positive, got {comparable.sale_price}")
        if comparable.area <= 0:
            raise InconsistentComparableError(label, f"area must be positive, got {comparable.area}")

        derived = comparable.derived_price_per_sqm
        supplied = comparable.price_per_sqm
        if supplied is not None:
            if not math.isfinite(supplied) or supplied <= 0 or abs(supplied - derived) > tolerance * derived:
                raise InconsistentComparableError(
                    label,
                    f"price_per_sqm {supplied:,.2f} does not match price / area {derived:,.2f}",
                )
        return derived

    def rates(self, context: "ValuationContext") -> Tuple[float, float]:
        """
        (age_rate, finishing_step) from the market formula, falling back to
        the depreciation formula's age factor and then to settings.
        """
        snapshot = context.snapshot
        settings = context.settings.comparison
        market = snapshot.market_formula
        if market is not None:
            return market.age_factor, market.base_rate
        if snapshot.depreciation_formula is not None:
            return snapshot.depreciation_formula.age_factor, settings.finishing_step_rate
        return settings.age_adjustment_rate, settings.finishing_step_rate

    def select(
        self, candidates: List[Tuple[ComparableSale, float, Optional[float]]], limit: int
    ) -> List[Tuple[ComparableSale, float, Optional[float]]]:
        """Most recent ``limit`` comparables; unknown recency sorts last, ties keep input order."""
        ordered = sorted(
            candidates, key=lambda item: (item[2] is None, item[2] if item[2] is not None else 0.0)
        )
        return ordered[:limit]

    def adjust(
        self,
        context: "ValuationContext",
        comparable: ComparableSale,
        ppsm: float,
        months: Optional[float],
        age_rate: float,
        finishing_step: float,
    ) -> AdjustedComparable:
        subject = context.subject
        settings = context.settings.comparison
        market = context.snapshot.market_formula
        district = context.snapshot.require_district()

        age_adjustment = 0.0
        if comparable.age is not None:
            cap = settings.max_age_adjustment_ratio
            age_ratio = min(max(age_rate * (comparable.age - subject.age), -cap), cap)
            age_adjustment = ppsm * age_ratio

        finishing_adjustment = 0.0
        if comparable.finishing_level is not None:
            steps = subject.finishing_level.rank - comparable.finishing_level.rank
            finishing_adjustment = ppsm * finishing_step * steps

        floor_adjustment = orientation_adjustment = view_adjustment = 0.0
        if market is not None:
            if subject.floor is not None and comparable.floor is not None:
                floor_adjustment = ppsm * (
                    nearest_floor_adjustment(market, subject.floor)
                    - nearest_floor_adjustment(market, comparable.floor)
                )
            if subject.orientation and comparable.orientation:
                orientation_adjustment = ppsm * (
                    labelled_adjustment(market, "orientation", subject.orientation)
                    - labelled_adjustment(market, "orientation", comparable.orientation)
                )
            if subject.view and comparable.view:
                view_adjustment = ppsm * (
                    labelled_adjustment(market, "view", subject.view)
                    - labelled_adjustment(market, "view", comparable.view)
                )

        market_time_adjustment = 0.0
        if months is not None:
            annual_rate = settings.market_trend_annual_rates.get(district.market_trend, 0.0)
            market_time_adjustment = ppsm * annual_rate * months / 12.0

        adjustments = (
            age_adjustment,
            finishing_adjustment,
            floor_adjustment,
            orientation_adjustment,
            view_adjustment,
            market_time_adjustment,
        )
        adjusted_ppsm = ppsm + math.fsum(adjustments)
        if adjusted_ppsm <= 0:
            raise InconsistentComparableError(
                comparable.address or "unnamed",
                f"adjusted price per sqm {adjusted_ppsm:,.2f} is not positive",
            )

        gross = math.fsum(abs(a) for a in adjustments) / ppsm
        is_outlier = gross > settings.adjustment_threshold

        recency = 1.0 if months is None else 1.0 / (1.0 + months / settings.recency_scale_months)
        raw_weight = 1.0 / (1.0 + gross) * recency
        if is_outlier:
            raw_weight *= settings.outlier_weight_factor
            logger.debug(
                f"Comparable '{comparable.address}' gross adjustment {gross:.1%} above threshold; down-weighted"
            )

        return AdjustedComparable(
            address=comparable.address,
            sale_price=comparable.sale_price,
            area=comparable.area,
            price_per_sqm=ppsm,
            months_since_sale=months,
            age_adjustment=age_adjustment,
            finishing_adjustment=finishing_adjustment,
            floor_adjustment=floor_adjustment,
            orientation_adjustment=orientation_adjustment,
            view_adjustment=view_adjustment,
            market_time_adjustment=market_time_adjustment,
            adjusted_price_per_sqm=adjusted_ppsm,
            gross_adjustment_ratio=gross,
            is_outlier=is_outlier,
            raw_weight=raw_weight,
        )

    def calculate(self, context: "ValuationContext") -> SalesComparisonResult:
        subject = context.subject
        settings = context.settings.comparison
        supplied = subject.comparable_sales

        if not supplied:
            raise MissingDataError("No comparable sales supplied")
        context.snapshot.require_district()

        candidates = []
        excluded: List[str] = []
        errors: List[InconsistentComparableError] = []
        for comparable in supplied:
            try:
                ppsm = self.validate_comparable(comparable, settings.price_per_sqm_tolerance)
            except InconsistentComparableError as e:
                logger.warning(e.message)
                excluded.append(e.message)
                errors.append(e)
                continue
            candidates.append((comparable, ppsm, comparable.elapsed_months(context.as_of)))

        # Comparables whose adjusted price is not positive drop out and the
        # next most recent one takes their place.
        age_rate, finishing_step = self.rates(context)
        adjusted: List[AdjustedComparable] = []
        for comparable, ppsm, months in self.select(candidates, len(candidates)):
            if len(adjusted) == settings.max_comparables:
                break
            try:
                adjusted.append(self.adjust(context, comparable, ppsm, months, age_rate, finishing_step))
            except InconsistentComparableError as e:
                logger.warning(e.message)
                excluded.append(e.message)
                errors.append(e)

        if not adjusted:
            if len(errors) == 1:
                raise errors[0]
            raise InconsistentComparableError(
                ", ".join(e.address for e in errors),
                f"all {len(errors)} comparable sales are inconsistent",
            )

        total_weight = math.fsum(c.raw_weight for c in adjusted)
        adjusted = [c.model_copy(update={"weight": c.raw_weight / total_weight}) for c in adjusted]

        weighted_ppsm = math.fsum(c.weight * c.adjusted_price_per_sqm for c in adjusted)
        unweighted_ppsm = math.fsum(c.adjusted_price_per_sqm for c in adjusted) / len(adjusted)
        value = weighted_ppsm * subject.area

        logger.debug(
            f"Sales comparison: {len(adjusted)} of {len(supplied)} comparables, "
            f"weighted ppsm={weighted_ppsm:,.2f} (unweighted {unweighted_ppsm:,.2f})"
        )

        return SalesComparisonResult(
            value=value,
            comparables=tuple(adjusted),
            excluded=tuple(excluded),
            supplied_count=len(supplied),
            weighted_price_per_sqm=weighted_ppsm,
            unweighted_price_per_sqm=unweighted_ppsm,
            market_formula_found=context.snapshot.market_formula is not None,
            age_adjustment_rate=age_rate,
            finishing_step_rate=finishing_step,
        )
