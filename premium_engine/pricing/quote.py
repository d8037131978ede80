# premium_engine/pricing/quote.py
"""
Quote generation.

Provides:
- request validation against PricingConfig bounds
- reference plan selection for a product
- recommendation of exactly one payment option
- QuoteResult output object

Flow:
  QuoteRequest + product + plans -> validate -> select plan
  -> calculator (one option per frequency) -> comparator -> recommend
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence

from premium_engine.pricing.calculator import PaymentOption, build_payment_options
from premium_engine.pricing.comparator import compare_frequencies
from premium_engine.pricing.config import RECOMMEND_LUMP_SUM, PricingConfig
from premium_engine.pricing.errors import QuoteValidationError
from premium_engine.pricing.frequency import PaymentFrequency, parse_frequency
from premium_engine.pricing.rates import Applicant, Plan, Product


@dataclass(frozen=True)
class QuoteRequest:
    product_id: int
    coverage_amount: Decimal
    term_years: int
    plan_id: Optional[int] = None
    payment_frequency: Optional[str] = None
    applicant: Optional[Applicant] = None


@dataclass(frozen=True)
class QuoteResult:
    product_id: int
    product_name: str
    plan_id: int
    plan_code: str
    plan_name: str
    coverage_amount: Decimal
    term_years: int
    currency: str
    payment_options: List[PaymentOption] = field(default_factory=list)

    @property
    def recommended(self) -> Optional[PaymentOption]:
        return next((o for o in self.payment_options if o.is_recommended), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "plan_id": self.plan_id,
            "plan_code": self.plan_code,
            "plan_name": self.plan_name,
            "coverage_amount": self.coverage_amount,
            "term_years": self.term_years,
            "currency": self.currency,
            "payment_options": [o.to_dict() for o in self.payment_options],
        }


def to_decimal(value: Any, name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise QuoteValidationError(f"{name} is required and must be a number")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise QuoteValidationError(f"{name} must be a number, got {value!r}") from None
    if not d.is_finite():
        raise QuoteValidationError(f"{name} must be a finite number")
    return d


def validate_request(req: QuoteRequest, cfg: PricingConfig) -> QuoteRequest:
    """
    Reject missing or out-of-range values. Returns a normalised copy
    (coverage as Decimal).
    """
    if isinstance(req.product_id, bool) or not isinstance(req.product_id, int) or req.product_id < 1:
        raise QuoteValidationError(f"Product id must be a positive integer, got {req.product_id!r}")

    if isinstance(req.term_years, bool) or not isinstance(req.term_years, int):
        raise QuoteValidationError(f"Term must be a whole number of years, got {req.term_years!r}")
    if not cfg.min_term_years <= req.term_years <= cfg.max_term_years:
        raise QuoteValidationError(
            f"Term must be between {cfg.min_term_years} and {cfg.max_term_years} years"
        )

    coverage = to_decimal(req.coverage_amount, "Coverage amount")
    if not cfg.min_coverage <= coverage <= cfg.max_coverage:
        raise QuoteValidationError(
            f"Coverage amount must be between {cfg.min_coverage:,} and {cfg.max_coverage:,}"
        )

    if req.plan_id is not None and (isinstance(req.plan_id, bool) or req.plan_id < 1):
        raise QuoteValidationError(f"Plan id must be a positive integer, got {req.plan_id!r}")

    if req.payment_frequency is not None:
        parse_frequency(req.payment_frequency)

    return replace(req, coverage_amount=coverage)


def select_plan(
    plans: Sequence[Plan],
    coverage_amount: Decimal,
    plan_id: Optional[int] = None,
) -> Plan:
    """
    Pick the reference plan for a quote.

    - plan_id given: that plan (must be among `plans`)
    - otherwise: the largest coverage not exceeding the request,
      or the smallest plan if the request is below all of them
    """
    active = [p for p in plans if p.is_active]
    if not active:
        raise QuoteValidationError("Product has no active plans to quote")

    if plan_id is not None:
        for p in active:
            if p.plan_id == plan_id:
                return p
        raise QuoteValidationError(f"Plan {plan_id} is not an active plan of this product")

    ordered = sorted(active, key=lambda p: (p.coverage_amount, p.plan_id))
    chosen = ordered[0]
    for p in ordered:
        if p.coverage_amount <= coverage_amount:
            chosen = p
    return chosen


def recommend(options: Sequence[PaymentOption], cfg: PricingConfig) -> List[PaymentOption]:
    """Flag exactly one option as recommended."""
    if not options:
        return []

    if cfg.recommendation == RECOMMEND_LUMP_SUM:
        pick = next((o for o in options if o.is_lump_sum), None)
        if pick is not None:
            reason = (
                f"Best value - Save {pick.savings_percentage_vs_monthly:.1f}% "
                "compared to monthly payments"
            )
        else:
            pick = min(options, key=lambda o: o.grand_total)
            reason = "Lowest total cost"
    else:
        # min() keeps the first of equal totals
        pick = min(options, key=lambda o: o.grand_total)
        if pick.payment_frequency is PaymentFrequency.MONTHLY:
            reason = "Lowest total cost"
        else:
            reason = (
                f"Lowest total cost - Save {pick.savings_percentage_vs_monthly:.1f}% "
                "compared to monthly payments"
            )

    return [
        replace(o, is_recommended=True, recommendation_reason=reason) if o is pick else o
        for o in options
    ]


def generate_quote(
    product: Product,
    plans: Sequence[Plan],
    req: QuoteRequest,
    cfg: Optional[PricingConfig] = None,
) -> QuoteResult:
    """
    Generate payment options for every frequency (or just the requested one).
    Pure: no I/O, identical inputs give identical output.
    """
    cfg = cfg or PricingConfig()
    req = validate_request(req, cfg)

    if req.product_id != product.product_id:
        raise QuoteValidationError(
            f"Request product {req.product_id} does not match product {product.product_id}"
        )

    plan = select_plan(plans, req.coverage_amount, req.plan_id)

    options = build_payment_options(
        product,
        plan,
        coverage_amount=req.coverage_amount,
        term_years=req.term_years,
        applicant=req.applicant,
    )
    options = recommend(compare_frequencies(options), cfg)

    if req.payment_frequency is not None:
        wanted = parse_frequency(req.payment_frequency)
        options = [o for o in options if o.payment_frequency is wanted]

    return QuoteResult(
        product_id=product.product_id,
        product_name=product.product_name,
        plan_id=plan.plan_id,
        plan_code=plan.plan_code,
        plan_name=plan.plan_name,
        coverage_amount=req.coverage_amount,
        term_years=req.term_years,
        currency=cfg.currency,
        payment_options=options,
    )
