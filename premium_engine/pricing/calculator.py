# premium_engine/pricing/calculator.py
"""
Premium calculator.

Provides:
- risk multiplier lookup (age band, gender, health status, occupation risk)
- base premium selection per payment frequency (with fallbacks)
- fee breakdown for a product/plan/term
- one PaymentOption per frequency for a coverage amount and term

Formula per frequency:
  payment_per_period = base_premium[frequency] * risk_factor * coverage_scale
  (lump sum is additionally scaled by term_years / plan.term_years)
  total_premium      = payment_per_period * number_of_payments
  grand_total        = total_premium + one_time_fees

payment_per_period is rounded to cents before the total is derived from it, so
payment_per_period * number_of_payments == total_premium exactly.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from premium_engine.pricing.errors import QuoteValidationError
from premium_engine.pricing.frequency import QUOTE_ORDER, PaymentFrequency
from premium_engine.pricing.rates import AGE_BANDS, Applicant, Plan, Product

CENT = Decimal("0.01")
ONE = Decimal("1")
ZERO = Decimal("0")

GENDERS = {"male": "male", "m": "male", "female": "female", "f": "female"}
HEALTH_STATUSES = ("excellent", "good", "fair", "poor")
OCCUPATION_RISKS = ("low", "medium", "high")


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AppliedFactors:
    age: Decimal = ONE
    gender: Decimal = ONE
    health: Decimal = ONE
    occupation: Decimal = ONE

    @property
    def combined(self) -> Decimal:
        return self.age * self.gender * self.health * self.occupation

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["combined"] = self.combined
        return d


@dataclass(frozen=True)
class FeeBreakdown:
    processing_fee: Decimal
    policy_issuance_fee: Decimal
    medical_checkup_fee: Decimal
    admin_fee_per_year: Decimal
    total_admin_fees: Decimal

    @property
    def one_time_fees(self) -> Decimal:
        # admin fees for the whole term are collected with the policy fees
        return money(
            self.processing_fee
            + self.policy_issuance_fee
            + self.medical_checkup_fee
            + self.total_admin_fees
        )


@dataclass(frozen=True)
class PaymentOption:
    payment_frequency: PaymentFrequency
    display_name: str
    is_lump_sum: bool

    base_premium_per_year: Decimal
    total_premium_before_adjustment: Decimal
    total_premium: Decimal

    payment_per_period: Decimal
    number_of_payments: int

    processing_fee: Decimal
    policy_issuance_fee: Decimal
    medical_checkup_fee: Decimal
    admin_fee_per_year: Decimal
    total_admin_fees: Decimal
    one_time_fees: Decimal

    grand_total: Decimal

    # Filled in by the comparator
    frequency_adjustment: Decimal = ZERO
    adjustment_percentage: Decimal = ZERO
    savings_vs_monthly: Decimal = ZERO
    savings_percentage_vs_monthly: Decimal = ZERO

    is_recommended: bool = False
    recommendation_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["payment_frequency"] = self.payment_frequency.value
        return d


# -----------------------------
# Multipliers
# -----------------------------
def age_multiplier(plan: Plan, age: Optional[int]) -> Decimal:
    if age is None:
        return ONE
    if age < plan.min_age or age > plan.max_age:
        raise QuoteValidationError(
            f"Age must be between {plan.min_age} and {plan.max_age} for plan {plan.plan_code}"
        )
    for low, high, field in AGE_BANDS:
        if low <= age <= high:
            return getattr(plan, field)
    return ONE


def gender_multiplier(plan: Plan, gender: Optional[str]) -> Decimal:
    if gender is None:
        return ONE
    key = GENDERS.get(gender.strip().lower())
    if key is None:
        raise QuoteValidationError(f"Unknown gender: {gender!r}. Expected male or female")
    return plan.male_multiplier if key == "male" else plan.female_multiplier


def health_multiplier(plan: Plan, health_status: Optional[str]) -> Decimal:
    if health_status is None:
        return ONE
    key = health_status.strip().lower()
    if key not in HEALTH_STATUSES:
        raise QuoteValidationError(
            f"Unknown health status: {health_status!r}. Expected one of: {', '.join(HEALTH_STATUSES)}"
        )
    return getattr(plan, f"health_{key}_multiplier")


def occupation_multiplier(plan: Plan, occupation_risk: Optional[str]) -> Decimal:
    if occupation_risk is None:
        return ONE
    key = occupation_risk.strip().lower()
    if key not in OCCUPATION_RISKS:
        raise QuoteValidationError(
            f"Unknown occupation risk: {occupation_risk!r}. Expected one of: {', '.join(OCCUPATION_RISKS)}"
        )
    return getattr(plan, f"occupation_{key}_risk_multiplier")


def resolve_factors(plan: Plan, applicant: Optional[Applicant] = None) -> AppliedFactors:
    a = applicant or Applicant()
    return AppliedFactors(
        age=age_multiplier(plan, a.age),
        gender=gender_multiplier(plan, a.gender),
        health=health_multiplier(plan, a.health_status),
        occupation=occupation_multiplier(plan, a.occupation_risk),
    )


# -----------------------------
# Premiums
# -----------------------------
def base_premium_for(plan: Plan, frequency: PaymentFrequency) -> Decimal:
    """
    Base premium for one payment period of the plan's reference coverage.
    Zero table entries fall back to a derived value.
    """
    if frequency is PaymentFrequency.MONTHLY:
        return plan.base_premium_monthly
    if frequency is PaymentFrequency.QUARTERLY:
        if plan.base_premium_quarterly > 0:
            return plan.base_premium_quarterly
        return plan.base_premium_monthly * 3
    if frequency is PaymentFrequency.SEMI_ANNUAL:
        if plan.base_premium_semi_annual > 0:
            return plan.base_premium_semi_annual
        return plan.base_premium_monthly * 6
    if frequency is PaymentFrequency.LUMP_SUM:
        if plan.base_premium_lump_sum > 0:
            return plan.base_premium_lump_sum
        return plan.base_premium_annual * plan.term_years
    return plan.base_premium_annual


def calculate_plan_premium(
    plan: Plan,
    frequency: PaymentFrequency,
    factors: Optional[AppliedFactors] = None,
) -> Decimal:
    """Premium per period for the plan's own coverage and term."""
    factors = factors or AppliedFactors()
    return money(base_premium_for(plan, frequency) * factors.combined)


def payment_per_period(
    plan: Plan,
    frequency: PaymentFrequency,
    factors: AppliedFactors,
    coverage_amount: Decimal,
    term_years: int,
) -> Decimal:
    scale = coverage_amount / plan.coverage_amount
    raw = base_premium_for(plan, frequency) * factors.combined * scale
    if frequency.is_lump_sum:
        raw = raw * Decimal(term_years) / Decimal(plan.term_years)
    return money(raw)


def compute_fees(product: Product, plan: Plan, term_years: int) -> FeeBreakdown:
    medical = product.medical_checkup_fee if plan.requires_medical_exam else ZERO
    return FeeBreakdown(
        processing_fee=product.processing_fee,
        policy_issuance_fee=product.policy_issuance_fee,
        medical_checkup_fee=medical,
        admin_fee_per_year=product.admin_fee,
        total_admin_fees=money(product.admin_fee * term_years),
    )


def build_payment_options(
    product: Product,
    plan: Plan,
    coverage_amount: Decimal,
    term_years: int,
    applicant: Optional[Applicant] = None,
    frequencies: Iterable[PaymentFrequency] = QUOTE_ORDER,
) -> List[PaymentOption]:
    """
    One PaymentOption per frequency (comparison fields left at zero).
    """
    if coverage_amount <= 0:
        raise QuoteValidationError("Coverage amount must be positive")
    if term_years < 1:
        raise QuoteValidationError("Term must be at least 1 year")
    if plan.coverage_amount <= 0 or plan.term_years < 1:
        raise QuoteValidationError(f"Plan {plan.plan_code} has no usable reference coverage/term")

    factors = resolve_factors(plan, applicant)
    fees = compute_fees(product, plan, term_years)

    annual_per_year = payment_per_period(plan, PaymentFrequency.ANNUAL, factors, coverage_amount, term_years)
    annual_total = money(annual_per_year * term_years)

    options: List[PaymentOption] = []
    for freq in frequencies:
        per_period = payment_per_period(plan, freq, factors, coverage_amount, term_years)
        n = freq.number_of_payments(term_years)
        total = money(per_period * n)
        options.append(
            PaymentOption(
                payment_frequency=freq,
                display_name=freq.display_name,
                is_lump_sum=freq.is_lump_sum,
                base_premium_per_year=annual_per_year,
                total_premium_before_adjustment=annual_total,
                total_premium=total,
                payment_per_period=per_period,
                number_of_payments=n,
                processing_fee=fees.processing_fee,
                policy_issuance_fee=fees.policy_issuance_fee,
                medical_checkup_fee=fees.medical_checkup_fee,
                admin_fee_per_year=fees.admin_fee_per_year,
                total_admin_fees=fees.total_admin_fees,
                one_time_fees=fees.one_time_fees,
                grand_total=money(total + fees.one_time_fees),
            )
        )
    return options
