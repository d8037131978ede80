# premium_engine/catalog/service.py
"""
End-to-end quoting service.

Single source of truth:
- quote request -> product + plans from the rate table -> payment options
- plan + applicant + frequency -> single plan premium
- payment options -> display-ready comparison rows
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from premium_engine.catalog.rate_table import RateTable, load_rate_table
from premium_engine.pricing.calculator import (
    AppliedFactors,
    calculate_plan_premium,
    resolve_factors,
)
from premium_engine.pricing.config import PricingConfig, pricing_config_from_env
from premium_engine.pricing.errors import QuoteValidationError
from premium_engine.pricing.frequency import PaymentFrequency, parse_frequency
from premium_engine.pricing.quote import QuoteRequest, QuoteResult, generate_quote
from premium_engine.pricing.rates import Applicant, Plan

logger = logging.getLogger(__name__)

# In-process cache (useful for FastAPI startup + AWS Lambda warm invocations)
_CACHED_RATE_TABLE: Optional[RateTable] = None


def get_rate_table(rate_table_dir: Optional[str] = None, force_reload: bool = False) -> RateTable:
    """
    Load and cache the rate table.
    Asking for a directory other than the cached table's source reloads it.
    """
    global _CACHED_RATE_TABLE
    stale = (
        _CACHED_RATE_TABLE is None
        or (rate_table_dir is not None and str(Path(rate_table_dir)) != _CACHED_RATE_TABLE.source)
    )
    if force_reload or stale:
        _CACHED_RATE_TABLE = load_rate_table(rate_table_dir=rate_table_dir)
    return _CACHED_RATE_TABLE


def set_rate_table(table: Optional[RateTable]) -> None:
    """Replace (or clear with None) the cached rate table."""
    global _CACHED_RATE_TABLE
    _CACHED_RATE_TABLE = table


def quote(
    req: QuoteRequest,
    *,
    table: Optional[RateTable] = None,
    cfg: Optional[PricingConfig] = None,
) -> QuoteResult:
    """
    Full quote generation:
      request -> product/plans lookup -> generate_quote
    """
    table = table or get_rate_table()
    cfg = cfg or pricing_config_from_env()

    product = table.get_product(req.product_id)
    plans = table.plans_for_product(product.product_id)

    result = generate_quote(product, plans, req, cfg=cfg)
    logger.info(
        "Quoted product %s plan %s coverage %s term %sy: %d options",
        result.product_id, result.plan_code, result.coverage_amount,
        result.term_years, len(result.payment_options),
    )
    return result


# -----------------------------
# Comparison table
# -----------------------------
def format_money(amount: Decimal, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def comparison_rows(result: QuoteResult) -> List[Dict[str, Any]]:
    rows = []
    for o in result.payment_options:
        if o.payment_frequency is PaymentFrequency.MONTHLY:
            savings = "Baseline"
        else:
            savings = (
                f"{format_money(o.savings_vs_monthly, result.currency)} "
                f"({o.savings_percentage_vs_monthly:.1f}%)"
            )
        rows.append(
            {
                "payment_frequency": o.payment_frequency.value,
                "display_name": o.display_name,
                "total_premium": format_money(o.total_premium, result.currency),
                "payment_amount": format_money(o.payment_per_period, result.currency),
                "number_of_payments": o.number_of_payments,
                "fees": format_money(o.one_time_fees, result.currency),
                "grand_total": format_money(o.grand_total, result.currency),
                "savings": savings,
                "recommended": o.is_recommended,
            }
        )
    return rows


# -----------------------------
# Single plan premium
# -----------------------------
@dataclass(frozen=True)
class PlanPremium:
    plan: Plan
    payment_frequency: PaymentFrequency
    calculated_premium: Decimal
    factors: AppliedFactors


def calculate_for_plan(
    plan_id: int,
    applicant: Applicant,
    payment_frequency: str = "Annual",
    *,
    table: Optional[RateTable] = None,
) -> PlanPremium:
    """
    Premium per period for one plan at its own coverage and term.
    Age is required here because plan eligibility depends on it.
    """
    table = table or get_rate_table()
    plan = table.get_plan(plan_id)
    freq = parse_frequency(payment_frequency)

    if applicant.age is None:
        raise QuoteValidationError("Age is required to calculate a plan premium")

    factors = resolve_factors(plan, applicant)
    premium = calculate_plan_premium(plan, freq, factors)
    logger.info("Plan %s premium (%s): %s", plan.plan_code, freq.value, premium)
    return PlanPremium(plan=plan, payment_frequency=freq, calculated_premium=premium, factors=factors)
