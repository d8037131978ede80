# premium_engine/pricing/comparator.py
"""
Frequency comparator.

For each option:
- frequency_adjustment / adjustment_percentage: total premium vs the annual option
- savings_vs_monthly / savings_percentage_vs_monthly: grand total vs the monthly option

Returns new PaymentOption objects; the input list is left untouched.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Sequence

from premium_engine.pricing.calculator import ZERO, PaymentOption, money
from premium_engine.pricing.frequency import PaymentFrequency

HUNDRED = Decimal("100")


def _find(options: Sequence[PaymentOption], freq: PaymentFrequency) -> Optional[PaymentOption]:
    for o in options:
        if o.payment_frequency is freq:
            return o
    return None


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return money(part / whole * HUNDRED)


def compare_frequencies(options: Sequence[PaymentOption]) -> List[PaymentOption]:
    annual = _find(options, PaymentFrequency.ANNUAL)
    monthly = _find(options, PaymentFrequency.MONTHLY)

    out: List[PaymentOption] = []
    for o in options:
        changes = {}

        if annual is not None:
            adjustment = money(o.total_premium - annual.total_premium)
            changes["frequency_adjustment"] = adjustment
            changes["adjustment_percentage"] = percentage(adjustment, annual.total_premium)

        if monthly is not None:
            savings = money(monthly.grand_total - o.grand_total)
            changes["savings_vs_monthly"] = savings
            changes["savings_percentage_vs_monthly"] = percentage(savings, monthly.grand_total)

        out.append(replace(o, **changes))
    return out
