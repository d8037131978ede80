# premium_engine/pricing/frequency.py
"""
Payment frequencies and their schedules.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from premium_engine.pricing.errors import QuoteValidationError


class PaymentFrequency(str, Enum):
    LUMP_SUM = "LumpSum"
    ANNUAL = "Annual"
    SEMI_ANNUAL = "SemiAnnual"
    QUARTERLY = "Quarterly"
    MONTHLY = "Monthly"

    @property
    def payments_per_year(self) -> int:
        return _PAYMENTS_PER_YEAR[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_lump_sum(self) -> bool:
        return self is PaymentFrequency.LUMP_SUM

    def number_of_payments(self, term_years: int) -> int:
        if self.is_lump_sum:
            return 1
        return self.payments_per_year * term_years


# Order in which quotes are listed: least to most frequent
QUOTE_ORDER = (
    PaymentFrequency.LUMP_SUM,
    PaymentFrequency.ANNUAL,
    PaymentFrequency.SEMI_ANNUAL,
    PaymentFrequency.QUARTERLY,
    PaymentFrequency.MONTHLY,
)

_PAYMENTS_PER_YEAR: Dict[PaymentFrequency, int] = {
    PaymentFrequency.LUMP_SUM: 1,
    PaymentFrequency.ANNUAL: 1,
    PaymentFrequency.SEMI_ANNUAL: 2,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.MONTHLY: 12,
}

_DISPLAY_NAMES: Dict[PaymentFrequency, str] = {
    PaymentFrequency.LUMP_SUM: "Lump Sum (One-time payment)",
    PaymentFrequency.ANNUAL: "Annual (Yearly)",
    PaymentFrequency.SEMI_ANNUAL: "Semi-Annual (Every 6 months)",
    PaymentFrequency.QUARTERLY: "Quarterly (Every 3 months)",
    PaymentFrequency.MONTHLY: "Monthly",
}

_ALIASES: Dict[str, PaymentFrequency] = {
    "lumpsum": PaymentFrequency.LUMP_SUM,
    "lump-sum": PaymentFrequency.LUMP_SUM,
    "onetime": PaymentFrequency.LUMP_SUM,
    "single": PaymentFrequency.LUMP_SUM,
    "annual": PaymentFrequency.ANNUAL,
    "yearly": PaymentFrequency.ANNUAL,
    "semiannual": PaymentFrequency.SEMI_ANNUAL,
    "semi-annual": PaymentFrequency.SEMI_ANNUAL,
    "halfyearly": PaymentFrequency.SEMI_ANNUAL,
    "quarterly": PaymentFrequency.QUARTERLY,
    "monthly": PaymentFrequency.MONTHLY,
}


def parse_frequency(value: Optional[str]) -> PaymentFrequency:
    """
    Parse a frequency label (case-insensitive, common aliases accepted).
    Unknown labels raise QuoteValidationError instead of defaulting.
    """
    key = (value or "").strip().lower().replace(" ", "").replace("_", "")
    try:
        return _ALIASES[key]
    except KeyError:
        raise QuoteValidationError(
            f"Unknown payment frequency: {value!r}. "
            f"Expected one of: {', '.join(f.value for f in QUOTE_ORDER)}"
        ) from None
