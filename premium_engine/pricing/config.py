# premium_engine/pricing/config.py
"""
Pricing configuration.

- currency: label used when formatting money for display
- min/max coverage: accepted coverage amount range (inclusive)
- min/max term: accepted term range in years (inclusive)
- recommendation: which option gets the recommended flag
    "lump_sum"     -> always the lump-sum option
    "lowest_total" -> lowest grand total (first in quote order on ties)

Out-of-range requests are rejected, never clamped to the bounds.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

RECOMMEND_LUMP_SUM = "lump_sum"
RECOMMEND_LOWEST_TOTAL = "lowest_total"
RECOMMENDATION_RULES = (RECOMMEND_LUMP_SUM, RECOMMEND_LOWEST_TOTAL)


@dataclass(frozen=True)
class PricingConfig:
    currency: str = "USD"

    min_coverage: Decimal = Decimal("50000")
    max_coverage: Decimal = Decimal("10000000")

    min_term_years: int = 1
    max_term_years: int = 100

    recommendation: str = RECOMMEND_LUMP_SUM

    def __post_init__(self) -> None:
        if self.min_coverage <= 0 or self.min_coverage > self.max_coverage:
            raise ValueError(
                f"Invalid coverage bounds: {self.min_coverage} .. {self.max_coverage}"
            )
        if self.min_term_years < 1 or self.min_term_years > self.max_term_years:
            raise ValueError(
                f"Invalid term bounds: {self.min_term_years} .. {self.max_term_years}"
            )
        if self.recommendation not in RECOMMENDATION_RULES:
            raise ValueError(
                f"Unknown recommendation rule: {self.recommendation!r}. "
                f"Expected one of: {RECOMMENDATION_RULES}"
            )


# env var -> (field, parser)
_ENV_OVERRIDES = {
    "QUOTE_CURRENCY": ("currency", str),
    "QUOTE_MIN_COVERAGE": ("min_coverage", Decimal),
    "QUOTE_MAX_COVERAGE": ("max_coverage", Decimal),
    "QUOTE_MIN_TERM": ("min_term_years", int),
    "QUOTE_MAX_TERM": ("max_term_years", int),
    "QUOTE_RECOMMENDATION": ("recommendation", str),
}


def merge_overrides(overrides: Dict[str, Any], base: Optional[PricingConfig] = None) -> PricingConfig:
    """
    Apply non-None overrides to a PricingConfig.
    Unknown keys raise KeyError.
    """
    cfg_dict = asdict(base or PricingConfig())
    for k, v in overrides.items():
        if k not in cfg_dict:
            raise KeyError(f"Unknown pricing config field: {k}")
        if v is not None:
            cfg_dict[k] = v
    return PricingConfig(**cfg_dict)


def pricing_config_from_env(base: Optional[PricingConfig] = None) -> PricingConfig:
    overrides: Dict[str, Any] = {}
    for env_key, (field, parse) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_key)
        if raw is None or raw.strip() == "":
            continue
        try:
            overrides[field] = parse(raw.strip())
        except (ValueError, ArithmeticError) as e:
            raise ValueError(f"Invalid value for {env_key}: {raw!r}") from e
    return merge_overrides(overrides, base)
