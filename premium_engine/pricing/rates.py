# premium_engine/pricing/rates.py
"""
Rate-table records consumed by the calculator.

Product carries the fee schedule, Plan carries base premiums per frequency and
the multiplier tables. Both are immutable reference data.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

# (low, high, Plan field) inclusive age bands
AGE_BANDS = (
    (18, 25, "age_multiplier_18_25"),
    (26, 35, "age_multiplier_26_35"),
    (36, 45, "age_multiplier_36_45"),
    (46, 55, "age_multiplier_46_55"),
    (56, 65, "age_multiplier_56_65"),
)


@dataclass(frozen=True)
class Product:
    product_id: int
    product_code: str
    product_name: str
    product_type: str
    description: str = ""

    processing_fee: Decimal = Decimal("0")
    policy_issuance_fee: Decimal = Decimal("0")
    medical_checkup_fee: Decimal = Decimal("0")
    admin_fee: Decimal = Decimal("0")  # per year

    is_active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Plan:
    plan_id: int
    product_id: int
    plan_code: str
    plan_name: str
    coverage_amount: Decimal
    term_years: int

    base_premium_monthly: Decimal
    base_premium_quarterly: Decimal
    base_premium_semi_annual: Decimal
    base_premium_annual: Decimal
    base_premium_lump_sum: Decimal

    description: str = ""

    accidental_death_benefit: Optional[Decimal] = None
    disability_benefit: Optional[Decimal] = None
    critical_illness_benefit: Optional[Decimal] = None
    includes_maternity_benefit: bool = False
    includes_rider_options: bool = False

    age_multiplier_18_25: Decimal = Decimal("0.8")
    age_multiplier_26_35: Decimal = Decimal("1.0")
    age_multiplier_36_45: Decimal = Decimal("1.3")
    age_multiplier_46_55: Decimal = Decimal("1.8")
    age_multiplier_56_65: Decimal = Decimal("2.5")

    health_excellent_multiplier: Decimal = Decimal("0.9")
    health_good_multiplier: Decimal = Decimal("1.0")
    health_fair_multiplier: Decimal = Decimal("1.2")
    health_poor_multiplier: Decimal = Decimal("1.5")

    male_multiplier: Decimal = Decimal("1.1")
    female_multiplier: Decimal = Decimal("1.0")

    occupation_low_risk_multiplier: Decimal = Decimal("1.0")
    occupation_medium_risk_multiplier: Decimal = Decimal("1.3")
    occupation_high_risk_multiplier: Decimal = Decimal("1.8")

    min_age: int = 18
    max_age: int = 65
    requires_medical_exam: bool = False
    is_active: bool = True

    # Catalog presentation
    display_order: int = 0
    is_featured: bool = False
    is_popular: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Applicant:
    """Optional risk attributes. A missing attribute contributes a factor of 1."""

    age: Optional[int] = None
    gender: Optional[str] = None
    health_status: Optional[str] = None
    occupation_risk: Optional[str] = None
