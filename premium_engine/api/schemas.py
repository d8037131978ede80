# premium_engine/api/schemas.py
"""
HTTP request/response models.

JSON keys are camelCase; PascalCase request keys (ProductId, TermYears, ...)
are accepted too. Money goes out as JSON numbers.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from premium_engine.catalog.service import PlanPremium, comparison_rows
from premium_engine.pricing.calculator import PaymentOption
from premium_engine.pricing.quote import QuoteRequest, QuoteResult
from premium_engine.pricing.rates import Applicant, Plan, Product


def _num(v: Optional[Decimal]) -> Optional[float]:
    return None if v is None else float(v)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelRequest(CamelModel):
    @model_validator(mode="before")
    @classmethod
    def _accept_pascal_case(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                (k[:1].lower() + k[1:] if isinstance(k, str) else k): v
                for k, v in data.items()
            }
        return data


# -----------------------------
# Requests
# -----------------------------
class ApplicantInput(CamelRequest):
    age: Optional[int] = None
    gender: Optional[str] = None
    health_status: Optional[str] = None
    occupation_risk: Optional[str] = None

    def to_applicant(self) -> Applicant:
        return Applicant(
            age=self.age,
            gender=self.gender,
            health_status=self.health_status,
            occupation_risk=self.occupation_risk,
        )


class PremiumQuoteRequest(CamelRequest):
    product_id: int
    term_years: int
    coverage_amount: Decimal
    plan_id: Optional[int] = None
    payment_frequency: Optional[str] = None
    applicant: Optional[ApplicantInput] = None

    def to_quote_request(self) -> QuoteRequest:
        return QuoteRequest(
            product_id=self.product_id,
            coverage_amount=self.coverage_amount,
            term_years=self.term_years,
            plan_id=self.plan_id,
            payment_frequency=self.payment_frequency,
            applicant=self.applicant.to_applicant() if self.applicant else None,
        )


class PlanCalculationRequest(CamelRequest):
    plan_id: int
    age: int
    gender: str = "Male"
    health_status: str = "Good"
    occupation_risk: str = "Low"
    payment_frequency: str = "Annual"

    def to_applicant(self) -> Applicant:
        return Applicant(
            age=self.age,
            gender=self.gender,
            health_status=self.health_status,
            occupation_risk=self.occupation_risk,
        )


# -----------------------------
# Responses
# -----------------------------
class PaymentOptionOut(CamelModel):
    payment_frequency: str
    display_name: str
    is_lump_sum: bool

    base_premium_per_year: float
    total_premium_before_adjustment: float
    frequency_adjustment: float
    adjustment_percentage: float
    total_premium: float

    payment_per_period: float
    number_of_payments: int

    processing_fee: float
    policy_issuance_fee: float
    medical_checkup_fee: float
    admin_fee_per_year: float
    total_admin_fees: float
    one_time_fees: float

    grand_total: float

    savings_vs_monthly: float
    savings_percentage_vs_monthly: float

    is_recommended: bool
    recommendation_reason: Optional[str] = None

    @classmethod
    def from_option(cls, o: PaymentOption) -> "PaymentOptionOut":
        d = o.to_dict()
        return cls(**{k: (_num(v) if isinstance(v, Decimal) else v) for k, v in d.items()})


class PremiumQuoteResponse(CamelModel):
    product_id: int
    product_name: str
    plan_id: int
    plan_code: str
    plan_name: str
    coverage_amount: float
    term_years: int
    currency: str
    payment_options: List[PaymentOptionOut] = Field(default_factory=list)

    @classmethod
    def from_result(cls, r: QuoteResult) -> "PremiumQuoteResponse":
        return cls(
            product_id=r.product_id,
            product_name=r.product_name,
            plan_id=r.plan_id,
            plan_code=r.plan_code,
            plan_name=r.plan_name,
            coverage_amount=float(r.coverage_amount),
            term_years=r.term_years,
            currency=r.currency,
            payment_options=[PaymentOptionOut.from_option(o) for o in r.payment_options],
        )


class ComparisonRow(CamelModel):
    payment_frequency: str
    display_name: str
    total_premium: str
    payment_amount: str
    number_of_payments: int
    fees: str
    grand_total: str
    savings: str
    recommended: bool


class ProductInfo(CamelModel):
    product_id: int
    product_name: str
    plan_code: str
    coverage_amount: float
    term_years: int


class CompareResponse(CamelModel):
    product_info: ProductInfo
    comparison: List[ComparisonRow]

    @classmethod
    def from_result(cls, r: QuoteResult) -> "CompareResponse":
        return cls(
            product_info=ProductInfo(
                product_id=r.product_id,
                product_name=r.product_name,
                plan_code=r.plan_code,
                coverage_amount=float(r.coverage_amount),
                term_years=r.term_years,
            ),
            comparison=[ComparisonRow(**row) for row in comparison_rows(r)],
        )


class ProductOut(CamelModel):
    id: int
    product_code: str
    product_name: str
    product_type: str
    description: str
    processing_fee: float
    policy_issuance_fee: float
    medical_checkup_fee: float
    admin_fee: float

    @classmethod
    def from_product(cls, p: Product) -> "ProductOut":
        return cls(
            id=p.product_id,
            product_code=p.product_code,
            product_name=p.product_name,
            product_type=p.product_type,
            description=p.description,
            processing_fee=float(p.processing_fee),
            policy_issuance_fee=float(p.policy_issuance_fee),
            medical_checkup_fee=float(p.medical_checkup_fee),
            admin_fee=float(p.admin_fee),
        )


class PlanBenefits(CamelModel):
    accidental_death_benefit: Optional[float] = None
    disability_benefit: Optional[float] = None
    critical_illness_benefit: Optional[float] = None
    includes_maternity_benefit: bool = False
    includes_rider_options: bool = False


class PlanOut(CamelModel):
    id: int
    product_id: int
    plan_code: str
    plan_name: str
    description: str
    coverage_amount: float
    term_years: int
    base_premiums: Dict[str, float]
    min_age: int
    max_age: int
    requires_medical_exam: bool
    benefits: PlanBenefits
    display_order: int = 0
    is_featured: bool = False
    is_popular: bool = False

    @classmethod
    def from_plan(cls, p: Plan) -> "PlanOut":
        return cls(
            id=p.plan_id,
            product_id=p.product_id,
            plan_code=p.plan_code,
            plan_name=p.plan_name,
            description=p.description,
            coverage_amount=float(p.coverage_amount),
            term_years=p.term_years,
            base_premiums={
                "Monthly": float(p.base_premium_monthly),
                "Quarterly": float(p.base_premium_quarterly),
                "SemiAnnual": float(p.base_premium_semi_annual),
                "Annual": float(p.base_premium_annual),
                "LumpSum": float(p.base_premium_lump_sum),
            },
            min_age=p.min_age,
            max_age=p.max_age,
            requires_medical_exam=p.requires_medical_exam,
            benefits=benefits_of(p),
            display_order=p.display_order,
            is_featured=p.is_featured,
            is_popular=p.is_popular,
        )


def benefits_of(p: Plan) -> PlanBenefits:
    return PlanBenefits(
        accidental_death_benefit=_num(p.accidental_death_benefit),
        disability_benefit=_num(p.disability_benefit),
        critical_illness_benefit=_num(p.critical_illness_benefit),
        includes_maternity_benefit=p.includes_maternity_benefit,
        includes_rider_options=p.includes_rider_options,
    )


class AppliedFactorsOut(CamelModel):
    age_factor: float
    gender_factor: float
    health_factor: float
    occupation_factor: float
    combined_factor: float


class PlanCalculationResponse(CamelModel):
    plan_id: int
    plan_name: str
    plan_code: str
    description: str
    coverage_amount: float
    term_years: int
    base_premium_annual: float
    calculated_premium: float
    payment_frequency: str
    requires_medical_exam: bool
    benefits: PlanBenefits
    applied_factors: AppliedFactorsOut

    @classmethod
    def from_plan_premium(cls, pp: PlanPremium) -> "PlanCalculationResponse":
        p = pp.plan
        return cls(
            plan_id=p.plan_id,
            plan_name=p.plan_name,
            plan_code=p.plan_code,
            description=p.description,
            coverage_amount=float(p.coverage_amount),
            term_years=p.term_years,
            base_premium_annual=float(p.base_premium_annual),
            calculated_premium=float(pp.calculated_premium),
            payment_frequency=pp.payment_frequency.value,
            requires_medical_exam=p.requires_medical_exam,
            benefits=benefits_of(p),
            applied_factors=AppliedFactorsOut(
                age_factor=float(pp.factors.age),
                gender_factor=float(pp.factors.gender),
                health_factor=float(pp.factors.health),
                occupation_factor=float(pp.factors.occupation),
                combined_factor=float(pp.factors.combined),
            ),
        )
