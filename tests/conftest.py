from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from premium_engine.api.app import app
from premium_engine.catalog.rate_table import RateTable, load_rate_table, rate_table_from_records
from premium_engine.catalog.service import set_rate_table
from premium_engine.pricing.config import PricingConfig
from premium_engine.utils.config import get_project_root

RATE_TABLE_DIR = get_project_root() / "data" / "rate_table"


@pytest.fixture(scope="session")
def rate_table() -> RateTable:
    """The shipped rate table (12 products, 48 plans)."""
    return load_rate_table(str(RATE_TABLE_DIR))


@pytest.fixture()
def cfg() -> PricingConfig:
    return PricingConfig()


@pytest.fixture()
def product_1(rate_table):
    return rate_table.get_product(1)


@pytest.fixture()
def plans_1(rate_table):
    return rate_table.plans_for_product(1)


@pytest.fixture()
def basic_plan(rate_table):
    return rate_table.get_plan(1)


@pytest.fixture()
def client(rate_table):
    set_rate_table(rate_table)
    yield TestClient(app)
    set_rate_table(None)


def product_row(**overrides):
    row = {
        "product_id": 1,
        "product_code": "TEST-001",
        "product_name": "Test Product",
        "product_type": "Life",
        "processing_fee": "10.00",
        "policy_issuance_fee": "20.00",
        "medical_checkup_fee": "100.00",
        "admin_fee": "5.00",
        "is_active": "true",
    }
    row.update(overrides)
    return row


def plan_row(**overrides):
    row = {
        "plan_id": 1,
        "product_id": 1,
        "plan_code": "TEST-001-BASIC",
        "plan_name": "Test Basic",
        "coverage_amount": "100000",
        "term_years": "10",
        "base_premium_monthly": "10.00",
        "base_premium_quarterly": "29.00",
        "base_premium_semi_annual": "57.00",
        "base_premium_annual": "110.00",
        "base_premium_lump_sum": "1000.00",
        "requires_medical_exam": "false",
    }
    row.update(overrides)
    return row


@pytest.fixture()
def small_table() -> RateTable:
    return rate_table_from_records(
        [product_row()],
        [
            plan_row(),
            plan_row(
                plan_id=2,
                plan_code="TEST-001-PLUS",
                plan_name="Test Plus",
                coverage_amount="400000",
                base_premium_monthly="30.00",
                base_premium_quarterly="0",
                base_premium_semi_annual="0",
                base_premium_annual="330.00",
                base_premium_lump_sum="0",
                requires_medical_exam="true",
            ),
        ],
    )
