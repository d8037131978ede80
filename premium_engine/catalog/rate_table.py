# premium_engine/catalog/rate_table.py
"""
Rate-table loading.

Responsibilities:
- Read products and plans tables (CSV or Parquet) from a rate-table directory
- Fall back to downloading them from RATE_TABLE_S3_URI when configured
- Convert rows into immutable Product / Plan records (money as Decimal)

The tables are read as strings so no value passes through float.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import MISSING, dataclass, fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

import pandas as pd

from premium_engine.pricing.errors import NotFoundError
from premium_engine.pricing.rates import Plan, Product
from premium_engine.utils.config import get_aws_config, get_paths
from premium_engine.utils.io import find_table, read_text_table
from premium_engine.utils.rate_store import ensure_rate_table_downloaded

logger = logging.getLogger(__name__)

_TRUE = {"true", "1", "yes", "y"}
_FALSE = {"false", "0", "no", "n"}
_BLANK = {"", "nan", "none", "null"}


@dataclass(frozen=True)
class RateTable:
    products: Tuple[Product, ...]
    plans: Tuple[Plan, ...]
    source: str = ""

    def get_product(self, product_id: int, *, active_only: bool = True) -> Product:
        for p in self.products:
            if p.product_id == product_id and (p.is_active or not active_only):
                return p
        raise NotFoundError(f"Product {product_id} not found or inactive")

    def get_plan(self, plan_id: int) -> Plan:
        for p in self.plans:
            if p.plan_id == plan_id:
                return p
        raise NotFoundError(f"Plan with ID {plan_id} not found")

    def plans_for_product(self, product_id: int, *, active_only: bool = True) -> List[Plan]:
        """Plans of a product, cheapest coverage first."""
        plans = [
            p for p in self.plans
            if p.product_id == product_id and (p.is_active or not active_only)
        ]
        return sorted(plans, key=lambda p: (p.coverage_amount, p.plan_id))

    def featured_plans(self, limit: int = 6) -> List[Plan]:
        """
        Active featured or popular plans across all products:
        featured first, then popular, then display order.
        """
        plans = [p for p in self.plans if p.is_active and (p.is_featured or p.is_popular)]
        plans.sort(key=lambda p: (not p.is_featured, not p.is_popular, p.display_order, p.plan_id))
        return plans[:limit]

    def active_products(self, product_type: Optional[str] = None) -> List[Product]:
        out = [p for p in self.products if p.is_active]
        if product_type:
            out = [p for p in out if p.product_type.lower() == product_type.lower()]
        return out


# -----------------------------
# Row parsing
# -----------------------------
def _parse_bool(raw: str, column: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"Column {column}: expected a boolean, got {raw!r}")


def _parse_decimal(raw: str, column: str) -> Decimal:
    try:
        d = Decimal(raw.strip())
    except InvalidOperation:
        raise ValueError(f"Column {column}: expected a number, got {raw!r}") from None
    if not d.is_finite():
        raise ValueError(f"Column {column}: expected a finite number, got {raw!r}")
    return d


def _parse_int(raw: str, column: str) -> int:
    d = _parse_decimal(raw, column)
    if d != d.to_integral_value():
        raise ValueError(f"Column {column}: expected a whole number, got {raw!r}")
    return int(d)


def _parse_field(raw: str, column: str, type_hint: str) -> Any:
    if "Decimal" in type_hint:
        return _parse_decimal(raw, column)
    if "int" in type_hint:
        return _parse_int(raw, column)
    if "bool" in type_hint:
        return _parse_bool(raw, column)
    return "" if raw.strip().lower() in _BLANK else raw.strip()


def records_from_df(df: pd.DataFrame, record_type: Type[Any], table: str) -> List[Any]:
    """
    Convert a string-typed DataFrame into record_type instances.
    Columns named after required dataclass fields must be present; optional
    ones fall back to the dataclass defaults.
    """
    record_fields = fields(record_type)
    required = [
        f.name for f in record_fields
        if f.default is MISSING and f.default_factory is MISSING
    ]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"{table} table missing columns: {missing}. Found columns: {list(df.columns)}")

    known = {f.name: str(f.type) for f in record_fields}
    out = []
    for i, row in enumerate(df.to_dict(orient="records"), start=1):
        kwargs: Dict[str, Any] = {}
        for col, raw in row.items():
            if col not in known:
                continue
            # blank optional cell -> dataclass default
            if col not in required and str(raw).strip().lower() in _BLANK:
                continue
            try:
                kwargs[col] = _parse_field(str(raw), col, known[col])
            except ValueError as e:
                raise ValueError(f"{table} row {i}: {e}") from e
        out.append(record_type(**kwargs))
    return out


def _check_unique(ids: List[int], table: str) -> None:
    dupes = sorted(i for i, n in Counter(ids).items() if n > 1)
    if dupes:
        raise ValueError(f"{table} table has duplicate ids: {dupes}")


def build_rate_table(products_df: pd.DataFrame, plans_df: pd.DataFrame, source: str = "") -> RateTable:
    products: List[Product] = records_from_df(products_df, Product, "products")
    plans: List[Plan] = records_from_df(plans_df, Plan, "plans")

    _check_unique([p.product_id for p in products], "products")
    _check_unique([p.plan_id for p in plans], "plans")

    product_ids = {p.product_id for p in products}
    orphans = sorted({p.plan_id for p in plans if p.product_id not in product_ids})
    if orphans:
        raise ValueError(f"plans reference unknown products (plan ids): {orphans}")

    return RateTable(products=tuple(products), plans=tuple(plans), source=source)


def load_rate_table(rate_table_dir: Optional[str] = None) -> RateTable:
    """
    Load the rate table.

    If rate_table_dir is not provided:
      - Use RATE_TABLE_DIR (default: <repo>/data/rate_table)
      - If RATE_TABLE_S3_URI is set, download missing files into it first
    """
    if rate_table_dir:
        directory = Path(rate_table_dir)
    else:
        directory = get_paths().rate_table_dir
        aws = get_aws_config()
        if aws.enabled:
            ensure_rate_table_downloaded(
                rate_table_s3_uri=aws.rate_table_s3_uri,  # type: ignore[arg-type]
                local_dir=directory,
                aws_region=aws.region,
            )

    products_path = find_table(directory, "products")
    plans_path = find_table(directory, "plans")

    table = build_rate_table(
        read_text_table(products_path),
        read_text_table(plans_path),
        source=str(directory),
    )
    logger.info(
        "Loaded rate table from %s: %d products, %d plans",
        directory, len(table.products), len(table.plans),
    )
    return table


def rate_table_from_records(
    products: List[Mapping[str, Any]],
    plans: List[Mapping[str, Any]],
) -> RateTable:
    """Build a RateTable from in-memory rows (values stringified like a CSV read)."""
    return build_rate_table(_to_text_df(products), _to_text_df(plans), source="memory")


def _to_text_df(rows: List[Mapping[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(rows).fillna("").astype(str)
