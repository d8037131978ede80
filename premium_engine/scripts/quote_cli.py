# premium_engine/scripts/quote_cli.py
"""
Quote a product from the command line.

Usage:
  python -m premium_engine.scripts.quote_cli --product-id 1 --coverage 50000 --term 10
  python -m premium_engine.scripts.quote_cli --product-id 7 --coverage 250000 --term 20 \
      --age 40 --gender female --health good --occupation low --json

Prints a comparison table (or the full quote as JSON with --json).
Exit code 2 on validation / not-found errors.
"""

from __future__ import annotations

import argparse
import json
import sys
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from premium_engine.catalog.rate_table import load_rate_table
from premium_engine.catalog.service import comparison_rows, get_rate_table, quote
from premium_engine.pricing.errors import QuoteError
from premium_engine.pricing.quote import QuoteRequest
from premium_engine.pricing.rates import Applicant
from premium_engine.utils.logging_setup import configure_logging


def _amount(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate premium quotes for every payment frequency.")
    p.add_argument("--product-id", type=int, required=True, help="Product id from the rate table.")
    p.add_argument("--coverage", type=_amount, required=True, help="Coverage amount.")
    p.add_argument("--term", type=int, required=True, help="Term in years.")
    p.add_argument("--plan-id", type=int, default=None, help="Pin a specific plan of the product.")
    p.add_argument("--frequency", default=None, help="Only show this payment frequency.")
    p.add_argument("--age", type=int, default=None)
    p.add_argument("--gender", default=None)
    p.add_argument("--health", default=None, help="excellent / good / fair / poor")
    p.add_argument("--occupation", default=None, help="low / medium / high")
    p.add_argument("--rate-table-dir", default=None, help="Directory holding products/plans tables.")
    p.add_argument("--json", action="store_true", help="Print the full quote as JSON.")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging("WARNING")

    applicant = None
    if any(v is not None for v in (args.age, args.gender, args.health, args.occupation)):
        applicant = Applicant(
            age=args.age,
            gender=args.gender,
            health_status=args.health,
            occupation_risk=args.occupation,
        )

    req = QuoteRequest(
        product_id=args.product_id,
        coverage_amount=args.coverage,
        term_years=args.term,
        plan_id=args.plan_id,
        payment_frequency=args.frequency,
        applicant=applicant,
    )

    try:
        table = load_rate_table(args.rate_table_dir) if args.rate_table_dir else get_rate_table()
        result = quote(req, table=table)
    except QuoteError as e:
        print(f"[ERROR] {e.args[0] if e.args else e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
        return 0

    print(f"{result.product_name} | plan {result.plan_code} | coverage {result.coverage_amount:,} | {result.term_years}y")
    for row in comparison_rows(result):
        flag = " *" if row["recommended"] else ""
        print(
            f"  {row['display_name']:<30} {row['payment_amount']:>14} x {row['number_of_payments']:<4}"
            f" total {row['grand_total']:>14}  savings {row['savings']}{flag}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
