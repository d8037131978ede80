# premium_engine/api/app.py
"""
FastAPI service for the Premium Quote Engine (thin API wrapper).

Endpoints:
- GET  /health
- POST /api/premiumquote          -> payment options for every frequency
- POST /api/premiumquote/compare  -> display-ready comparison table
- GET  /api/products              -> active products (optional ?type=)
- GET  /api/products/{id}
- GET  /api/plans/product/{id}    -> active plans of a product
- GET  /api/plans/featured        -> up to 6 featured / popular plans
- GET  /api/plans/{id}
- POST /api/plans/calculate       -> single plan premium with applied factors

The API layer stays thin:
- validates input shape (pydantic)
- calls premium_engine.catalog.service
- maps QuoteValidationError -> 400, NotFoundError -> 404
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from premium_engine.api.schemas import (
    CompareResponse,
    PlanCalculationRequest,
    PlanCalculationResponse,
    PlanOut,
    PremiumQuoteRequest,
    PremiumQuoteResponse,
    ProductOut,
)
from premium_engine.catalog.service import calculate_for_plan, get_rate_table, quote
from premium_engine.pricing.errors import NotFoundError, QuoteValidationError
from premium_engine.utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)


# Load rate table once at startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    get_rate_table()  # caches rate table
    yield


app = FastAPI(title="Premium Quote Engine", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------
# Error mapping
# -----------------------------
@app.exception_handler(QuoteValidationError)
async def _validation_error(request: Request, exc: QuoteValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    message = exc.args[0] if exc.args else "Not found"
    logger.warning("Not found %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=404, content={"error": message})


# -----------------------------
# Routes
# -----------------------------
@app.get("/health")
def health() -> Dict[str, object]:
    table = get_rate_table()
    return {"status": "ok", "products": len(table.products), "plans": len(table.plans)}


@app.post("/api/premiumquote", response_model=PremiumQuoteResponse)
def premium_quote(req: PremiumQuoteRequest) -> PremiumQuoteResponse:
    logger.info(
        "Getting premium quotes for product %s, term %s years, coverage %s",
        req.product_id, req.term_years, req.coverage_amount,
    )
    result = quote(req.to_quote_request())
    return PremiumQuoteResponse.from_result(result)


@app.post("/api/premiumquote/compare", response_model=CompareResponse)
def compare_payment_options(req: PremiumQuoteRequest) -> CompareResponse:
    result = quote(req.to_quote_request())
    return CompareResponse.from_result(result)


@app.get("/api/products", response_model=List[ProductOut])
def list_products(product_type: Optional[str] = Query(None, alias="type")) -> List[ProductOut]:
    table = get_rate_table()
    return [ProductOut.from_product(p) for p in table.active_products(product_type)]


@app.get("/api/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int) -> ProductOut:
    return ProductOut.from_product(get_rate_table().get_product(product_id))


@app.get("/api/plans/product/{product_id}", response_model=List[PlanOut])
def get_plans_by_product(product_id: int) -> List[PlanOut]:
    plans = get_rate_table().plans_for_product(product_id)
    if not plans:
        raise NotFoundError(f"No active plans found for product ID {product_id}")
    return [PlanOut.from_plan(p) for p in plans]


# Must be registered before /api/plans/{plan_id}
@app.get("/api/plans/featured", response_model=List[PlanOut])
def get_featured_plans() -> List[PlanOut]:
    return [PlanOut.from_plan(p) for p in get_rate_table().featured_plans()]


@app.get("/api/plans/{plan_id}", response_model=PlanOut)
def get_plan(plan_id: int) -> PlanOut:
    return PlanOut.from_plan(get_rate_table().get_plan(plan_id))


@app.post("/api/plans/calculate", response_model=PlanCalculationResponse)
def calculate_plan_premium(req: PlanCalculationRequest) -> PlanCalculationResponse:
    pp = calculate_for_plan(req.plan_id, req.to_applicant(), req.payment_frequency)
    return PlanCalculationResponse.from_plan_premium(pp)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
