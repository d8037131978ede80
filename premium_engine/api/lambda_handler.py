# premium_engine/api/lambda_handler.py
"""
AWS Lambda handler for FastAPI using Mangum (ASGI adapter).

How it works:
- API Gateway invokes Lambda
- Mangum translates the event into an ASGI request
- FastAPI handles routing (/health, /api/premiumquote, /api/plans, ...)
- Response is returned back to API Gateway

Rate table loading:
- get_rate_table() runs at import time (cold start) so the table is ready.
- If RATE_TABLE_S3_URI is set, missing files are downloaded into RATE_TABLE_DIR
  first (use a writable path such as /tmp/rate_table on Lambda).
"""

from __future__ import annotations

from mangum import Mangum

from premium_engine.api.app import app
from premium_engine.catalog.service import get_rate_table
from premium_engine.utils.config import env_flag
from premium_engine.utils.logging_setup import configure_logging

configure_logging()

# Warm up / pre-load rate table at cold start for lower first-request latency.
_PRELOAD_RATE_TABLE = env_flag("PRELOAD_RATE_TABLE", default=True)

if _PRELOAD_RATE_TABLE:
    get_rate_table()


# Mangum handler (lifespan off: the table is already cached above)
handler = Mangum(app, lifespan="off")
