# premium_engine/pricing/errors.py
"""
Error taxonomy for quoting.

- QuoteValidationError: bad request values (out of range, unknown attribute value)
- NotFoundError       : unknown / inactive product or plan
"""

from __future__ import annotations


class QuoteError(Exception):
    """Base class for all quoting errors."""


class QuoteValidationError(QuoteError, ValueError):
    pass


class NotFoundError(QuoteError, LookupError):
    pass
