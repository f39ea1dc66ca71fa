"""
Pricewise — Error taxonomy

Every engine failure is scoped to a single call and raised synchronously.
All errors subclass ValueError so callers that already guard numeric input
with ``except ValueError`` keep working.
"""

from __future__ import annotations


class PricingError(ValueError):
    """Base class for all calculation errors."""


class InvalidInput(PricingError):
    """Negative money, non-positive quantity, or a malformed percentage."""


class UnknownPlatform(PricingError):
    """Platform key is not configured (or ``custom`` without a fee list)."""


class UnsupportedCurrency(PricingError):
    """Currency code outside the supported set."""
