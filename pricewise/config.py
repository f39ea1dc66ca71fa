"""
Pricewise — Configuration & Constants

Enumerations shared across the engine and process-level tunables loaded from
the environment. Seller preferences (currency, VAT status, target margin) are
NOT read from here; they travel in an explicit SellerProfile.

Usage:
    from pricewise.config import settings
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Currency(str, Enum):
    """Supported selling currencies."""
    GBP = "GBP"
    USD = "USD"
    EUR = "EUR"
    CAD = "CAD"
    AUD = "AUD"
    JPY = "JPY"
    CHF = "CHF"
    SEK = "SEK"
    NOK = "NOK"
    DKK = "DKK"


class PlatformKey(str, Enum):
    """Marketplaces with a fee schedule."""
    ETSY = "etsy"
    EBAY = "ebay"
    AMAZON = "amazon"
    SHOPIFY = "shopify"
    TIKTOK = "tiktok"
    CUSTOM = "custom"


class FeeType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class FeeBase(str, Enum):
    """What a fee term is charged against."""
    ITEM = "item"           # item price
    SHIPPING = "shipping"   # shipping cost
    SUBTOTAL = "subtotal"   # item + shipping
    ORDER = "order"         # subtotal less fees charged so far


class PaymentMethod(str, Enum):
    PLATFORM_INCLUDED = "platform_included"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    SQUARE = "square"
    MANUAL = "manual"


class OverheadCategory(str, Enum):
    RENT = "rent"
    UTILITIES = "utilities"
    SOFTWARE = "software"
    INSURANCE = "insurance"
    MARKETING = "marketing"
    OTHER = "other"


class RoundingMode(str, Enum):
    """Price-ending strategies. All of them round up to protect margin."""
    NONE = "none"
    NEAREST_99 = "nearest_99"
    NEAREST_50 = "nearest_50"
    NEAREST_00 = "nearest_00"
    INCREMENT = "increment"


class ProductKind(str, Enum):
    HANDMADE = "handmade"
    SOURCED = "sourced"


class SourceType(str, Enum):
    DROPSHIP = "dropship"
    PRINT_ON_DEMAND = "print_on_demand"
    RESALE = "resale"
    WHOLESALE = "wholesale"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Process-level tunables for Pricewise.

    Loads from PRICEWISE_* environment variables with fallback defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRICEWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------------------------------------------------
    # Logging
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # -----------------------------------------------------------------------
    # Price solver (break-even / target margin)
    # Search gives up above this unit price (minor units).
    # -----------------------------------------------------------------------
    SOLVER_PRICE_CEILING: int = Field(default=10**12, gt=0)

    # -----------------------------------------------------------------------
    # Discount analysis
    # -----------------------------------------------------------------------
    DISCOUNT_STEP: Decimal = Decimal("5")
    DISCOUNT_MAX: Decimal = Decimal("90")
    DISCOUNT_RESOLUTION: Decimal = Decimal("0.1")   # break-even discount precision

    # -----------------------------------------------------------------------
    # Batch pricing
    # -----------------------------------------------------------------------
    BATCH_DEFAULT_QUANTITIES: tuple[int, ...] = (1, 5, 10, 25, 50, 100)

    # -----------------------------------------------------------------------
    # VAT registration warning
    # -----------------------------------------------------------------------
    VAT_WARNING_RATIO: Decimal = Decimal("0.80")    # warn at 80% of threshold

    # -----------------------------------------------------------------------
    # Boost plan
    # -----------------------------------------------------------------------
    BOOST_BUFFER_RATIO: Decimal = Decimal("0.05")   # launch 5% above break-even


# Singleton instance
settings = Settings()
