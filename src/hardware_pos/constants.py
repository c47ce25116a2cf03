"""Enumerations and fixed values shared across the hardware store modules.

Keeps the labels used by the domain model, the report renderers, and the
command-line layer in one place so they cannot drift apart.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum


# Discount applied to every line of a wholesale customer's sale.
WHOLESALE_DISCOUNT = Decimal("0.15")

DEFAULT_STORE_NAME = "Hardware Store"
CURRENCY_SYMBOL = "$"


class ProductKind(str, Enum):
    """Enumerate the product variants carried by the store."""

    TOOL = "Tool"
    MATERIAL = "Material"


class CustomerTier(str, Enum):
    """Enumerate pricing tiers; only wholesale customers get a discount."""

    WHOLESALE = "Wholesale"
    RETAIL = "Retail"


class ReportTitle(str, Enum):
    """Enumerate the section headers printed above each listing."""

    INVENTORY = "=== INVENTORY ==="
    CUSTOMERS = "=== CUSTOMERS ==="
    SALES = "=== SALES HISTORY ==="
    INVOICE = "=== Invoice ==="


__all__ = [
    "WHOLESALE_DISCOUNT",
    "DEFAULT_STORE_NAME",
    "CURRENCY_SYMBOL",
    "ProductKind",
    "CustomerTier",
    "ReportTitle",
]
