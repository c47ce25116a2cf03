"""Plain-text listings for products, customers, and the sales history."""

from __future__ import annotations

from typing import Iterable, List

from .constants import ReportTitle
from .models import Customer, Product, Sale


def render_banner(store_name: str) -> str:
    """Return the store-name header printed above a session's reports."""

    return f"*** {store_name} ***"


def render_inventory(products: Iterable[Product]) -> str:
    lines: List[str] = [ReportTitle.INVENTORY.value]
    lines.extend(product.render() for product in products)
    return "\n".join(lines)


def render_customers(customers: Iterable[Customer]) -> str:
    lines: List[str] = [ReportTitle.CUSTOMERS.value]
    lines.extend(customer.render() for customer in customers)
    return "\n".join(lines)


def render_sales(sales: Iterable[Sale]) -> str:
    """Render every sale's invoice in recording order, each followed by a blank line."""

    lines: List[str] = [ReportTitle.SALES.value]
    for sale in sales:
        lines.append(sale.render_detail())
        lines.append("")
    return "\n".join(lines)


__all__ = ["render_banner", "render_inventory", "render_customers", "render_sales"]
