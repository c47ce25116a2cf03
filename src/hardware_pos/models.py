"""Domain model for the hardware store point of sale.

Products carry their variant-specific attributes in a ``details`` record
(:class:`ToolDetails` or :class:`MaterialDetails`) instead of through
subclasses. A :class:`Sale` references the customer and products owned by the
inventory and keys its line items by product code, so later price or stock
changes on a product never disturb the mapping.

Exceptions raised by the model live here as well; the business layer
re-exports them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Union

from . import log
from .constants import CURRENCY_SYMBOL, WHOLESALE_DISCOUNT, CustomerTier, ProductKind, ReportTitle


class BusinessRuleViolation(Exception):
    """Raised when a requested operation violates a domain constraint."""


class MissingReferenceError(BusinessRuleViolation):
    """Raised when a referenced product, customer, or sale is unknown."""


class DuplicateReferenceError(BusinessRuleViolation):
    """Raised when an identifier is registered twice."""


Money = Union[Decimal, int, str]


def to_money(value: Money) -> Decimal:
    """Normalize a caller-supplied amount into a :class:`~decimal.Decimal`.

    Values go through ``str`` first so that floats such as ``25.5`` become
    ``Decimal("25.5")`` rather than their binary expansion.
    """

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_money(amount: Decimal) -> str:
    """Render an amount with the currency symbol and two decimals."""

    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def require_nonnegative_money(amount: Decimal) -> None:
    """Reject negative prices.

    Raises:
        ValueError: If ``amount`` is below zero.
    """

    if amount < 0:
        log.error("Monetary value validation failed: %s", amount)
        raise ValueError("Amount must be zero or positive")


def require_nonnegative_stock(stock: int) -> None:
    """Reject negative stock counts.

    Raises:
        ValueError: If ``stock`` is below zero.
    """

    if stock < 0:
        log.error("Stock validation failed: %s", stock)
        raise ValueError("Stock must be zero or positive")


def require_positive_quantity(quantity: int) -> None:
    """Ensure a requested sale quantity is strictly positive.

    Raises:
        ValueError: If ``quantity`` is zero or negative.
    """

    if quantity <= 0:
        log.error("Quantity validation failed: %s", quantity)
        raise ValueError("Quantity must be greater than zero")


@dataclass(frozen=True)
class ToolDetails:
    """Attributes specific to tools."""

    tool_type: str
    brand: str
    powered: bool

    def render(self) -> str:
        powered = "Yes" if self.powered else "No"
        return f"Type: {self.tool_type}, Brand: {self.brand}, Powered: {powered}"


@dataclass(frozen=True)
class MaterialDetails:
    """Attributes specific to construction materials."""

    unit: str
    category: str

    def render(self) -> str:
        return f"Unit: {self.unit}, Category: {self.category}"


ProductDetails = Union[ToolDetails, MaterialDetails]


@dataclass(eq=False)
class Product:
    """A sellable item owned by the inventory.

    Only ``unit_price`` and ``stock`` change after creation, through
    :meth:`set_price`, :meth:`set_stock`, and :meth:`sell`.
    """

    code: str
    name: str
    description: str
    unit_price: Decimal
    stock: int
    details: ProductDetails

    def __post_init__(self) -> None:
        self.unit_price = to_money(self.unit_price)
        require_nonnegative_money(self.unit_price)
        require_nonnegative_stock(self.stock)

    @property
    def kind(self) -> ProductKind:
        if isinstance(self.details, ToolDetails):
            return ProductKind.TOOL
        return ProductKind.MATERIAL

    def sell(self, quantity: int) -> bool:
        """Deduct ``quantity`` units from stock when enough are available.

        Args:
            quantity (int): Units requested; must be positive.

        Returns:
            bool: ``True`` when the stock was decremented, ``False`` when the
                request exceeds the units on hand. Stock is untouched on
                failure.

        Raises:
            ValueError: If ``quantity`` is not positive.
        """

        require_positive_quantity(quantity)
        if quantity > self.stock:
            log.debug(
                "Product '%s' cannot sell %d units (stock %d)",
                self.code,
                quantity,
                self.stock,
            )
            return False
        self.stock -= quantity
        return True

    def set_price(self, value: Money) -> None:
        price = to_money(value)
        require_nonnegative_money(price)
        log.info("Product '%s' price changed from %s to %s", self.code, self.unit_price, price)
        self.unit_price = price

    def set_stock(self, value: int) -> None:
        require_nonnegative_stock(value)
        log.info("Product '%s' stock changed from %d to %d", self.code, self.stock, value)
        self.stock = value

    def render(self) -> str:
        return (
            f"Code: {self.code}, Name: {self.name}, "
            f"Price: {format_money(self.unit_price)}, Stock: {self.stock}, "
            f"{self.details.render()}"
        )


@dataclass(frozen=True)
class Customer:
    """A registered customer; immutable once created."""

    customer_id: str
    name: str
    address: str
    phone: str
    wholesale: bool = False

    @property
    def tier(self) -> CustomerTier:
        return CustomerTier.WHOLESALE if self.wholesale else CustomerTier.RETAIL

    def render(self) -> str:
        return f"ID: {self.customer_id}, Name: {self.name}, Phone: {self.phone}, {self.tier.value}"


@dataclass
class LineItem:
    """One product and the quantity bought of it within a sale."""

    product: Product
    quantity: int

    @property
    def list_amount(self) -> Decimal:
        # Undiscounted, priced at the product's current unit price.
        return self.product.unit_price * self.quantity


@dataclass(eq=False)
class Sale:
    """A sale to one customer, built up item by item.

    ``total`` is accumulated as items are added and never recomputed. Once
    the inventory records the sale it is closed and rejects further items.
    """

    sale_code: str
    customer: Customer
    sale_date: str
    discount_rate: Decimal = WHOLESALE_DISCOUNT
    items: Dict[str, LineItem] = field(default_factory=dict)
    total: Decimal = Decimal("0")
    closed: bool = False

    def __post_init__(self) -> None:
        if self.customer is None:
            log.error("Sale '%s' created without a customer", self.sale_code)
            raise MissingReferenceError(f"Sale '{self.sale_code}' requires a customer")
        self.discount_rate = to_money(self.discount_rate)

    def discount_for(self, customer: Customer) -> Decimal:
        return self.discount_rate if customer.wholesale else Decimal("0")

    def add_item(self, product: Optional[Product], quantity: int) -> bool:
        """Sell ``quantity`` units of ``product`` as part of this sale.

        A request larger than the product's stock is rejected without
        raising: nothing is recorded, the total is unchanged, and ``False``
        is returned. Adding a product already on the sale replaces its
        recorded quantity while the total still gains the new line amount.

        Args:
            product (Product | None): Product resolved from the inventory.
            quantity (int): Units to sell.

        Returns:
            bool: ``True`` if the item was added, ``False`` if stock was
                insufficient.

        Raises:
            MissingReferenceError: If ``product`` is ``None``.
            BusinessRuleViolation: If the sale was already recorded.
            ValueError: If ``quantity`` is not positive.
        """

        if product is None:
            log.error("Sale '%s' received an unknown product", self.sale_code)
            raise MissingReferenceError(f"Sale '{self.sale_code}' cannot add a missing product")
        if self.closed:
            log.warning("Attempted to add '%s' to recorded sale '%s'", product.code, self.sale_code)
            raise BusinessRuleViolation(f"Sale '{self.sale_code}' is already recorded")

        if not product.sell(quantity):
            log.warning(
                "Sale '%s' skipped '%s' x%d: insufficient stock",
                self.sale_code,
                product.code,
                quantity,
            )
            return False

        self.items[product.code] = LineItem(product=product, quantity=quantity)
        discount = self.discount_for(self.customer)
        self.total += product.unit_price * quantity * (1 - discount)
        log.debug("Sale '%s' total is now %s", self.sale_code, self.total)
        return True

    def close(self) -> None:
        self.closed = True

    def render_detail(self) -> str:
        """Return the itemized invoice text for this sale."""

        lines = [
            ReportTitle.INVOICE.value,
            f"Sale #{self.sale_code}",
            f"Customer: {self.customer.name}",
            f"Date: {self.sale_date}",
            "",
            "Items:",
        ]
        for item in self.items.values():
            lines.append(f"{item.product.name} x{item.quantity} - {format_money(item.list_amount)}")
        lines.append("")
        lines.append(f"TOTAL: {format_money(self.total)}")
        return "\n".join(lines)


__all__ = [
    "BusinessRuleViolation",
    "MissingReferenceError",
    "DuplicateReferenceError",
    "ToolDetails",
    "MaterialDetails",
    "Product",
    "Customer",
    "LineItem",
    "Sale",
    "to_money",
    "format_money",
]
