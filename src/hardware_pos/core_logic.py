"""Business logic layer for the hardware store simulator.

:class:`Inventory` is the aggregate root: it owns every product, customer,
and recorded sale, and is the only place identifiers are resolved. The
module-level helpers build a :class:`RuntimeContext` (settings plus a seeded
inventory) and run sale requests against it, which is what the CLI drives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Tuple

from . import config, log, reports, set_log_level
from .models import (
    BusinessRuleViolation,
    Customer,
    DuplicateReferenceError,
    MaterialDetails,
    MissingReferenceError,
    Money,
    Product,
    Sale,
    ToolDetails,
    require_positive_quantity,
)


DEMO_SALE_CODE = "V001"
DEMO_SALE_DATE = "2023-10-15"
DEMO_CUSTOMER_ID = "C002"
DEMO_SALE_ITEMS: Tuple[Tuple[str, int], ...] = (("H02", 2), ("M02", 5))


@dataclass
class Inventory:
    """Products, customers, and sales history kept in insertion order."""

    products: List[Product] = field(default_factory=list)
    customers: List[Customer] = field(default_factory=list)
    sales: List[Sale] = field(default_factory=list)
    settings: config.ConfigSettings = field(default_factory=config.ConfigSettings)

    def add_product(self, product: Product) -> None:
        """Register a product.

        Raises:
            DuplicateReferenceError: If a product with the same code exists.
        """

        if self.find_product(product.code) is not None:
            log.warning("Duplicate product code '%s' rejected", product.code)
            raise DuplicateReferenceError(f"Product code already registered: {product.code}")
        self.products.append(product)
        log.info("Registered %s '%s' (%s)", product.kind.value.lower(), product.code, product.name)

    def add_customer(self, customer: Customer) -> None:
        """Register a customer.

        Raises:
            DuplicateReferenceError: If a customer with the same id exists.
        """

        if self.find_customer(customer.customer_id) is not None:
            log.warning("Duplicate customer id '%s' rejected", customer.customer_id)
            raise DuplicateReferenceError(f"Customer id already registered: {customer.customer_id}")
        self.customers.append(customer)
        log.info("Registered %s customer '%s'", customer.tier.value.lower(), customer.customer_id)

    def record_sale(self, sale: Sale) -> None:
        """Append ``sale`` to the history and close it against further items.

        Raises:
            DuplicateReferenceError: If a sale with the same code was recorded.
        """

        self.require_new_sale_code(sale.sale_code)
        sale.close()
        self.sales.append(sale)
        log.info(
            "Recorded sale '%s' for customer '%s' with %d item(s), total %s",
            sale.sale_code,
            sale.customer.customer_id,
            len(sale.items),
            sale.total,
        )

    def require_new_sale_code(self, sale_code: str) -> None:
        """Ensure no recorded sale already uses ``sale_code``.

        Raises:
            DuplicateReferenceError: If the code is taken.
        """

        if any(existing.sale_code == sale_code for existing in self.sales):
            log.warning("Duplicate sale code '%s' rejected", sale_code)
            raise DuplicateReferenceError(f"Sale code already recorded: {sale_code}")

    def find_product(self, code: str) -> Optional[Product]:
        for product in self.products:
            if product.code == code:
                return product
        return None

    def find_customer(self, customer_id: str) -> Optional[Customer]:
        for customer in self.customers:
            if customer.customer_id == customer_id:
                return customer
        return None

    def get_product(self, code: str) -> Product:
        """Resolve a product by code.

        Raises:
            MissingReferenceError: If no product has ``code``.
        """

        product = self.find_product(code)
        if product is None:
            log.warning("Product lookup failed for code '%s'", code)
            raise MissingReferenceError(f"Unknown product code: {code}")
        return product

    def get_customer(self, customer_id: str) -> Customer:
        """Resolve a customer by id.

        Raises:
            MissingReferenceError: If no customer has ``customer_id``.
        """

        customer = self.find_customer(customer_id)
        if customer is None:
            log.warning("Customer lookup failed for id '%s'", customer_id)
            raise MissingReferenceError(f"Unknown customer id: {customer_id}")
        return customer

    def open_sale(self, sale_code: str, customer_id: str, sale_date: str) -> Sale:
        """Start a sale for a registered customer using the configured discount."""

        customer = self.get_customer(customer_id)
        return Sale(
            sale_code=sale_code,
            customer=customer,
            sale_date=sale_date,
            discount_rate=self.settings.wholesale_discount,
        )

    def list_inventory(self) -> str:
        return reports.render_inventory(self.products)

    def list_customers(self) -> str:
        return reports.render_customers(self.customers)

    def list_sales(self) -> str:
        return reports.render_sales(self.sales)


@dataclass(frozen=True)
class RuntimeContext:
    """Settings and the live inventory shared by one run of the simulator."""

    settings: config.ConfigSettings
    inventory: Inventory


@dataclass(frozen=True)
class SaleCommand:
    """User intent for selling several products to one customer."""

    sale_code: str
    customer_id: str
    sale_date: str
    items: Tuple[Tuple[str, int], ...]


@dataclass(frozen=True)
class SaleOutcome:
    """A recorded sale and the product codes rejected for lack of stock."""

    sale: Sale
    rejected: Tuple[str, ...] = ()


def seed_catalog(inventory: Inventory) -> Inventory:
    """Register the sample tools, materials, and customers."""

    inventory.add_product(Product(
        "H01", "Drill", "650W hammer drill", Decimal("350.99"), 10,
        ToolDetails(tool_type="Power", brand="Black & Decker", powered=True),
    ))
    inventory.add_product(Product(
        "H02", "Hammer", "16oz claw hammer", Decimal("25.50"), 30,
        ToolDetails(tool_type="Manual", brand="Stanley", powered=False),
    ))
    inventory.add_product(Product(
        "M01", "Cement", "Grey cement 50kg", Decimal("120.00"), 50,
        MaterialDetails(unit="Bag", category="Construction"),
    ))
    inventory.add_product(Product(
        "M02", "Nail", "Steel nail 2.5in", Decimal("5.75"), 200,
        MaterialDetails(unit="Kilogram", category="Hardware"),
    ))

    inventory.add_customer(Customer("C001", "Construcciones SA", "123 Main Ave", "5551234", wholesale=True))
    inventory.add_customer(Customer("C002", "Juan Perez", "456 Side St", "5555678", wholesale=False))
    return inventory


def load_runtime_context(config_path: Optional[Path] = None) -> RuntimeContext:
    """Load settings and build a freshly seeded inventory.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        KeyError: When mandatory configuration options are missing.
    """

    settings = config.load_settings(config_path)
    set_log_level(settings.log_level)
    inventory = seed_catalog(Inventory(settings=settings))
    log.info(
        "Loaded runtime context for '%s' with %d products and %d customers",
        settings.store_name,
        len(inventory.products),
        len(inventory.customers),
    )
    return RuntimeContext(settings=settings, inventory=inventory)


def process_sale(context: RuntimeContext, command: SaleCommand) -> SaleOutcome:
    """Build, fill, and record a sale from ``command``.

    The sale code, customer, every product code, and every quantity are
    checked before any stock moves, so a rejected command leaves the
    inventory untouched. Items that exceed stock are skipped
    and reported in :attr:`SaleOutcome.rejected`.

    Raises:
        MissingReferenceError: For an unknown customer or product code.
        DuplicateReferenceError: If the sale code was already recorded.
        BusinessRuleViolation: If the command carries no items.
        ValueError: If any quantity is not positive.
    """

    if not command.items:
        log.warning("Sale '%s' requested without items", command.sale_code)
        raise BusinessRuleViolation(f"Sale '{command.sale_code}' has no items")

    inventory = context.inventory
    inventory.require_new_sale_code(command.sale_code)
    sale = inventory.open_sale(command.sale_code, command.customer_id, command.sale_date)
    resolved = [(inventory.get_product(code), quantity) for code, quantity in command.items]
    for _, quantity in resolved:
        require_positive_quantity(quantity)

    rejected: List[str] = []
    for product, quantity in resolved:
        if not sale.add_item(product, quantity):
            rejected.append(product.code)

    inventory.record_sale(sale)
    return SaleOutcome(sale=sale, rejected=tuple(rejected))


def demo_sale_command() -> SaleCommand:
    return SaleCommand(
        sale_code=DEMO_SALE_CODE,
        customer_id=DEMO_CUSTOMER_ID,
        sale_date=DEMO_SALE_DATE,
        items=DEMO_SALE_ITEMS,
    )


def update_price(context: RuntimeContext, code: str, price: Money) -> Product:
    product = context.inventory.get_product(code)
    product.set_price(price)
    return product


def update_stock(context: RuntimeContext, code: str, stock: int) -> Product:
    product = context.inventory.get_product(code)
    product.set_stock(stock)
    return product


__all__ = [
    "BusinessRuleViolation",
    "MissingReferenceError",
    "DuplicateReferenceError",
    "Inventory",
    "RuntimeContext",
    "SaleCommand",
    "SaleOutcome",
    "seed_catalog",
    "load_runtime_context",
    "process_sale",
    "demo_sale_command",
    "update_price",
    "update_stock",
]
