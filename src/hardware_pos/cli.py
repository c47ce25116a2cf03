"""Command-line entry points for the hardware store simulator.

All orchestration in this module is limited to argparse wiring, translating
command-line arguments into the objects consumed by the business layer, and
printing the resulting reports. Nothing is persisted between runs, so every
invocation starts from the freshly seeded catalog.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, MutableMapping, Optional, Sequence, Tuple

from . import core_logic, log, reports


DEFAULT_COMMAND = "demo"


@dataclass(frozen=True)
class CommandSpec:
    """Describe how a CLI sub-command is configured and executed."""

    name: str
    help_text: str
    register: Callable[[argparse._SubParsersAction[argparse.ArgumentParser]], argparse.ArgumentParser]
    execute: Callable[[core_logic.RuntimeContext, argparse.Namespace], int]


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="hardware-pos",
        description="Inventory and point-of-sale simulator for a hardware store.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional path to config.ini (defaults to a discovered ./config.ini or built-in settings).",
    )
    return parser


def configure_subcommands(
    parser: argparse.ArgumentParser,
) -> Mapping[str, CommandSpec]:
    """Wire all CLI sub-commands onto the supplied parser."""
    subparsers = parser.add_subparsers(dest="command", required=False, title="commands")
    write_specs = register_write_commands(subparsers)
    read_specs = register_read_commands(subparsers)
    return build_command_table([*write_specs.values(), *read_specs.values()])


def register_write_commands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> Dict[str, CommandSpec]:
    """Declare commands that change stock or prices before reporting."""
    specs = {
        "demo": register_demo_command(subparsers),
        "sale": register_sale_command(subparsers),
        "reprice": register_reprice_command(subparsers),
        "set-stock": register_set_stock_command(subparsers),
    }
    for spec in specs.values():
        spec.register(subparsers)
    return specs


def register_read_commands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> Dict[str, CommandSpec]:
    """Declare read-only listing commands."""
    specs = {
        "stock": register_stock_command(subparsers),
        "customers": register_customers_command(subparsers),
    }
    for spec in specs.values():
        spec.register(subparsers)
    return specs


def register_demo_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``demo``."""
    name = "demo"
    help_text = "Run the sample session: listings, one retail sale, final reports."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_demo)


def register_sale_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``sale``."""
    name = "sale"
    help_text = "Sell products to a customer and print the invoice."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        parser.add_argument("--customer-id", required=True)
        parser.add_argument(
            "--item",
            dest="items",
            action="append",
            required=True,
            type=parse_item,
            metavar="CODE=QTY",
            help="Product code and quantity; repeat for several products.",
        )
        parser.add_argument("--sale-code", default=core_logic.DEMO_SALE_CODE)
        parser.add_argument("--date", dest="sale_date", default=core_logic.DEMO_SALE_DATE)
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_sale)


def register_reprice_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``reprice``."""
    name = "reprice"
    help_text = "Change a product's unit price and print the inventory."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        parser.add_argument("--product-id", required=True)
        parser.add_argument("--price", required=True, type=parse_money)
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_reprice)


def register_set_stock_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``set-stock``."""
    name = "set-stock"
    help_text = "Overwrite a product's stock count and print the inventory."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        parser.add_argument("--product-id", required=True)
        parser.add_argument("--stock", required=True, type=int)
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_set_stock)


def register_stock_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``stock``."""
    name = "stock"
    help_text = "List every product with its price and stock."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_stock_report)


def register_customers_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``customers``."""
    name = "customers"
    help_text = "List registered customers and their pricing tier."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_customers_report)


def parse_item(text: str) -> Tuple[str, int]:
    """Parse a ``CODE=QTY`` item argument."""
    code, sep, quantity = text.partition("=")
    if not sep or not code.strip():
        raise argparse.ArgumentTypeError(f"Expected CODE=QTY, got {text!r}")
    try:
        return code.strip(), int(quantity)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Quantity must be an integer: {quantity!r}") from exc


def parse_money(text: str) -> Decimal:
    """Parse a decimal amount for argparse."""
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Not a valid amount: {text!r}") from exc


def load_runtime_context(config_path: Optional[Path] = None) -> core_logic.RuntimeContext:
    """Resolve the runtime context for CLI operations."""
    return core_logic.load_runtime_context(config_path)


def dispatch_command(
    context: core_logic.RuntimeContext,
    args: argparse.Namespace,
    command_table: Mapping[str, CommandSpec],
) -> int:
    """Dispatch the parsed arguments to the configured executor."""
    command = getattr(args, "command", None) or DEFAULT_COMMAND
    spec = command_table.get(command)
    if spec is None:
        raise KeyError(f"Unknown command: {command}")
    return spec.execute(context, args)


def build_command_table(
    specs: Iterable[CommandSpec],
) -> MutableMapping[str, CommandSpec]:
    """Build an index of command specifications keyed by command name."""
    table: Dict[str, CommandSpec] = {}
    for spec in specs:
        if spec.name in table:
            raise ValueError(f"Duplicate command name: {spec.name}")
        table[spec.name] = spec
    return table


def translate_sale(args: argparse.Namespace) -> core_logic.SaleCommand:
    """Translate CLI args into a sale command object."""
    return core_logic.SaleCommand(
        sale_code=args.sale_code,
        customer_id=args.customer_id,
        sale_date=args.sale_date,
        items=tuple(args.items),
    )


def emit(*sections: str) -> None:
    """Print report sections separated by blank lines."""
    print("\n\n".join(sections))


def run_demo(context: core_logic.RuntimeContext, args: argparse.Namespace) -> int:
    """Execute the sample session end to end."""
    inventory = context.inventory
    emit(reports.render_banner(context.settings.store_name), inventory.list_inventory(), inventory.list_customers())
    outcome = core_logic.process_sale(context, core_logic.demo_sale_command())
    print()
    emit(outcome.sale.render_detail(), inventory.list_inventory(), inventory.list_sales())
    return 0


def run_sale(context: core_logic.RuntimeContext, args: argparse.Namespace) -> int:
    """Execute the sale workflow via the BLL and print the invoice."""
    command = translate_sale(args)
    outcome = core_logic.process_sale(context, command)
    emit(reports.render_banner(context.settings.store_name), outcome.sale.render_detail())
    for code in outcome.rejected:
        print(f"Skipped {code}: insufficient stock")
    return 0


def run_reprice(context: core_logic.RuntimeContext, args: argparse.Namespace) -> int:
    """Execute a price update and print the inventory."""
    core_logic.update_price(context, args.product_id, args.price)
    emit(context.inventory.list_inventory())
    return 0


def run_set_stock(context: core_logic.RuntimeContext, args: argparse.Namespace) -> int:
    """Execute a stock overwrite and print the inventory."""
    core_logic.update_stock(context, args.product_id, args.stock)
    emit(context.inventory.list_inventory())
    return 0


def run_stock_report(context: core_logic.RuntimeContext, args: argparse.Namespace) -> int:
    """Print the inventory listing."""
    emit(context.inventory.list_inventory())
    return 0


def run_customers_report(context: core_logic.RuntimeContext, args: argparse.Namespace) -> int:
    """Print the customer listing."""
    emit(context.inventory.list_customers())
    return 0


def handle_cli_error(error: Exception) -> int:
    """Convert raised exceptions into user-friendly exit codes."""
    if isinstance(error, core_logic.BusinessRuleViolation):
        log.error("%s", error)
        return 2
    if isinstance(error, FileNotFoundError):
        log.error("%s", error)
        return 3
    log.error("%s", error)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point that orchestrates parsing and execution."""
    parser = build_parser()
    command_table = configure_subcommands(parser)
    args = parser.parse_args(argv)
    try:
        context = load_runtime_context(getattr(args, "config", None))
        return dispatch_command(context, args, command_table)
    except Exception as error:  # pragma: no cover - centralised error handler tested separately
        return handle_cli_error(error)
