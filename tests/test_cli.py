"""Unit tests describing the CLI presentation layer contract."""

from __future__ import annotations

import argparse
from decimal import Decimal

import pytest

from hardware_pos import cli, core_logic


WRITE_COMMANDS = {"demo", "sale", "reprice", "set-stock"}
READ_COMMANDS = {"stock", "customers"}


def _registered_choices(parser: argparse.ArgumentParser) -> set[str]:
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            return set(action.choices)
    return set()


# ---------------------------------------------------------------------------
# Parser construction
# ---------------------------------------------------------------------------


def test_build_parser_sets_program_metadata():
    parser = cli.build_parser()
    assert isinstance(parser, argparse.ArgumentParser)
    assert parser.prog == "hardware-pos"
    assert "hardware store" in (parser.description or "")


def test_configure_subcommands_registers_all_commands(cli_parser):
    command_table = cli.configure_subcommands(cli_parser)

    assert set(command_table) == WRITE_COMMANDS | READ_COMMANDS
    assert _registered_choices(cli_parser) == WRITE_COMMANDS | READ_COMMANDS


def test_register_write_commands_returns_command_specs(subparsers_action):
    specs = cli.register_write_commands(subparsers_action)
    assert set(specs) == WRITE_COMMANDS
    assert all(isinstance(spec, cli.CommandSpec) for spec in specs.values())


def test_register_read_commands_returns_command_specs(subparsers_action):
    specs = cli.register_read_commands(subparsers_action)
    assert set(specs) == READ_COMMANDS
    for name in READ_COMMANDS:
        assert name in subparsers_action.choices


def test_build_command_table_indexes_by_name(command_spec_iterable):
    table = cli.build_command_table(command_spec_iterable)
    assert list(table) == ["alpha", "beta", "gamma"]


def test_build_command_table_rejects_duplicates(command_spec_iterable):
    with pytest.raises(ValueError):
        cli.build_command_table([*command_spec_iterable, command_spec_iterable[0]])


def test_sale_arguments_are_parsed():
    parser = cli.build_parser()
    cli.configure_subcommands(parser)

    args = parser.parse_args(["sale", "--customer-id", "C001", "--item", "M01=3", "--item", "H02=1"])

    command = cli.translate_sale(args)
    assert command == core_logic.SaleCommand(
        sale_code=core_logic.DEMO_SALE_CODE,
        customer_id="C001",
        sale_date=core_logic.DEMO_SALE_DATE,
        items=(("M01", 3), ("H02", 1)),
    )


@pytest.mark.parametrize("raw", ["M01", "=3", "M01=x"])
def test_parse_item_rejects_malformed_values(raw):
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_item(raw)


def test_parse_money():
    assert cli.parse_money("27.00") == Decimal("27.00")
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_money("cheap")


# ---------------------------------------------------------------------------
# Dispatch and error handling
# ---------------------------------------------------------------------------


def test_dispatch_command_defaults_to_demo(runtime_context):
    called = {}

    def execute(context, args):
        called["context"] = context
        return 0

    table = {"demo": cli.CommandSpec("demo", "help", lambda _: None, execute)}

    assert cli.dispatch_command(runtime_context, argparse.Namespace(command=None), table) == 0
    assert called["context"] is runtime_context


def test_dispatch_command_unknown_raises(runtime_context):
    with pytest.raises(KeyError):
        cli.dispatch_command(runtime_context, argparse.Namespace(command="nope"), {})


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (core_logic.BusinessRuleViolation("rule"), 2),
        (core_logic.MissingReferenceError("missing"), 2),
        (FileNotFoundError("config.ini"), 3),
        (ValueError("bad"), 1),
    ],
)
def test_handle_cli_error_returns_exit_code(error, expected, caplog):
    caplog.set_level("ERROR")
    assert cli.handle_cli_error(error) == expected
    assert caplog.records


# ---------------------------------------------------------------------------
# Commands end to end
# ---------------------------------------------------------------------------


def test_main_stock_prints_inventory(isolated_cwd, capsys):
    assert cli.main(["stock"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("=== INVENTORY ===\n")
    assert "Code: M02, Name: Nail, Price: $5.75, Stock: 200" in out


def test_main_customers_prints_listing(isolated_cwd, capsys):
    assert cli.main(["customers"]) == 0
    out = capsys.readouterr().out
    assert "ID: C001, Name: Construcciones SA, Phone: 5551234, Wholesale" in out


def test_main_sale_prints_invoice_and_rejections(isolated_cwd, capsys):
    exit_code = cli.main(["sale", "--customer-id", "C001", "--item", "M01=3", "--item", "H01=11"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Cement x3 - $360.00" in out
    assert "TOTAL: $306.00" in out
    assert "Skipped H01: insufficient stock" in out


def test_main_sale_unknown_customer_exits_with_rule_code(isolated_cwd, capsys):
    assert cli.main(["sale", "--customer-id", "C404", "--item", "M01=1"]) == 2
    assert "Invoice" not in capsys.readouterr().out


def test_main_reprice_updates_listing(isolated_cwd, capsys):
    assert cli.main(["reprice", "--product-id", "H02", "--price", "27.00"]) == 0
    assert "Code: H02, Name: Hammer, Price: $27.00" in capsys.readouterr().out


def test_main_set_stock_rejects_negative(isolated_cwd):
    assert cli.main(["set-stock", "--product-id", "H02", "--stock", "-1"]) == 1


def test_main_missing_config_exits_with_file_code(isolated_cwd, tmp_path):
    assert cli.main(["--config", str(tmp_path / "missing.ini"), "stock"]) == 3


def test_main_sale_prints_configured_store_name(isolated_cwd, capsys, config_factory):
    path = config_factory(store_name="Corner Hardware")

    exit_code = cli.main(["--config", str(path), "sale", "--customer-id", "C002", "--item", "H02=1"])

    out = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert out[0] == "*** Corner Hardware ***"
    assert "Hammer x1 - $25.50" in out
