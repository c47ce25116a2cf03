"""Shared pytest fixtures and utilities for hardware-pos tests."""

from __future__ import annotations

import argparse
import sys
import uuid
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterator

import pytest

# Ensure source packages are importable without installation.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from hardware_pos import cli, config, core_logic  # noqa: E402
from hardware_pos.models import Customer, MaterialDetails, Product, ToolDetails  # noqa: E402

_CONFIG_TEMPLATE = (
    "[Store]\n"
    "StoreName = {store_name}\n"
    "WholesaleDiscount = {discount}\n\n"
    "[Logging]\n"
    "Level = {level}\n"
)


@pytest.fixture(scope="session", autouse=True)
def _restore_sys_path() -> Iterator[None]:
    """Ensure sys.path modifications are undone after the test session."""

    original = sys.path.copy()
    try:
        yield
    finally:
        sys.path[:] = original


@pytest.fixture
def config_factory(tmp_path: Path) -> Callable[..., Path]:
    """Provide a callable that writes a config.ini into a fresh directory."""

    def _create_config(
        *,
        store_name: str = "Test Hardware",
        discount: str = "0.15",
        level: str = "INFO",
    ) -> Path:
        bundle_dir = tmp_path / f"bundle_{uuid.uuid4().hex}"
        bundle_dir.mkdir(parents=True, exist_ok=True)
        config_path = bundle_dir / config.CONFIG_FILE_NAME
        config_path.write_text(
            _CONFIG_TEMPLATE.format(store_name=store_name, discount=discount, level=level),
            encoding="utf-8",
        )
        return config_path

    return _create_config


@pytest.fixture
def config_file(config_factory: Callable[..., Path]) -> Path:
    """Convenience fixture returning a default config path."""

    return config_factory()


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory so no config.ini is discovered."""

    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def drill() -> Product:
    return Product("H01", "Drill", "650W hammer drill", Decimal("350.99"), 10, ToolDetails("Power", "Black & Decker", True))


@pytest.fixture
def cement() -> Product:
    return Product("M01", "Cement", "Grey cement 50kg", Decimal("120.00"), 50, MaterialDetails("Bag", "Construction"))


@pytest.fixture
def wholesale_customer() -> Customer:
    return Customer("C001", "Construcciones SA", "123 Main Ave", "5551234", wholesale=True)


@pytest.fixture
def retail_customer() -> Customer:
    return Customer("C002", "Juan Perez", "456 Side St", "5555678", wholesale=False)


@pytest.fixture
def inventory() -> core_logic.Inventory:
    """Return an inventory seeded with the sample catalog."""

    return core_logic.seed_catalog(core_logic.Inventory())


@pytest.fixture
def runtime_context(isolated_cwd: Path) -> core_logic.RuntimeContext:
    """Load the runtime context through the public API with default settings."""

    return core_logic.load_runtime_context()


# ---------------------------------------------------------------------------
# CLI layer fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_parser() -> argparse.ArgumentParser:
    """Return a fresh CLI parser instance for tests."""

    return argparse.ArgumentParser(prog="hardware-pos", description="Hardware POS")


@pytest.fixture
def subparsers_action(
    cli_parser: argparse.ArgumentParser,
) -> argparse._SubParsersAction[argparse.ArgumentParser]:
    """Return the subparser action used to register commands."""

    return cli_parser.add_subparsers(dest="command")


@pytest.fixture
def command_spec_iterable() -> list[cli.CommandSpec]:
    """Provide a list of command specs for indexing tests."""

    def _make_spec(name: str) -> cli.CommandSpec:
        return cli.CommandSpec(
            name,
            f"{name} help",
            lambda subparsers: subparsers.add_parser(name),
            lambda *_: 0,
        )

    return [_make_spec("alpha"), _make_spec("beta"), _make_spec("gamma")]
