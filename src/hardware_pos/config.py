"""Configuration handling for the hardware store simulator.

Settings come from an optional ``config.ini``::

    [Store]
    StoreName = Hardware Store
    WholesaleDiscount = 0.15

    [Logging]
    Level = INFO

When no file is found and none was requested explicitly, built-in defaults
are used so the simulator runs without any setup.
"""


from __future__ import annotations

import configparser
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from . import log
from .constants import DEFAULT_STORE_NAME, WHOLESALE_DISCOUNT


CONFIG_FILE_NAME = "config.ini"


@dataclass(frozen=True)
class ConfigSettings:
    """Typed representation of the ``config.ini`` settings we care about."""

    store_name: str = DEFAULT_STORE_NAME
    wholesale_discount: Decimal = WHOLESALE_DISCOUNT
    log_level: str = "INFO"


def find_config_file(explicit_path: Optional[Path] = None) -> Path:
    """Locate the configuration file.

    If the caller provides ``explicit_path`` the value is returned immediately
    without any verification. Otherwise the function walks up from the current
    working directory toward the filesystem root looking for a file named
    ``CONFIG_FILE_NAME``; the first match is considered authoritative.

    Args:
        explicit_path (Path | None): Optional path to use instead of performing
            the upward search.

    Returns:
        Path: The path provided by the caller or the discovered file.

    Raises:
        FileNotFoundError: If the search exhausts all parent directories without
            finding ``CONFIG_FILE_NAME``.
    """

    if explicit_path:
        return explicit_path

    current = Path.cwd()
    for p in (current, *current.parents):
        candidate = p / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate

    raise FileNotFoundError(
        f"Configuration file not found: {CONFIG_FILE_NAME}")


def read_config(config_path: Path) -> configparser.ConfigParser:
    """Load ``config.ini`` and return a populated ``ConfigParser`` instance.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist after expansion and
            resolution.
    """

    config_path = config_path.expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    parser = configparser.ConfigParser()
    parser.read(config_path, encoding="utf-8")
    return parser


def parse_settings(parser: configparser.ConfigParser) -> ConfigSettings:
    """Convert a ``ConfigParser`` into strongly typed :class:`ConfigSettings`.

    ``[Store] StoreName`` and ``[Store] WholesaleDiscount`` are required. The
    ``[Logging]`` section is optional and defaults to ``INFO``.

    Args:
        parser (configparser.ConfigParser): Parsed configuration data.

    Returns:
        ConfigSettings: Immutable settings container.

    Raises:
        KeyError: If a required section or option is missing.
        ValueError: If the discount is not a number in ``[0, 1)``.
    """

    try:
        store_name = parser.get("Store", "StoreName")
        discount_raw = parser.get("Store", "WholesaleDiscount")
    except (configparser.NoSectionError, configparser.NoOptionError) as exc:
        raise KeyError(f"Missing required configuration entry: {exc}") from exc

    try:
        discount = Decimal(discount_raw.strip())
    except InvalidOperation as exc:
        raise ValueError(f"WholesaleDiscount is not a number: {discount_raw!r}") from exc
    if not Decimal("0") <= discount < Decimal("1"):
        raise ValueError(f"WholesaleDiscount must be in [0, 1): {discount}")

    log_level = parser.get("Logging", "Level", fallback="INFO").strip().upper()

    return ConfigSettings(
        store_name=store_name,
        wholesale_discount=discount,
        log_level=log_level,
    )


def load_settings(config_path: Optional[Path] = None) -> ConfigSettings:
    """Resolve settings from an explicit path, a discovered file, or defaults.

    An explicit ``config_path`` must exist. Without one, a missing
    ``config.ini`` simply yields the default :class:`ConfigSettings`.
    """

    try:
        located = find_config_file(config_path)
    except FileNotFoundError:
        log.debug("No %s found; using default settings", CONFIG_FILE_NAME)
        return ConfigSettings()

    parser = read_config(Path(located))
    settings = parse_settings(parser)
    log.info("Loaded settings from '%s'", located)
    return settings


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigSettings",
    "find_config_file",
    "read_config",
    "parse_settings",
    "load_settings",
]
