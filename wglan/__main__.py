"""
Entry point for wglan.

Run with: python -m wglan
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_SUBNET,
    ENV_COMMAND_TIMEOUT,
    ENV_CONFIG_PATH,
    ENV_LOG_FILE,
    ENV_LOG_LEVEL,
    ENV_SUBNET,
    resolve_settings,
)
from .exceptions import ConfigError, WgLanError
from .lifecycle import run_server
from .logging_setup import get_logger, setup_logging
from .preflight import run_preflight_checks
from .watcher import WatchdogSource


BANNER = r"""
                 _
 __      ____ _ | |  __ _  _ __
 \ \ /\ / / _` || | / _` || '_ \
  \ V  V / (_| || || (_| || | | |
   \_/\_/ \__, ||_| \__,_||_| |_|
          |___/
"""

EPILOG = f"""\
Environment variables:
  {ENV_CONFIG_PATH}  Path of the interface config (default: {DEFAULT_CONFIG_PATH})
  {ENV_SUBNET}                 Server subnet; the first address is assigned to the
                          interface (default: {DEFAULT_SUBNET})
  {ENV_COMMAND_TIMEOUT}        Seconds before an external command is killed (default: none)
  {ENV_LOG_LEVEL}              DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
  {ENV_LOG_FILE}               Also log to this rotating file
"""


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="wglan",
        description=(
            "Create and manage a WireGuard interface that simulates a LAN for a "
            "set of machines. Compatible with wireguard-ui: the config file is "
            "re-applied live whenever it changes."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for wglan."""
    build_parser().parse_args(argv)

    print(BANNER)

    try:
        config = resolve_settings()
    except ConfigError as e:
        setup_logging()
        get_logger().error(f"unable to load the config: {e}")
        return 1

    logger = setup_logging(log_file=config.log_file, log_level=config.log_level)
    logger.info(
        f"Managing {config.config_path} on subnet {config.subnet} "
        f"(interface address {config.interface_address})"
    )

    run_preflight_checks()

    source = WatchdogSource()
    try:
        run_server(config, source)
    except WgLanError as e:
        logger.error(f"A critical error occurred while running the wireguard server: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
        return 0
    finally:
        source.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
