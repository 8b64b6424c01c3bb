"""
WireGuard interface provisioning and activation.

The interface is created once per run. A leftover interface from an unclean
shutdown makes creation fail; that is reported, not cleaned up.
"""

from __future__ import annotations

import logging

from .config import INTERFACE_NAME, INTERFACE_TYPE, RuntimeConfig
from .exceptions import ActivationError, ProvisioningError
from .shell import run_command

logger = logging.getLogger(__name__)


def create_interface(config: RuntimeConfig, name: str = INTERFACE_NAME) -> str:
    """
    Create the interface and assign it the first address of the subnet.

    Returns:
        The assigned address in CIDR notation

    Raises:
        ProvisioningError: If creation or address assignment fails
    """
    run_command(
        ["ip", "link", "add", name, "type", INTERFACE_TYPE],
        ProvisioningError,
        "create the interface",
        timeout=config.command_timeout,
    )
    logger.info(f"Created interface {name}")

    addr = config.interface_address
    run_command(
        ["ip", "addr", "add", addr, "dev", name],
        ProvisioningError,
        "set an ip on the interface",
        timeout=config.command_timeout,
    )
    logger.info(f"Assigned {addr} to {name}")
    return addr


def set_interface_up(config: RuntimeConfig, name: str = INTERFACE_NAME) -> None:
    """Bring the interface up."""
    run_command(
        ["ip", "link", "set", name, "up"],
        ActivationError,
        "set the interface up",
        timeout=config.command_timeout,
    )
    logger.info(f"Interface {name} is up")
