"""
Kernel capability loading.

Makes sure the wireguard module is active before any interface of that type
is created.
"""

from __future__ import annotations

import logging

from .config import KERNEL_MODULE, MODULES_PATH, RuntimeConfig
from .exceptions import CapabilityError
from .shell import run_command

logger = logging.getLogger(__name__)


def is_module_loaded(name: str = KERNEL_MODULE, modules_path: str = MODULES_PATH) -> bool:
    """
    Check whether a kernel module appears in the active module list.

    A module counts as loaded when a line starts with its name followed by
    a space, so "wireguard" does not match "wireguard_extra".

    Raises:
        CapabilityError: If the module list cannot be read
    """
    try:
        with open(modules_path, "r") as f:
            content = f.read()
    except OSError as e:
        raise CapabilityError(f"unable to read modules from {modules_path}: {e}") from e

    prefix = f"{name} "
    return any(line.startswith(prefix) for line in content.splitlines())


def load_module(
    config: RuntimeConfig,
    name: str = KERNEL_MODULE,
    modules_path: str = MODULES_PATH,
) -> bool:
    """
    Ensure the kernel module is loaded.

    Returns:
        True if a load was requested, False if the module was already active

    Raises:
        CapabilityError: If the module list is unreadable or the load is rejected
    """
    if is_module_loaded(name, modules_path):
        logger.info(f"The {name} module is already loaded")
        return False

    try:
        run_command(
            ["modprobe", name],
            CapabilityError,
            f"load the {name} kernel module",
            timeout=config.command_timeout,
        )
    except CapabilityError:
        # Another process may have loaded it between the check and our load
        if is_module_loaded(name, modules_path):
            logger.warning(f"Loading {name} failed but the module is now active, continuing")
            return False
        raise

    logger.info(f"Loaded the {name} kernel module")
    return True
