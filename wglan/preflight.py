"""
Pre-flight checks for wglan.

Diagnoses common setup problems before the startup sequence runs. Results
are only logged: the startup steps themselves decide what is fatal.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import List, Tuple

from .config import INTERFACE_NAME
from .logging_setup import format_block

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("modprobe", "ip", "iptables", "wg", "wg-quick")

SYS_CLASS_NET = "/sys/class/net"


def check_root_privileges() -> Tuple[bool, str]:
    """
    Check if running as root (needed for modules, links and iptables).

    Returns:
        Tuple of (success, message)
    """
    if os.geteuid() == 0:
        return True, "Running as root"
    return False, "Not running as root; module loading, ip and iptables will likely fail"


def check_tools_available(tools: Tuple[str, ...] = REQUIRED_TOOLS) -> Tuple[bool, str]:
    """
    Check that every external tool is on PATH.

    Returns:
        Tuple of (success, message)
    """
    missing = [tool for tool in tools if shutil.which(tool) is None]
    if missing:
        return False, f"Missing tools: {', '.join(missing)} (install wireguard-tools and iproute2)"
    return True, "All required tools available"


def check_interface_absent(
    name: str = INTERFACE_NAME,
    sys_class_net: str = SYS_CLASS_NET,
) -> Tuple[bool, str]:
    """
    Check that no interface with our name is left over from a previous run.

    Returns:
        Tuple of (success, message)
    """
    if os.path.exists(os.path.join(sys_class_net, name)):
        return False, (
            f"Interface '{name}' already exists; creation will fail. "
            f"Remove it with: ip link del {name}"
        )
    return True, f"Interface '{name}' not present"


def run_preflight_checks() -> List[Tuple[str, bool, str]]:
    """
    Run all pre-flight checks and log the results.

    Returns:
        List of (check_name, success, message) tuples
    """
    checks = [
        ("Privileges", check_root_privileges),
        ("Tools", check_tools_available),
        ("Interface", check_interface_absent),
    ]

    results = []
    for name, check_fn in checks:
        success, message = check_fn()
        results.append((name, success, message))

    lines = [
        f"{'[OK]' if success else '[WARN]'} {name}: {message}"
        for name, success, message in results
    ]
    if all(success for _, success, _ in results):
        logger.debug(format_block("PREFLIGHT", lines))
    else:
        logger.warning(format_block("PREFLIGHT", lines))

    return results
