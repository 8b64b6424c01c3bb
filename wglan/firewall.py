"""Forwarding policy for routing traffic between peers."""

from __future__ import annotations

import logging

from .config import RuntimeConfig
from .exceptions import PolicyError
from .shell import run_command

logger = logging.getLogger(__name__)

FORWARD_CHAIN = "FORWARD"
FORWARD_POLICY = "ACCEPT"


def set_forward_policy(config: RuntimeConfig) -> None:
    """
    Set the host's default FORWARD policy to ACCEPT.

    This is global, not scoped to the VPN subnet, and is never reverted.
    """
    run_command(
        ["iptables", "-P", FORWARD_CHAIN, FORWARD_POLICY],
        PolicyError,
        "enable forwarding in the iptables",
        timeout=config.command_timeout,
    )
    logger.info(f"Set the iptables {FORWARD_CHAIN} policy to {FORWARD_POLICY}")
