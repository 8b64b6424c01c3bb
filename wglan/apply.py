"""
Applying the on-disk config to the live interface.

Every call is a full reconciliation from whatever is on disk now: the config
is stripped to the subset `wg syncconf` accepts and synced onto the
interface, which keeps existing sessions alive. Nothing about the previous
config is remembered between calls.
"""

from __future__ import annotations

import logging
import os

from .config import INTERFACE_NAME, SCRATCH_FILE_MODE, SCRATCH_PATH, RuntimeConfig
from .exceptions import ApplyError
from .shell import run_command

logger = logging.getLogger(__name__)


def strip_config(config: RuntimeConfig) -> str:
    """Return the output of `wg-quick strip` for the config file."""
    return run_command(
        ["wg-quick", "strip", config.config_path],
        ApplyError,
        "strip the wireguard config",
        timeout=config.command_timeout,
        combined=False,
    )


def write_scratch(payload: str, path: str = SCRATCH_PATH) -> None:
    """Write the stripped payload to the scratch location."""
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SCRATCH_FILE_MODE)
        with os.fdopen(fd, "w") as f:
            f.write(payload)
    except OSError as e:
        raise ApplyError(f"unable to write the stripped config to {path}: {e}") from e


def apply_interface_config(
    config: RuntimeConfig,
    scratch_path: str = SCRATCH_PATH,
    name: str = INTERFACE_NAME,
) -> None:
    """
    Sync the live interface with the config file's current contents.

    Raises:
        ApplyError: If stripping fails, the stripped config is empty, the
            scratch file cannot be written, or `wg syncconf` rejects it
    """
    payload = strip_config(config)
    if not payload.strip():
        raise ApplyError(
            f"unable to sync the wireguard config: {config.config_path} "
            "has no usable configuration after stripping"
        )

    write_scratch(payload, scratch_path)

    run_command(
        ["wg", "syncconf", name, scratch_path],
        ApplyError,
        "sync the wireguard config",
        timeout=config.command_timeout,
    )
    logger.info(f"Applied {config.config_path} to {name}")
