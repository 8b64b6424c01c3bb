"""
Configuration constants and runtime settings for wglan.

All paths, names and tunable defaults are centralized here. The runtime
settings are resolved once at startup from the environment and passed to
every lifecycle step as an immutable value.
"""

from __future__ import annotations

import ipaddress
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigError


# ---------------- Interface Constants ----------------

INTERFACE_NAME = "wg0"
INTERFACE_TYPE = "wireguard"
KERNEL_MODULE = "wireguard"
LISTEN_PORT = 51820


# ---------------- File Paths ----------------

DEFAULT_CONFIG_PATH = "/etc/wireguard/wg0.conf"
SCRATCH_PATH = "/tmp/wg0.conf"  # Stripped payload handed to `wg syncconf`
MODULES_PATH = "/proc/modules"

CONFIG_FILE_MODE = 0o700
SCRATCH_FILE_MODE = 0o600


# ---------------- Defaults ----------------

DEFAULT_SUBNET = "10.32.42.0/24"
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------- Logging Configuration ----------------

LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB per log file
LOG_BACKUP_COUNT = 5  # Keep 5 rotated log files


# ---------------- Environment Variables ----------------

ENV_CONFIG_PATH = "INTERFACE_CONFIG_PATH"
ENV_SUBNET = "SUBNET"
ENV_COMMAND_TIMEOUT = "COMMAND_TIMEOUT"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FILE = "LOG_FILE"


@dataclass(frozen=True)
class RuntimeConfig:
    """Settings resolved once at startup."""

    config_path: str = DEFAULT_CONFIG_PATH
    subnet: ipaddress.IPv4Network = ipaddress.IPv4Network(DEFAULT_SUBNET)
    command_timeout: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None

    @property
    def interface_address(self) -> str:
        """The server's own address on the subnet, in CIDR notation."""
        return interface_address(self.subnet)


def interface_address(subnet: ipaddress.IPv4Network) -> str:
    """
    Return the first usable address of a subnet with the subnet's prefix.

    The subnet must be canonical (host bits zero) and leave at least one
    host bit, so a /32 is rejected.

    Example:
        10.32.42.0/24 -> "10.32.42.1/24"
    """
    if subnet.prefixlen > 31:
        raise ConfigError(
            f"subnet {subnet} leaves no room for an interface address",
            value=str(subnet),
        )
    return f"{subnet.network_address + 1}/{subnet.prefixlen}"


def parse_subnet(value: str) -> ipaddress.IPv4Network:
    """
    Parse a CIDR string into a canonical IPv4 network.

    Any host bits the operator supplied are discarded, so
    "192.168.5.17/28" becomes 192.168.5.16/28.
    """
    if "/" not in value:
        raise ConfigError(f"unable to parse subnet {value!r}: missing prefix length", value=value)

    try:
        iface = ipaddress.ip_interface(value.strip())
    except ValueError as e:
        raise ConfigError(f"unable to parse subnet {value!r}: {e}", value=value) from e

    if iface.version != 4:
        raise ConfigError(f"unable to parse subnet {value!r}: only IPv4 is supported", value=value)

    subnet = iface.network
    if subnet.prefixlen > 31:
        raise ConfigError(
            f"subnet {value!r} leaves no room for an interface address",
            value=value,
        )
    return subnet


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError as e:
        raise ConfigError(f"invalid {ENV_COMMAND_TIMEOUT} {value!r}: {e}", value=value) from e
    if timeout <= 0:
        raise ConfigError(f"invalid {ENV_COMMAND_TIMEOUT} {value!r}: must be positive", value=value)
    return timeout


def _parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"invalid {ENV_LOG_LEVEL} {value!r}: expected one of {', '.join(LOG_LEVELS)}",
            value=value,
        )
    return level


def resolve_settings(environ: Optional[Mapping[str, str]] = None) -> RuntimeConfig:
    """
    Build the runtime settings from defaults and environment overrides.

    Args:
        environ: Mapping to read overrides from (defaults to os.environ)

    Returns:
        Fully populated RuntimeConfig

    Raises:
        ConfigError: If an override cannot be parsed
    """
    env = os.environ if environ is None else environ

    config_path = env.get(ENV_CONFIG_PATH, DEFAULT_CONFIG_PATH)

    subnet = ipaddress.IPv4Network(DEFAULT_SUBNET)
    if ENV_SUBNET in env:
        subnet = parse_subnet(env[ENV_SUBNET])

    command_timeout = None
    if env.get(ENV_COMMAND_TIMEOUT):
        command_timeout = _parse_timeout(env[ENV_COMMAND_TIMEOUT])

    log_level = DEFAULT_LOG_LEVEL
    if env.get(ENV_LOG_LEVEL):
        log_level = _parse_log_level(env[ENV_LOG_LEVEL])

    return RuntimeConfig(
        config_path=config_path,
        subnet=subnet,
        command_timeout=command_timeout,
        log_level=log_level,
        log_file=env.get(ENV_LOG_FILE) or None,
    )
