"""
Default configuration bootstrapping.

If no config file exists yet, a fresh server key is generated with `wg genkey`
and a minimal wireguard-ui compatible config is written. An existing file is
never inspected or replaced, even if it is empty.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import x25519

from .config import CONFIG_FILE_MODE, LISTEN_PORT, RuntimeConfig
from .exceptions import BootstrapError
from .logging_setup import format_block
from .shell import run_command

logger = logging.getLogger(__name__)

KEY_LEN = 32

DEFAULT_CONFIG_TEMPLATE = """\
# This file is managed by wireguard-ui (https://github.com/ngoduykhanh/wireguard-ui)
# and was initially generated by wglan. Peers added in the UI are applied live.

[Interface]
Address = {address}
ListenPort = {listen_port}
PrivateKey = {private_key}
"""


def render_default_config(config: RuntimeConfig, private_key: str) -> str:
    """Render the default config for a freshly generated key."""
    return DEFAULT_CONFIG_TEMPLATE.format(
        address=config.interface_address,
        listen_port=LISTEN_PORT,
        private_key=private_key,
    )


def derive_public_key(private_key: str) -> str:
    """
    Derive the base64 public key for a base64 WireGuard private key.

    Raises:
        BootstrapError: If the key is not 32 bytes of base64
    """
    try:
        raw = base64.b64decode(private_key.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise BootstrapError(f"generated private key is not valid base64: {e}") from e

    if len(raw) != KEY_LEN:
        raise BootstrapError(
            f"generated private key has {len(raw)} bytes, expected {KEY_LEN}"
        )

    public = x25519.X25519PrivateKey.from_private_bytes(raw).public_key()
    public_raw = public.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return base64.b64encode(public_raw).decode("ascii")


def generate_private_key(config: RuntimeConfig) -> str:
    """Generate a private key with `wg genkey`."""
    output = run_command(
        ["wg", "genkey"],
        BootstrapError,
        "generate a new private key",
        timeout=config.command_timeout,
        combined=False,
    )
    key = output.strip()
    if not key:
        raise BootstrapError("unable to generate a new private key: wg genkey printed nothing")
    return key


def config_exists(path: str) -> bool:
    """
    Check whether anything exists at the config path.

    Raises:
        BootstrapError: If the path cannot be checked (e.g. permission denied)
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise BootstrapError(f"unable to access the config file at {path}: {e}") from e
    return True


def write_config(path: str, content: str, mode: int = CONFIG_FILE_MODE) -> None:
    """
    Create the config file exclusively with the given mode.

    Raises:
        BootstrapError: If the file cannot be created
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    except OSError as e:
        raise BootstrapError(
            f"unable to write the default config to the file at {path}: {e}"
        ) from e

    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        # The umask may have narrowed the mode passed to os.open
        os.chmod(path, mode)
    except OSError as e:
        raise BootstrapError(
            f"unable to write the default config to the file at {path}: {e}"
        ) from e


def init_interface_config(config: RuntimeConfig) -> bool:
    """
    Ensure a config file exists at the configured path.

    Returns:
        True if a new default config was written, False if one already existed

    Raises:
        BootstrapError: On stat errors other than "absent", key generation
            failure, or write failure
    """
    path = config.config_path
    if config_exists(path):
        logger.info(f"Using the existing config at {path}")
        return False

    private_key = generate_private_key(config)
    public_key = derive_public_key(private_key)

    write_config(path, render_default_config(config, private_key))

    logger.info(format_block("BOOTSTRAP", [
        "Generated a new server config.",
        f"config     : {path}",
        f"address    : {config.interface_address}",
        f"listen port: {LISTEN_PORT}",
        f"public key : {public_key}",
    ]))
    return True
