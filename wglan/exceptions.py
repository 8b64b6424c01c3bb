"""
Custom exceptions for wglan.

One exception type per lifecycle step, so the top-level caller can tell which
stage of bringing up the interface failed.
"""

from typing import Optional, Sequence


class WgLanError(Exception):
    """Base exception for all wglan errors."""
    pass


# ---------------- Settings Errors ----------------

class ConfigError(WgLanError):
    """An environment override could not be parsed."""

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(message)
        self.value = value


# ---------------- Command Errors ----------------

class CommandError(WgLanError):
    """
    Base class for errors raised from an external command.

    Carries the command line, exit status and combined output so the
    operator can see what the tool actually complained about.
    """

    def __init__(
        self,
        message: str,
        argv: Sequence[str] = (),
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output


class CapabilityError(CommandError):
    """The wireguard kernel module could not be queried or loaded."""
    pass


class ProvisioningError(CommandError):
    """Interface creation or address assignment failed."""
    pass


class PolicyError(CommandError):
    """Setting the forwarding policy failed."""
    pass


class BootstrapError(CommandError):
    """Key generation or writing the default config failed."""
    pass


class ApplyError(CommandError):
    """Stripping or syncing the config onto the interface failed."""
    pass


class ActivationError(CommandError):
    """Bringing the interface up failed."""
    pass


# ---------------- Watch Errors ----------------

class WatchError(WgLanError):
    """Registering a watch on the config file failed."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


# ---------------- Lifecycle Errors ----------------

class StartupError(WgLanError):
    """A startup step failed. The step's own error is kept as .cause."""

    def __init__(self, step: str, description: str, cause: WgLanError):
        super().__init__(f"unable to {description}: {cause}")
        self.step = step
        self.cause = cause


class MonitorError(WgLanError):
    """The reconciliation loop stopped on an error, kept as .cause."""

    def __init__(self, cause: WgLanError):
        super().__init__(f"an error occurred while watching for interface changes: {cause}")
        self.cause = cause
