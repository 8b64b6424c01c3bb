"""
wglan - keeps a WireGuard interface in sync with a wireguard-ui config file.

Creates the wg0 interface, bootstraps a default config if none exists, and
re-applies the config live whenever the file changes.
"""

__version__ = "1.0.0"
__author__ = "wglan Contributors"
