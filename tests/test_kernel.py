"""
Tests for wglan.kernel module.
"""

import subprocess

import pytest

from wglan.exceptions import CapabilityError
from wglan.kernel import is_module_loaded, load_module


class TestIsModuleLoaded:
    """Tests for the module list check."""

    def test_loaded(self, modules_file):
        """Module listed at the start of a line counts as loaded."""
        path = modules_file("ip6_udp_tunnel", "wireguard", "udp_tunnel")
        assert is_module_loaded("wireguard", path)

    def test_not_loaded(self, modules_file):
        """Absent module is reported as not loaded."""
        path = modules_file("ip6_udp_tunnel", "udp_tunnel")
        assert not is_module_loaded("wireguard", path)

    def test_name_prefix_does_not_match(self, modules_file):
        """A longer module name sharing the prefix is not a match."""
        path = modules_file("wireguard_extra", "curve25519_wireguard")
        assert not is_module_loaded("wireguard", path)

    def test_unreadable_list(self, tmp_path):
        """Missing module list raises CapabilityError."""
        with pytest.raises(CapabilityError):
            is_module_loaded("wireguard", str(tmp_path / "missing"))


class TestLoadModule:
    """Tests for load_module."""

    def test_already_loaded_is_noop(self, config, fake_run, modules_file):
        """No modprobe when the module is active, however often it is called."""
        path = modules_file("wireguard")

        assert load_module(config, modules_path=path) is False
        assert load_module(config, modules_path=path) is False
        assert fake_run.calls == []

    def test_loads_when_absent(self, config, fake_run, modules_file):
        """modprobe is called with just the module name."""
        path = modules_file("udp_tunnel")

        assert load_module(config, modules_path=path) is True
        assert fake_run.commands() == [["modprobe", "wireguard"]]

    def test_load_rejected(self, config, fake_run, modules_file):
        """A rejected load raises CapabilityError with the tool output."""
        path = modules_file("udp_tunnel")
        fake_run.script(
            ["modprobe"], returncode=1,
            stdout="modprobe: FATAL: Module wireguard not found\n",
        )

        with pytest.raises(CapabilityError) as exc_info:
            load_module(config, modules_path=path)

        assert "Module wireguard not found" in exc_info.value.output
        assert exc_info.value.returncode == 1

    def test_lost_race_counts_as_loaded(self, config, monkeypatch, modules_file):
        """If the load fails but the module appears meanwhile, it is accepted."""
        path = modules_file("udp_tunnel")

        def _racing_load(argv, **kwargs):
            modules_file("udp_tunnel", "wireguard")
            return subprocess.CompletedProcess(
                argv, 1, "modprobe: ERROR: could not insert 'wireguard': File exists\n", None,
            )

        monkeypatch.setattr("wglan.shell.subprocess.run", _racing_load)

        assert load_module(config, modules_path=path) is False

    def test_unreadable_list_does_not_load(self, config, fake_run, tmp_path):
        """An unreadable module list fails before any load attempt."""
        with pytest.raises(CapabilityError):
            load_module(config, modules_path=str(tmp_path / "missing"))
        assert fake_run.calls == []
