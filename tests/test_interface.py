"""
Tests for wglan.interface and wglan.firewall modules.
"""

import dataclasses
import ipaddress

import pytest

from wglan.exceptions import ActivationError, PolicyError, ProvisioningError
from wglan.firewall import set_forward_policy
from wglan.interface import create_interface, set_interface_up


class TestCreateInterface:
    """Tests for create_interface."""

    def test_creates_and_assigns_address(self, config, fake_run):
        """Link is created, then the first subnet address is assigned."""
        addr = create_interface(config)

        assert addr == "10.32.42.1/24"
        assert fake_run.commands() == [
            ["ip", "link", "add", "wg0", "type", "wireguard"],
            ["ip", "addr", "add", "10.32.42.1/24", "dev", "wg0"],
        ]

    def test_custom_subnet(self, config, fake_run):
        """The assigned address follows the configured subnet."""
        config = dataclasses.replace(config, subnet=ipaddress.IPv4Network("192.168.5.16/28"))

        create_interface(config)

        assert fake_run.commands()[1] == ["ip", "addr", "add", "192.168.5.17/28", "dev", "wg0"]

    def test_name_collision(self, config, fake_run):
        """A leftover interface makes creation fail without further commands."""
        fake_run.script(["ip", "link", "add"], returncode=2, stdout="RTNETLINK answers: File exists\n")

        with pytest.raises(ProvisioningError) as exc_info:
            create_interface(config)

        assert "File exists" in exc_info.value.output
        assert len(fake_run.calls) == 1

    def test_address_assignment_failure(self, config, fake_run):
        """Address assignment failure is a ProvisioningError; nothing is undone."""
        fake_run.script(["ip", "addr", "add"], returncode=2, stdout="Error: ipv4: Address already assigned.\n")

        with pytest.raises(ProvisioningError):
            create_interface(config)

        assert len(fake_run.calls) == 2
        assert not any(cmd[:3] == ["ip", "link", "del"] for cmd in fake_run.commands())

    def test_timeout_passed_through(self, config, fake_run):
        """The configured command timeout reaches subprocess."""
        config = dataclasses.replace(config, command_timeout=5.0)

        create_interface(config)

        assert all(kwargs["timeout"] == 5.0 for _, kwargs in fake_run.calls)


class TestSetInterfaceUp:
    """Tests for set_interface_up."""

    def test_sets_link_up(self, config, fake_run):
        set_interface_up(config)
        assert fake_run.commands() == [["ip", "link", "set", "wg0", "up"]]

    def test_failure_carries_output(self, config, fake_run):
        fake_run.script(["ip", "link", "set"], returncode=1, stdout='Cannot find device "wg0"\n')

        with pytest.raises(ActivationError) as exc_info:
            set_interface_up(config)

        assert 'Cannot find device "wg0"' in exc_info.value.output


class TestSetForwardPolicy:
    """Tests for set_forward_policy."""

    def test_sets_accept(self, config, fake_run):
        set_forward_policy(config)
        assert fake_run.commands() == [["iptables", "-P", "FORWARD", "ACCEPT"]]

    def test_permission_denied(self, config, fake_run):
        fake_run.script(
            ["iptables"], returncode=4,
            stdout="iptables v1.8.7 (nf_tables): Could not fetch rule set generation id: Permission denied\n",
        )

        with pytest.raises(PolicyError) as exc_info:
            set_forward_policy(config)

        assert "Permission denied" in str(exc_info.value)
