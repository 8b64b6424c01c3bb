"""
Pytest configuration and fixtures for wglan tests.
"""

import ipaddress
import os
import subprocess
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wglan.config import RuntimeConfig


# X25519 key pair from RFC 7748 section 6.1 (Alice), base64 encoded
TEST_PRIVATE_KEY = "dwdtCnMYpX08FsFyUbJmRd9ML4frwJkqsXf7pR25LCo="
TEST_PUBLIC_KEY = "hSDwCYkwp1R0i33ctD73Wg2/Og0mOBr066SpjqqbTmo="


class FakeRunner:
    """
    Stand-in for subprocess.run that records calls and replays scripted results.

    Responses are keyed by a prefix of the argv, e.g. ("wg", "genkey").
    Unscripted commands succeed with empty output.
    """

    def __init__(self):
        self.calls = []
        self.responses = {}

    def script(self, prefix, returncode=0, stdout="", stderr="", exc=None):
        self.responses[tuple(prefix)] = (returncode, stdout, stderr, exc)

    def commands(self):
        return [call[0] for call in self.calls]

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        for length in range(len(argv), 0, -1):
            response = self.responses.get(tuple(argv[:length]))
            if response is not None:
                returncode, stdout, stderr, exc = response
                if exc is not None:
                    raise exc
                if kwargs.get("stderr") == subprocess.STDOUT:
                    stdout, stderr = stdout + stderr, None
                return subprocess.CompletedProcess(argv, returncode, stdout, stderr)
        return subprocess.CompletedProcess(argv, 0, "", None)


@pytest.fixture
def fake_run(monkeypatch):
    """Replace subprocess.run in the command runner."""
    runner = FakeRunner()
    monkeypatch.setattr("wglan.shell.subprocess.run", runner)
    return runner


@pytest.fixture
def config(tmp_path):
    """Runtime config pointing at a temporary config file path."""
    return RuntimeConfig(
        config_path=str(tmp_path / "wg0.conf"),
        subnet=ipaddress.IPv4Network("10.32.42.0/24"),
    )


@pytest.fixture
def modules_file(tmp_path):
    """Write a fake /proc/modules listing and return its path."""
    def _write(*names):
        path = tmp_path / "modules"
        lines = [f"{name} 118784 0 - Live 0x0000000000000000" for name in names]
        path.write_text("\n".join(lines) + "\n")
        return str(path)
    return _write
