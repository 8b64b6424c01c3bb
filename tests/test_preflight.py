"""
Tests for wglan.preflight module.
"""

import logging

from wglan.preflight import (
    check_interface_absent,
    check_root_privileges,
    check_tools_available,
    run_preflight_checks,
)


class TestChecks:
    """Tests for the individual checks."""

    def test_root(self, monkeypatch):
        monkeypatch.setattr("wglan.preflight.os.geteuid", lambda: 0)
        ok, message = check_root_privileges()
        assert ok
        assert "root" in message

    def test_not_root(self, monkeypatch):
        monkeypatch.setattr("wglan.preflight.os.geteuid", lambda: 1000)
        ok, _ = check_root_privileges()
        assert not ok

    def test_missing_tools_listed(self, monkeypatch):
        monkeypatch.setattr(
            "wglan.preflight.shutil.which",
            lambda tool: None if tool.startswith("wg") else f"/usr/bin/{tool}",
        )

        ok, message = check_tools_available()

        assert not ok
        assert "wg, wg-quick" in message

    def test_all_tools_present(self, monkeypatch):
        monkeypatch.setattr("wglan.preflight.shutil.which", lambda tool: f"/usr/bin/{tool}")
        ok, _ = check_tools_available()
        assert ok

    def test_leftover_interface(self, tmp_path):
        (tmp_path / "wg0").mkdir()

        ok, message = check_interface_absent("wg0", str(tmp_path))

        assert not ok
        assert "ip link del wg0" in message

    def test_interface_absent(self, tmp_path):
        (tmp_path / "eth0").mkdir()
        ok, _ = check_interface_absent("wg0", str(tmp_path))
        assert ok


class TestRunPreflightChecks:
    """Tests for run_preflight_checks."""

    def test_failures_logged_as_warning(self, monkeypatch, caplog):
        monkeypatch.setattr("wglan.preflight.os.geteuid", lambda: 1000)
        monkeypatch.setattr(logging.getLogger("wglan"), "propagate", True)

        with caplog.at_level(logging.DEBUG, logger="wglan.preflight"):
            results = run_preflight_checks()

        names = [name for name, _, _ in results]
        assert names == ["Privileges", "Tools", "Interface"]
        assert any(r.levelno == logging.WARNING and "[PREFLIGHT]" in r.getMessage()
                   for r in caplog.records)

    def test_never_raises(self, monkeypatch):
        monkeypatch.setattr("wglan.preflight.shutil.which", lambda tool: None)
        monkeypatch.setattr("wglan.preflight.os.geteuid", lambda: 1000)
        results = run_preflight_checks()
        assert [ok for name, ok, _ in results if name != "Interface"] == [False, False]
