from pathlib import Path

import pytest
from click.testing import CliRunner

import fermentrack_installer.cli as cli_module


@pytest.fixture
def captured(tmp_path, monkeypatch):
    captured = {}

    class FakeInstaller:
        def __init__(self, config):
            captured["config"] = config

        def run(self):
            return 0

    monkeypatch.setattr(cli_module, "Installer", FakeInstaller)
    monkeypatch.delenv("FERMENTRACK_INSTALLER_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return captured


def test_cli_defaults(tmp_path, captured):
    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    config = captured["config"]
    assert config.install_dir == tmp_path / "fermentrack_2"
    assert config.port == 80
    assert config.multi_tenant is False
    assert config.no_start is False
    assert config.skip_port_check is False
    assert config.unattended is True


def test_cli_maps_every_flag(tmp_path, captured):
    result = CliRunner().invoke(
        cli_module.main,
        [
            "--install-dir",
            str(tmp_path / "custom"),
            "--port",
            "8080",
            "--multi-tenant",
            "--no-start",
            "--no-port-check",
            "--interactive",
        ],
    )

    assert result.exit_code == 0
    config = captured["config"]
    assert config.install_dir == tmp_path / "custom"
    assert config.port == 8080
    assert config.multi_tenant is True
    assert config.no_start is True
    assert config.skip_port_check is True
    assert config.unattended is False


def test_help_exits_without_running_installer(captured):
    result = CliRunner().invoke(cli_module.main, ["--help"])

    assert result.exit_code == 0
    assert "--install-dir" in result.output
    assert "--no-port-check" in result.output
    assert "config" not in captured


@pytest.mark.parametrize(
    "args",
    [
        ["--bogus"],
        ["--port"],
        ["--port", "70000"],
        ["--port", "abc"],
        ["--install-dir"],
        ["--install-dir", "--no-start"],
    ],
)
def test_usage_errors_exit_with_status_one(captured, args):
    result = CliRunner().invoke(cli_module.main, args)

    assert result.exit_code == 1
    assert "config" not in captured


def test_cli_uses_default_config_file_when_present(tmp_path, captured):
    (tmp_path / ".fermentrack-installer.yml").write_text(
        "install_dir: /srv/fermentrack\n" "port: 8000\n" "multi_tenant: true\n" "unattended: false\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    config = captured["config"]
    assert config.install_dir == Path("/srv/fermentrack")
    assert config.port == 8000
    assert config.multi_tenant is True
    assert config.unattended is False


def test_cli_flags_override_config_file(tmp_path, captured, monkeypatch):
    config_file = tmp_path / "installer.yml"
    config_file.write_text("port: 8000\n" "no_start: true\n" "unattended: false\n", encoding="utf-8")
    monkeypatch.setenv("FERMENTRACK_INSTALLER_CONFIG", str(config_file))

    result = CliRunner().invoke(cli_module.main, ["--port", "9000", "--unattended"])

    assert result.exit_code == 0
    config = captured["config"]
    assert config.port == 9000
    assert config.no_start is True
    assert config.unattended is True


def test_unknown_config_key_is_a_usage_error(tmp_path, captured):
    (tmp_path / ".fermentrack-installer.yml").write_text("colour: blue\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1
    assert "Unknown configuration keys: colour" in result.output
    assert "config" not in captured


def test_installer_exit_code_is_propagated(captured, monkeypatch):
    class FailingInstaller:
        def __init__(self, config):
            pass

        def run(self):
            return 1

    monkeypatch.setattr(cli_module, "Installer", FailingInstaller)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1
