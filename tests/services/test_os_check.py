from types import SimpleNamespace

import pytest
from rich.console import Console

from fermentrack_installer.errors import InstallerError
from fermentrack_installer.models import OsIdentity, OsSupport, PhaseStatus, RunConfig
from fermentrack_installer.services.os_check import OsCheckService, classify, parse_os_release
from fermentrack_installer.services.prompt import PromptService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class RecordingPrompt:
    def __init__(self, answer=True):
        self.answer = answer
        self.questions = []

    def require_confirmation(self, question, unattended):
        self.questions.append((question, unattended))
        if not self.answer:
            raise InstallerError("Installation cancelled by user.")


def _os_release(tmp_path, distro_id, pretty_name):
    path = tmp_path / "os-release"
    path.write_text(
        f'PRETTY_NAME="{pretty_name}"\nNAME="{pretty_name}"\nID={distro_id}\nVERSION_ID="12"\n',
        encoding="utf-8",
    )
    return path


def _service(tmp_path, fake_runner, prompt, os_release_path, system="Linux"):
    fake_runner.available.add("apt-get")
    return OsCheckService(
        logger=DummyLogger(),
        console=Console(record=True, width=200),
        runner=fake_runner,
        prompt=prompt,
        os_release_path=str(os_release_path),
        platform_module=SimpleNamespace(system=lambda: system),
    )


def test_parse_os_release_handles_quotes_and_comments():
    values = parse_os_release(
        '# comment\nPRETTY_NAME="Debian GNU/Linux 12 (bookworm)"\nID=debian\nHOME_URL=\'https://x\'\n\n'
    )

    assert values["PRETTY_NAME"] == "Debian GNU/Linux 12 (bookworm)"
    assert values["ID"] == "debian"
    assert values["HOME_URL"] == "https://x"


@pytest.mark.parametrize(
    "distro_id, expected",
    [
        ("debian", OsSupport.SUPPORTED),
        ("raspbian", OsSupport.SUPPORTED),
        ("ubuntu", OsSupport.UNTESTED),
        ("fedora", OsSupport.UNKNOWN),
    ],
)
def test_classify(distro_id, expected):
    assert classify(OsIdentity(id=distro_id)) is expected


@pytest.mark.parametrize("distro_id", ["debian", "raspbian"])
def test_supported_distribution_passes_without_prompting(tmp_path, fake_runner, distro_id):
    prompt = RecordingPrompt()
    service = _service(tmp_path, fake_runner, prompt, _os_release(tmp_path, distro_id, "Debian GNU/Linux 12"))

    result = service.check(RunConfig(install_dir=tmp_path, unattended=False))

    assert result.status is PhaseStatus.SUCCESS
    assert prompt.questions == []


@pytest.mark.parametrize("distro_id", ["ubuntu", "arch"])
def test_untested_distribution_continues_in_unattended_mode(tmp_path, fake_runner, distro_id):
    console = Console(record=True, width=200)

    def never_asked(*_args, **_kwargs):
        raise AssertionError("unattended mode must not prompt")

    prompt = PromptService(logger=DummyLogger(), console=console, confirm=never_asked)
    service = _service(tmp_path, fake_runner, prompt, _os_release(tmp_path, distro_id, "Some Linux"))
    service.console = console

    result = service.check(RunConfig(install_dir=tmp_path, unattended=True))

    assert result.status is PhaseStatus.WARNING
    output = console.export_text()
    assert "not a tested distribution" in output
    assert "Unattended mode: continuing" in output


def test_unknown_distribution_declined_in_interactive_mode(tmp_path, fake_runner):
    prompt = RecordingPrompt(answer=False)
    service = _service(tmp_path, fake_runner, prompt, _os_release(tmp_path, "fedora", "Fedora Linux 40"))

    with pytest.raises(InstallerError, match="cancelled"):
        service.check(RunConfig(install_dir=tmp_path, unattended=False))

    assert prompt.questions == [("Do you want to continue anyway?", False)]


def test_non_linux_kernel_is_fatal(tmp_path, fake_runner):
    service = _service(
        tmp_path,
        fake_runner,
        RecordingPrompt(),
        _os_release(tmp_path, "debian", "Debian"),
        system="Darwin",
    )

    with pytest.raises(InstallerError, match="only supports Linux"):
        service.check(RunConfig(install_dir=tmp_path))


def test_missing_os_release_is_fatal(tmp_path, fake_runner):
    service = _service(tmp_path, fake_runner, RecordingPrompt(), tmp_path / "missing-os-release")

    with pytest.raises(InstallerError, match="Cannot detect OS"):
        service.check(RunConfig(install_dir=tmp_path))


def test_missing_apt_get_is_fatal(tmp_path, fake_runner):
    service = _service(tmp_path, fake_runner, RecordingPrompt(), _os_release(tmp_path, "debian", "Debian"))
    fake_runner.available.discard("apt-get")

    with pytest.raises(InstallerError, match="apt-get is not available"):
        service.check(RunConfig(install_dir=tmp_path))
