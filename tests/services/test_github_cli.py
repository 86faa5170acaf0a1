from pathlib import Path

import pytest
from rich.console import Console

from fermentrack_installer.constants import GH_KEYRING_PATH, GH_KEYRING_URL, GH_SOURCE_LIST_PATH
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.models import PhaseStatus, RunConfig
from fermentrack_installer.services.apt import AptService
from fermentrack_installer.services.github_cli import GithubCliService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None


class FakeDownloadService:
    def __init__(self):
        self.urls = []

    def download_file(self, url, dest_path, description="Downloading..."):
        self.urls.append(url)
        Path(dest_path).write_bytes(b"payload")


def _service(fake_runner, download_service=None) -> GithubCliService:
    return GithubCliService(
        logger=DummyLogger(),
        console=Console(record=True),
        runner=fake_runner,
        apt=AptService(logger=DummyLogger(), runner=fake_runner),
        download_service=download_service or FakeDownloadService(),
    )


def test_authenticated_setup_configures_git_and_validates_access(tmp_path, fake_runner):
    fake_runner.available.add("gh")

    result = _service(fake_runner).setup(RunConfig(install_dir=tmp_path))

    assert result.status is PhaseStatus.SUCCESS
    assert fake_runner.commands == [
        ["gh", "auth", "status"],
        ["gh", "auth", "setup-git"],
        ["gh", "repo", "view", "thorrak/fermentrack_2", "--json", "name"],
    ]


def test_unauthenticated_unattended_run_fails_fast(tmp_path, fake_runner):
    fake_runner.available.add("gh")
    fake_runner.on(["gh", "auth", "status"], returncode=1)

    with pytest.raises(InstallerError, match="gh auth login"):
        _service(fake_runner).setup(RunConfig(install_dir=tmp_path, unattended=True))

    assert fake_runner.count(["gh", "auth", "login"]) == 0


def test_unauthenticated_interactive_run_starts_login(tmp_path, fake_runner):
    fake_runner.available.add("gh")
    fake_runner.on(["gh", "auth", "status"], returncode=1)

    _service(fake_runner).setup(RunConfig(install_dir=tmp_path, unattended=False))

    assert fake_runner.count(["gh", "auth", "login"]) == 1
    assert fake_runner.count(["gh", "auth", "setup-git"]) == 1


def test_failed_interactive_login_is_fatal(tmp_path, fake_runner):
    fake_runner.available.add("gh")
    fake_runner.on(["gh", "auth", "status"], returncode=1)
    fake_runner.on(["gh", "auth", "login"], returncode=1)

    with pytest.raises(InstallerError, match="GitHub authentication did not complete"):
        _service(fake_runner).setup(RunConfig(install_dir=tmp_path, unattended=False))


def test_repository_access_denied_is_fatal(tmp_path, fake_runner):
    fake_runner.available.add("gh")
    fake_runner.on(["gh", "repo", "view", "thorrak/fermentrack_2", "--json", "name"], returncode=1)

    with pytest.raises(InstallerError, match="Unable to access the thorrak/fermentrack_2 repository"):
        _service(fake_runner).setup(RunConfig(install_dir=tmp_path))


def test_missing_gh_is_installed_from_github_apt_source(tmp_path, fake_runner):
    download_service = FakeDownloadService()
    fake_runner.on(["dpkg", "--print-architecture"], stdout="arm64\n")

    _service(fake_runner, download_service).setup(RunConfig(install_dir=tmp_path))

    assert download_service.urls == [GH_KEYRING_URL]
    installs = [cmd for cmd in fake_runner.commands if cmd[:2] == ["sudo", "install"]]
    assert [cmd[-1] for cmd in installs] == [GH_KEYRING_PATH, GH_SOURCE_LIST_PATH]
    assert ["sudo", "apt-get", "update"] in fake_runner.commands
    assert ["sudo", "apt-get", "install", "-y", "gh"] in fake_runner.commands
    assert fake_runner.commands.index(["sudo", "apt-get", "install", "-y", "gh"]) < fake_runner.commands.index(
        ["gh", "auth", "status"]
    )


def test_clone_reports_success(tmp_path, fake_runner):
    destination = str(tmp_path / "ft2")
    fake_runner.on(["gh", "repo", "clone", "thorrak/fermentrack_2", destination], returncode=1)

    assert _service(fake_runner).clone(destination) is False
