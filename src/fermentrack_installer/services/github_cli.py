"""GitHub CLI installation and authentication."""

import os
import tempfile

from fermentrack_installer.constants import (
    GH_KEYRING_PATH,
    GH_KEYRING_URL,
    GH_SOURCE_LINE,
    GH_SOURCE_LIST_PATH,
    GITHUB_REPOSITORY,
)
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import PhaseResult, RunConfig


class GithubCliService:
    """Makes sure `gh` is installed, logged in, and can see the repository."""

    def __init__(self, logger, console, runner, apt, download_service, repository: str = GITHUB_REPOSITORY):
        self.logger = logger
        self.console = console
        self.runner = runner
        self.apt = apt
        self.download_service = download_service
        self.repository = repository

    def is_installed(self) -> bool:
        return bool(self.runner.which("gh"))

    def install(self):
        self.console.print("[blue]Installing GitHub CLI...[/blue]")
        with tempfile.TemporaryDirectory(prefix="fermentrack-gh-") as temp_dir:
            keyring_path = os.path.join(temp_dir, "githubcli-archive-keyring.gpg")
            self.download_service.download_file(GH_KEYRING_URL, keyring_path, "Downloading GitHub CLI keyring...")
            self.apt.install_file(keyring_path, GH_KEYRING_PATH)

        source_line = GH_SOURCE_LINE.format(arch=self.apt.architecture(), keyring=GH_KEYRING_PATH)
        self.apt.write_file(GH_SOURCE_LIST_PATH, source_line + "\n")
        self.apt.update()
        self.apt.install(["gh"])
        self.console.print("[green]GitHub CLI installed successfully[/green]")

    def is_authenticated(self) -> bool:
        return self.runner.succeeds(["gh", "auth", "status"])

    def login(self):
        self.console.print("[blue]Starting interactive GitHub authentication...[/blue]")
        result = self.runner.run(["gh", "auth", "login"], check=False)
        if result.returncode != 0:
            raise InstallerError(actionable_error("gh_login_failed"))
        self.console.print("[green]GitHub authentication completed[/green]")

    def setup_git(self):
        self.console.print("[blue]Configuring git to use GitHub CLI credentials...[/blue]")
        result = self.runner.run(["gh", "auth", "setup-git"], check=False, capture_output=True)
        if result.returncode != 0:
            raise InstallerError(actionable_error("gh_setup_git_failed"))
        self.console.print("[green]Git credential helper configured[/green]")

    def can_access_repository(self) -> bool:
        return self.runner.succeeds(["gh", "repo", "view", self.repository, "--json", "name"])

    def clone(self, destination: str) -> bool:
        result = self.runner.run(["gh", "repo", "clone", self.repository, destination], check=False)
        return result.returncode == 0

    def setup(self, config: RunConfig) -> PhaseResult:
        self.console.print("[blue]Setting up GitHub CLI and authentication...[/blue]")

        if self.is_installed():
            self.console.print("[dim]GitHub CLI is already installed[/dim]")
        else:
            self.install()

        if self.is_authenticated():
            self.console.print("[dim]GitHub CLI is already authenticated[/dim]")
        else:
            self.console.print("[blue]GitHub CLI authentication required...[/blue]")
            if config.unattended:
                raise InstallerError(actionable_error("gh_unauthenticated"))
            self.login()

        self.setup_git()

        self.console.print("[blue]Validating access to Fermentrack repository...[/blue]")
        if not self.can_access_repository():
            raise InstallerError(actionable_error("repo_access_denied", repo=self.repository))
        self.console.print("[green]Repository access validated[/green]")
        return PhaseResult.success(f"Access to {self.repository} validated")
