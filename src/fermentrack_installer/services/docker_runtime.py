"""Docker installation, access checks and compose lifecycle."""

import getpass
import os
import tempfile
from typing import List, Optional

from fermentrack_installer.constants import COMPOSE_FILE, DOCKER_GROUP, DOCKER_INSTALL_SCRIPT_URL
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import DockerAccess, PhaseResult, RunConfig

RELOGIN_MESSAGE = (
    "You need to log out and log back in for Docker group membership to take effect.\n"
    "After logging back in, re-run this installer."
)


def current_user() -> str:
    name = os.environ.get("SUDO_USER") or os.environ.get("USER")
    if name:
        return name
    try:
        return getpass.getuser()
    except (KeyError, OSError) as exc:
        raise InstallerError(f"Could not determine the current user name: {exc}") from exc


class DockerRuntimeService:
    """Manages the docker engine, group access, and docker-compose commands."""

    def __init__(self, logger, console, runner, download_service, user: Optional[str] = None):
        self.logger = logger
        self.console = console
        self.runner = runner
        self.download_service = download_service
        self._user = user
        self._compose_cmd: Optional[List[str]] = None

    @property
    def user(self) -> str:
        if self._user is None:
            self._user = current_user()
        return self._user

    def is_installed(self) -> bool:
        return bool(self.runner.which("docker"))

    def install(self):
        self.console.print("[blue]Installing Docker...[/blue]")
        with tempfile.TemporaryDirectory(prefix="fermentrack-docker-") as temp_dir:
            script_path = os.path.join(temp_dir, "get-docker.sh")
            self.download_service.download_file(
                DOCKER_INSTALL_SCRIPT_URL, script_path, "Downloading Docker install script..."
            )
            result = self.runner.run(["sh", script_path], check=False)

        if result.returncode != 0 or not self.is_installed():
            raise InstallerError(actionable_error("docker_install_failed"))
        self.console.print("[green]Docker installed successfully.[/green]")

    def probe_access(self) -> DockerAccess:
        groups = self.runner.output(["id", "-nG", self.user]).split()
        return DockerAccess(
            in_group=DOCKER_GROUP in groups,
            usable=self.runner.succeeds(["docker", "ps"]),
        )

    def add_user_to_group(self):
        self.console.print(f"[blue]Adding user '{self.user}' to the {DOCKER_GROUP} group...[/blue]")
        cmd = self.runner.privileged(["usermod", "-aG", DOCKER_GROUP, self.user])
        result = self.runner.run(cmd, check=False)
        if result.returncode != 0:
            raise InstallerError(actionable_error("docker_group_failed", user=self.user))

    def setup(self, config: RunConfig) -> PhaseResult:
        self.console.print("[blue]Setting up Docker...[/blue]")

        if self.is_installed():
            self.console.print("[green]Docker is already installed.[/green]")
        else:
            self.install()

        access = self.probe_access()
        self.logger.info(
            "Docker access for '%s': in_group=%s usable=%s", self.user, access.in_group, access.usable
        )

        if access.in_group and access.usable:
            self.console.print("[green]Docker is properly configured and ready to use.[/green]")
            return PhaseResult.success("Docker ready")

        if not access.in_group:
            self.add_user_to_group()

        return PhaseResult.action_required(RELOGIN_MESSAGE)

    def get_docker_compose_cmd(self) -> List[str]:
        if self._compose_cmd is not None:
            return self._compose_cmd

        if self.runner.succeeds(["docker", "compose", "version"]):
            self._compose_cmd = ["docker", "compose"]
        elif self.runner.succeeds(["docker-compose", "--version"]):
            self._compose_cmd = ["docker-compose"]
        else:
            raise InstallerError(actionable_error("compose_missing"))
        return self._compose_cmd

    def compose(self, install_dir: str, *args: str) -> bool:
        cmd = self.get_docker_compose_cmd() + ["-f", COMPOSE_FILE, *args]
        result = self.runner.run(cmd, check=False, cwd=install_dir)
        return result.returncode == 0

    def build_and_start(self, config: RunConfig) -> PhaseResult:
        install_dir = str(config.install_dir)
        self.console.print("[blue]Building Docker containers...[/blue]")
        if not self.compose(install_dir, "build"):
            raise InstallerError(actionable_error("compose_build_failed"))
        self.console.print("[green]Docker build complete[/green]")

        if config.no_start:
            self.console.print("[blue]Skipping service start (--no-start flag provided)[/blue]")
            return PhaseResult.skipped("Containers built, not started")

        self.console.print("[blue]Starting Fermentrack 2 services...[/blue]")
        if not self.compose(install_dir, "up", "-d"):
            raise InstallerError(actionable_error("compose_up_failed"))
        self.console.print("[green]Services started[/green]")
        return PhaseResult.success("Services started")
