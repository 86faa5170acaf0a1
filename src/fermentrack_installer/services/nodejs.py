"""Node.js runtime checks and installation."""

import os
import tempfile
from typing import Optional

from packaging import version

from fermentrack_installer.constants import NODE_LTS_MAJOR, NODE_MIN_MAJOR, NODESOURCE_SETUP_URL
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import PhaseResult, RunConfig


def parse_major_version(raw: str) -> Optional[int]:
    """Return the major component of a `node --version` string such as `v20.10.0`."""
    clean = raw.strip()
    if clean[:1] in ("v", "V"):
        clean = clean[1:]
    try:
        return version.parse(clean).major
    except version.InvalidVersion:
        return None


class NodeRuntimeService:
    def __init__(
        self,
        logger,
        console,
        runner,
        apt,
        download_service,
        min_major: int = NODE_MIN_MAJOR,
        lts_major: int = NODE_LTS_MAJOR,
    ):
        self.logger = logger
        self.console = console
        self.runner = runner
        self.apt = apt
        self.download_service = download_service
        self.min_major = min_major
        self.lts_major = lts_major

    def installed_version(self) -> Optional[str]:
        if not self.runner.which("node"):
            return None
        return self.runner.output(["node", "--version"])

    def install(self):
        self.console.print(
            f"[blue]Node.js is not installed. Installing Node.js {self.lts_major} LTS via NodeSource...[/blue]"
        )
        setup_url = NODESOURCE_SETUP_URL.format(major=self.lts_major)

        with tempfile.TemporaryDirectory(prefix="fermentrack-node-") as temp_dir:
            script_path = os.path.join(temp_dir, "nodesource_setup.sh")
            self.download_service.download_file(setup_url, script_path, "Downloading NodeSource setup...")
            self.console.print("[blue]Adding NodeSource repository...[/blue]")
            result = self.runner.run(self.runner.privileged(["bash", script_path], preserve_env=True), check=False)

        if result.returncode != 0:
            raise InstallerError(actionable_error("node_install_failed", major=str(self.min_major)))

        self.console.print("[blue]Installing Node.js package...[/blue]")
        self.apt.install(["nodejs"])

        if not (self.runner.which("node") and self.runner.which("npm")):
            raise InstallerError(actionable_error("node_install_failed", major=str(self.min_major)))

        node_version = self.runner.output(["node", "--version"])
        npm_version = self.runner.output(["npm", "--version"])
        self.console.print(f"[green]Node.js {node_version} installed successfully.[/green]")
        self.console.print(f"[green]npm {npm_version} installed successfully.[/green]")

    def setup(self, config: RunConfig) -> PhaseResult:
        self.console.print("[blue]Checking Node.js installation...[/blue]")

        node_version = self.installed_version()
        if node_version is None:
            self.install()
            return PhaseResult.success("Node.js installed")

        major = parse_major_version(node_version)
        if major is None:
            self.console.print(
                f"[yellow]Warning:[/yellow] Could not determine the Node.js version from '{node_version}'."
            )
            self.logger.warning("Unparsable Node.js version: %r", node_version)
            return PhaseResult.warning(f"Unknown Node.js version '{node_version}'")

        if major < self.min_major:
            self.console.print(
                f"[yellow]Warning:[/yellow] Node.js {node_version} is installed but is outdated "
                f"(major version {major} < {self.min_major})."
            )
            self.console.print(
                f"[yellow]Warning:[/yellow] It is recommended to upgrade to Node.js {self.min_major} or later."
            )
            self.console.print("[yellow]Warning:[/yellow] Continuing with the current version...")
            return PhaseResult.warning(f"Node.js {node_version} is older than {self.min_major}")

        self.console.print(
            f"[green]Node.js {node_version} is installed and meets the minimum requirement "
            f"(>= {self.min_major}).[/green]"
        )
        return PhaseResult.success(f"Node.js {node_version}")
