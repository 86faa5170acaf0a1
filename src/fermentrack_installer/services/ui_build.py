"""Frontend build for the cloned repository."""

from pathlib import Path

from fermentrack_installer.constants import UI_DIRNAME
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import PhaseResult, RunConfig


class UiBuildService:
    def __init__(self, logger, console, runner):
        self.logger = logger
        self.console = console
        self.runner = runner

    def build(self, config: RunConfig) -> PhaseResult:
        ui_dir = str(Path(config.install_dir) / UI_DIRNAME)
        self.console.print("[blue]Building Fermentrack 2 UI...[/blue]")

        self.console.print("[blue]Installing npm dependencies...[/blue]")
        if self.runner.run(["npm", "install"], check=False, cwd=ui_dir).returncode != 0:
            raise InstallerError(actionable_error("npm_install_failed"))

        self.console.print("[blue]Building UI application...[/blue]")
        if self.runner.run(["npm", "run", "build"], check=False, cwd=ui_dir).returncode != 0:
            raise InstallerError(actionable_error("ui_build_failed"))

        self.console.print("[green]UI build complete[/green]")
        return PhaseResult.success("UI built")
