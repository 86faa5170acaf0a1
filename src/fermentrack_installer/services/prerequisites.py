"""System prerequisite installation."""

from typing import Sequence

from fermentrack_installer.constants import REQUIRED_PACKAGES
from fermentrack_installer.models import PhaseResult, RunConfig


class PrerequisiteService:
    """Installs whichever required packages are not already present."""

    def __init__(self, logger, console, apt, packages: Sequence[str] = REQUIRED_PACKAGES):
        self.logger = logger
        self.console = console
        self.apt = apt
        self.packages = tuple(packages)

    def install(self, config: RunConfig) -> PhaseResult:
        self.console.print("[blue]Installing prerequisites...[/blue]")

        missing = self.apt.missing(self.packages)
        for package in self.packages:
            if package in missing:
                self.console.print(f"[blue]Package '{package}' needs to be installed.[/blue]")
            else:
                self.console.print(f"[dim]Package '{package}' is already installed.[/dim]")

        if not missing:
            self.console.print("[green]All prerequisite packages are already installed.[/green]")
            return PhaseResult.success("All prerequisites present")

        self.console.print(f"[blue]Installing missing packages: {' '.join(missing)}[/blue]")
        self.logger.info("Installing prerequisites: %s", ", ".join(missing))
        self.console.print("[blue]Updating package lists...[/blue]")
        self.apt.update()
        self.apt.install(missing)

        self.console.print(f"[green]Successfully installed: {' '.join(missing)}[/green]")
        return PhaseResult.success(f"Installed {', '.join(missing)}")
