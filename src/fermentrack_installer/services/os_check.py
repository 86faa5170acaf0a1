"""Operating system compatibility checks."""

import platform
import shlex
from pathlib import Path
from typing import Dict

from fermentrack_installer.constants import (
    OS_RELEASE_PATH,
    SUPPORTED_DISTRIBUTIONS,
    UNTESTED_DISTRIBUTIONS,
)
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import OsIdentity, OsSupport, PhaseResult, RunConfig


def parse_os_release(content: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            parts = [raw_value.strip("\"'")]
        values[key.strip()] = " ".join(parts)
    return values


def classify(identity: OsIdentity) -> OsSupport:
    if identity.id in SUPPORTED_DISTRIBUTIONS:
        return OsSupport.SUPPORTED
    if identity.id in UNTESTED_DISTRIBUTIONS:
        return OsSupport.UNTESTED
    return OsSupport.UNKNOWN


class OsCheckService:
    """Verifies the host is a Linux distribution the installer can work with."""

    def __init__(
        self,
        logger,
        console,
        runner,
        prompt,
        os_release_path: str = OS_RELEASE_PATH,
        platform_module=platform,
    ):
        self.logger = logger
        self.console = console
        self.runner = runner
        self.prompt = prompt
        self.os_release_path = Path(os_release_path)
        self.platform = platform_module

    def read_identity(self) -> OsIdentity:
        if not self.os_release_path.is_file():
            raise InstallerError(actionable_error("os_release_missing", path=str(self.os_release_path)))

        try:
            content = self.os_release_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InstallerError(f"Could not read {self.os_release_path}: {exc}") from exc

        values = parse_os_release(content)
        return OsIdentity(
            id=values.get("ID", "unknown").lower() or "unknown",
            pretty_name=values.get("PRETTY_NAME", ""),
        )

    def check(self, config: RunConfig) -> PhaseResult:
        self.console.print("[blue]Checking operating system compatibility...[/blue]")

        if self.platform.system() != "Linux":
            raise InstallerError(actionable_error("unsupported_kernel"))

        identity = self.read_identity()
        support = classify(identity)
        self.logger.info("Detected OS '%s' (%s): %s", identity.id, identity.display_name, support.value)

        if support is OsSupport.SUPPORTED:
            self.console.print(f"[green]Running on {identity.display_name}[/green]")
        else:
            self.console.print(
                f"[yellow]Warning:[/yellow] Running on {identity.display_name}, "
                "which is not a tested distribution."
            )
            if support is OsSupport.UNTESTED:
                self.console.print(
                    "[yellow]Warning:[/yellow] The installer may work, "
                    "but is designed for Debian/Raspbian."
                )
            else:
                self.console.print("[yellow]Warning:[/yellow] The installer is designed for Debian/Raspbian.")
            self.prompt.require_confirmation("Do you want to continue anyway?", config.unattended)

        if not self.runner.which("apt-get"):
            raise InstallerError(actionable_error("apt_missing"))

        self.console.print("[green]Operating system check passed.[/green]")
        if support is OsSupport.SUPPORTED:
            return PhaseResult.success(f"Running on {identity.display_name}")
        return PhaseResult.warning(f"{identity.display_name} is not a tested distribution")
