"""Debian package management helpers."""

import os
import tempfile
from typing import Iterable, List, Sequence

from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error


class AptService:
    """Wraps dpkg/apt-get queries and installs behind the command runner."""

    def __init__(self, logger, runner):
        self.logger = logger
        self.runner = runner

    def is_installed(self, package: str) -> bool:
        if self.runner.succeeds(["dpkg", "-s", package]):
            self.logger.debug("Package '%s' is installed according to dpkg.", package)
            return True
        if self.runner.which(package):
            self.logger.debug("Command '%s' is available on PATH.", package)
            return True
        return False

    def missing(self, packages: Iterable[str]) -> List[str]:
        return [package for package in packages if not self.is_installed(package)]

    def update(self):
        result = self.runner.run(self.runner.privileged(["apt-get", "update"]), check=False)
        if result.returncode != 0:
            raise InstallerError(actionable_error("apt_update_failed"))

    def install(self, packages: Sequence[str]):
        if not packages:
            return
        cmd = self.runner.privileged(["apt-get", "install", "-y", *packages])
        result = self.runner.run(cmd, check=False)
        if result.returncode != 0:
            raise InstallerError(actionable_error("apt_install_failed", packages=" ".join(packages)))

    def architecture(self) -> str:
        arch = self.runner.output(["dpkg", "--print-architecture"])
        if not arch:
            raise InstallerError("Could not determine the package architecture with dpkg.")
        return arch

    def install_file(self, source_path: str, dest_path: str, mode: str = "0644"):
        """Copy a local file into a root-owned location with the given mode."""
        cmd = self.runner.privileged(["install", "-D", "-m", mode, source_path, dest_path])
        self.runner.run(cmd, check=True, capture_output=True)

    def write_file(self, dest_path: str, content: str, mode: str = "0644"):
        fd, temp_path = tempfile.mkstemp(prefix="fermentrack-installer-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as file_obj:
                file_obj.write(content)
            self.install_file(temp_path, dest_path, mode=mode)
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)
