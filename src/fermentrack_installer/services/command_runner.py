"""Subprocess execution service for the Fermentrack 2 installer."""

import os
import shutil
import subprocess
from typing import Dict, List, Optional

from fermentrack_installer.errors import InstallerError


class CommandRunner:
    """Runs external commands with consistent error handling."""

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        timeout: Optional[float] = None,
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        if cwd:
            self.logger.debug("Executing in %s: %s", cwd, cmd_str)
        else:
            self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout
        if cwd and not os.path.isdir(cwd):
            raise InstallerError(f"Working directory not found: {cwd}")

        try:
            result = subprocess.run(
                cmd,
                text=True,
                capture_output=capture_output,
                timeout=effective_timeout,
                cwd=cwd,
                env=env,
            )
        except FileNotFoundError as exc:
            raise InstallerError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise InstallerError(f"Command timed out after {effective_timeout}s: {cmd_str}") from exc
        except OSError as exc:
            raise InstallerError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise InstallerError(message)

        self.logger.debug(message)
        return result

    def succeeds(self, cmd: List[str], cwd: Optional[str] = None) -> bool:
        """Run a probe command quietly and report whether it exited with 0."""
        try:
            result = self.run(cmd, check=False, capture_output=True, cwd=cwd)
        except InstallerError:
            return False
        return result.returncode == 0

    def output(self, cmd: List[str], cwd: Optional[str] = None) -> str:
        """Return stripped stdout of a command, or an empty string if it fails."""
        try:
            result = self.run(cmd, check=False, capture_output=True, cwd=cwd)
        except InstallerError:
            return ""
        if result.returncode != 0:
            return ""
        return (result.stdout or "").strip()

    def which(self, command: str) -> Optional[str]:
        return shutil.which(command)

    def privileged(self, cmd: List[str], preserve_env: bool = False) -> List[str]:
        if os.geteuid() == 0:
            return list(cmd)
        prefix = ["sudo", "-E"] if preserve_env else ["sudo"]
        return prefix + list(cmd)
