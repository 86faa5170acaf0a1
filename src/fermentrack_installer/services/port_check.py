"""Port availability probe."""

import errno

import requests

from fermentrack_installer.constants import APP_MARKER_TEXT, PORT_CONNECT_TIMEOUT, PORT_READ_TIMEOUT
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import PhaseResult, PortStatus, RunConfig


def is_connection_refused(exc: BaseException) -> bool:
    """Walk a requests/urllib3 exception chain looking for a refused connection."""
    pending = [exc]
    seen = set()
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True

        pending.append(current.__cause__)
        pending.append(current.__context__)
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            pending.append(reason)
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))

    return "Connection refused" in str(exc)


class PortCheckService:
    """Figures out whether the target port is free, ours, or taken."""

    def __init__(self, logger, console, prompt, requests_module=requests):
        self.logger = logger
        self.console = console
        self.prompt = prompt
        self.requests = requests_module

    def probe(self, port: int) -> PortStatus:
        url = f"http://localhost:{port}"
        try:
            response = self.requests.get(
                url,
                timeout=(PORT_CONNECT_TIMEOUT, PORT_READ_TIMEOUT),
                proxies={"http": None, "https": None},
            )
        except self.requests.exceptions.Timeout as exc:
            self.logger.debug("Port probe timed out: %s", exc)
            return PortStatus.UNKNOWN
        except self.requests.exceptions.ConnectionError as exc:
            if is_connection_refused(exc):
                return PortStatus.AVAILABLE
            self.logger.debug("Port probe connection failed: %s", exc)
            return PortStatus.UNKNOWN
        except self.requests.exceptions.RequestException as exc:
            self.logger.debug("Port probe failed: %s", exc)
            return PortStatus.UNKNOWN

        try:
            body = response.text or ""
        finally:
            response.close()

        if APP_MARKER_TEXT in body:
            return PortStatus.UPGRADE
        return PortStatus.CONFLICT

    def check(self, config: RunConfig) -> PhaseResult:
        if config.skip_port_check:
            self.console.print("[blue]Skipping port check (--no-port-check flag provided)[/blue]")
            return PhaseResult.skipped("Port check disabled")

        port = config.port
        self.console.print(f"[blue]Checking if port {port} is available...[/blue]")
        status = self.probe(port)
        self.logger.info("Port %s probe result: %s", port, status.value)

        if status is PortStatus.AVAILABLE:
            self.console.print(f"[green]Port {port} is available.[/green]")
            return PhaseResult.success(f"Port {port} is available")

        if status is PortStatus.UPGRADE:
            self.console.print(
                f"[yellow]Warning:[/yellow] Port {port} is in use by an existing Fermentrack 2 installation."
            )
            self.console.print(
                "[yellow]Warning:[/yellow] This appears to be an upgrade. "
                "The existing installation will be updated."
            )
            return PhaseResult.warning("Existing installation detected, upgrading")

        if status is PortStatus.CONFLICT:
            raise InstallerError(actionable_error("port_conflict", port=str(port)))

        self.console.print(
            f"[yellow]Warning:[/yellow] Port {port} appears to be in use but not responding to HTTP requests."
        )
        self.console.print(
            "[yellow]Warning:[/yellow] This could be a non-HTTP service or a slow-starting application."
        )
        self.prompt.require_confirmation("Do you want to continue anyway?", config.unattended)
        return PhaseResult.warning(f"Port {port} state could not be determined")
