import logging
from typing import Callable, List, Optional, Tuple

import requests
from rich.console import Console
from rich.panel import Panel

from .constants import APP_NAME, COMPOSE_FILE
from .errors import InstallerError
from .models import PhaseResult, PhaseStatus, RunConfig
from .services.apt import AptService
from .services.command_runner import CommandRunner
from .services.docker_runtime import DockerRuntimeService
from .services.download import DownloadService
from .services.environment import EnvironmentConfigService
from .services.github_cli import GithubCliService
from .services.nodejs import NodeRuntimeService
from .services.os_check import OsCheckService
from .services.port_check import PortCheckService
from .services.prerequisites import PrerequisiteService
from .services.prompt import PromptService
from .services.repository import RepositoryService
from .services.ui_build import UiBuildService

console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger("fermentrack_installer")

BANNER = r"""
███████╗███████╗██████╗ ███╗   ███╗███████╗███╗   ██╗████████╗██████╗  █████╗  ██████╗██╗  ██╗██████╗
██╔════╝██╔════╝██╔══██╗████╗ ████║██╔════╝████╗  ██║╚══██╔══╝██╔══██╗██╔══██╗██╔════╝██║ ██╔╝╚════██╗
█████╗  █████╗  ██████╔╝██╔████╔██║█████╗  ██╔██╗ ██║   ██║   ██████╔╝███████║██║     █████╔╝  █████╔╝
██╔══╝  ██╔══╝  ██╔══██╗██║╚██╔╝██║██╔══╝  ██║╚██╗██║   ██║   ██╔══██╗██╔══██║██║     ██╔═██╗ ██╔═══╝
██║     ███████╗██║  ██║██║ ╚═╝ ██║███████╗██║ ╚████║   ██║   ██║  ██║██║  ██║╚██████╗██║  ██╗███████╗
╚═╝     ╚══════╝╚═╝  ╚═╝╚═╝     ╚═╝╚══════╝╚═╝  ╚═══╝   ╚═╝   ╚═╝  ╚═╝╚═╝  ╚═╝ ╚═════╝╚═╝  ╚═╝╚══════╝
"""

Phase = Tuple[str, Callable[[RunConfig], PhaseResult]]


class Installer:
    """Runs the provisioning phases in order and turns their outcome into an exit code."""

    def __init__(
        self,
        config: RunConfig,
        runner: Optional[CommandRunner] = None,
        prompt: Optional[PromptService] = None,
        requests_module=requests,
    ):
        self.config = config
        self.runner = runner or CommandRunner(logger=logger)
        self.prompt = prompt or PromptService(logger=logger, console=console)
        self.current_phase_name: Optional[str] = None
        self.results: List[Tuple[str, PhaseResult]] = []

        self.download_service = DownloadService(
            logger=logger,
            console=console,
            requests_module=requests_module,
        )
        self.apt_service = AptService(logger=logger, runner=self.runner)
        self.os_check_service = OsCheckService(
            logger=logger,
            console=console,
            runner=self.runner,
            prompt=self.prompt,
        )
        self.port_check_service = PortCheckService(
            logger=logger,
            console=console,
            prompt=self.prompt,
            requests_module=requests_module,
        )
        self.prerequisite_service = PrerequisiteService(
            logger=logger,
            console=console,
            apt=self.apt_service,
        )
        self.github_service = GithubCliService(
            logger=logger,
            console=console,
            runner=self.runner,
            apt=self.apt_service,
            download_service=self.download_service,
        )
        self.docker_runtime_service = DockerRuntimeService(
            logger=logger,
            console=console,
            runner=self.runner,
            download_service=self.download_service,
        )
        self.node_runtime_service = NodeRuntimeService(
            logger=logger,
            console=console,
            runner=self.runner,
            apt=self.apt_service,
            download_service=self.download_service,
        )
        self.repository_service = RepositoryService(
            logger=logger,
            console=console,
            runner=self.runner,
            github=self.github_service,
        )
        self.environment_service = EnvironmentConfigService(logger=logger, console=console)
        self.ui_build_service = UiBuildService(logger=logger, console=console, runner=self.runner)

    def phases(self) -> List[Phase]:
        return [
            ("check_os", self.os_check_service.check),
            ("check_port", self.port_check_service.check),
            ("install_prerequisites", self.prerequisite_service.install),
            ("setup_github_cli", self.github_service.setup),
            ("setup_docker", self.docker_runtime_service.setup),
            ("setup_nodejs", self.node_runtime_service.setup),
            ("clone_or_update_repository", self.repository_service.clone_or_update),
            ("configure_environment", self.environment_service.configure),
            ("build_ui", self.ui_build_service.build),
            ("build_and_start_containers", self.docker_runtime_service.build_and_start),
        ]

    def _run_phase(self, name: str, callback: Callable[[RunConfig], PhaseResult]) -> PhaseResult:
        self.current_phase_name = name
        logger.debug("Starting phase: %s", name)

        result = callback(self.config)

        logger.info("Phase %s finished: %s %s", name, result.status.value, result.message)
        self.results.append((name, result))
        self.current_phase_name = None
        console.print()
        return result

    def print_banner(self):
        console.print(BANNER, style="bold cyan", highlight=False)
        console.print(f"[bold]{APP_NAME} Installer[/bold]", justify="center")
        console.print()
        console.print(f"[blue]Starting {APP_NAME} installation...[/blue]")
        console.print(f"[blue]Installation directory:[/blue] {self.config.install_dir}")
        console.print(f"[blue]Port:[/blue] {self.config.port}")
        console.print(f"[blue]Multi-tenant mode:[/blue] {self.config.multi_tenant}")
        console.print(f"[blue]No-start mode:[/blue] {self.config.no_start}")
        console.print(f"[blue]No-port-check mode:[/blue] {self.config.skip_port_check}")
        console.print(f"[blue]Unattended mode:[/blue] {self.config.unattended}")
        console.print()

    def print_action_required(self, message: str):
        console.print()
        console.print(
            Panel(message, title="ACTION REQUIRED", border_style="yellow", expand=False),
        )
        console.print()

    def access_url(self) -> str:
        if self.config.port == 80:
            return "http://localhost"
        return f"http://localhost:{self.config.port}"

    def print_summary(self):
        install_dir = self.config.install_dir
        compose = f"cd {install_dir} && docker compose -f {COMPOSE_FILE}"

        console.print(
            Panel(f"{APP_NAME} installation completed!", border_style="green", expand=False),
        )
        console.print(f"[blue]Installation directory:[/blue] {install_dir}")
        console.print()

        warnings = [(name, result) for name, result in self.results if result.status is PhaseStatus.WARNING]
        for name, result in warnings:
            console.print(f"[yellow]Warning ({name}):[/yellow] {result.message}")
        if warnings:
            console.print()

        if self.config.no_start:
            console.print("[blue]Services were not started (--no-start flag was used)[/blue]")
            console.print("[blue]To start services, run:[/blue]")
            console.print(f"    {compose} up -d", highlight=False)
        else:
            console.print("[green]Services are now running![/green]")
            console.print(f"[blue]Access Fermentrack at:[/blue] {self.access_url()}")
            console.print("[dim](If accessing from another device, use your server's IP address)[/dim]")

        console.print()
        console.print("[blue]Useful commands:[/blue]")
        console.print(f"    View logs:        {compose} logs -f", highlight=False)
        console.print(f"    Stop services:    {compose} down", highlight=False)
        console.print(f"    Restart:          {compose} restart", highlight=False)
        console.print()
        console.print(f"[green]Thank you for installing {APP_NAME}![/green]")

    def run(self) -> int:
        exit_code = 1

        try:
            logger.info("Starting %s installer", APP_NAME)
            self.print_banner()

            for name, callback in self.phases():
                result = self._run_phase(name, callback)
                if result.status is PhaseStatus.ACTION_REQUIRED:
                    logger.info("Phase %s requires operator action; stopping here.", name)
                    self.print_action_required(result.message)
                    exit_code = 0
                    return exit_code

            self.print_summary()
            exit_code = 0
            return exit_code

        except KeyboardInterrupt:
            error_console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            exit_code = 1
            return exit_code
        except InstallerError as exc:
            error_console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error("Phase %s failed: %s", self.current_phase_name or "run", exc)
            exit_code = 1
            return exit_code
        except Exception as exc:
            error_console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            exit_code = 1
            return exit_code
