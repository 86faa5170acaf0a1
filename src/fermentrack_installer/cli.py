import logging
import os
from pathlib import Path

import click
from rich.logging import RichHandler

from .constants import DEFAULT_INSTALL_DIRNAME, DEFAULT_PORT
from .core import Installer
from .errors import InstallerError
from .models import RunConfig
from .services.config_loader import ConfigLoader

EXAMPLES = """
\b
Examples:
    fermentrack-install
        Install with default settings

\b
    fermentrack-install --install-dir /opt/fermentrack
        Install to a custom directory

\b
    fermentrack-install --multi-tenant --interactive
        Install in multi-tenant mode with prompts
"""


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def _require_path(ctx, param, value):
    if value is not None and value.startswith("--"):
        raise click.BadParameter("requires a PATH argument")
    return value


def _default_install_dir() -> str:
    return os.path.join(os.path.expanduser("~"), DEFAULT_INSTALL_DIRNAME)


class InstallerCommand(click.Command):
    """Reports usage errors with the same exit status as any other failure."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command(cls=InstallerCommand, epilog=EXAMPLES)
@click.option(
    "--install-dir",
    required=False,
    callback=_require_path,
    metavar="PATH",
    help="Set the installation directory (default: $HOME/fermentrack_2)",
)
@click.option(
    "--port",
    required=False,
    type=click.IntRange(1, 65535),
    metavar="PORT",
    help="Set the port to check/use (default: 80)",
)
@click.option("--multi-tenant", is_flag=True, default=None, help="Enable multi-tenant mode")
@click.option("--no-start", is_flag=True, default=None, help="Install but do not start the services")
@click.option("--no-port-check", is_flag=True, default=None, help="Skip the port availability check")
@click.option(
    "--interactive/--unattended",
    "interactive",
    default=None,
    help="Run with prompts, or without prompts (default: unattended)",
)
def main(install_dir, port, multi_tenant, no_start, no_port_check, interactive):
    """Fermentrack 2 Installer."""
    logger = logging.getLogger("fermentrack_installer")

    try:
        config_loader = ConfigLoader()
        config_values = config_loader.load(config_loader.resolve_path())
    except InstallerError as exc:
        raise click.UsageError(str(exc)) from exc

    install_dir = _resolve_option(install_dir, config_values, "install_dir", default=_default_install_dir())
    port = _resolve_option(port, config_values, "port", default=DEFAULT_PORT)
    multi_tenant = bool(_resolve_option(multi_tenant, config_values, "multi_tenant", default=False))
    no_start = bool(_resolve_option(no_start, config_values, "no_start", default=False))
    no_port_check = bool(_resolve_option(no_port_check, config_values, "no_port_check", default=False))
    unattended = (
        not interactive
        if interactive is not None
        else bool(config_values.get("unattended", True))
    )
    verbose = bool(config_values.get("verbose", False))
    log_file = config_values.get("log_file")

    try:
        port = int(port)
    except (TypeError, ValueError):
        raise click.BadParameter(f"'{port}' is not a valid port number.", param_hint="'port'")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        config = RunConfig(
            install_dir=Path(os.path.expanduser(str(install_dir))),
            port=port,
            multi_tenant=multi_tenant,
            no_start=no_start,
            unattended=unattended,
            skip_port_check=no_port_check,
        )
    except InstallerError as exc:
        raise click.BadParameter(str(exc), param_hint="'--port'") from exc

    raise SystemExit(Installer(config).run())


if __name__ == "__main__":
    main()
