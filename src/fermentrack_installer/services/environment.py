"""Production environment file generation."""

import base64
import os
import re
import secrets
import shutil
import tempfile
from pathlib import Path

from fermentrack_installer.constants import (
    DJANGO_ENV_FILE,
    ENVS_DIRNAME,
    MULTI_TENANT_SETTING,
    POSTGRES_ENV_FILE,
    POSTGRES_USER,
    PRODUCTION_ENV_DIRNAME,
    SAMPLE_ENV_DIRNAME,
)
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import PhaseResult, RunConfig


def generate_secret_key() -> str:
    return base64.b64encode(secrets.token_bytes(48)).decode("ascii")


def generate_fernet_key() -> str:
    return base64.urlsafe_b64encode(secrets.token_bytes(32)).decode("ascii")


def generate_db_password() -> str:
    return secrets.token_urlsafe(32)


class EnvironmentConfigService:
    """Creates `.envs/.production` from the sample once and never touches it again."""

    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    def paths(self, install_dir: Path):
        envs_dir = Path(install_dir) / ENVS_DIRNAME
        return envs_dir / PRODUCTION_ENV_DIRNAME, envs_dir / SAMPLE_ENV_DIRNAME

    def _read(self, path: Path) -> str:
        if not path.is_file():
            raise InstallerError(actionable_error("env_file_missing", path=str(path)))
        return path.read_text(encoding="utf-8")

    def _write(self, path: Path, content: str):
        with open(path, "w", encoding="utf-8", newline="\n") as file_obj:
            file_obj.write(content)

    def _substitute(self, path: Path, content: str, pattern: str, line: str) -> str:
        updated, count = re.subn(pattern, lambda _match: line, content, flags=re.MULTILINE)
        if count == 0:
            key = line.split("=", 1)[0]
            self.logger.warning("No %s entry found in %s; leaving it unchanged.", key, path)
        return updated

    def configure_django(self, path: Path, multi_tenant: bool):
        content = self._read(path)
        content = self._substitute(
            path, content, r"^DJANGO_SECRET_KEY=.*$", f"DJANGO_SECRET_KEY={generate_secret_key()}"
        )
        content = self._substitute(
            path,
            content,
            r"^# DJANGO_ENCRYPTED_FIELDS_SALT_KEY=$",
            f"DJANGO_ENCRYPTED_FIELDS_SALT_KEY={generate_fernet_key()}",
        )
        if multi_tenant:
            content = self.ensure_setting(content, MULTI_TENANT_SETTING, "True")
        self._write(path, content)

    def configure_postgres(self, path: Path):
        content = self._read(path)
        content = self._substitute(path, content, r"^POSTGRES_USER=.*$", f"POSTGRES_USER={POSTGRES_USER}")
        content = self._substitute(
            path, content, r"^POSTGRES_PASSWORD=.*$", f"POSTGRES_PASSWORD={generate_db_password()}"
        )
        self._write(path, content)

    @staticmethod
    def ensure_setting(content: str, key: str, value: str) -> str:
        if re.search(rf"^{re.escape(key)}=", content, flags=re.MULTILINE):
            return content
        if content and not content.endswith("\n"):
            content += "\n"
        return f"{content}{key}={value}\n"

    def configure(self, config: RunConfig) -> PhaseResult:
        self.console.print("[blue]Configuring environment...[/blue]")
        production_dir, sample_dir = self.paths(config.install_dir)

        if production_dir.exists():
            self.console.print("[blue]Existing configuration found, preserving your settings...[/blue]")
            return PhaseResult.skipped(f"Preserved {production_dir}")

        self.console.print("[blue]Creating production environment configuration...[/blue]")
        if not sample_dir.is_dir():
            raise InstallerError(actionable_error("sample_config_missing", path=str(sample_dir)))

        for name in (DJANGO_ENV_FILE, POSTGRES_ENV_FILE):
            if not (sample_dir / name).is_file():
                raise InstallerError(actionable_error("env_file_missing", path=str(sample_dir / name)))

        # Filled in next to the target and renamed into place, so a failed run leaves no production dir.
        staging_dir = Path(tempfile.mkdtemp(prefix=".production-", dir=str(production_dir.parent)))
        try:
            shutil.copytree(sample_dir, staging_dir, dirs_exist_ok=True)
            self.configure_django(staging_dir / DJANGO_ENV_FILE, config.multi_tenant)
            self.configure_postgres(staging_dir / POSTGRES_ENV_FILE)
            os.replace(staging_dir, production_dir)
        finally:
            if staging_dir.exists():
                shutil.rmtree(staging_dir)

        self.logger.info("Generated production environment in %s", production_dir)
        self.console.print("[green]Environment configuration complete[/green]")
        return PhaseResult.success(f"Created {production_dir}")
