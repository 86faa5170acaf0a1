"""Configuration loader for the Fermentrack 2 installer."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from fermentrack_installer.constants import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILENAME
from fermentrack_installer.errors import InstallerError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "install_dir",
        "port",
        "multi_tenant",
        "no_start",
        "no_port_check",
        "unattended",
        "verbose",
        "log_file",
    }

    def resolve_path(self, environ: Optional[Mapping[str, str]] = None, cwd: Optional[str] = None) -> Optional[str]:
        environ = os.environ if environ is None else environ
        explicit = environ.get(CONFIG_ENV_VAR)
        if explicit:
            return explicit

        default_path = os.path.join(cwd or os.getcwd(), DEFAULT_CONFIG_FILENAME)
        if os.path.exists(default_path):
            return default_path
        return None

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise InstallerError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise InstallerError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise InstallerError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS, key=str)
        if unknown:
            unknown_list = ", ".join(str(key) for key in unknown)
            raise InstallerError(f"Unknown configuration keys: {unknown_list}")

        return parsed
