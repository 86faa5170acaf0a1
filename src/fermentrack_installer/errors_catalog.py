"""Actionable error catalog for the Fermentrack 2 installer."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "unsupported_kernel": {
        "what": "This installer only supports Linux operating systems.",
        "next": "Run the installer on a Debian-based Linux host.",
    },
    "os_release_missing": {
        "what": "Cannot detect OS: {path} not found.",
        "next": "This installer requires a Debian-based Linux distribution.",
    },
    "apt_missing": {
        "what": "apt-get is not available.",
        "next": "This installer requires a Debian-based distribution with apt.",
    },
    "cancelled": {
        "what": "Installation cancelled by user.",
        "next": "Re-run the installer when you are ready to continue.",
    },
    "port_conflict": {
        "what": "Port {port} is already in use by another application.",
        "next": (
            "Stop the application using this port, use `--port` to choose a different port, "
            "or use `--no-port-check` to skip this check."
        ),
    },
    "apt_update_failed": {
        "what": "Failed to update package lists.",
        "next": "Check your internet connection and try again.",
    },
    "apt_install_failed": {
        "what": "Failed to install packages: {packages}.",
        "next": "Check the apt-get output above and try again.",
    },
    "gh_unauthenticated": {
        "what": "GitHub authentication is required but the installer is running in unattended mode.",
        "next": "Authenticate manually with `gh auth login` before running in unattended mode.",
    },
    "gh_login_failed": {
        "what": "GitHub authentication did not complete.",
        "next": "Run `gh auth login` manually and re-run the installer.",
    },
    "gh_setup_git_failed": {
        "what": "Could not configure git to use GitHub CLI credentials.",
        "next": "Run `gh auth setup-git` manually and check its output.",
    },
    "repo_access_denied": {
        "what": "Unable to access the {repo} repository.",
        "next": (
            "Ensure you have access to this repository and that your GitHub authentication is "
            "correct. You may need to request access or check your organization membership."
        ),
    },
    "docker_install_failed": {
        "what": "Docker installation failed.",
        "next": "Install Docker manually and re-run this installer.",
    },
    "docker_group_failed": {
        "what": "Could not add user '{user}' to the docker group.",
        "next": "Run `sudo usermod -aG docker {user}` manually, log out and back in, then re-run.",
    },
    "compose_missing": {
        "what": "Docker Compose is not available.",
        "next": "Install Docker Compose v2 (`docker compose`) or v1 (`docker-compose`) and try again.",
    },
    "node_install_failed": {
        "what": "Node.js installation failed.",
        "next": "Install Node.js {major} or later manually and re-run this installer.",
    },
    "clone_failed": {
        "what": "Failed to clone the {repo} repository.",
        "next": "Check your network connection and GitHub access, then try again.",
    },
    "not_a_repository": {
        "what": "Directory {path} exists but is not a git repository.",
        "next": "Remove it or choose a different install directory with `--install-dir`.",
    },
    "foreign_repository": {
        "what": "Directory {path} contains a different git repository.",
        "next": "Remove it or choose a different install directory with `--install-dir`.",
    },
    "fetch_failed": {
        "what": "Failed to fetch updates from the remote repository.",
        "next": "Check your network connection and GitHub access, then try again.",
    },
    "pull_failed": {
        "what": "Failed to pull updates from the remote repository.",
        "next": "Resolve any local changes in the install directory and try again.",
    },
    "submodules_failed": {
        "what": "Failed to update submodules even with HTTPS fallback.",
        "next": "Run `git submodule update --init --recursive` in the install directory to inspect the error.",
    },
    "submodule_marker_missing": {
        "what": "Submodule verification failed: {marker} not found.",
        "next": "The ui/ submodule may not have been cloned properly. Re-run the installer.",
    },
    "sample_config_missing": {
        "what": "Sample configuration directory not found: {path}",
        "next": "Make sure the repository checkout in the install directory is complete.",
    },
    "env_file_missing": {
        "what": "Configuration file not found: {path}",
        "next": "Restore the missing file in the install directory and re-run the installer.",
    },
    "npm_install_failed": {
        "what": "Failed to install npm dependencies.",
        "next": (
            "Ensure Node.js and npm are properly installed. "
            "You can check with `node --version` and `npm --version`."
        ),
    },
    "ui_build_failed": {
        "what": "Failed to build UI.",
        "next": (
            "Check the build output above for errors. Common issues include missing "
            "dependencies or TypeScript errors."
        ),
    },
    "compose_build_failed": {
        "what": "Failed to build Docker containers.",
        "next": (
            "Ensure Docker is properly installed and running. "
            "You can check with `docker --version` and `docker compose version`."
        ),
    },
    "compose_up_failed": {
        "what": "Failed to start Docker containers.",
        "next": "Check the Docker logs for more information.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
