"""Repository clone/update and submodule handling."""

from pathlib import Path

from fermentrack_installer.constants import (
    HTTPS_URL_PREFIX,
    REPOSITORY_IDENTITY,
    SSH_URL_PREFIX,
    SUBMODULE_MARKER,
)
from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error
from fermentrack_installer.models import PhaseResult, RepositoryState, RunConfig

SUBMODULE_UPDATE_CMD = ["git", "submodule", "update", "--init", "--recursive"]


def rewrite_ssh_urls(content: str) -> str:
    return content.replace(SSH_URL_PREFIX, HTTPS_URL_PREFIX)


class RepositoryService:
    """Clones the application repository or brings an existing checkout up to date.

    An existing install directory is only ever touched when it is a git
    working copy whose ``origin`` points at the application repository.
    """

    def __init__(self, logger, console, runner, github, identity: str = REPOSITORY_IDENTITY):
        self.logger = logger
        self.console = console
        self.runner = runner
        self.github = github
        self.identity = identity

    def remote_url(self, repo_dir: Path) -> str:
        return self.runner.output(["git", "-C", str(repo_dir), "remote", "get-url", "origin"])

    def inspect(self, repo_dir: Path) -> RepositoryState:
        if not repo_dir.exists():
            return RepositoryState.ABSENT
        if not (repo_dir / ".git").exists():
            return RepositoryState.NOT_A_REPOSITORY
        if self.identity not in self.remote_url(repo_dir):
            return RepositoryState.FOREIGN_REPOSITORY
        return RepositoryState.MATCHING_REPOSITORY

    def init_submodules(self, repo_dir: Path):
        cwd = str(repo_dir)
        if self.runner.succeeds(SUBMODULE_UPDATE_CMD, cwd=cwd):
            return

        self.console.print("[blue]Submodule fetch failed, converting SSH URLs to HTTPS...[/blue]")
        gitmodules = repo_dir / ".gitmodules"
        if gitmodules.is_file():
            content = gitmodules.read_text(encoding="utf-8")
            rewritten = rewrite_ssh_urls(content)
            if rewritten != content:
                with open(gitmodules, "w", encoding="utf-8", newline="\n") as file_obj:
                    file_obj.write(rewritten)
                self.logger.info("Rewrote SSH submodule URLs in %s", gitmodules)
            self.runner.run(["git", "submodule", "sync", "--recursive"], check=False, cwd=cwd)

        result = self.runner.run(SUBMODULE_UPDATE_CMD, check=False, cwd=cwd)
        if result.returncode != 0:
            raise InstallerError(actionable_error("submodules_failed"))

    def verify_marker(self, repo_dir: Path):
        if not (repo_dir / SUBMODULE_MARKER).is_file():
            raise InstallerError(actionable_error("submodule_marker_missing", marker=SUBMODULE_MARKER))

    def clone(self, repo_dir: Path):
        self.console.print("[blue]Cloning Fermentrack 2 repository...[/blue]")
        if not self.github.clone(str(repo_dir)):
            raise InstallerError(actionable_error("clone_failed", repo=self.github.repository))

        self.console.print("[blue]Initializing submodules...[/blue]")
        self.init_submodules(repo_dir)
        self.verify_marker(repo_dir)
        self.console.print("[green]Successfully cloned Fermentrack 2 repository.[/green]")

    def update(self, repo_dir: Path):
        self.console.print("[blue]Updating existing Fermentrack 2 installation...[/blue]")
        cwd = str(repo_dir)

        if self.runner.run(["git", "fetch"], check=False, cwd=cwd).returncode != 0:
            raise InstallerError(actionable_error("fetch_failed"))
        if self.runner.run(["git", "pull"], check=False, cwd=cwd).returncode != 0:
            raise InstallerError(actionable_error("pull_failed"))

        self.console.print("[blue]Updating submodules...[/blue]")
        self.init_submodules(repo_dir)
        self.verify_marker(repo_dir)
        self.console.print("[green]Successfully updated Fermentrack 2 repository.[/green]")

    def clone_or_update(self, config: RunConfig) -> PhaseResult:
        repo_dir = Path(config.install_dir)
        state = self.inspect(repo_dir)
        self.logger.info("Install directory %s: %s", repo_dir, state.value)

        if state is RepositoryState.NOT_A_REPOSITORY:
            raise InstallerError(actionable_error("not_a_repository", path=str(repo_dir)))
        if state is RepositoryState.FOREIGN_REPOSITORY:
            raise InstallerError(actionable_error("foreign_repository", path=str(repo_dir)))

        if state is RepositoryState.ABSENT:
            self.clone(repo_dir)
            return PhaseResult.success(f"Cloned into {repo_dir}")

        self.update(repo_dir)
        return PhaseResult.success(f"Updated {repo_dir}")
