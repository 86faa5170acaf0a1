"""Operator confirmation helpers."""

from rich.prompt import Confirm

from fermentrack_installer.errors import InstallerError
from fermentrack_installer.errors_catalog import actionable_error


class PromptService:
    """Asks the operator to continue, or continues on their behalf when unattended."""

    def __init__(self, logger, console, confirm=Confirm.ask):
        self.logger = logger
        self.console = console
        self.confirm = confirm

    def confirm_or_continue(self, question: str, unattended: bool) -> bool:
        if unattended:
            self.console.print("[yellow]Warning:[/yellow] Unattended mode: continuing with installation...")
            self.logger.warning("Unattended mode: continuing after '%s'", question)
            return True

        answer = bool(self.confirm(question, default=False, console=self.console))
        if answer:
            self.console.print("[blue]Continuing with installation...[/blue]")
        else:
            self.logger.info("Operator declined: %s", question)
        return answer

    def require_confirmation(self, question: str, unattended: bool):
        if not self.confirm_or_continue(question, unattended):
            raise InstallerError(actionable_error("cancelled"))
