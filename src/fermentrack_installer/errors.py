"""Domain errors for the Fermentrack 2 installer."""


class InstallerError(RuntimeError):
    """Raised when the installation cannot continue safely."""
