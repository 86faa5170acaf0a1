"""
Fermentrack Installer - provisions Fermentrack 2 onto a Debian-based host
"""

__version__ = "0.1.0"

from .core import Installer
from .errors import InstallerError
from .models import RunConfig

__all__ = ["Installer", "InstallerError", "RunConfig"]
