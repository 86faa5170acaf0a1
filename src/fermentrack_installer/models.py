"""Shared domain models for the Fermentrack 2 installer."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fermentrack_installer.errors import InstallerError


@dataclass(frozen=True)
class RunConfig:
    """Options for a single installer run, fixed once parsed."""

    install_dir: Path
    port: int = 80
    multi_tenant: bool = False
    no_start: bool = False
    unattended: bool = True
    skip_port_check: bool = False

    def __post_init__(self):
        if not 1 <= self.port <= 65535:
            raise InstallerError(f"Invalid port {self.port}. Use a value between 1 and 65535.")


class PhaseStatus(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    SKIPPED = "skipped"
    ACTION_REQUIRED = "action_required"


@dataclass(frozen=True)
class PhaseResult:
    """Outcome of a phase that did not fail."""

    status: PhaseStatus
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> "PhaseResult":
        return cls(PhaseStatus.SUCCESS, message)

    @classmethod
    def warning(cls, message: str) -> "PhaseResult":
        return cls(PhaseStatus.WARNING, message)

    @classmethod
    def skipped(cls, message: str) -> "PhaseResult":
        return cls(PhaseStatus.SKIPPED, message)

    @classmethod
    def action_required(cls, message: str) -> "PhaseResult":
        return cls(PhaseStatus.ACTION_REQUIRED, message)


class OsSupport(Enum):
    SUPPORTED = "supported"
    UNTESTED = "untested"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OsIdentity:
    id: str
    pretty_name: str = ""

    @property
    def display_name(self) -> str:
        return self.pretty_name or self.id


class PortStatus(Enum):
    AVAILABLE = "available"
    UPGRADE = "upgrade"
    CONFLICT = "conflict"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DockerAccess:
    in_group: bool
    usable: bool


class RepositoryState(Enum):
    ABSENT = "absent"
    NOT_A_REPOSITORY = "not_a_repository"
    FOREIGN_REPOSITORY = "foreign_repository"
    MATCHING_REPOSITORY = "matching_repository"
