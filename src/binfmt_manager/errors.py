"""Error taxonomy — every fatal condition the manager can hit."""

from __future__ import annotations


class BinfmtError(Exception):
    """Base class for all binfmt-manager failures.

    The CLI prints ``str(error)`` to stderr and exits with ``exit_code``.
    """

    exit_code: int = 1


class PrivilegeError(BinfmtError):
    """Not running with effective root privileges."""

    def __init__(
        self, message: str = "This script must be run with root privileges"
    ) -> None:
        super().__init__(message)


class MountError(BinfmtError):
    """The binfmt_misc filesystem could not be mounted."""


class MissingArgumentError(BinfmtError):
    """A required command-line argument was not supplied."""


class NotFoundError(BinfmtError):
    """A definition file or registered entry does not exist."""


class MissingFieldError(BinfmtError):
    """A definition file lacks a required field (or it is empty)."""

    def __init__(self, path: str, field: str) -> None:
        self.path = path
        self.field = field
        super().__init__(f"{path}: variable {field} is not set")


class DuplicateEntryError(BinfmtError):
    """An entry with the same name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"binfmt named '{name}' already exists")


class KernelRejectionError(BinfmtError):
    """The kernel refused a write to a control file."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"kernel rejected write to '{target}': {reason}")
