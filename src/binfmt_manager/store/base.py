"""EntryStore — abstract access to the binfmt_misc control directory."""

from __future__ import annotations

from abc import ABC, abstractmethod

REGISTER = "register"
STATUS = "status"
RESERVED = frozenset({REGISTER, STATUS})


class EntryStore(ABC):
    """The binfmt_misc control directory as a small key/value interface.

    Names are bare file names relative to the control directory. The two
    reserved files (``register`` and ``status``) are addressable through
    :meth:`read` / :meth:`write` / :meth:`exists` but never returned by
    :meth:`enumerate`.

    Usage:
        store = ProcfsEntryStore("/proc/sys/fs/binfmt_misc")
        store.ensure_mounted()
        for name in store.enumerate():
            print(name, store.read(name).splitlines()[0])
    """

    @abstractmethod
    def enumerate(self) -> list[str]:
        """Names of all registered entries, sorted."""
        ...

    @abstractmethod
    def read(self, name: str) -> str:
        """Contents of a control file."""
        ...

    @abstractmethod
    def write(self, name: str, data: str) -> None:
        """Write ``data`` to a control file in a single write.

        Raises:
            KernelRejectionError: The kernel refused the write.
        """
        ...

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Whether a control file with this name exists."""
        ...

    def is_active(self) -> bool:
        """Whether binfmt_misc is mounted and exposes its status file."""
        return self.exists(STATUS)

    @abstractmethod
    def ensure_mounted(self) -> None:
        """Load the kernel module and mount the filesystem if needed.

        Raises:
            MountError: The filesystem could not be mounted.
        """
        ...

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the control directory."""
        ...
