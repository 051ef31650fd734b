"""Command dispatcher — register, toggle and reload binfmt_misc entries."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from binfmt_manager.config import FailurePolicy
from binfmt_manager.encoder import encode_registration
from binfmt_manager.errors import (
    BinfmtError,
    DuplicateEntryError,
    MissingArgumentError,
    NotFoundError,
    PrivilegeError,
)
from binfmt_manager.loader import iter_definition_files, load_definition
from binfmt_manager.model import BinfmtDefinition
from binfmt_manager.result import BatchReport, OperationResult
from binfmt_manager.store import REGISTER, EntryStore

logger = logging.getLogger(__name__)

# Values written to an entry's control file.
ENABLE = 1
DISABLE = 0
REMOVE = -1


class BinfmtManager:
    """Dispatches binfmt commands against an entry store.

    Every mutating command first checks for root and mounts the store on
    demand. Single-entry commands raise on failure; batch commands
    (``unregister_all``, ``reload``) follow the configured
    :class:`FailurePolicy`.
    """

    def __init__(
        self,
        store: EntryStore,
        config_dir: str | Path = "/etc/binfmt.d",
        failure_policy: FailurePolicy = FailurePolicy.ABORT,
        geteuid: Callable[[], int] | None = None,
    ) -> None:
        self.store = store
        self.config_dir = Path(config_dir)
        self.failure_policy = failure_policy
        self._geteuid = geteuid or os.geteuid
        self._prepared = False

    def prepare(self) -> None:
        """Check privileges and make sure binfmt_misc is mounted."""
        if self._prepared:
            return
        if self._geteuid() != 0:
            raise PrivilegeError()
        logger.debug("Using binfmt_misc at %s", self.store.location)
        self.store.ensure_mounted()
        self._prepared = True

    # ----- register -----

    def resolve(self, item: str) -> Path:
        """Map a register argument to a definition file path.

        An existing regular file is used as-is; anything else is looked up
        in the config directory.
        """
        if os.path.isfile(item):
            return Path(item)
        return self.config_dir / item

    def register(self, item: str | None) -> BinfmtDefinition:
        """Register a binfmt by definition name or file path."""
        self.prepare()
        if not item:
            raise MissingArgumentError("No binfmt name or file path provided")
        return self.register_file(self.resolve(item))

    def register_file(self, path: str | Path) -> BinfmtDefinition:
        """Load, encode and write one definition file."""
        self.prepare()
        defn = load_definition(path)

        if self.store.exists(defn.name):
            raise DuplicateEntryError(defn.name)

        self.store.write(REGISTER, encode_registration(defn))
        logger.info("Registered %s (%s)", defn.name, defn.interpreter)
        return defn

    # ----- toggles -----

    def _toggle(self, value: int, name: str | None) -> None:
        self.prepare()
        if not name:
            raise MissingArgumentError("No binfmt provided")
        # Entry names are single path components under the control directory.
        if "/" in name or name in (".", "..") or not self.store.exists(name):
            raise NotFoundError(f"binfmt '{name}' was not registered")
        self.store.write(name, str(value))

    def unregister(self, name: str | None) -> None:
        self._toggle(REMOVE, name)
        logger.info("Unregistered %s", name)

    def enable(self, name: str | None) -> None:
        self._toggle(ENABLE, name)
        logger.info("Enabled %s", name)

    def disable(self, name: str | None) -> None:
        self._toggle(DISABLE, name)
        logger.info("Disabled %s", name)

    # ----- batch -----

    def _attempt(
        self,
        report: BatchReport,
        action: str,
        target: str,
        fn: Callable[[], object],
    ) -> None:
        try:
            fn()
        except BinfmtError as e:
            if self.failure_policy is FailurePolicy.ABORT:
                raise
            logger.debug("%s %s failed: %s", action, target, e)
            report.add(OperationResult(action=action, target=target, error=e))
        else:
            report.add(OperationResult(action=action, target=target))

    def unregister_all(self) -> BatchReport:
        """Remove every registered entry."""
        self.prepare()
        report = BatchReport()
        for name in self.store.enumerate():
            self._attempt(
                report, "unregister", name, lambda n=name: self.unregister(n)
            )
        return report

    def reload(self) -> BatchReport:
        """Unregister everything, then register every file in the config directory."""
        self.prepare()
        report = self.unregister_all()

        for path in iter_definition_files(self.config_dir):
            logger.debug("Registering %s", path)
            self._attempt(
                report, "register", str(path), lambda p=path: self.register_file(p)
            )
        return report
