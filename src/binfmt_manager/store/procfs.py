"""Procfs entry store — the real binfmt_misc pseudo-filesystem."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

from binfmt_manager.errors import KernelRejectionError, MountError
from binfmt_manager.store.base import RESERVED, EntryStore

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "/proc/sys/fs/binfmt_misc"
DEFAULT_MODULE = "binfmt_misc"


class ProcfsEntryStore(EntryStore):
    """Entry store backed by a mounted binfmt_misc filesystem."""

    def __init__(
        self, root: str = DEFAULT_ROOT, kernel_module: str = DEFAULT_MODULE
    ) -> None:
        self._root = root
        self._kernel_module = kernel_module

    @property
    def location(self) -> str:
        return self._root

    def _path(self, name: str) -> str:
        return os.path.join(self._root, name)

    def enumerate(self) -> list[str]:
        try:
            names = os.listdir(self._root)
        except FileNotFoundError:
            return []
        return sorted(n for n in names if n not in RESERVED)

    def read(self, name: str) -> str:
        with open(self._path(name)) as f:
            return f.read()

    def write(self, name: str, data: str) -> None:
        path = self._path(name)
        logger.debug("write %s <- %r", path, data)
        try:
            # binfmt_misc parses each write() on its own, so the line must
            # reach the kernel in one syscall.
            fd = os.open(path, os.O_WRONLY)
            try:
                os.write(fd, data.encode())
            finally:
                os.close(fd)
        except OSError as e:
            raise KernelRejectionError(name, e.strerror or str(e)) from e

    def exists(self, name: str) -> bool:
        return os.path.isfile(self._path(name))

    def ensure_mounted(self) -> None:
        if os.path.ismount(self._root):
            return

        self._load_module()

        logger.info("Mounting binfmt_misc on %s", self._root)
        mount = shutil.which("mount")
        if mount is None:
            raise MountError("Cannot mount binfmtfs: mount executable not found")
        sp = subprocess.run(
            [mount, "-t", "binfmt_misc", "binfmt", self._root],
            capture_output=True,
            text=True,
        )
        if sp.returncode != 0:
            logger.debug("mount failed: %s", sp.stderr.strip())
            raise MountError("Cannot mount binfmtfs")

    def _load_module(self) -> None:
        """Best-effort ``modprobe``; a built-in binfmt_misc needs no module."""
        modprobe = shutil.which("modprobe")
        if modprobe is None:
            logger.warning(
                "modprobe not found, assuming %s is built in", self._kernel_module
            )
            return
        sp = subprocess.run(
            [modprobe, self._kernel_module],
            capture_output=True,
            text=True,
        )
        if sp.returncode != 0:
            logger.warning(
                "modprobe %s failed: %s", self._kernel_module, sp.stderr.strip()
            )
