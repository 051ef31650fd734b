"""In-memory entry store — a small emulation of the binfmt_misc kernel side.

Used wherever a real kernel is not available (tests, dry runs). It accepts
the same registration lines and sentinel writes the kernel does and renders
entry status text in the kernel's layout, so the dispatcher and lister run
against it unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from binfmt_manager.errors import KernelRejectionError, MountError
from binfmt_manager.store.base import REGISTER, STATUS, EntryStore

logger = logging.getLogger(__name__)


def _unescape(value: str) -> bytes:
    """Decode ``\\xHH`` escapes the way binfmt_misc does for magic/mask."""
    try:
        return value.encode("latin-1").decode("unicode_escape").encode("latin-1")
    except (UnicodeDecodeError, UnicodeEncodeError) as e:
        raise ValueError(f"bad escape sequence in {value!r}") from e


@dataclass
class _KernelEntry:
    name: str
    type: str
    offset: int
    magic: bytes
    mask: bytes
    interpreter: str
    flags: str
    enabled: bool = True

    def render(self) -> str:
        lines = [
            "enabled" if self.enabled else "disabled",
            f"interpreter {self.interpreter}",
            f"flags: {self.flags}",
        ]
        if self.type == "E":
            lines.append(f"extension .{self.magic.decode('latin-1')}")
        else:
            lines.append(f"offset {self.offset}")
            lines.append(f"magic {self.magic.hex()}")
            if self.mask:
                lines.append(f"mask {self.mask.hex()}")
        return "\n".join(lines) + "\n"


@dataclass
class InMemoryEntryStore(EntryStore):
    """Entry store that keeps registered entries in a dict.

    Args:
        mounted: Whether the filesystem starts out mounted.
        mount_fails: Make :meth:`ensure_mounted` raise ``MountError``.
    """

    mounted: bool = True
    mount_fails: bool = False
    writes: list[tuple[str, str]] = field(default_factory=list)
    _entries: dict[str, _KernelEntry] = field(default_factory=dict, init=False)

    @property
    def location(self) -> str:
        return "<memory>"

    def enumerate(self) -> list[str]:
        if not self.mounted:
            return []
        return sorted(self._entries)

    def read(self, name: str) -> str:
        if self.mounted and name == STATUS:
            return "enabled\n"
        if not self.mounted or name not in self._entries:
            raise FileNotFoundError(name)
        return self._entries[name].render()

    def exists(self, name: str) -> bool:
        if not self.mounted:
            return False
        return name in (REGISTER, STATUS) or name in self._entries

    def ensure_mounted(self) -> None:
        if self.mounted:
            return
        if self.mount_fails:
            raise MountError("Cannot mount binfmtfs")
        self.mounted = True

    def write(self, name: str, data: str) -> None:
        if not self.mounted:
            raise KernelRejectionError(name, "No such file or directory")
        self.writes.append((name, data))
        if name == REGISTER:
            self._register(data)
        elif name == STATUS:
            raise KernelRejectionError(name, "Invalid argument")
        elif name in self._entries:
            self._toggle(name, data)
        else:
            raise KernelRejectionError(name, "No such file or directory")

    # ----- kernel emulation -----

    def _register(self, line: str) -> None:
        if len(line) < 2:
            raise KernelRejectionError(REGISTER, "Invalid argument")
        # The first character is the field delimiter.
        parts = line[1:].rstrip("\n").split(line[0])
        if len(parts) != 7:
            raise KernelRejectionError(REGISTER, "Invalid argument")
        name, kind, offset, magic, mask, interpreter, flags = parts

        if not name or name in (".", "..", REGISTER, STATUS) or "/" in name:
            raise KernelRejectionError(REGISTER, "Invalid argument")
        if name in self._entries:
            raise KernelRejectionError(REGISTER, "File exists")
        if kind not in ("M", "E") or not interpreter:
            raise KernelRejectionError(REGISTER, "Invalid argument")
        if any(f not in "POCF" for f in flags):
            raise KernelRejectionError(REGISTER, "Invalid argument")

        try:
            offset_value = int(offset) if offset else 0
            magic_bytes = _unescape(magic)
            mask_bytes = _unescape(mask)
        except ValueError as e:
            raise KernelRejectionError(REGISTER, "Invalid argument") from e
        if offset_value < 0 or not magic_bytes:
            raise KernelRejectionError(REGISTER, "Invalid argument")
        if mask_bytes and len(mask_bytes) != len(magic_bytes):
            raise KernelRejectionError(REGISTER, "Invalid argument")

        self._entries[name] = _KernelEntry(
            name=name,
            type=kind,
            offset=offset_value,
            magic=magic_bytes,
            mask=mask_bytes,
            interpreter=interpreter,
            flags=flags,
        )
        logger.debug("memory store: registered %s", name)

    def _toggle(self, name: str, data: str) -> None:
        value = data.strip()
        if value == "1":
            self._entries[name].enabled = True
        elif value == "0":
            self._entries[name].enabled = False
        elif value == "-1":
            del self._entries[name]
        else:
            raise KernelRejectionError(name, "Invalid argument")
