"""RegisteredEntry — the kernel's view of a live binfmt_misc entry."""

from __future__ import annotations

from dataclasses import dataclass


def _second_token(line: str) -> str:
    parts = line.split()
    return parts[1] if len(parts) > 1 else ""


@dataclass
class RegisteredEntry:
    """A registered entry as reported by its control file.

    The kernel renders an entry as::

        enabled
        interpreter /usr/bin/qemu-aarch64
        flags: OCF
        offset 0
        magic 7f454c46...
        mask ffffffff...

    Extension entries carry an ``extension .foo`` line instead of
    offset/magic/mask.
    """

    name: str
    status: str = ""  # "enabled" / "disabled"
    interpreter: str = ""
    flags: str = ""
    offset: str = ""
    magic: str = ""
    mask: str = ""
    extension: str = ""

    @property
    def enabled(self) -> bool:
        return self.status == "enabled"

    @classmethod
    def from_status(cls, name: str, text: str) -> RegisteredEntry:
        """Parse the contents of an entry's control file.

        The first three lines are positional (status, interpreter, flags);
        anything after is matched by keyword.
        """
        lines = text.splitlines()
        entry = cls(name=name)
        if len(lines) > 0:
            entry.status = lines[0].strip()
        if len(lines) > 1:
            entry.interpreter = _second_token(lines[1])
        if len(lines) > 2:
            entry.flags = _second_token(lines[2])
        for line in lines[3:]:
            key, _, value = line.strip().partition(" ")
            if key in ("offset", "magic", "mask", "extension"):
                setattr(entry, key, value.strip())
        return entry
