"""BinfmtDefinition — one interpreter binding as read from a config file."""

from __future__ import annotations

from dataclasses import dataclass

# Order matters: it is the field order of the kernel registration line.
FIELDS: tuple[str, ...] = (
    "name",
    "type",
    "offset",
    "magic",
    "mask",
    "interpreter",
    "flags",
)


@dataclass(frozen=True)
class BinfmtDefinition:
    """A binfmt_misc registration request.

    Values are kept as the raw strings found in the definition file. The
    kernel does its own validation of type, offset, magic and mask.
    """

    name: str
    type: str  # "M" (magic) or "E" (extension)
    offset: str
    magic: str  # hex, two characters per byte
    mask: str  # hex, same length as magic
    interpreter: str
    flags: str  # e.g. "P", "OCF"
    source: str = ""  # path the definition was loaded from

    def values(self) -> list[str]:
        """Field values in registration-line order."""
        return [getattr(self, f) for f in FIELDS]
