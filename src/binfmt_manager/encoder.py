"""Control encoder — build the line written to binfmt_misc/register."""

from __future__ import annotations

import re

from binfmt_manager.model import BinfmtDefinition

_PAIR_RE = re.compile(r"(..)", re.DOTALL)


def hex_escape(value: str) -> str:
    """Rewrite each pair of hex digits as an escaped byte token.

    ``"cafebabe"`` becomes ``"\\xca\\xfe\\xba\\xbe"``. A trailing odd
    character is left as-is; the kernel decides whether it is acceptable.
    """
    return _PAIR_RE.sub(r"\\x\1", value)


def encode_registration(defn: BinfmtDefinition) -> str:
    """Encode a definition as a kernel registration line.

    Format: ``:name:type:offset:magic:mask:interpreter:flags`` with magic
    and mask hex-escaped and no trailing newline.
    """
    fields = [
        defn.name,
        defn.type,
        defn.offset,
        hex_escape(defn.magic),
        hex_escape(defn.mask),
        defn.interpreter,
        defn.flags,
    ]
    return ":" + ":".join(fields)
