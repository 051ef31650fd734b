"""Tests for binfmt_manager.model (BinfmtDefinition, RegisteredEntry)."""

from __future__ import annotations

import dataclasses

import pytest

from binfmt_manager.model import FIELDS, BinfmtDefinition, RegisteredEntry


# ---------------------------------------------------------------------------
# BinfmtDefinition
# ---------------------------------------------------------------------------


class TestBinfmtDefinition:
    def test_field_order(self) -> None:
        assert FIELDS == ("name", "type", "offset", "magic", "mask", "interpreter", "flags")

    def test_values(self) -> None:
        defn = BinfmtDefinition("n", "M", "0", "aa", "ff", "/bin/i", "F")
        assert defn.values() == ["n", "M", "0", "aa", "ff", "/bin/i", "F"]

    def test_frozen(self) -> None:
        defn = BinfmtDefinition("n", "M", "0", "aa", "ff", "/bin/i", "F")
        with pytest.raises(dataclasses.FrozenInstanceError):
            defn.name = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# RegisteredEntry.from_status
# ---------------------------------------------------------------------------


QEMU_STATUS = """\
enabled
interpreter /usr/bin/qemu-aarch64-static
flags: OCF
offset 0
magic 7f454c460201010000000000000000000200b700
mask ffffffffffffff00fffffffffffffffffeffffff
"""


class TestRegisteredEntry:
    def test_positional_lines(self) -> None:
        entry = RegisteredEntry.from_status("qemu-aarch64", QEMU_STATUS)
        assert entry.name == "qemu-aarch64"
        assert entry.status == "enabled"
        assert entry.enabled is True
        assert entry.interpreter == "/usr/bin/qemu-aarch64-static"
        assert entry.flags == "OCF"

    def test_keyword_lines(self) -> None:
        entry = RegisteredEntry.from_status("qemu-aarch64", QEMU_STATUS)
        assert entry.offset == "0"
        assert entry.magic.startswith("7f454c46")
        assert entry.mask.startswith("ffffffff")
        assert entry.extension == ""

    def test_disabled(self) -> None:
        entry = RegisteredEntry.from_status("x", "disabled\ninterpreter /bin/x\nflags: \n")
        assert entry.enabled is False
        assert entry.status == "disabled"

    def test_empty_flags(self) -> None:
        entry = RegisteredEntry.from_status("x", "enabled\ninterpreter /bin/x\nflags: \n")
        assert entry.flags == ""

    def test_extension_entry(self) -> None:
        entry = RegisteredEntry.from_status(
            "pyz", "enabled\ninterpreter /usr/bin/python3\nflags: \nextension .pyz\n"
        )
        assert entry.extension == ".pyz"
        assert entry.magic == ""

    def test_truncated_content(self) -> None:
        entry = RegisteredEntry.from_status("x", "enabled\n")
        assert entry.status == "enabled"
        assert entry.interpreter == ""
        assert entry.flags == ""

    def test_empty_content(self) -> None:
        entry = RegisteredEntry.from_status("x", "")
        assert entry.status == ""
        assert entry.enabled is False
