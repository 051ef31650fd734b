"""Status lister — report registered entries."""

from __future__ import annotations

from binfmt_manager.model import RegisteredEntry
from binfmt_manager.store import EntryStore

NOT_ENABLED = "binfmt is not enabled"


def collect_entries(store: EntryStore) -> list[RegisteredEntry]:
    """Read and parse every registered entry, in name order."""
    return [
        RegisteredEntry.from_status(name, store.read(name))
        for name in store.enumerate()
    ]


def format_entry(entry: RegisteredEntry) -> str:
    return (
        f"{entry.name}:\n"
        f"\tStatus: {entry.status}\n"
        f"\tInterpreter: {entry.interpreter}\n"
        f"\tFlags: {entry.flags}"
    )


def render_report(store: EntryStore) -> str:
    """Human report of all entries.

    Returns :data:`NOT_ENABLED` when binfmt_misc is not active, and an empty
    string when nothing is registered.
    """
    if not store.is_active():
        return NOT_ENABLED
    return "\n".join(format_entry(e) for e in collect_entries(store))
