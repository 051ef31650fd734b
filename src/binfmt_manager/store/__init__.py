"""Entry stores — where registered binfmt entries live.

ProcfsEntryStore talks to the real kernel through the mounted binfmt_misc
filesystem; InMemoryEntryStore emulates it.
"""

from binfmt_manager.store.base import REGISTER, RESERVED, STATUS, EntryStore
from binfmt_manager.store.memory import InMemoryEntryStore
from binfmt_manager.store.procfs import ProcfsEntryStore

__all__ = [
    "REGISTER",
    "RESERVED",
    "STATUS",
    "EntryStore",
    "InMemoryEntryStore",
    "ProcfsEntryStore",
]
