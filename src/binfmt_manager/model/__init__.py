"""Data model — definitions read from disk and entries read from the kernel."""

from binfmt_manager.model.definition import FIELDS, BinfmtDefinition
from binfmt_manager.model.entry import RegisteredEntry

__all__ = [
    "FIELDS",
    "BinfmtDefinition",
    "RegisteredEntry",
]
