"""binfmt-manager — register and manage binfmt_misc interpreter bindings."""

from binfmt_manager.commands import BinfmtManager
from binfmt_manager.encoder import encode_registration, hex_escape
from binfmt_manager.loader import extract_field, load_definition
from binfmt_manager.model import BinfmtDefinition, RegisteredEntry

__version__ = "0.1.0"

__all__ = [
    "BinfmtManager",
    "BinfmtDefinition",
    "RegisteredEntry",
    "encode_registration",
    "hex_escape",
    "extract_field",
    "load_definition",
]
