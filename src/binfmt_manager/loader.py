"""Definition loader — read key:value binfmt definition files.

A definition file holds one ``key: value`` pair per line::

    name: java_app
    type: M
    offset: 0
    magic: cafebabe
    mask: ffffffff
    interpreter: /usr/bin/run-jar
    flags: P

Lines that don't start with a known key are ignored. If a key appears more
than once, the last occurrence wins.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from binfmt_manager.errors import MissingFieldError, NotFoundError
from binfmt_manager.model import FIELDS, BinfmtDefinition

logger = logging.getLogger(__name__)


def _read(path: str | Path) -> str:
    try:
        return Path(path).read_text()
    except (OSError, UnicodeDecodeError) as e:
        reason = e.strerror if isinstance(e, OSError) and e.strerror else e
        raise NotFoundError(f"binfmt {path} cannot be read: {reason}") from e


def extract_field(path: str | Path, field: str, text: str | None = None) -> str:
    """Return the value of ``field`` in the definition file at ``path``.

    Args:
        path: Definition file path (used for reading and for error messages).
        field: Key to look up, without the trailing colon.
        text: Pre-read file contents. Read from ``path`` when omitted.

    Raises:
        MissingFieldError: The key is absent or its value is empty.
        NotFoundError: The file cannot be read.
    """
    if text is None:
        text = _read(path)

    prefix = f"{field}:"
    value = ""
    for line in text.splitlines():
        if line.startswith(prefix):
            value = line[len(prefix):].strip()

    if not value:
        raise MissingFieldError(str(path), field)
    return value


def load_definition(path: str | Path) -> BinfmtDefinition:
    """Load and check every required field of a definition file.

    Raises:
        NotFoundError: ``path`` is not a regular file or cannot be read as text.
        MissingFieldError: Any of the seven fields is absent or empty.
    """
    path = str(path)
    if not os.path.isfile(path):
        raise NotFoundError(f"binfmt {path} does not exist")

    text = _read(path)
    values = {field: extract_field(path, field, text) for field in FIELDS}
    logger.debug("Loaded definition %s from %s", values["name"], path)
    return BinfmtDefinition(source=path, **values)


def iter_definition_files(config_dir: str | Path) -> Iterator[Path]:
    """Yield regular files in ``config_dir`` in name order.

    A missing directory yields nothing.
    """
    directory = Path(config_dir)
    if not directory.is_dir():
        logger.debug("Config directory %s does not exist", directory)
        return
    for candidate in sorted(directory.iterdir()):
        if candidate.is_file():
            yield candidate
