"""Content fingerprints for captured window images."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

logger = logging.getLogger("ds.fingerprint")

_CHUNK_SIZE = 64 * 1024


def fingerprint(path: Path) -> str:
    """Return the hex SHA-256 of the file's bytes, or "" if unreadable.

    Only the bytes are hashed, so mtime and inode never affect the result.
    """
    digest = hashlib.sha256()
    try:
        with path.open("rb") as fh:
            for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as exc:
        logger.warning("Failed to read %s for hashing: %s", path, exc)
        return ""
    return digest.hexdigest()
