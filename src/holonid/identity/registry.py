"""Discover and resolve HOLON.md documents under a directory tree.

Every call re-walks the filesystem; nothing is cached between calls.
Results follow ``os.walk`` order, which is filesystem-defined; callers
that need a stable order sort for themselves.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Literal

from holonid.identity.document import load_document
from holonid.identity.errors import (
    AmbiguousMatchError,
    FormatError,
    NotFoundError,
    RegistryIOError,
)
from holonid.identity.model import HolonIdentity

logger = logging.getLogger(__name__)

DOCUMENT_NAME = "HOLON.md"
CONVENTION_DIR = ".holon"

AmbiguityPolicy = Literal["error", "first"]


def _is_pruned(dir_name: str) -> bool:
    return dir_name.startswith(".") and dir_name != CONVENTION_DIR


def iter_identities(root: str | Path) -> Iterator[tuple[Path, HolonIdentity]]:
    """Yield ``(path, identity)`` for every readable document under ``root``.

    Hidden directories are not descended into, except ``.holon/``. Files
    and subdirectories that can't be read or parsed are skipped; a root that
    can't be listed raises RegistryIOError.
    """
    root = Path(root)
    if not root.is_dir():
        raise RegistryIOError(f"cannot scan {root}: not a directory")

    def on_walk_error(err: OSError) -> None:
        if err.filename == os.fspath(root):
            raise RegistryIOError(f"cannot scan {root}: {err}") from err
        logger.debug("Skipping unreadable directory %s: %s", err.filename, err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
        dirnames[:] = [d for d in dirnames if not _is_pruned(d)]
        if DOCUMENT_NAME not in filenames:
            continue

        path = Path(dirpath) / DOCUMENT_NAME
        try:
            identity, _ = load_document(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable %s: %s", path, e)
            continue
        except FormatError as e:
            logger.debug("Skipping malformed %s: %s", path, e)
            continue
        yield path, identity


def find_all(root: str | Path) -> list[HolonIdentity]:
    """Return every identity under ``root`` in tree-walk order."""
    return [identity for _, identity in iter_identities(root)]


def find_by_uuid(
    root: str | Path,
    target: str,
    on_ambiguous: AmbiguityPolicy = "error",
) -> Path:
    """Locate a HOLON.md by full UUID or UUID prefix.

    An exact UUID match wins outright. Otherwise the prefix must select a
    single document: several matches raise AmbiguousMatchError, or with
    ``on_ambiguous="first"`` the first one in walk order is returned.
    """
    if not target:
        raise NotFoundError(target)

    matches: list[Path] = []
    for path, identity in iter_identities(root):
        if identity.uuid == target:
            return path
        if identity.uuid.startswith(target):
            if on_ambiguous == "first":
                return path
            matches.append(path)

    if not matches:
        raise NotFoundError(target)
    if len(matches) > 1:
        raise AmbiguousMatchError(target, matches)
    return matches[0]
