"""Create and rewrite HOLON.md documents.

Documents are rendered fully in memory and written through a temporary
file that replaces the target in one ``os.replace``. Readers see either the
old document or the new one. Rewrites of the same path are serialized
per process.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
import threading
import weakref
from collections.abc import Callable
from pathlib import Path

from holonid.identity.document import load_document, render_document, render_new
from holonid.identity.errors import FormatError, RegistryIOError, ValidationError
from holonid.identity.model import IMMUTABLE_FIELDS, HolonIdentity, validate_new

logger = logging.getLogger(__name__)

Mutation = Callable[[HolonIdentity], None]

# Entries disappear once no writer holds the lock.
_path_locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _path_locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.Lock()
        return lock


def atomic_write_text(path: Path, content: str, mode: int = 0o644) -> None:
    """Write text via a sibling temp file + rename. The temp file never outlives a failure."""
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        os.chmod(tmp_path, mode)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise


def create_new(identity: HolonIdentity, output_path: str | Path, *, overwrite: bool = False) -> Path:
    """Write a freshly created identity to ``output_path`` using the full template."""
    validate_new(identity)
    content = render_new(identity)

    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RegistryIOError(f"cannot create directory {path.parent}: {e}") from e

    with _lock_for(path):
        if path.exists() and not overwrite:
            raise RegistryIOError(f"cannot create {path}: a holon already lives there")
        try:
            atomic_write_text(path, content)
        except OSError as e:
            raise RegistryIOError(f"cannot write {path}: {e}") from e

    logger.info("Created holon %s (%s) at %s", identity.display_name, identity.uuid, path)
    return path


def update_existing(path: str | Path, mutate: Mutation) -> HolonIdentity:
    """Apply ``mutate`` to the record at ``path`` and rewrite its structured block.

    The body is written back exactly as it was read.
    """
    path = Path(path)
    with _lock_for(path):
        try:
            identity, body = load_document(path)
        except UnicodeDecodeError as e:
            raise FormatError(f"{path} is not UTF-8: {e}") from e
        except OSError as e:
            raise RegistryIOError(f"cannot read {path}: {e}") from e

        frozen = {name: getattr(identity, name) for name in IMMUTABLE_FIELDS}
        mutate(identity)
        for name, before in frozen.items():
            if getattr(identity, name) != before:
                raise ValidationError(f"{name} is immutable")
        identity.normalize()

        try:
            mode = stat.S_IMODE(path.stat().st_mode)
            atomic_write_text(path, render_document(identity, body), mode=mode)
        except OSError as e:
            raise RegistryIOError(f"cannot write {path}: {e}") from e

    logger.info("Updated holon %s (%s) at %s", identity.display_name, identity.uuid, path)
    return identity
