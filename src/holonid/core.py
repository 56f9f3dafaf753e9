"""Registry façade — the operations collaborators call.

Binds the identity core to one configured root:
1. create: validate, render the template, write a new HOLON.md
2. find_all: enumerate every readable record
3. find: resolve a UUID or UUID prefix to a document path
4. read: parse a document into (record, body)
5. update: apply field mutations and rewrite the structured block
6. pin: resolve + update the binary-pinning fields
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import fields
from pathlib import Path
from typing import Any

from holonid.config import HolonConfig
from holonid.identity import registry, writer
from holonid.identity.document import load_document, read_document_text
from holonid.identity.errors import FormatError, RegistryIOError, ValidationError
from holonid.identity.model import (
    IMMUTABLE_FIELDS,
    OPTIONAL_FIELDS,
    PINNING_FIELDS,
    SEQUENCE_FIELDS,
    VOCABULARIES,
    HolonIdentity,
    default_dir_name,
)

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = frozenset(f.name for f in fields(HolonIdentity)) - set(IMMUTABLE_FIELDS)


def _check_value(name: str, value: Any) -> Any:
    if name in SEQUENCE_FIELDS:
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ValidationError(f"{name} must be a list of strings")
        return list(value)
    if value is None and name in OPTIONAL_FIELDS:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    if name in VOCABULARIES and value not in VOCABULARIES[name]:
        allowed = ", ".join(VOCABULARIES[name])
        raise ValidationError(f"{name} must be one of {allowed}, got {value!r}")
    return value


class IdentityRegistry:
    """All HOLON.md documents reachable under ``config.root``."""

    def __init__(self, config: HolonConfig) -> None:
        self.config = config
        self.root = config.root

    def default_output_dir(self, identity: HolonIdentity) -> Path:
        return self.root / registry.CONVENTION_DIR / default_dir_name(identity)

    def create(self, identity: HolonIdentity, output_dir: str | Path | None = None) -> Path:
        """Write a new identity; relative ``output_dir`` values are taken from the root."""
        if output_dir:
            target_dir = Path(output_dir)
            if not target_dir.is_absolute():
                target_dir = self.root / target_dir
        else:
            target_dir = self.default_output_dir(identity)
        return writer.create_new(identity, target_dir / registry.DOCUMENT_NAME)

    def find_all(self) -> list[HolonIdentity]:
        return registry.find_all(self.root)

    def find(self, text: str) -> Path:
        return registry.find_by_uuid(self.root, text, self.config.registry.on_ambiguous)

    def read(self, path: str | Path) -> tuple[HolonIdentity, str]:
        try:
            return load_document(path)
        except UnicodeDecodeError as e:
            raise FormatError(f"{path} is not UTF-8: {e}") from e
        except OSError as e:
            raise RegistryIOError(f"cannot read {path}: {e}") from e

    def read_raw(self, path: str | Path) -> str:
        try:
            return read_document_text(path)
        except OSError as e:
            raise RegistryIOError(f"cannot read {path}: {e}") from e

    def update(self, path: str | Path, mutations: Mapping[str, Any]) -> HolonIdentity:
        """Set the given fields on the record at ``path``. ``None`` clears an optional field."""
        unknown = sorted(set(mutations) - _MUTABLE_FIELDS)
        if unknown:
            raise ValidationError(f"cannot update field(s): {', '.join(unknown)}")
        changes = {name: _check_value(name, value) for name, value in mutations.items()}

        def apply(identity: HolonIdentity) -> None:
            for name, value in changes.items():
                setattr(identity, name, value)

        return writer.update_existing(path, apply)

    def pin(self, text: str, **pinning: str | None) -> tuple[Path, HolonIdentity]:
        """Resolve ``text`` and record the non-empty pinning values on it."""
        unknown = sorted(set(pinning) - set(PINNING_FIELDS))
        if unknown:
            raise ValidationError(f"not pinning field(s): {', '.join(unknown)}")

        path = self.find(text)
        changes = {name: value for name, value in pinning.items() if value}
        identity = self.update(path, changes)
        logger.info("Pinned %s: %s", identity.display_name, changes or "(no changes)")
        return path, identity
