"""Error taxonomy for the identity registry."""

from __future__ import annotations

from pathlib import Path


class IdentityError(Exception):
    """Base class for every registry failure."""


class FormatError(IdentityError, ValueError):
    """A document has no structured block, an unclosed one, or one that won't decode."""


class ValidationError(IdentityError, ValueError):
    """A record or a mutation breaks a field invariant."""


class NotFoundError(IdentityError, LookupError):
    """No record matches the requested identifier or prefix."""

    def __init__(self, query: str) -> None:
        super().__init__(f"holon not found: {query}")
        self.query = query


class AmbiguousMatchError(IdentityError, LookupError):
    """More than one record matches a non-exact prefix."""

    def __init__(self, query: str, candidates: list[Path]) -> None:
        listed = ", ".join(str(p) for p in candidates)
        super().__init__(f"ambiguous holon prefix {query!r} matches {len(candidates)}: {listed}")
        self.query = query
        self.candidates = candidates


class RegistryIOError(IdentityError):
    """The registry root is inaccessible or a document can't be written."""
