"""HOLON.md codec — structured block + markdown body.

A document is a YAML frontmatter block between ``---`` lines followed by a
free-form body. The body is opaque: parsing captures it verbatim and every
rewrite of the block puts it back untouched. The block is always rendered
in one fixed layout, with absent scalars written as ``null`` and empty
sequences as ``[]``, so rewriting never drops a field.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

import yaml
from frontmatter.default_handlers import YAMLHandler

from holonid.identity.errors import FormatError
from holonid.identity.model import STATUSES, HolonIdentity

DELIMITER = YAMLHandler.START_DELIMITER
LAYOUT_HEADER = "# Holon Identity v1"

_CLOSING = re.compile(rf"(?:^|\r?\n){re.escape(DELIMITER)}(?:\r?\n|\Z)")
_handler = YAMLHandler()

# Characters PyYAML refuses to read raw or folds as line breaks inside a quoted scalar.
_YAML_UNSAFE = re.compile("[\x7f-\x9f\u2028\u2029\ud800-\udfff\ufffe\uffff]")


class _StringLoader(yaml.SafeLoader):
    """SafeLoader that only resolves plain scalars to null; everything else stays text."""

    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag == "tag:yaml.org,2002:null"]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }


BODY_TEMPLATE = """\

# {given_name} {family_name}

> *"{motto}"*

## Description

<Describe what this holon does.>

## Introspection Notes

<Any assumptions or ambiguities noted during creation.>
"""


# ── Parse ─────────────────────────────────────────────────────


def split_document(text: str) -> tuple[str, str]:
    """Split a document into (block, body) without decoding the block."""
    if not text.startswith(DELIMITER):
        raise FormatError("no structured block found")

    rest = text[len(DELIMITER) :]
    if rest.startswith("\r\n"):
        rest = rest[2:]
    elif rest.startswith("\n"):
        rest = rest[1:]

    match = _CLOSING.search(rest)
    if not match:
        raise FormatError("unclosed structured block")
    return rest[: match.start()], rest[match.end() :]


def parse_document(text: str) -> tuple[HolonIdentity, str]:
    """Parse a HOLON.md document into its record and its body."""
    block, body = split_document(text)
    try:
        data = _handler.load(block, Loader=_StringLoader)
    except yaml.YAMLError as e:
        raise FormatError(f"block parse error: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FormatError("block parse error: structured block is not a mapping")
    return HolonIdentity.from_mapping(data), body


def read_document_text(path: str | Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def load_document(path: str | Path) -> tuple[HolonIdentity, str]:
    """Read and parse a HOLON.md file. Line endings are kept as stored."""
    return parse_document(read_document_text(path))


# ── Render ────────────────────────────────────────────────────


def _quote(value: str) -> str:
    # A JSON string literal is a valid YAML double-quoted scalar once the
    # characters YAML rejects raw are escaped too.
    text = json.dumps(value, ensure_ascii=False)
    return _YAML_UNSAFE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def _optional(value: str | None) -> str:
    return "null" if value is None else _quote(value)


def _status(value: str | None) -> str:
    if value is None:
        return "null"
    return value if value in STATUSES else _quote(value)


def _sequence(values: list[str]) -> str:
    return "[" + ", ".join(_quote(v) for v in values) + "]"


def render_block(identity: HolonIdentity) -> str:
    """Render the structured block (without delimiters) in the fixed layout."""
    i = identity
    return (
        f"{LAYOUT_HEADER}\n"
        f"uuid: {_quote(i.uuid)}\n"
        f"given_name: {_quote(i.given_name)}\n"
        f"family_name: {_quote(i.family_name)}\n"
        f"motto: {_quote(i.motto)}\n"
        f"composer: {_quote(i.composer)}\n"
        f"clade: {_quote(i.clade)}\n"
        f"status: {_status(i.status)}\n"
        f"born: {_quote(i.born)}\n"
        f"\n"
        f"# Lineage\n"
        f"parents: {_sequence(i.parents)}\n"
        f"reproduction: {_quote(i.reproduction)}\n"
        f"\n"
        f"# Pinning\n"
        f"binary_path: {_optional(i.binary_path)}\n"
        f"binary_version: {_optional(i.binary_version)}\n"
        f"git_tag: {_optional(i.git_tag)}\n"
        f"git_commit: {_optional(i.git_commit)}\n"
        f"os: {_optional(i.os)}\n"
        f"arch: {_optional(i.arch)}\n"
        f"dependencies: {_sequence(i.dependencies)}\n"
        f"\n"
        f"# Optional\n"
        f"aliases: {_sequence(i.aliases)}\n"
        f"wrapped_license: {_optional(i.wrapped_license)}\n"
        f"\n"
        f"# Metadata\n"
        f"generated_by: {_quote(i.generated_by)}\n"
        f"lang: {_quote(i.lang)}\n"
        f"proto_status: {_status(i.proto_status)}\n"
    )


def render_document(identity: HolonIdentity, body: str) -> str:
    """Render a full document: the record's block followed by ``body`` verbatim."""
    return f"{DELIMITER}\n{render_block(identity)}{DELIMITER}\n{body}"


def render_new(identity: HolonIdentity) -> str:
    """Render a brand-new document with the default body template."""
    body = BODY_TEMPLATE.format(
        given_name=identity.given_name,
        family_name=identity.family_name,
        motto=identity.motto,
    )
    return render_document(identity, body)
