"""HTTP/JSON service exposing the registry operations.

Endpoints:
    POST /v1/identities              CreateIdentity
    GET  /v1/identities              ListIdentities
    GET  /v1/identities/{uuid}       ShowIdentity (uuid may be a prefix)
    POST /v1/identities/{uuid}/pin   PinVersion

Enums cross this boundary as integer wire tags; the registry underneath
only ever sees the on-disk symbols.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from aiohttp import web

from holonid.core import IdentityRegistry
from holonid.identity import enums
from holonid.identity.document import parse_document
from holonid.identity.errors import (
    AmbiguousMatchError,
    FormatError,
    NotFoundError,
    RegistryIOError,
    ValidationError,
)
from holonid.identity.model import PINNING_FIELDS, HolonIdentity, new_identity

if TYPE_CHECKING:
    from holonid.config import ServerConfig

logger = logging.getLogger(__name__)

REGISTRY_KEY = web.AppKey("registry", IdentityRegistry)

_REQUIRED = ("given_name", "family_name", "motto", "composer")

_STATUS_BY_ERROR: list[tuple[type[Exception], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (AmbiguousMatchError, 409),
    (FormatError, 422),
    (RegistryIOError, 500),
]


def identity_to_wire(identity: HolonIdentity) -> dict[str, Any]:
    """JSON shape of a record, with enum fields as wire tags."""
    data = asdict(identity)
    data["clade"] = int(enums.clade_to_wire(identity.clade))
    data["status"] = int(enums.status_to_wire(identity.status))
    data["reproduction"] = int(enums.reproduction_to_wire(identity.reproduction))
    data["proto_status"] = int(enums.proto_status_to_wire(identity.proto_status))
    return data


def identity_from_request(
    body: dict[str, Any], default_lang: str = ""
) -> tuple[HolonIdentity, str | None]:
    """Validate a CreateIdentity body and build the unsaved record."""
    if any(not isinstance(body.get(name), str) or not body[name] for name in _REQUIRED):
        raise ValidationError("given_name, family_name, motto, and composer are required")

    clade = _tag(body, "clade")
    reproduction = _tag(body, "reproduction")
    lang = _optional_str(body, "lang")
    wrapped_license = _optional_str(body, "wrapped_license")
    output_dir = _optional_str(body, "output_dir")
    aliases = body.get("aliases") or []
    if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
        raise ValidationError("aliases must be a list of strings")

    identity = new_identity(
        given_name=body["given_name"],
        family_name=body["family_name"],
        motto=body["motto"],
        composer=body["composer"],
        clade=enums.clade_from_wire(clade),
        reproduction=enums.reproduction_from_wire(reproduction),
        aliases=list(aliases),
        wrapped_license=wrapped_license,
    )
    identity.lang = lang or default_lang
    return identity, output_dir


def _tag(body: dict[str, Any], name: str) -> int:
    value = body.get(name, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer enum tag")
    return value


def _optional_str(body: dict[str, Any], name: str) -> str | None:
    value = body.get(name)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    return value or None


def _error_response(exc: Exception) -> web.Response:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            if status >= 500:
                logger.error("Registry failure: %s", exc)
            else:
                logger.warning("Request rejected (%d): %s", status, exc)
            return web.json_response({"error": str(exc)}, status=status)
    logger.exception("Unexpected error handling request")
    return web.json_response({"error": "internal error"}, status=500)


async def _json_body(request: web.Request) -> dict[str, Any]:
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except json.JSONDecodeError as e:
        raise ValidationError(f"malformed JSON: {e}") from e
    if not isinstance(body, dict):
        raise ValidationError("request body must be a JSON object")
    return body


# ── Handlers ──────────────────────────────────────────────────


async def create_identity(request: web.Request) -> web.Response:
    registry: IdentityRegistry = request.app[REGISTRY_KEY]
    try:
        body = await _json_body(request)
        identity, output_dir = identity_from_request(body, registry.config.registry.default_lang)
        path = await asyncio.to_thread(registry.create, identity, output_dir)
    except Exception as e:
        return _error_response(e)
    return web.json_response(
        {"identity": identity_to_wire(identity), "file_path": str(path)}, status=201
    )


async def list_identities(request: web.Request) -> web.Response:
    registry: IdentityRegistry = request.app[REGISTRY_KEY]
    try:
        holons = await asyncio.to_thread(registry.find_all)
    except Exception as e:
        return _error_response(e)
    return web.json_response({"identities": [identity_to_wire(h) for h in holons]})


async def show_identity(request: web.Request) -> web.Response:
    registry: IdentityRegistry = request.app[REGISTRY_KEY]
    target = request.match_info["uuid"]
    try:
        path = await asyncio.to_thread(registry.find, target)
        raw = await asyncio.to_thread(registry.read_raw, path)
        identity, _ = parse_document(raw)
    except Exception as e:
        return _error_response(e)
    return web.json_response(
        {"identity": identity_to_wire(identity), "file_path": str(path), "raw_content": raw}
    )


async def pin_version(request: web.Request) -> web.Response:
    registry: IdentityRegistry = request.app[REGISTRY_KEY]
    target = request.match_info["uuid"]
    try:
        body = await _json_body(request)
        pinning = {name: _optional_str(body, name) for name in PINNING_FIELDS}
        _, identity = await asyncio.to_thread(registry.pin, target, **pinning)
    except Exception as e:
        return _error_response(e)
    return web.json_response({"identity": identity_to_wire(identity)})


def build_app(registry: IdentityRegistry) -> web.Application:
    app = web.Application()
    app[REGISTRY_KEY] = registry
    app.router.add_post("/v1/identities", create_identity)
    app.router.add_get("/v1/identities", list_identities)
    app.router.add_get("/v1/identities/{uuid}", show_identity)
    app.router.add_post("/v1/identities/{uuid}/pin", pin_version)
    return app


class HttpConnector:
    """Runs the registry app on an aiohttp TCP site."""

    def __init__(self, registry: IdentityRegistry, config: ServerConfig) -> None:
        self._registry = registry
        self._config = config
        self._runner: web.AppRunner | None = None

    @property
    def name(self) -> str:
        return "http"

    async def start(self) -> None:
        self._runner = web.AppRunner(build_app(self._registry))
        await self._runner.setup()
        if self._config.unix_path:
            site: web.BaseSite = web.UnixSite(self._runner, self._config.unix_path)
        else:
            site = web.TCPSite(self._runner, self._config.host, self._config.port)
        await site.start()
        logger.info("Holon registry listening on %s", site.name)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Holon registry stopped")
