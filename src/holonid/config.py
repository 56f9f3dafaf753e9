"""Configuration loading from environment variables and holonid.toml."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

_CONFIG_FILENAME = "holonid.toml"
_AMBIGUITY_POLICIES = ("error", "first")


@dataclass
class RegistryConfig:
    """How identities are resolved and created."""

    on_ambiguous: str = "error"
    default_lang: str = "python"


@dataclass
class ServerConfig:
    """HTTP service configuration."""

    host: str = "127.0.0.1"
    port: int = 9090
    unix_path: str | None = None  # set by a unix:// listen URI; overrides host/port


@dataclass
class HolonConfig:
    """Top-level configuration."""

    root: Path = Path(".")
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"


def parse_listen(uri: str, base: ServerConfig) -> ServerConfig:
    """Apply a ``tcp://host:port`` or ``unix:///path/to.sock`` listen URI to ``base``.

    An empty tcp host (``tcp://:9090``) listens on all interfaces.
    """
    scheme, sep, rest = uri.partition("://")
    if sep and scheme == "tcp":
        host, colon, port = rest.rpartition(":")
        if colon and port.isdigit():
            return replace(base, host=host.strip("[]") or "0.0.0.0", port=int(port), unix_path=None)
    elif sep and scheme == "unix" and rest:
        return replace(base, unix_path=rest)
    raise ValueError(f"invalid listen URI {uri!r}: expected tcp://host:port or unix:///path")


def load_config(config_path: Path | None = None) -> HolonConfig:
    """Load configuration from environment variables and optional holonid.toml.

    Priority: environment variables > holonid.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".holonid" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    registry_data = file_data.get("registry", {})
    server_data = file_data.get("server", {})

    on_ambiguous = os.getenv("HOLONID_ON_AMBIGUOUS", registry_data.get("on_ambiguous", "error"))
    if on_ambiguous not in _AMBIGUITY_POLICIES:
        raise ValueError(
            f"on_ambiguous must be one of {_AMBIGUITY_POLICIES}, got {on_ambiguous!r}"
        )

    config = HolonConfig(
        root=Path(os.getenv("HOLONID_ROOT", file_data.get("root", "."))),
        registry=RegistryConfig(
            on_ambiguous=on_ambiguous,
            default_lang=os.getenv("HOLONID_LANG", registry_data.get("default_lang", "python")),
        ),
        server=ServerConfig(
            host=os.getenv("HOLONID_HOST", server_data.get("host", "127.0.0.1")),
            port=int(os.getenv("HOLONID_PORT", server_data.get("port", 9090))),
        ),
        log_level=os.getenv("HOLONID_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )

    listen = os.getenv("HOLONID_LISTEN", server_data.get("listen"))
    if listen:
        config.server = parse_listen(listen, config.server)
    return config
