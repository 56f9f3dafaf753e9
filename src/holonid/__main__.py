"""Entry point: python -m holonid <command>

- new:           Create a new holon identity (interactive)
- show <uuid>:   Display a holon's identity (uuid or unique prefix)
- list:          List all holons under the registry root
- pin <uuid>:    Capture version/commit/arch for a holon's binary
- serve:         Run the HTTP registry service (--listen tcp://host:port|unix:///path, --port N)
- version:       Print version
"""

from __future__ import annotations

import asyncio
import logging
import sys

from holonid.config import ServerConfig, load_config, parse_listen
from holonid.identity.errors import IdentityError

VERSION = "0.1.0"

USAGE = """\
Sophia Who? — holon identity manager

Usage: python -m holonid <command>
  new           create a new holon identity (interactive)
  show <uuid>   display a holon's identity
  list          list all known holons
  pin <uuid>    capture version/commit/arch
  serve [--listen tcp://host:port|unix:///path] [--port N]
                start the HTTP registry service
  version       print version"""


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _run_interactive(cmd: str, args: list[str]) -> None:
    config = load_config()
    _setup_logging(config.log_level)

    from holonid.connectors.cli import InteractiveCLI
    from holonid.core import IdentityRegistry

    cli = InteractiveCLI(IdentityRegistry(config))
    if cmd == "new":
        cli.run_new()
    elif cmd == "list":
        cli.run_list()
    elif cmd == "show":
        cli.run_show(args[0])
    elif cmd == "pin":
        cli.run_pin(args[0])


def parse_serve_args(args: list[str], server: ServerConfig) -> ServerConfig:
    """Apply ``--listen URI`` and ``--port N`` on top of the configured server settings."""
    it = iter(args)
    for arg in it:
        if arg not in ("--listen", "--port"):
            raise ValueError(f"unknown serve option: {arg}")
        value = next(it, None)
        if value is None:
            raise ValueError(f"{arg} needs a value")
        if arg == "--listen":
            server = parse_listen(value, server)
        else:
            server = parse_listen(f"tcp://{server.host}:{value}", server)
    return server


def _run_serve(args: list[str]) -> None:
    config = load_config()
    config.server = parse_serve_args(args, config.server)
    _setup_logging(config.log_level)

    from holonid.daemon import RegistryDaemon

    daemon = RegistryDaemon(config)
    asyncio.run(daemon.run())


def main() -> None:
    if len(sys.argv) < 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    cmd, args = sys.argv[1], sys.argv[2:]

    if cmd in ("show", "pin") and not args:
        print(f"usage: python -m holonid {cmd} <uuid>", file=sys.stderr)
        sys.exit(1)

    try:
        if cmd in ("new", "list", "show", "pin"):
            _run_interactive(cmd, args)
        elif cmd == "serve":
            _run_serve(args)
        elif cmd == "version":
            print(f"holonid v{VERSION}")
        elif cmd in ("help", "--help", "-h"):
            print(USAGE)
        else:
            print(f"unknown command: {cmd}", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            sys.exit(1)
    except (IdentityError, ValueError, EOFError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
