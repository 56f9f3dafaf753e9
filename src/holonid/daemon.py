"""Serve mode — keep the HTTP registry service up until signalled.

Usage: python -m holonid serve

Manages:
- HTTP connector lifecycle
- Graceful shutdown (SIGTERM/SIGINT)
"""

from __future__ import annotations

import asyncio
import logging
import signal

from holonid.config import HolonConfig, load_config
from holonid.connectors.http import HttpConnector
from holonid.core import IdentityRegistry

logger = logging.getLogger(__name__)


class RegistryDaemon:
    """Always-on registry service."""

    def __init__(self, config: HolonConfig | None = None) -> None:
        self.config = config or load_config()
        self.registry = IdentityRegistry(self.config)
        self._shutdown_event = asyncio.Event()

    def _setup_signals(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._handle_signal, sig)

    def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down...", sig.name)
        self._shutdown_event.set()

    def shutdown(self) -> None:
        self._shutdown_event.set()

    async def run(self) -> None:
        self._setup_signals()
        connector = HttpConnector(self.registry, self.config.server)

        logger.info("Registry daemon starting (root=%s)", self.config.root)
        await connector.start()
        try:
            await self._shutdown_event.wait()
        finally:
            await connector.stop()
            logger.info("Registry daemon stopped.")
