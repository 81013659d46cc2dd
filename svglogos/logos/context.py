"""Resolution context.

Owns the process-wide mutable state of the engine: result cache,
attempt ledger, in-flight lookups and the periodic ledger sweep.
Built once at startup (see svglogos.main lifespan) and passed into the
resolver and batch coordinator. Tests build a fresh one per test.
"""

import asyncio
import logging
from typing import Optional

from svglogos.logos.cache import ResolutionCache
from svglogos.logos.config import get_logos_settings
from svglogos.logos.ledger import AttemptLedger
from svglogos.logos.results import LookupOutcome

logger = logging.getLogger(__name__)


class ResolutionContext:
    """Cache + ledger + sweep timer, with an explicit lifecycle."""

    def __init__(self, sweep_interval: Optional[float] = None):
        if sweep_interval is None:
            sweep_interval = get_logos_settings().LOGOS_FAILED_SOURCE_RESET_SECONDS
        self.cache = ResolutionCache()
        self.ledger = AttemptLedger()
        self.inflight: dict[str, "asyncio.Future[LookupOutcome]"] = {}
        self.sweep_interval = sweep_interval
        self._sweep_task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def sweep(self) -> int:
        """Clear all recently failed sources now."""
        return self.ledger.clear_failed()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep()

    def start(self) -> None:
        """Start the periodic sweep (idempotent). Requires a running loop."""
        if self.running:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop())
        logger.info(f"[CONTEXT] Ledger sweep started (every {self.sweep_interval:.0f}s)")

    async def stop(self) -> None:
        """Cancel the periodic sweep."""
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        try:
            await self._sweep_task
        except asyncio.CancelledError:
            pass
        self._sweep_task = None
        logger.info("[CONTEXT] Ledger sweep stopped")
