"""
Attempt Ledger.

Per-term bookkeeping that drives source rotation and back-off:

- used:   sources that ever produced a result for the term (never expire,
          used to rotate providers on refresh)
- failed: sources that came up empty for the term in the current sweep
          window (cleared wholesale by clear_failed())

Logo hosts are flaky or geofenced. Retrying a source that just failed
wastes latency, but a permanent blacklist would turn a transient outage
into a session-long one, hence the time-bounded amnesia.
"""

import logging

logger = logging.getLogger(__name__)


class AttemptLedger:
    """In-memory used/failed source sets keyed by term key."""

    def __init__(self):
        self._used: dict[str, set[str]] = {}
        self._failed: dict[str, set[str]] = {}

    def ensure(self, key: str) -> None:
        """Create empty entries for a term on first touch."""
        self._used.setdefault(key, set())
        self._failed.setdefault(key, set())

    def record_used(self, key: str, source_id: str) -> None:
        self._used.setdefault(key, set()).add(source_id)

    def record_failed(self, key: str, source_id: str) -> None:
        self._failed.setdefault(key, set()).add(source_id)

    def is_recently_failed(self, key: str, source_id: str) -> bool:
        return source_id in self._failed.get(key, ())

    def used_sources(self, key: str) -> set[str]:
        """Copy of the used set (empty if the term was never touched)."""
        return set(self._used.get(key, ()))

    def failed_sources(self, key: str) -> set[str]:
        """Copy of the failed set (empty if the term was never touched)."""
        return set(self._failed.get(key, ()))

    def clear_failed(self) -> int:
        """Forget every recently failed source across all terms.

        Returns:
            Number of (term, source) pairs that were cleared
        """
        cleared = sum(len(sources) for sources in self._failed.values())
        self._failed.clear()
        if cleared:
            logger.info(f"[LEDGER] Sweep cleared {cleared} failed source marks")
        return cleared

    def __contains__(self, key: object) -> bool:
        return key in self._used or key in self._failed
