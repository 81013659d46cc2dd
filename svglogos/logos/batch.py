"""Batch Coordinator.

Fans a list of terms out to the resolver concurrently and partitions the
outcomes. One failed term never aborts the batch; only a batch where
every term fails is an error.

Order of successes follows completion order, not input order.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from svglogos.logos.config import get_logos_settings
from svglogos.logos.resolver import LogoResolver
from svglogos.logos.results import LogoLookupError, LogoResult, NoLogosFoundError

logger = logging.getLogger(__name__)

NO_LOGOS_FOUND_MESSAGE = "No logos found. Try different search terms."


class GridCapacityError(LogoLookupError):
    """Adding the requested terms would exceed the grid limit."""

    code = "grid_capacity"

    def __init__(self, limit: int):
        super().__init__(f"Maximum of {limit} logos allowed")
        self.limit = limit


@dataclass
class BatchResult:
    """Partitioned outcome of a batch lookup."""

    successes: list[LogoResult] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def warning(self) -> Optional[str]:
        """User-facing partial-failure warning, if any term failed."""
        if not self.failures:
            return None
        return f"Could not find logos for: {', '.join(self.failures)}"


def parse_search_input(text: str) -> list[str]:
    """Split a comma-separated query: trim each part, drop empties."""
    if not text:
        return []
    return [term.strip() for term in text.split(",") if term.strip()]


def check_grid_capacity(existing: int, requested: int, limit: Optional[int] = None) -> None:
    """Raise GridCapacityError if the grid would exceed its limit."""
    if limit is None:
        limit = get_logos_settings().LOGOS_MAX_PER_GRID
    if existing + requested > limit:
        raise GridCapacityError(limit)


class BatchCoordinator:
    """Concurrent primary lookups over a list of terms."""

    def __init__(self, resolver: LogoResolver):
        self.resolver = resolver

    async def resolve_many(self, terms: list[str]) -> BatchResult:
        """
        Resolve every term concurrently.

        Returns:
            BatchResult with successes (completion order) and failed terms
            (verbatim, as given)

        Raises:
            NoLogosFoundError: terms was non-empty and none resolved
        """
        batch = BatchResult()
        if not terms:
            return batch

        async def _one(term: str) -> None:
            try:
                outcome = await self.resolver.resolve(term)
            except Exception as e:
                # Should be rare: the resolver recovers network errors itself
                logger.error(f"[BATCH] Lookup for '{term}' raised: {e}")
                batch.failures.append(term)
                return
            if outcome.ok:
                batch.successes.append(outcome.result)
            else:
                batch.failures.append(term)

        await asyncio.gather(*(_one(term) for term in terms))

        logger.info(
            f"[BATCH] {len(terms)} terms: {len(batch.successes)} found, "
            f"{len(batch.failures)} not found"
        )

        if not batch.successes:
            raise NoLogosFoundError(NO_LOGOS_FOUND_MESSAGE, failures=batch.failures)

        return batch
