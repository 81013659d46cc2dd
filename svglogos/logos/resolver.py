"""
Multi-source Logo Resolver.

Given a brand term, walks the source registry and returns the first
candidate URL that validates as a real SVG.

Primary lookup (resolve):
    cache -> internal repository -> registry walk (skipping recently
    failed sources) -> cache + ledger update. Exhausted sources are
    marked failed for the current sweep window.

Alternative lookup (resolve_alternative):
    never uses or fills the cache; prefers sources never used for the
    term, then previously used ones, then the current source last; any
    URL equal to the caller's current URL is skipped.

Both return a LookupOutcome. Nothing here raises on network trouble:
probe errors and exhausted sources are recovered locally.
"""

import asyncio
import logging
from typing import Optional

from svglogos.logos.config import get_logos_settings
from svglogos.logos.context import ResolutionContext
from svglogos.logos.normalization import normalize_term
from svglogos.logos.repository import LogoRepository
from svglogos.logos.results import LogoResult, LookupOutcome, random_suffix
from svglogos.logos.sources import LogoSource, SourceRegistry, get_default_registry
from svglogos.logos.validator import SvgValidator

logger = logging.getLogger(__name__)


class LogoResolver:
    """Resolves brand terms to validated SVG assets."""

    def __init__(
        self,
        context: ResolutionContext,
        validator: SvgValidator,
        registry: Optional[SourceRegistry] = None,
        repository: Optional[LogoRepository] = None,
        coalesce: Optional[bool] = None,
    ):
        self.context = context
        self.validator = validator
        self.registry = registry if registry is not None else get_default_registry()
        self.repository = repository
        if coalesce is None:
            coalesce = get_logos_settings().LOGOS_COALESCE_INFLIGHT
        self.coalesce = coalesce
        self._background: set[asyncio.Task] = set()

    # -----------------------------------------------------------------
    # Primary lookup
    # -----------------------------------------------------------------

    async def resolve(self, term: str) -> LookupOutcome:
        """Find a logo for a term, honouring the cache first."""
        key = normalize_term(term)

        cached = self.context.cache.get(key)
        if cached is not None:
            logger.debug(f"[RESOLVER] Cache hit for '{key}'")
            return LookupOutcome.found(term, cached)

        if not self.coalesce:
            return await self._walk(term, key)

        inflight = self.context.inflight
        task = inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._walk(term, key))
            inflight[key] = task
            task.add_done_callback(lambda _: inflight.pop(key, None))
        else:
            logger.debug(f"[RESOLVER] Joining in-flight lookup for '{key}'")

        # A cancelled caller must not cancel the walk other callers share
        outcome = await asyncio.shield(task)
        if not outcome.ok and outcome.term != term:
            return LookupOutcome.not_found(term)
        return outcome

    async def _walk(self, term: str, key: str) -> LookupOutcome:
        if not key:
            logger.info(f"[RESOLVER] Term '{term}' normalizes to nothing, skipping")
            return LookupOutcome.not_found(term)

        ledger = self.context.ledger
        ledger.ensure(key)

        stored = await self._repository_lookup(key)
        if stored is not None:
            logger.info(f"[RESOLVER] '{key}' served from internal repository")
            self.context.cache.put(key, stored)
            return LookupOutcome.found(term, stored)

        for source in self.registry:
            if ledger.is_recently_failed(key, source.id):
                logger.debug(f"[RESOLVER] Skipping {source.id} for '{key}' (recently failed)")
                continue

            try:
                found = await self._try_source(source, key, skip_url=None)
            except Exception as e:
                logger.warning(f"[RESOLVER] Source {source.id} errored for '{key}': {e}")
                ledger.record_failed(key, source.id)
                continue

            if found is None:
                logger.info(f"[RESOLVER] Source {source.id} exhausted for '{key}'")
                ledger.record_failed(key, source.id)
                continue

            url, body = found
            result = LogoResult(
                id=f"{source.id}-{key}",
                url=url,
                source=source.id,
                source_name=source.name,
            )
            ledger.record_used(key, source.id)
            self.context.cache.put(key, result)
            logger.info(f"[RESOLVER] '{key}' resolved via {source.id}")

            if self.repository is not None:
                self._spawn(self._repository_save(key, result, body))
            return LookupOutcome.found(term, result)

        logger.info(f"[RESOLVER] No source could resolve '{key}'")
        if self.repository is not None:
            self._spawn(self._repository_record_failure(key))
        return LookupOutcome.not_found(term)

    # -----------------------------------------------------------------
    # Alternative lookup
    # -----------------------------------------------------------------

    def alternative_candidates(self, key: str, current_source: Optional[str]) -> list[LogoSource]:
        """
        Priority order for a refresh:
        1. never used for the term, not failed
        2. used before (not the current one), not failed
        3. the current source, if not failed
        Registry order within each group.
        """
        ledger = self.context.ledger
        used = ledger.used_sources(key)
        failed = ledger.failed_sources(key)

        unused = [
            s for s in self.registry
            if s.id not in used and s.id not in failed and s.id != current_source
        ]
        previously_used = [
            s for s in self.registry
            if s.id in used and s.id not in failed and s.id != current_source
        ]
        current = []
        if current_source is not None and current_source not in failed:
            source = self.registry.get(current_source)
            if source is not None:
                current.append(source)

        return unused + previously_used + current

    async def resolve_alternative(
        self,
        term: str,
        current_url: str,
        current_source: Optional[str] = None,
    ) -> LookupOutcome:
        """Find a logo different from the one the caller already has."""
        key = normalize_term(term)
        self.context.cache.invalidate(key)

        if not key:
            return LookupOutcome.no_alternative(term)

        ledger = self.context.ledger
        for source in self.alternative_candidates(key, current_source):
            try:
                found = await self._try_source(source, key, skip_url=current_url)
            except Exception as e:
                logger.warning(f"[RESOLVER] Source {source.id} errored on refresh of '{key}': {e}")
                ledger.record_failed(key, source.id)
                continue

            if found is None:
                ledger.record_failed(key, source.id)
                continue

            url, _ = found
            result = LogoResult(
                id=f"{source.id}-{key}-{random_suffix()}",
                url=url,
                source=source.id,
                source_name=source.name,
            )
            # Not cached: repeated refreshes must keep producing new answers
            ledger.record_used(key, source.id)
            logger.info(f"[RESOLVER] Alternative for '{key}' via {source.id}")
            return LookupOutcome.found(term, result)

        logger.info(f"[RESOLVER] No alternative for '{key}'")
        return LookupOutcome.no_alternative(term)

    # -----------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------

    async def _try_source(
        self,
        source: LogoSource,
        key: str,
        skip_url: Optional[str],
    ) -> Optional[tuple[str, str]]:
        """Probe a source's candidate URLs in order; (url, body) of the first valid one."""
        for url in source.candidate_urls(key):
            if skip_url is not None and url == skip_url:
                continue
            body = await self.validator.probe(url)
            if body is not None:
                return url, body
        return None

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def drain(self) -> None:
        """Wait for pending repository writes (shutdown, tests)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def _repository_lookup(self, key: str) -> Optional[LogoResult]:
        if self.repository is None:
            return None
        try:
            return await self.repository.lookup(key)
        except Exception as e:
            logger.error(f"[REPO] Lookup failed for '{key}': {e}")
            return None

    async def _repository_save(self, key: str, result: LogoResult, body: str) -> None:
        try:
            await self.repository.save(key, result, body)
        except Exception as e:
            logger.error(f"[REPO] Save failed for '{key}': {e}")

    async def _repository_record_failure(self, key: str) -> None:
        try:
            await self.repository.record_failure(key)
        except Exception as e:
            logger.error(f"[REPO] Failure tracking failed for '{key}': {e}")
