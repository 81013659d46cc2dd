"""Tests for the logo resolver (primary and alternative lookups).

FakeValidator stands in for HTTP: every probe is recorded.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from svglogos.logos.results import (
    LogoNotFoundError,
    LogoResult,
    LookupStatus,
    NoAlternativeFoundError,
)
from tests.fakes import SVG_BODY, FakeValidator

A1 = "https://a.test/acme.svg"
A2 = "https://a.test/acme-icon.svg"
B1 = "https://b.test/acme.svg"
B2 = "https://b.test/acme-icon.svg"
C1 = "https://c.test/acme.svg"


# ---------------------------------------------------------------------------
# Primary lookup
# ---------------------------------------------------------------------------

class TestResolve:

    @pytest.mark.asyncio
    async def test_first_source_wins_and_is_cached(self, make_resolver, context):
        validator = FakeValidator(valid=[A1, B1, C1])
        resolver = make_resolver(validator)

        outcome = await resolver.resolve("acme")

        assert outcome.ok
        assert outcome.result.source == "A"
        assert outcome.result.url == A1
        assert outcome.result.id == "A-acme"
        assert outcome.result.source_name == "Source A"
        assert context.cache.get("acme") == outcome.result
        # Stops at the first valid candidate
        assert validator.calls == [A1]

    @pytest.mark.asyncio
    async def test_used_set_contains_winning_source(self, make_resolver, context):
        resolver = make_resolver(FakeValidator(valid=[B2]))
        outcome = await resolver.resolve("ACME!")
        assert outcome.result.source == "B"
        assert "B" in context.ledger.used_sources("acme")

    @pytest.mark.asyncio
    async def test_cache_idempotent_no_network(self, make_resolver):
        validator = FakeValidator(valid=[A1])
        resolver = make_resolver(validator)

        first = await resolver.resolve("Acme")
        calls = len(validator.calls)
        second = await resolver.resolve("ACME")

        assert second.result.url == first.result.url
        assert len(validator.calls) == calls

    @pytest.mark.asyncio
    async def test_skips_recently_failed_source(self, make_resolver, context):
        context.ledger.record_failed("acme", "A")
        validator = FakeValidator(valid=[A1, B1, C1])
        resolver = make_resolver(validator)

        outcome = await resolver.resolve("acme")

        assert outcome.result.source == "B"
        assert validator.calls_for("a.test") == []
        assert validator.calls_for("c.test") == []

    @pytest.mark.asyncio
    async def test_exhausted_source_marked_failed_and_not_retried(self, make_resolver, context):
        validator = FakeValidator(valid=[B1])
        resolver = make_resolver(validator)

        await resolver.resolve("acme")
        assert context.ledger.is_recently_failed("acme", "A")
        assert validator.calls_for("a.test") == [A1, A2]

        context.cache.invalidate("acme")
        validator.calls.clear()
        outcome = await resolver.resolve("acme")

        assert outcome.result.source == "B"
        assert validator.calls_for("a.test") == []

    @pytest.mark.asyncio
    async def test_sweep_allows_retry(self, make_resolver, context):
        validator = FakeValidator(valid=[B1])
        resolver = make_resolver(validator)
        await resolver.resolve("acme")

        context.sweep()
        context.cache.invalidate("acme")
        validator.valid[A1] = SVG_BODY
        outcome = await resolver.resolve("acme")

        assert outcome.result.source == "A"

    @pytest.mark.asyncio
    async def test_probe_error_treated_as_failure(self, make_resolver, context):
        validator = FakeValidator(valid=[B1], errors=[A1])
        resolver = make_resolver(validator)

        outcome = await resolver.resolve("acme")

        assert outcome.result.source == "B"
        assert context.ledger.is_recently_failed("acme", "A")

    @pytest.mark.asyncio
    async def test_not_found(self, make_resolver, context):
        resolver = make_resolver(FakeValidator())

        outcome = await resolver.resolve("nosuchbrand")

        assert outcome.status is LookupStatus.NOT_FOUND
        assert "nosuchbrand" in outcome.message
        assert context.cache.get("nosuchbrand") is None
        assert context.ledger.failed_sources("nosuchbrand") == {"A", "B", "C"}
        with pytest.raises(LogoNotFoundError) as exc_info:
            outcome.unwrap()
        assert exc_info.value.term == "nosuchbrand"

    @pytest.mark.asyncio
    async def test_empty_key_skips_network(self, make_resolver):
        validator = FakeValidator(valid=[A1])
        resolver = make_resolver(validator)

        outcome = await resolver.resolve("!!!")

        assert outcome.status is LookupStatus.NOT_FOUND
        assert validator.calls == []

    @pytest.mark.asyncio
    async def test_concurrent_same_term_single_walk(self, make_resolver):
        validator = FakeValidator(valid=[B1], delay=0.01)
        resolver = make_resolver(validator, coalesce=True)

        first, second = await asyncio.gather(
            resolver.resolve("acme"), resolver.resolve("Acme")
        )

        assert first.result == second.result
        assert validator.calls == [A1, A2, B1]

    @pytest.mark.asyncio
    async def test_concurrent_same_term_races_without_coalescing(self, make_resolver):
        validator = FakeValidator(valid=[A1], delay=0.01)
        resolver = make_resolver(validator, coalesce=False)

        await asyncio.gather(resolver.resolve("acme"), resolver.resolve("acme"))

        assert validator.calls == [A1, A1]

    @pytest.mark.asyncio
    async def test_coalesced_failure_names_each_caller_term(self, make_resolver):
        resolver = make_resolver(FakeValidator(delay=0.01), coalesce=True)

        first, second = await asyncio.gather(
            resolver.resolve("No Such"), resolver.resolve("nosuch")
        )

        assert first.term == "No Such"
        assert second.term == "nosuch"
        assert not first.ok and not second.ok

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_shared_walk(self, make_resolver):
        validator = FakeValidator(valid=[B1], delay=0.01)
        resolver = make_resolver(validator, coalesce=True)

        first = asyncio.ensure_future(resolver.resolve("acme"))
        await asyncio.sleep(0)
        second = asyncio.ensure_future(resolver.resolve("Acme"))
        await asyncio.sleep(0.005)
        first.cancel()

        outcome = await second

        assert outcome.ok
        assert outcome.result.source == "B"
        assert validator.calls == [A1, A2, B1]
        with pytest.raises(asyncio.CancelledError):
            await first


# ---------------------------------------------------------------------------
# Repository bridge integration
# ---------------------------------------------------------------------------

class TestResolveWithRepository:

    @pytest.fixture
    def repository(self):
        repo = AsyncMock()
        repo.lookup = AsyncMock(return_value=None)
        repo.save = AsyncMock(return_value=True)
        repo.record_failure = AsyncMock(return_value=None)
        return repo

    @pytest.mark.asyncio
    async def test_repository_hit_short_circuits(self, make_resolver, repository, context):
        stored = LogoResult(
            id="internal-1", url="https://bucket.test/acme.svg",
            source="internal", source_name="Internal Logo Repository",
        )
        repository.lookup.return_value = stored
        validator = FakeValidator(valid=[A1])
        resolver = make_resolver(validator, repository=repository)

        outcome = await resolver.resolve("acme")

        assert outcome.result == stored
        assert validator.calls == []
        assert context.cache.get("acme") == stored

    @pytest.mark.asyncio
    async def test_external_hit_saved_with_raw_content(self, make_resolver, repository):
        resolver = make_resolver(FakeValidator(valid=[A1]), repository=repository)

        outcome = await resolver.resolve("Acme")
        await resolver.drain()

        repository.save.assert_awaited_once_with("acme", outcome.result, SVG_BODY)

    @pytest.mark.asyncio
    async def test_failure_recorded(self, make_resolver, repository):
        resolver = make_resolver(FakeValidator(), repository=repository)

        await resolver.resolve("nosuchbrand")
        await resolver.drain()

        repository.record_failure.assert_awaited_once_with("nosuchbrand")

    @pytest.mark.asyncio
    async def test_repository_errors_never_fail_lookup(self, make_resolver, repository):
        repository.lookup.side_effect = RuntimeError("db down")
        repository.save.side_effect = RuntimeError("bucket down")
        resolver = make_resolver(FakeValidator(valid=[B1]), repository=repository)

        outcome = await resolver.resolve("acme")
        await resolver.drain()

        assert outcome.ok
        assert outcome.result.source == "B"


# ---------------------------------------------------------------------------
# Alternative lookup
# ---------------------------------------------------------------------------

class TestResolveAlternative:

    @pytest.mark.asyncio
    async def test_prefers_unused_source(self, make_resolver):
        validator = FakeValidator(valid=[A1, B1, C1])
        resolver = make_resolver(validator)
        current = (await resolver.resolve("acme")).result

        outcome = await resolver.resolve_alternative("acme", current.url, current.source)

        assert outcome.result.source == "B"
        assert outcome.result.url == B1

    @pytest.mark.asyncio
    async def test_never_returns_current_url(self, make_resolver):
        # Only A has anything, and both its patterns validate
        validator = FakeValidator(valid=[A1, A2])
        resolver = make_resolver(validator)
        current = (await resolver.resolve("acme")).result

        outcome = await resolver.resolve_alternative("acme", current.url, current.source)

        assert outcome.ok
        assert outcome.result.url == A2
        assert outcome.result.url != current.url
        assert A1 not in validator.calls[1:]

    @pytest.mark.asyncio
    async def test_bypasses_and_does_not_fill_cache(self, make_resolver, context):
        resolver = make_resolver(FakeValidator(valid=[A1, B1]))
        current = (await resolver.resolve("acme")).result
        assert context.cache.get("acme") is not None

        await resolver.resolve_alternative("acme", current.url, current.source)

        assert context.cache.get("acme") is None

    @pytest.mark.asyncio
    async def test_ids_are_unique_per_refresh(self, make_resolver):
        resolver = make_resolver(FakeValidator(valid=[A1, B1]))
        first = await resolver.resolve_alternative("acme", "https://elsewhere.test/x.svg", None)
        second = await resolver.resolve_alternative("acme", "https://elsewhere.test/x.svg", None)

        assert first.result.id.startswith("A-acme-")
        assert first.result.id != second.result.id

    @pytest.mark.asyncio
    async def test_records_used_keeps_old(self, make_resolver, context):
        resolver = make_resolver(FakeValidator(valid=[A1, B1]))
        current = (await resolver.resolve("acme")).result

        await resolver.resolve_alternative("acme", current.url, current.source)

        assert context.ledger.used_sources("acme") == {"A", "B"}

    @pytest.mark.asyncio
    async def test_rotation_order(self, make_resolver, context):
        context.ledger.record_used("acme", "A")
        context.ledger.record_used("acme", "B")
        resolver = make_resolver(FakeValidator())

        order = [s.id for s in resolver.alternative_candidates("acme", "A")]

        # unused (C), then used-but-not-current (B), then current (A)
        assert order == ["C", "B", "A"]

    @pytest.mark.asyncio
    async def test_failed_sources_excluded(self, make_resolver, context):
        context.ledger.record_used("acme", "A")
        context.ledger.record_failed("acme", "C")
        context.ledger.record_failed("acme", "A")
        resolver = make_resolver(FakeValidator())

        order = [s.id for s in resolver.alternative_candidates("acme", "A")]

        assert order == ["B"]

    @pytest.mark.asyncio
    async def test_no_alternative(self, make_resolver, context):
        resolver = make_resolver(FakeValidator(valid=[A1]))
        current = (await resolver.resolve("acme")).result

        outcome = await resolver.resolve_alternative("acme", current.url, current.source)

        assert outcome.status is LookupStatus.NO_ALTERNATIVE
        assert context.ledger.failed_sources("acme") == {"A", "B", "C"}
        with pytest.raises(NoAlternativeFoundError) as exc_info:
            outcome.unwrap()
        assert exc_info.value.auto_dismiss is True

    @pytest.mark.asyncio
    async def test_probe_error_moves_on(self, make_resolver):
        resolver = make_resolver(FakeValidator(valid=[C1], errors=[B1]))
        outcome = await resolver.resolve_alternative("acme", A1, "A")
        assert outcome.result.source == "C"
