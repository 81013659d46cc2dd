"""Shared fixtures for logo resolution tests (no real network calls)."""

import pytest

from svglogos.logos.context import ResolutionContext
from svglogos.logos.resolver import LogoResolver
from svglogos.logos.sources import LogoSource, SourceRegistry


def _source(source_id: str, host: str) -> LogoSource:
    return LogoSource(
        id=source_id,
        name=f"Source {source_id}",
        url_templates=(
            lambda term, host=host: f"https://{host}/{term}.svg",
            lambda term, host=host: f"https://{host}/{term}-icon.svg",
        ),
    )


@pytest.fixture
def registry() -> SourceRegistry:
    """Three sources A, B, C with two patterns each."""
    return SourceRegistry((
        _source("A", "a.test"),
        _source("B", "b.test"),
        _source("C", "c.test"),
    ))


@pytest.fixture
def context() -> ResolutionContext:
    return ResolutionContext(sweep_interval=300)


@pytest.fixture
def make_resolver(context, registry):
    def _make(validator, repository=None, coalesce=True):
        return LogoResolver(
            context,
            validator,
            registry=registry,
            repository=repository,
            coalesce=coalesce,
        )
    return _make
