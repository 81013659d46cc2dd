"""API Routes for Logo Search.

- POST /logos/search   comma-separated brand names -> grid entries
- POST /logos/refresh  find a different logo for one grid entry
- GET  /logos/sources  registry listing
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from svglogos.logos.batch import (
    BatchCoordinator,
    GridCapacityError,
    check_grid_capacity,
    parse_search_input,
)
from svglogos.logos.resolver import LogoResolver
from svglogos.logos.results import LogoResult, NoAlternativeFoundError, NoLogosFoundError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/logos",
    tags=["logos"],
)


# =============================================================================
# Pydantic Models
# =============================================================================


class SearchRequest(BaseModel):
    """Comma-separated brand names plus how many entries the grid already holds."""

    query: str
    existing_count: int = 0


class RefreshRequest(BaseModel):
    """The grid entry to replace."""

    term: str
    current_url: str
    current_source: Optional[str] = None


class LogoResponse(BaseModel):
    id: str
    url: str
    source: str
    source_name: str

    @classmethod
    def from_result(cls, result: LogoResult) -> "LogoResponse":
        return cls(**result.to_dict())


class SearchResponse(BaseModel):
    successes: list[LogoResponse]
    failures: list[str]
    warning: Optional[str] = None


class SourceResponse(BaseModel):
    id: str
    name: str
    patterns: int


# =============================================================================
# Dependencies
# =============================================================================


def get_resolver(request: Request) -> LogoResolver:
    return request.app.state.resolver


def get_batch_coordinator(request: Request) -> BatchCoordinator:
    return request.app.state.batch_coordinator


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/search", response_model=SearchResponse)
async def search_logos(
    body: SearchRequest,
    coordinator: BatchCoordinator = Depends(get_batch_coordinator),
):
    """Resolve every term in the query concurrently."""
    terms = parse_search_input(body.query)
    if not terms:
        raise HTTPException(
            status_code=400,
            detail={"code": "empty_query", "message": "Enter at least one brand name"},
        )

    try:
        check_grid_capacity(body.existing_count, len(terms))
    except GridCapacityError as e:
        raise HTTPException(status_code=400, detail={"code": e.code, "message": str(e)})

    try:
        batch = await coordinator.resolve_many(terms)
    except NoLogosFoundError as e:
        raise HTTPException(
            status_code=404,
            detail={"code": e.code, "message": str(e), "failures": e.failures},
        )

    return SearchResponse(
        successes=[LogoResponse.from_result(r) for r in batch.successes],
        failures=batch.failures,
        warning=batch.warning,
    )


@router.post("/refresh", response_model=LogoResponse)
async def refresh_logo(
    body: RefreshRequest,
    resolver: LogoResolver = Depends(get_resolver),
):
    """Replace one grid entry with a logo from a different URL."""
    outcome = await resolver.resolve_alternative(
        body.term, body.current_url, body.current_source
    )
    try:
        result = outcome.unwrap()
    except NoAlternativeFoundError as e:
        raise HTTPException(
            status_code=404,
            detail={
                "code": e.code,
                "message": "No alternative logo found",
                "auto_dismiss": e.auto_dismiss,
            },
        )

    return LogoResponse.from_result(result)


@router.get("/sources", response_model=list[SourceResponse])
async def list_sources(resolver: LogoResolver = Depends(get_resolver)):
    """Registered sources in resolution order."""
    return [
        SourceResponse(id=s.id, name=s.name, patterns=len(s.url_templates))
        for s in resolver.registry
    ]
