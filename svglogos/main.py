"""SVG Logos API.

Builds the resolution context once at startup and shares it across
requests through app.state.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from svglogos.config import get_settings
from svglogos.database import close_db, get_session_maker, init_db
from svglogos.logos.batch import BatchCoordinator
from svglogos.logos.config import get_logos_settings
from svglogos.logos.context import ResolutionContext
from svglogos.logos.r2_client import get_logos_r2_client
from svglogos.logos.repository import InternalLogoRepository, LogoRepository
from svglogos.logos.resolver import LogoResolver
from svglogos.logos.routes import router as logos_router
from svglogos.logos.validator import SvgValidator

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def build_repository() -> Optional[LogoRepository]:
    """Internal repository if enabled and the object store is configured."""
    logos_settings = get_logos_settings()
    if not logos_settings.LOGOS_REPOSITORY_ENABLED:
        return None

    # Stored rows are served as result URLs, so they must be absolute
    if not logos_settings.LOGOS_PUBLIC_BASE_URL:
        logger.warning("Internal repository disabled: LOGOS_PUBLIC_BASE_URL not set")
        return None

    object_store = get_logos_r2_client()
    if object_store is None:
        logger.warning("Internal repository disabled: object store not configured")
        return None

    await init_db()
    return InternalLogoRepository(get_session_maker(), object_store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    # Startup
    logger.info("Starting SVG Logos...")
    context = ResolutionContext()
    validator = SvgValidator()
    repository = await build_repository()
    resolver = LogoResolver(context, validator, repository=repository)

    app.state.context = context
    app.state.resolver = resolver
    app.state.batch_coordinator = BatchCoordinator(resolver)
    context.start()

    yield

    # Shutdown
    logger.info("Shutting down SVG Logos...")
    await context.stop()
    await resolver.drain()
    await validator.close()
    if repository is not None:
        await close_db()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        lifespan=lifespan,
    )
    app.include_router(logos_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
