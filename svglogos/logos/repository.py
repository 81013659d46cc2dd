"""Internal Logo Repository Bridge.

Optional persisted store consulted before external sources and fed with
newly resolved SVGs afterwards:

- logo_searches table (SQLModel): one row per lookup attempt
- public object store bucket: raw SVG markup

Every operation is best-effort. Errors are logged and swallowed here so
they never reach the resolver's control flow.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from svglogos.logos.config import (
    build_logo_object_key,
    build_public_object_url,
    get_logos_settings,
)
from svglogos.logos.r2_client import SVG_CONTENT_TYPE, LogosR2Client
from svglogos.logos.results import LogoResult
from svglogos.logos.signature import (
    content_hash,
    extract_visual_signature,
    signatures_similar,
)
from svglogos.models import LogoSearch

logger = logging.getLogger(__name__)

INTERNAL_SOURCE_ID = "internal"
INTERNAL_SOURCE_NAME = "Internal Logo Repository"


class LogoRepository(ABC):
    """Contract the resolver consumes."""

    @abstractmethod
    async def lookup(self, term_key: str) -> Optional[LogoResult]:
        """Most recent stored logo for the term, or None."""
        pass

    @abstractmethod
    async def save(self, term_key: str, result: LogoResult, raw_content: str) -> bool:
        """Store a resolved SVG unless a duplicate exists. True if written."""
        pass

    @abstractmethod
    async def record_failure(self, term_key: str) -> None:
        """Record that a term could not be resolved."""
        pass


class InternalLogoRepository(LogoRepository):
    """logo_searches table + object store implementation."""

    def __init__(self, session_maker: sessionmaker, object_store: LogosR2Client):
        self._session_maker = session_maker
        self._object_store = object_store

    async def lookup(self, term_key: str) -> Optional[LogoResult]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(LogoSearch)
                    .where(
                        LogoSearch.search_term == term_key,
                        LogoSearch.logo_found == True,  # noqa: E712
                    )
                    .order_by(LogoSearch.created_at.desc())
                    .limit(1)
                )
                record = result.scalars().first()
        except Exception as e:
            logger.error(f"[REPO] Error searching internal repo for '{term_key}': {e}")
            return None

        if record is None:
            return None

        if not record.object_url:
            logger.error(f"[REPO] Record {record.id} found but has no object_url")
            return None

        return LogoResult(
            id=f"internal-{record.id}",
            url=record.object_url,
            source=INTERNAL_SOURCE_ID,
            source_name=INTERNAL_SOURCE_NAME,
        )

    async def exists(self, term_key: str, raw_content: str) -> bool:
        """
        Duplicate check:
        1. exact content hash match (any term)
        2. visually similar signature among rows for the same term
        """
        digest = content_hash(raw_content)
        signature = extract_visual_signature(raw_content)

        try:
            async with self._session_maker() as session:
                hash_matches = await session.execute(
                    select(LogoSearch.id)
                    .where(
                        LogoSearch.content_hash == digest,
                        LogoSearch.logo_found == True,  # noqa: E712
                    )
                    .limit(1)
                )
                if hash_matches.first() is not None:
                    return True

                term_matches = await session.execute(
                    select(LogoSearch.visual_signature).where(
                        LogoSearch.search_term == term_key,
                        LogoSearch.logo_found == True,  # noqa: E712
                    )
                )
                for (stored_signature,) in term_matches.all():
                    if stored_signature and signatures_similar(signature, stored_signature):
                        return True
        except Exception as e:
            logger.error(f"[REPO] Error checking duplicates for '{term_key}': {e}")
            # Unknown state counts as a duplicate
            return True

        return False

    async def save(self, term_key: str, result: LogoResult, raw_content: str) -> bool:
        try:
            if await self.exists(term_key, raw_content):
                logger.info(f"[REPO] Logo for '{term_key}' already exists in repository")
                return False

            file_name = build_logo_object_key(term_key)
            uploaded = await self._object_store.put_object(
                file_name,
                raw_content.encode("utf-8"),
                content_type=SVG_CONTENT_TYPE,
                cache_control=get_logos_settings().LOGOS_OBJECT_CACHE_CONTROL,
            )
            if not uploaded:
                return False

            record = LogoSearch(
                search_term=term_key,
                file_name=file_name,
                source=result.source,
                logo_found=True,
                object_url=build_public_object_url(file_name),
                content_hash=content_hash(raw_content),
                visual_signature=extract_visual_signature(raw_content),
            )
            try:
                async with self._session_maker() as session:
                    session.add(record)
                    await session.commit()
            except Exception as e:
                logger.error(f"[REPO] Error inserting record for '{term_key}': {e}")
                await self._object_store.delete_object(file_name)
                return False

            logger.info(f"[REPO] Logo for '{term_key}' saved to internal repository")
            return True

        except Exception as e:
            logger.error(f"[REPO] Error saving '{term_key}': {e}")
            return False

    async def record_failure(self, term_key: str) -> None:
        try:
            async with self._session_maker() as session:
                session.add(
                    LogoSearch(
                        search_term=term_key,
                        file_name="",
                        source="none",
                        logo_found=False,
                    )
                )
                await session.commit()
        except Exception as e:
            logger.error(f"[REPO] Error tracking failed search '{term_key}': {e}")
