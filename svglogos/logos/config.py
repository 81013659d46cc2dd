"""Logo Resolution Configuration.

Settings for source probing, ledger back-off, grid limits and the
optional internal repository (object store + logo_searches table).
"""

import uuid
from functools import lru_cache

from pydantic_settings import BaseSettings


class LogosSettings(BaseSettings):
    """Logos-specific settings (supplements main app Settings)."""

    # ==========================================================================
    # Asset Validator
    # ==========================================================================

    LOGOS_VALIDATOR_TIMEOUT_SECONDS: float = 5.0
    LOGOS_ACCEPT_HEADER: str = "image/svg+xml"
    # Some hosts block requests without a recognisable client identifier
    LOGOS_USER_AGENT: str = "SVGLogos/1.0 (https://github.com/ppzgenome/svgLogos)"

    # ==========================================================================
    # Attempt Ledger / Resolver
    # ==========================================================================

    # Every N seconds all "recently failed" sources are forgotten (coarse sweep)
    LOGOS_FAILED_SOURCE_RESET_SECONDS: float = 300.0

    # Concurrent primary lookups for one term share a single walk
    LOGOS_COALESCE_INFLIGHT: bool = True

    # ==========================================================================
    # Batch query surface
    # ==========================================================================

    LOGOS_MAX_PER_GRID: int = 15

    # ==========================================================================
    # Internal Repository (S3-compatible bucket + logo_searches table)
    # ==========================================================================

    LOGOS_REPOSITORY_ENABLED: bool = False
    LOGOS_R2_ENDPOINT_URL: str = ""  # https://<account_id>.r2.cloudflarestorage.com
    LOGOS_R2_ACCESS_KEY_ID: str = ""
    LOGOS_R2_SECRET_ACCESS_KEY: str = ""
    LOGOS_R2_BUCKET: str = "internal-logo-repo"
    LOGOS_PUBLIC_BASE_URL: str = ""  # Public bucket URL used to build object_url
    LOGOS_OBJECT_CACHE_CONTROL: str = "3600"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_logos_settings() -> LogosSettings:
    """Get cached Logos settings instance."""
    return LogosSettings()


# ==========================================================================
# Object Key Builders
# ==========================================================================


def build_logo_object_key(term_key: str) -> str:
    """Build a unique object key for a stored SVG.

    Args:
        term_key: Normalized term

    Returns:
        Key: {term_key}-{uuid4}.svg
    """
    return f"{term_key}-{uuid.uuid4()}.svg"


def build_public_object_url(key: str) -> str:
    """Build the public URL of a stored object.

    Requires LOGOS_PUBLIC_BASE_URL; build_repository() refuses to enable
    the repository without it.
    """
    base_url = get_logos_settings().LOGOS_PUBLIC_BASE_URL.rstrip("/")
    return f"{base_url}/{key}"
