"""S3-compatible Object Store Client for the Internal Logo Repository.

Stores raw SVG markup in a public bucket (Cloudflare R2 or any
S3-compatible endpoint). Rows in logo_searches point at the public URL.

Usage:
    client = get_logos_r2_client()
    if client:
        await client.put_object(key, svg_bytes)
"""

import logging
from typing import Optional

from svglogos.logos.config import get_logos_settings

logger = logging.getLogger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"


class LogosR2Client:
    """Async object store client for stored SVGs."""

    def __init__(
        self,
        endpoint_url: str,
        access_key_id: str,
        secret_access_key: str,
        bucket: str,
    ):
        self.endpoint_url = endpoint_url
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.bucket = bucket
        self._session = None

    async def _get_client(self):
        """Get or create aioboto3 S3 client."""
        if self._session is None:
            import aioboto3

            self._session = aioboto3.Session()
        return self._session.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
        )

    async def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str = SVG_CONTENT_TYPE,
        cache_control: Optional[str] = None,
    ) -> bool:
        """Upload an object.

        Args:
            key: Object key
            body: Raw content
            content_type: MIME type (default: image/svg+xml)
            cache_control: Optional Cache-Control max-age seconds

        Returns:
            True if successful, False otherwise
        """
        kwargs = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        if cache_control:
            kwargs["CacheControl"] = f"max-age={cache_control}"

        try:
            async with await self._get_client() as client:
                await client.put_object(**kwargs)
                logger.debug(f"LogosR2: Uploaded {key} ({len(body)} bytes)")
                return True
        except Exception as e:
            logger.error(f"LogosR2: Failed to upload {key}: {e}")
            return False

    async def delete_object(self, key: str) -> bool:
        """Delete an object (used to roll back an upload whose row failed)."""
        try:
            async with await self._get_client() as client:
                await client.delete_object(Bucket=self.bucket, Key=key)
                logger.debug(f"LogosR2: Deleted {key}")
                return True
        except Exception as e:
            logger.error(f"LogosR2: Failed to delete {key}: {e}")
            return False


_logos_r2_client: Optional[LogosR2Client] = None


def get_logos_r2_client() -> Optional[LogosR2Client]:
    """Get the object store client if the repository is enabled and configured.

    Returns:
        LogosR2Client instance or None if disabled/not configured
    """
    global _logos_r2_client

    logos_settings = get_logos_settings()
    if not logos_settings.LOGOS_REPOSITORY_ENABLED:
        return None

    if not logos_settings.LOGOS_R2_ENDPOINT_URL:
        logger.warning("Logos repository enabled but LOGOS_R2_ENDPOINT_URL not set")
        return None

    if _logos_r2_client is None:
        _logos_r2_client = LogosR2Client(
            endpoint_url=logos_settings.LOGOS_R2_ENDPOINT_URL,
            access_key_id=logos_settings.LOGOS_R2_ACCESS_KEY_ID,
            secret_access_key=logos_settings.LOGOS_R2_SECRET_ACCESS_KEY,
            bucket=logos_settings.LOGOS_R2_BUCKET,
        )
        logger.info(f"LogosR2: Client initialized (bucket={logos_settings.LOGOS_R2_BUCKET})")

    return _logos_r2_client
