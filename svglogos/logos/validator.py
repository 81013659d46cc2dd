"""
SVG Asset Validator.

Probes a candidate URL and decides whether it is a genuine SVG resource.

Static-asset hosts often answer unmapped paths with HTTP 200 and an HTML
error page, so a 200 alone is not enough: the response must either
declare an SVG content-type or carry an <svg>...</svg> root with the SVG
namespace declaration.

Probes never raise. Any transport error counts as "not valid".
"""

import logging
from typing import Optional

import httpx

from svglogos.logos.config import get_logos_settings

logger = logging.getLogger(__name__)

SVG_NAMESPACE_DECLARATION = 'xmlns="http://www.w3.org/2000/svg"'


def looks_like_svg(content_type: Optional[str], body: str) -> bool:
    """Dual check: SVG content-type OR (root tag pair AND namespace)."""
    if content_type and "svg" in content_type.lower():
        return True
    has_svg_tags = "<svg" in body and "</svg>" in body
    return has_svg_tags and SVG_NAMESPACE_DECLARATION in body


class SvgValidator:
    """
    Async SVG probe with a bounded timeout.

    One httpx.AsyncClient is shared across probes and created lazily.
    An externally supplied client (tests, app-wide pool) is never closed here.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_logos_settings()
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout if timeout is not None else settings.LOGOS_VALIDATOR_TIMEOUT_SECONDS
        self._headers = {
            "Accept": settings.LOGOS_ACCEPT_HEADER,
            "User-Agent": settings.LOGOS_USER_AGENT,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
            self._owns_client = True
        return self._client

    async def probe(self, url: str) -> Optional[str]:
        """
        Fetch a candidate URL.

        Returns:
            The response body when the asset is a valid SVG, otherwise None.
        """
        try:
            client = await self._get_client()
            response = await client.get(url, headers=self._headers, timeout=self._timeout)

            if response.status_code != 200:
                logger.debug(f"[VALIDATOR] {url} -> HTTP {response.status_code}")
                return None

            body = response.text
            if not looks_like_svg(response.headers.get("content-type"), body):
                logger.debug(f"[VALIDATOR] {url} -> not an SVG payload")
                return None

            return body

        except httpx.TimeoutException:
            logger.debug(f"[VALIDATOR] {url} -> timeout after {self._timeout:.1f}s")
            return None
        except Exception as e:
            logger.debug(f"[VALIDATOR] {url} -> error: {e}")
            return None

    async def is_valid(self, url: str) -> bool:
        """True if the URL serves a genuine SVG."""
        return await self.probe(url) is not None

    async def close(self) -> None:
        """Close the HTTP client if this validator created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
