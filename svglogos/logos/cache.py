"""Resolution cache: term key -> last primary-lookup result.

Unbounded, process-lifetime. Refresh lookups never write here.
"""

from typing import Optional

from svglogos.logos.results import LogoResult

class ResolutionCache:
    """Plain in-memory map. Mutations between awaits are atomic under asyncio."""

    def __init__(self):
        self._entries: dict[str, LogoResult] = {}

    def get(self, key: str) -> Optional[LogoResult]:
        return self._entries.get(key)

    def put(self, key: str, result: LogoResult) -> None:
        self._entries[key] = result

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
