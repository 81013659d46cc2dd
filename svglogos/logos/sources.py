"""Logo Source Registry.

Ordered catalog of public SVG logo hosts. Each source exposes one or
more URL templates; templates are tried in listed order because some
naming conventions hit far more often than others.

Registry order is the default resolution priority. New providers are
appended here (or via SourceRegistry.append) without touching the
resolver.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Iterator, Optional


UrlTemplate = Callable[[str], str]


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class LogoSource:
    """A single logo provider and its URL naming conventions."""

    id: str
    name: str
    url_templates: tuple[UrlTemplate, ...]

    def candidate_urls(self, term_key: str) -> list[str]:
        """Build candidate URLs for a normalized term, in template order."""
        return [template(term_key) for template in self.url_templates]


class SourceRegistry:
    """Read-only, ordered collection of LogoSource records."""

    def __init__(self, sources: tuple[LogoSource, ...]):
        ids = [source.id for source in sources]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate source ids in registry: {ids}")
        self._sources = tuple(sources)
        self._by_id = {source.id: source for source in self._sources}

    def __iter__(self) -> Iterator[LogoSource]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._by_id

    def get(self, source_id: str) -> Optional[LogoSource]:
        return self._by_id.get(source_id)

    @property
    def ids(self) -> list[str]:
        return [source.id for source in self._sources]

    def append(self, *sources: LogoSource) -> "SourceRegistry":
        """Return a new registry with extra sources at the lowest priority."""
        return SourceRegistry(self._sources + tuple(sources))


# =============================================================================
# PROVIDERS
# =============================================================================

SIMPLE_ICONS = LogoSource(
    id="simpleIcons",
    name="Simple Icons",
    url_templates=(
        lambda term: f"https://raw.githubusercontent.com/simple-icons/simple-icons/develop/icons/{term}.svg",
        lambda term: f"https://cdn.jsdelivr.net/npm/simple-icons@latest/icons/{term}.svg",
        lambda term: f"https://raw.githubusercontent.com/simple-icons/simple-icons/master/icons/{term}.svg",
    ),
)

VECTOR_LOGO_ZONE = LogoSource(
    id="vectorLogoZone",
    name="Vector Logo Zone",
    url_templates=(
        lambda term: f"https://www.vectorlogo.zone/logos/{term}/{term}-icon.svg",
        lambda term: f"https://www.vectorlogo.zone/logos/{term}/{term}.svg",
    ),
)

ICONIFY = LogoSource(
    id="iconify",
    name="Iconify",
    url_templates=(
        lambda term: f"https://api.iconify.design/{term}.svg",
        lambda term: f"https://api.iconify.design/logos/{term}.svg",
        lambda term: f"https://api.iconify.design/logos-{term}.svg",
    ),
)

SVG_PORN = LogoSource(
    id="svgPorn",
    name="SVG Porn",
    url_templates=(
        lambda term: f"https://cdn.svgporn.com/logos/{term}.svg",
        lambda term: f"https://cdn.svgporn.com/logos/{term}-icon.svg",
    ),
)

GILBARBARA = LogoSource(
    id="gilbarbara",
    name="Gil Barbara Logos",
    url_templates=(
        lambda term: f"https://raw.githubusercontent.com/gilbarbara/logos/master/logos/{term}.svg",
        lambda term: f"https://raw.githubusercontent.com/gilbarbara/logos/master/logos/{term}-icon.svg",
    ),
)

WIKIMEDIA = LogoSource(
    id="wikimedia",
    name="Wikimedia Commons",
    url_templates=(
        lambda term: f"https://upload.wikimedia.org/wikipedia/commons/thumb/archive/{term}_logo.svg",
        lambda term: f"https://upload.wikimedia.org/wikipedia/commons/thumb/archive/{term}-logo.svg",
    ),
)

BRAND_LOGOS = LogoSource(
    id="brandLogos",
    name="Brand Logos",
    url_templates=(
        lambda term: f"https://www.brandlogos.net/logos/{term}-logo.svg",
        lambda term: f"https://www.brandlogos.net/logos/{term}_logo.svg",
    ),
)

DEFAULT_SOURCES: tuple[LogoSource, ...] = (
    SIMPLE_ICONS,
    VECTOR_LOGO_ZONE,
    ICONIFY,
    SVG_PORN,
    GILBARBARA,
    WIKIMEDIA,
    BRAND_LOGOS,
)


@lru_cache
def get_default_registry() -> SourceRegistry:
    """Get the shared default registry (built once)."""
    return SourceRegistry(DEFAULT_SOURCES)
