"""Multi-source SVG Logo Resolution.

Finds a usable SVG for a brand name across several public logo hosts:
source rotation on refresh, per-term failure memory, a result cache and
an optional internal repository.

Components:
- normalization: term -> lookup key
- sources: ordered provider registry
- validator: SVG probe
- cache / ledger / context: shared resolution state
- resolver: primary and alternative lookups
- batch: concurrent multi-term lookups
- repository: persisted store bridge
"""

from svglogos.logos.config import get_logos_settings, LogosSettings

__all__ = ["get_logos_settings", "LogosSettings"]
