"""Resolution results and lookup outcomes.

Resolver entry points return a LookupOutcome instead of raising, so
callers handle found / not found / no alternative explicitly. unwrap()
turns a failed outcome into the matching typed exception for callers
that prefer exception flow (HTTP layer, batch coordinator).
"""

import secrets
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional


_ID_ALPHABET = string.ascii_lowercase + string.digits


def random_suffix(length: int = 7) -> str:
    """Short base36 disambiguator for refreshed result ids."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class LogoResult:
    """A validated SVG asset for a term."""

    id: str
    url: str
    source: str  # Source id (e.g. "simpleIcons", "internal")
    source_name: str  # Human-readable provider name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "source": self.source,
            "source_name": self.source_name,
        }


# =============================================================================
# Errors
# =============================================================================


class LogoLookupError(Exception):
    """Base error for logo resolution failures."""

    code = "lookup_failed"
    auto_dismiss = False

    def __init__(self, message: str, term: Optional[str] = None):
        super().__init__(message)
        self.term = term


class LogoNotFoundError(LogoLookupError):
    """Primary lookup exhausted every source."""

    code = "not_found"


class NoAlternativeFoundError(LogoLookupError):
    """Refresh lookup exhausted every candidate.

    Surfaced to users as a short-lived message, hence auto_dismiss.
    """

    code = "no_alternative"
    auto_dismiss = True


class NoLogosFoundError(LogoLookupError):
    """Every term in a batch failed."""

    code = "no_logos_found"

    def __init__(self, message: str, failures: list[str]):
        super().__init__(message)
        self.failures = failures


# =============================================================================
# Outcome
# =============================================================================


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    NO_ALTERNATIVE = "no_alternative"


@dataclass(frozen=True)
class LookupOutcome:
    """Success-or-failure union returned by the resolver."""

    status: LookupStatus
    term: str
    result: Optional[LogoResult] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def found(cls, term: str, result: LogoResult) -> "LookupOutcome":
        return cls(status=LookupStatus.FOUND, term=term, result=result)

    @classmethod
    def not_found(cls, term: str) -> "LookupOutcome":
        return cls(
            status=LookupStatus.NOT_FOUND,
            term=term,
            message=f"No SVG logo found for: {term}",
        )

    @classmethod
    def no_alternative(cls, term: str) -> "LookupOutcome":
        return cls(
            status=LookupStatus.NO_ALTERNATIVE,
            term=term,
            message=f"No alternative SVG logo found for: {term}",
        )

    def unwrap(self) -> LogoResult:
        """Return the result or raise the typed error for this outcome."""
        if self.status is LookupStatus.FOUND and self.result is not None:
            return self.result
        if self.status is LookupStatus.NO_ALTERNATIVE:
            raise NoAlternativeFoundError(self.message or "", term=self.term)
        raise LogoNotFoundError(self.message or "", term=self.term)
