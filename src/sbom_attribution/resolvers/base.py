"""Base interface for license text sources.

A text source is one step of the resolution cascade. It either resolves a
license identifier to a text or declines, handing over to the next step.
Sources never raise for per-identifier failures; they turn them into
placeholder texts instead.
"""

from abc import ABC, abstractmethod
from typing import Optional

from sbom_attribution.models import LicenseText

MISSING_CUSTOM_TEXT_PREFIX = "Missing custom license text: "
EMPTY_CUSTOM_TEXT_PREFIX = "Empty custom license text: "
INVALID_LICENSE_ID_PREFIX = "Invalid license identifier: "
FETCH_FAILED_PREFIX = "Could not fetch SPDX text for "
PLACEHOLDER_PREFIXES = (
    MISSING_CUSTOM_TEXT_PREFIX,
    EMPTY_CUSTOM_TEXT_PREFIX,
    INVALID_LICENSE_ID_PREFIX,
    FETCH_FAILED_PREFIX,
)


def is_placeholder_text(text: str) -> bool:
    """Return True if ``text`` is a diagnostic written in place of a license."""
    return text.startswith(PLACEHOLDER_PREFIXES)


class BaseTextSource(ABC):
    """Abstract base class for license text sources."""

    #: Whether results of this source are written to the text cache.
    persist: bool = True

    @abstractmethod
    async def resolve(self, license_id: str) -> Optional[LicenseText]:
        """Resolve the text of a license identifier.

        Args:
            license_id: Canonical license identifier.

        Returns:
            LicenseText if this source handled the identifier (possibly with
            a placeholder text), or None to defer to the next source.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the source name for logging/debugging.

        Returns:
            Name like "cache", "custom", "SPDX".
        """
        ...

    @property
    def priority(self) -> int:
        """Return source priority for cascade ordering.

        Lower numbers are tried first. Default is 100.

        Returns:
            Priority value.
        """
        return 100


class CascadeResolverBase(ABC):
    """Abstract base for the cascading resolution strategy.

    Tries text sources in priority order, stopping at the first one that
    resolves the identifier.
    """

    def __init__(self, sources: list[BaseTextSource]) -> None:
        """Initialize with a list of sources.

        Args:
            sources: Sources to try, sorted here by priority.
        """
        self.sources = sorted(sources, key=lambda s: s.priority)

    @abstractmethod
    async def resolve(self, license_id: str) -> LicenseText:
        """Resolve a license text through the cascade.

        Args:
            license_id: Canonical license identifier.

        Returns:
            LicenseText from the first source that handled the identifier.
        """
        ...

    @abstractmethod
    async def resolve_batch(self, license_ids: list[str]) -> dict[str, LicenseText]:
        """Resolve multiple license identifiers concurrently.

        Args:
            license_ids: Identifiers to resolve.

        Returns:
            Dictionary mapping each identifier to its LicenseText.
        """
        ...
