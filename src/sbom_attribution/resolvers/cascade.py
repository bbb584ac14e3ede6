"""Cascading license text resolver.

This module chains the text cache, the custom license text store and the
SPDX license list, persisting every fresh result to the cache so later
runs are served without touching the network or the custom store.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from sbom_attribution.cache import LicenseTextCache
from sbom_attribution.models import LicenseText, is_license_idstring
from sbom_attribution.resolvers.base import (
    INVALID_LICENSE_ID_PREFIX,
    BaseTextSource,
    CascadeResolverBase,
)
from sbom_attribution.resolvers.local import CachedTextSource, CustomTextSource
from sbom_attribution.resolvers.spdx import SPDXLicenseData, SPDXTextSource

logger = logging.getLogger(__name__)


class LicenseTextResolver(CascadeResolverBase):
    """Resolves license texts through cache, custom store and SPDX.

    Resolution strategy:
    1. Cache: an existing cached file is returned unchanged
    2. Custom: ``LicenseRef-`` ids are read from the custom text directory
    3. SPDX: any other id is fetched from the pinned SPDX license list

    Results of steps 2 and 3, diagnostics included, are written to the cache.

    Attributes:
        cache: Text cache shared by the cache step and persistence.
        spdx_data: Client for the pinned SPDX license list data.
    """

    def __init__(
        self,
        cache: LicenseTextCache,
        custom_dir: Path,
        spdx_data: Optional[SPDXLicenseData] = None,
        sources: Optional[list[BaseTextSource]] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            cache: Text cache to read from and write to.
            custom_dir: Directory holding custom ``LicenseRef-`` texts.
            spdx_data: Optional SPDX data client. If not provided, creates
                one for the default pinned version.
            sources: Optional custom list of sources replacing the default
                cascade.
        """
        self.cache = cache
        self.spdx_data = spdx_data or SPDXLicenseData()

        if sources is None:
            sources = [
                CachedTextSource(cache),
                CustomTextSource(custom_dir),
                SPDXTextSource(self.spdx_data),
            ]

        super().__init__(sources=sources)

    async def resolve(self, license_id: str) -> LicenseText:
        """Resolve a license text using the cascade.

        Args:
            license_id: Canonical license identifier.

        Returns:
            LicenseText with a non-empty text, possibly a diagnostic.
            Identifiers that cannot name a file resolve to a diagnostic
            without consulting any source.
        """
        if not is_license_idstring(license_id):
            logger.error("Refusing to resolve invalid license id %r", license_id)
            return LicenseText(
                text=f"{INVALID_LICENSE_ID_PREFIX}{license_id}",
                source="none",
                is_placeholder=True,
            )

        for source in self.sources:
            result = await source.resolve(license_id)
            if result is None:
                continue

            logger.debug("Resolved %s via %s", license_id, source.name)
            if source.persist:
                self.cache.set(license_id, result.text)
            return result

        # Only reachable with a custom source list that has no catch-all step
        logger.error("No source resolved a text for %s", license_id)
        return LicenseText(
            text=f"No license text source handled {license_id}",
            source="none",
            is_placeholder=True,
        )

    async def resolve_batch(self, license_ids: list[str]) -> dict[str, LicenseText]:
        """Resolve multiple license identifiers concurrently.

        Each identifier touches only its own cache file, so resolutions run
        side by side with asyncio.gather.

        Args:
            license_ids: Identifiers to resolve.

        Returns:
            Dictionary mapping every identifier to its LicenseText.
        """
        unique_ids = list(dict.fromkeys(license_ids))
        logger.info("Resolving texts for %d licenses", len(unique_ids))

        results = await asyncio.gather(*(self.resolve(i) for i in unique_ids))
        resolved = dict(zip(unique_ids, results))

        placeholders = sum(1 for text in resolved.values() if text.is_placeholder)
        if placeholders:
            logger.warning(
                "%d of %d license texts are placeholders", placeholders, len(resolved)
            )
        return resolved

    async def close(self) -> None:
        """Close the SPDX client's HTTP session."""
        await self.spdx_data.close()

    async def __aenter__(self) -> "LicenseTextResolver":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
