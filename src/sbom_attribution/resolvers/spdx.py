"""Access to a pinned release of the SPDX license list data.

Display names come from ``json/licenses.json`` and license texts from
``text/<id>.txt`` of the same release of spdx/license-list-data, so names
and texts always agree with one another.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from sbom_attribution.models import LicenseText
from sbom_attribution.resolvers.base import FETCH_FAILED_PREFIX, BaseTextSource
from sbom_attribution.resolvers.http import DEFAULT_TIMEOUT, HttpSource

logger = logging.getLogger(__name__)

DEFAULT_SPDX_VERSION = "v3.27.0"
SPDX_DATA_BASE_URL = "https://raw.githubusercontent.com/spdx/license-list-data"


class LicenseListError(Exception):
    """Raised when the SPDX license list cannot be loaded."""


class SPDXFetchError(Exception):
    """Raised when a license text request does not return HTTP 200."""


class SPDXLicenseData(HttpSource):
    """Client for one pinned version of the SPDX license list data.

    Attributes:
        version: Release tag of spdx/license-list-data (e.g., "v3.27.0").
    """

    def __init__(
        self,
        version: str = DEFAULT_SPDX_VERSION,
        base_url: str = SPDX_DATA_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            version: Release tag of the license list data.
            base_url: Repository raw-content base URL.
            timeout: Total timeout in seconds for a single request.
        """
        super().__init__(timeout=timeout)
        self.version = version
        self.base_url = base_url.rstrip("/")

    @property
    def license_list_url(self) -> str:
        """URL of the license list JSON document."""
        return f"{self.base_url}/{self.version}/json/licenses.json"

    def text_url(self, license_id: str) -> str:
        """URL of the plain-text license for an identifier."""
        return f"{self.base_url}/{self.version}/text/{license_id}.txt"

    async def load_names(self) -> dict[str, str]:
        """Fetch the identifier to display-name table.

        Returns:
            Mapping from SPDX license id to its full name.

        Raises:
            LicenseListError: If the list cannot be fetched or parsed.
        """
        url = self.license_list_url
        logger.debug("Fetching SPDX license list from %s", url)

        try:
            session = await self._get_session()
            async with session.get(url) as response:
                if response.status != 200:
                    raise LicenseListError(f"HTTP {response.status} for {url}")
                # raw.githubusercontent.com serves JSON as text/plain
                data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise LicenseListError(f"Network error fetching {url}: {e}") from e
        except asyncio.TimeoutError as e:
            raise LicenseListError(f"Timed out fetching {url}") from e
        except ValueError as e:
            raise LicenseListError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, dict):
            raise LicenseListError(f"Unexpected license list format from {url}")

        names = {
            lic["licenseId"]: lic["name"]
            for lic in data.get("licenses") or []
            if lic.get("licenseId") and lic.get("name")
        }
        logger.info("Loaded %d SPDX license names (%s)", len(names), self.version)
        return names

    async def fetch_text(self, license_id: str) -> str:
        """Fetch the plain-text license for an identifier.

        Raises:
            SPDXFetchError: On a non-200 response or an empty body.
            aiohttp.ClientError: On transport errors.
            asyncio.TimeoutError: If the request times out.
        """
        url = self.text_url(license_id)
        session = await self._get_session()
        async with session.get(url) as response:
            if response.status != 200:
                raise SPDXFetchError(f"HTTP {response.status} for {url}")
            text = await response.text(errors="replace")
        if not text.strip():
            raise SPDXFetchError(f"Empty response body from {url}")
        return text


class SPDXTextSource(BaseTextSource):
    """Last step of the cascade: fetch the text from the SPDX license list.

    Handles every identifier. Fetch failures resolve to a diagnostic text
    naming the attempted URL and the error.

    Priority: 1000 (lowest, used as last resort)
    """

    def __init__(self, data: SPDXLicenseData) -> None:
        """Initialize the source.

        Args:
            data: Client for the pinned license list data.
        """
        self.data = data

    @property
    def name(self) -> str:
        """Return the source name.

        Returns:
            "SPDX"
        """
        return "SPDX"

    @property
    def priority(self) -> int:
        """Return lowest priority for fallback usage.

        Returns:
            1000 (highest number = lowest priority = tried last)
        """
        return 1000

    async def resolve(self, license_id: str) -> Optional[LicenseText]:
        """Fetch the license text, or a diagnostic if that fails."""
        url = self.data.text_url(license_id)
        logger.debug("Fetching SPDX text for %s from %s", license_id, url)

        try:
            text = await self.data.fetch_text(license_id)
        except asyncio.TimeoutError:
            return self._failure(license_id, url, "request timed out")
        except Exception as e:
            return self._failure(license_id, url, str(e) or type(e).__name__)

        return LicenseText(text=text, source=self.name)

    def _failure(self, license_id: str, url: str, error: str) -> LicenseText:
        logger.error("Could not fetch SPDX text for %s: %s", license_id, error)
        message = (
            f"{FETCH_FAILED_PREFIX}{license_id} from {url}\n"
            f"Error: {error}\n"
            "Map it to a valid SPDX id or add a LicenseRef text."
        )
        return LicenseText(text=message, source=self.name, is_placeholder=True)
