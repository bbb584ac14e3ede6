"""Filesystem-backed text sources: the text cache and custom license texts."""

import logging
from pathlib import Path
from typing import Optional

from sbom_attribution.cache import LicenseTextCache
from sbom_attribution.models import LicenseText, is_custom_license_id
from sbom_attribution.resolvers.base import (
    EMPTY_CUSTOM_TEXT_PREFIX,
    MISSING_CUSTOM_TEXT_PREFIX,
    BaseTextSource,
    is_placeholder_text,
)

logger = logging.getLogger(__name__)


class CachedTextSource(BaseTextSource):
    """Serve texts already present in the text cache.

    Cached entries are trusted as-is, including diagnostics written by
    earlier runs. An empty cache file counts as a miss. Priority: 0 (always
    tried first).
    """

    persist = False

    def __init__(self, cache: LicenseTextCache) -> None:
        self.cache = cache

    @property
    def name(self) -> str:
        return "cache"

    @property
    def priority(self) -> int:
        return 0

    async def resolve(self, license_id: str) -> Optional[LicenseText]:
        text = self.cache.get(license_id)
        if not text:
            return None
        logger.debug("Using cached text for %s", license_id)
        return LicenseText(
            text=text,
            source=self.name,
            is_placeholder=is_placeholder_text(text),
        )


class CustomTextSource(BaseTextSource):
    """Serve ``LicenseRef-`` texts from a directory of custom license files.

    A ``LicenseRef-`` identifier without a matching ``<id>.txt`` file, or
    with an empty one, resolves to a diagnostic naming the expected path,
    so the gap shows up in the report. Other identifiers are left to later
    sources. Files are decoded as UTF-8 with invalid bytes replaced.

    Attributes:
        directory: Directory holding ``<license id>.txt`` files.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    @property
    def name(self) -> str:
        return "custom"

    @property
    def priority(self) -> int:
        return 50

    async def resolve(self, license_id: str) -> Optional[LicenseText]:
        if not is_custom_license_id(license_id):
            return None

        path = self.directory / f"{license_id}.txt"
        if not path.is_file():
            logger.warning("Missing custom license text for %s: %s", license_id, path)
            return self._diagnostic(f"{MISSING_CUSTOM_TEXT_PREFIX}{path}")

        try:
            with open(path, "r", encoding="utf-8", newline="", errors="replace") as f:
                text = f.read()
        except OSError as e:
            logger.warning("Could not read custom license text %s: %s", path, e)
            return self._diagnostic(f"{MISSING_CUSTOM_TEXT_PREFIX}{path}\nError: {e}")
        if not text.strip():
            logger.warning("Custom license text for %s is empty: %s", license_id, path)
            return self._diagnostic(f"{EMPTY_CUSTOM_TEXT_PREFIX}{path}")

        return LicenseText(text=text, source=self.name)

    def _diagnostic(self, message: str) -> LicenseText:
        return LicenseText(text=message, source=self.name, is_placeholder=True)
