"""File-based cache of resolved license texts.

Each license identifier maps to ``<directory>/<license id>.txt``. The
cached files double as the ``licenses/`` folder shipped next to the
generated report, so entries never expire: once a text (or a diagnostic
standing in for one) is written, later runs reuse it until the file is
removed.
"""

import logging
from pathlib import Path
from typing import Optional

from sbom_attribution.models import is_license_idstring

logger = logging.getLogger(__name__)


class LicenseTextCache:
    """Directory of cached license texts keyed by license identifier.

    Attributes:
        directory: Directory holding one ``.txt`` file per identifier.
    """

    SUFFIX = ".txt"

    def __init__(self, directory: Path) -> None:
        """Initialize the cache.

        Args:
            directory: Cache directory. Created lazily on first write.
        """
        self.directory = directory

    def path_for(self, license_id: str) -> Path:
        """Return the cache file path for a license identifier.

        Raises:
            ValueError: If the identifier is not a plain license idstring.
        """
        if not is_license_idstring(license_id):
            raise ValueError(f"Invalid license id for the text cache: {license_id!r}")
        return self.directory / f"{license_id}{self.SUFFIX}"

    def get(self, license_id: str) -> Optional[str]:
        """Retrieve a cached text.

        Args:
            license_id: Canonical license identifier.

        Returns:
            The cached text exactly as stored, or None on a cache miss.
            Bytes that are not valid UTF-8 are replaced with U+FFFD.
        """
        path = self.path_for(license_id)
        if not path.is_file():
            return None
        with open(path, "r", encoding="utf-8", newline="", errors="replace") as f:
            return f.read()

    def set(self, license_id: str, text: str) -> None:
        """Store a text, replacing any existing entry.

        Args:
            license_id: Canonical license identifier.
            text: License text or diagnostic message.
        """
        path = self.path_for(license_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.debug("Cached license text for %s at %s", license_id, path)

    def clear(self, license_id: Optional[str] = None) -> int:
        """Remove cached entries.

        Args:
            license_id: If given, remove only this entry. Otherwise remove
                every cached text.

        Returns:
            Number of files removed.
        """
        if license_id is not None:
            path = self.path_for(license_id)
            if path.is_file():
                path.unlink()
                return 1
            return 0

        removed = 0
        for path in self._entries():
            path.unlink()
            removed += 1
        return removed

    def info(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache information:
                - path: Cache directory
                - count: Number of cached entries
                - size_bytes: Total size of cached texts in bytes
        """
        entries = self._entries()
        return {
            "path": str(self.directory),
            "count": len(entries),
            "size_bytes": sum(p.stat().st_size for p in entries),
        }

    def _entries(self) -> list[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(
            p for p in self.directory.glob(f"*{self.SUFFIX}") if p.is_file()
        )
