"""Scanner for CycloneDX JSON SBOMs.

Extracts the top-level ``components`` array of a CycloneDX document. License
declarations are passed through untouched for the normalizer.
"""

import json
import logging
from pathlib import Path
from typing import Any

from sbom_attribution.models import SbomComponent
from sbom_attribution.scanners.base import BaseScanner

logger = logging.getLogger(__name__)


class CycloneDXScanner(BaseScanner):
    """Scanner for CycloneDX JSON documents.

    Example document structure::

        {
            "bomFormat": "CycloneDX",
            "components": [
                {
                    "name": "left-pad",
                    "version": "1.3.0",
                    "purl": "pkg:npm/left-pad@1.3.0",
                    "licenses": [{"license": {"id": "MIT"}}],
                    "copyright": "Copyright (c) Azer Koculu"
                }
            ]
        }
    """

    FILE_NAMES = ("bom.json", "sbom.json")
    SUFFIXES = (".cdx.json", ".cyclonedx.json")

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True for "bom.json", "sbom.json", "*.cdx.json" and
            "*.cyclonedx.json" files.
        """
        filename = path.name.lower()
        return filename in cls.FILE_NAMES or filename.endswith(cls.SUFFIXES)

    @property
    def source_name(self) -> str:
        """Return the human-readable name for this scanner's source type.

        Returns:
            "CycloneDX JSON"
        """
        return "CycloneDX JSON"

    def scan(self) -> list[SbomComponent]:
        """Scan the CycloneDX document and extract its components.

        Returns:
            List of SbomComponent objects in document order.

        Raises:
            FileNotFoundError: If the SBOM file does not exist.
            ValueError: If source_path is not provided, the JSON is invalid,
                or a component has no name.
        """
        if self.source_path is None:
            raise ValueError("source_path must be provided")

        if not self.source_path.exists():
            raise FileNotFoundError(f"SBOM file not found: {self.source_path}")

        try:
            with open(self.source_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.source_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.source_path}")

        components = []
        for entry in data.get("components") or []:
            components.append(self._parse_component(entry))

        logger.debug("Read %d components from %s", len(components), self.source_path)
        return components

    def _parse_component(self, entry: Any) -> SbomComponent:
        """Convert one CycloneDX component object into an SbomComponent."""
        if not isinstance(entry, dict):
            raise ValueError(f"Component entry is not an object in {self.source_path}")
        if not entry.get("name"):
            raise ValueError(
                f"Component missing required field 'name' in {self.source_path}"
            )

        licenses = entry.get("licenses") or []
        return SbomComponent(
            name=entry["name"],
            version=entry.get("version") or "",
            purl=entry.get("purl") or None,
            licenses=tuple(lic for lic in licenses if isinstance(lic, dict)),
            copyright=entry.get("copyright") or None,
        )
